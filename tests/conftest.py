import os
import tempfile
from types import SimpleNamespace

import pytest

# api.config reads the environment at import time
_DATA_DIR = tempfile.mkdtemp(prefix="cbda-tests-")
os.environ["DB_DIR"] = _DATA_DIR
os.environ["DATABASE_URL"] = f"sqlite:///{_DATA_DIR}/test.db"
os.environ["EXPORTS_DIR"] = os.path.join(_DATA_DIR, "exports")
os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["ADMIN_PASSWORD"] = "admin-secret"
os.environ["SECRET_KEY"] = "test-secret-key"
for _key in ("EMAILJS_SERVICE_ID", "EMAILJS_TEMPLATE_ID", "EMAILJS_PUBLIC_KEY", "EMAILJS_PRIVATE_KEY"):
    os.environ.pop(_key, None)

from fastapi.testclient import TestClient  # noqa: E402

from api.app import app  # noqa: E402
from api.database import Base, engine  # noqa: E402
from api.routes import auth as auth_routes  # noqa: E402
from api.services.verification_store import verification_codes  # noqa: E402


@pytest.fixture
def sent_codes(monkeypatch: pytest.MonkeyPatch) -> list[SimpleNamespace]:
    sent: list[SimpleNamespace] = []

    def fake_send(email: str, name: str, code: str) -> bool:
        sent.append(SimpleNamespace(email=email, name=name, code=code))
        return True

    monkeypatch.setattr(auth_routes, "send_verification_email", fake_send)
    return sent


@pytest.fixture
def client(sent_codes):
    Base.metadata.drop_all(bind=engine)
    verification_codes.clear()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    response = client.post(
        "/api/auth/login", json={"email": "admin@example.com", "password": "admin-secret"}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def student(client: TestClient, sent_codes) -> SimpleNamespace:
    """A registered, verified student with auth headers."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Jane Student", "email": "jane@example.com", "password": "secret1"},
    )
    assert response.status_code == 201
    code = sent_codes[-1].code
    verified = client.post("/api/auth/verify", json={"email": "jane@example.com", "code": code})
    assert verified.status_code == 200
    data = verified.json()
    return SimpleNamespace(
        user=data["user"],
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
