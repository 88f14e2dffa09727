from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import requests

from models import ExamResult, QuestionFetch, SubmitOutcome, TestType
from serialization import parse_question, serialize_result

log = logging.getLogger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:8000"


class ExamApiError(Exception):
    """Non-success response from the exam server."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ExamApiClient:
    """Blocking client for the exam server's JSON API."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        session: requests.Session | None = None,
        timeout: float = 30,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self.session.request(
            method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs
        )
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = None
            raise ExamApiError(
                str(detail or f"HTTP {response.status_code}"), response.status_code
            )
        return response.json()

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in and keep the bearer token on the session."""
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.session.headers.update({"Authorization": f"Bearer {data['access_token']}"})
        log.info("Logged in to %s as %s", self.base_url, email)
        return data["user"]

    def logout(self) -> None:
        self._request("POST", "/api/auth/logout")
        self.session.headers.pop("Authorization", None)

    def catalog(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/questions/catalog")

    def fetch_questions(self, test_type: TestType, test_id: str) -> QuestionFetch:
        """Question set for an attempt; a missing bank is an unsuccessful fetch."""
        try:
            data = self._request("GET", f"/api/questions/{test_type.value}/{test_id}")
        except ExamApiError as exc:
            if exc.status_code == 404:
                return QuestionFetch(success=False)
            raise
        questions = [parse_question(raw, index) for index, raw in enumerate(data.get("questions", []))]
        return QuestionFetch(
            success=bool(data.get("success")), questions=questions, count=len(questions)
        )

    def submit_result(self, result: ExamResult) -> SubmitOutcome:
        data = self._request("POST", "/api/results", json=serialize_result(result))
        return SubmitOutcome(success=bool(data.get("success")), result_id=data.get("resultId"))

    def upload_bank(self, path: Path, test_type: TestType, test_id: str) -> dict[str, Any]:
        """Upload a question bank file (admin only)."""
        with path.open("rb") as handle:
            return self._request(
                "POST",
                f"/api/questions/upload/{test_type.value}/{test_id}",
                files={"file": (path.name, handle, "application/json")},
            )


class HttpQuestionProvider:
    """Question provider that fetches from the exam server off the event loop."""

    def __init__(self, client: ExamApiClient):
        self.client = client

    async def fetch(self, test_type: TestType, test_id: str) -> QuestionFetch:
        return await asyncio.to_thread(self.client.fetch_questions, test_type, test_id)


class HttpResultSink:
    """Result sink posting to the exam server off the event loop."""

    def __init__(self, client: ExamApiClient):
        self.client = client

    async def submit(self, result: ExamResult) -> SubmitOutcome:
        return await asyncio.to_thread(self.client.submit_result, result)
