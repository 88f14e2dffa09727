import io
import json
from pathlib import Path

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

import models
from api.utils import file_utils, json_utils, time_utils, validation


def test_safe_child_path_allows_nested(tmp_path: Path) -> None:
    base_dir = tmp_path / "exports"
    base_dir.mkdir()
    resolved = file_utils.safe_child_path(base_dir, "2024/results.csv")
    assert resolved == (base_dir / "2024" / "results.csv").resolve()


def test_safe_child_path_blocks_traversal(tmp_path: Path) -> None:
    base_dir = tmp_path / "exports"
    base_dir.mkdir()
    with pytest.raises(HTTPException):
        file_utils.safe_child_path(base_dir, "../secret.txt")


def test_read_upload_limited_rejects_large_files() -> None:
    upload = UploadFile(filename="bank.json", file=io.BytesIO(b"x" * 11))
    with pytest.raises(HTTPException) as excinfo:
        file_utils.read_upload_limited(upload, 10)
    assert excinfo.value.status_code == 413

    upload = UploadFile(filename="bank.json", file=io.BytesIO(b"[]"))
    assert file_utils.read_upload_limited(upload, 10) == b"[]"


def test_is_json_upload() -> None:
    by_name = UploadFile(filename="Bank.JSON", file=io.BytesIO(b""))
    by_type = UploadFile(
        filename="bank", file=io.BytesIO(b""), headers=Headers({"content-type": "application/json"})
    )
    other = UploadFile(filename="bank.csv", file=io.BytesIO(b""))
    assert file_utils.is_json_upload(by_name)
    assert file_utils.is_json_upload(by_type)
    assert not file_utils.is_json_upload(other)


def test_json_round_trip(tmp_path: Path) -> None:
    payload = {"question": "Qué métrica?", "count": 2}
    dumped = json.dumps(payload, ensure_ascii=False)
    assert json_utils.json_load(dumped) == payload

    path = tmp_path / "bank.json"
    path.write_text(dumped, encoding="utf-8")
    assert json_utils.read_json_file(path, {}) == payload
    assert json_utils.read_json_file(tmp_path / "missing.json", {"fallback": True}) == {"fallback": True}


def test_time_utils_parsing() -> None:
    timestamp = time_utils.utc_now()
    parsed = time_utils.parse_iso_timestamp(timestamp)
    assert parsed is not None

    zulu = "2024-01-01T12:00:00Z"
    parsed_zulu = time_utils.parse_iso_timestamp(zulu)
    assert parsed_zulu is not None
    assert parsed_zulu.tzinfo is not None

    assert time_utils.parse_iso_timestamp("") is None
    assert time_utils.parse_iso_timestamp("yesterday") is None
    assert time_utils.parse_iso_timestamp(123) is None


def test_validate_id() -> None:
    assert validation.validate_id("testId", " 3 ") == "3"
    with pytest.raises(HTTPException):
        validation.validate_id("testId", "")
    with pytest.raises(HTTPException):
        validation.validate_id("testId", "../bad")


def test_parse_test_type() -> None:
    assert validation.parse_test_type("Mock") is models.TestType.MOCK
    assert validation.parse_test_type("chapter") is models.TestType.CHAPTER
    with pytest.raises(HTTPException) as excinfo:
        validation.parse_test_type("final")
    assert excinfo.value.status_code == 400
