from pathlib import Path

import pytest
from fastapi import HTTPException

from api.services import export_service


def test_save_and_list_exports(tmp_path: Path) -> None:
    stored = export_service.save_export("ID\nresult_1\n", tmp_path)
    assert stored["filename"].startswith("cbda-results-")
    assert stored["url"] == f"/api/results/csv-files/{stored['filename']}"
    assert (tmp_path / stored["filename"]).read_text(encoding="utf-8") == "ID\nresult_1\n"

    files = export_service.list_exports(tmp_path)
    assert [f["name"] for f in files] == [stored["filename"]]
    assert files[0]["size"] == len("ID\nresult_1\n")


def test_save_export_never_overwrites(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(export_service, "export_filename", lambda: "cbda-results-1.csv")
    first = export_service.save_export("a", tmp_path)
    second = export_service.save_export("b", tmp_path)
    assert first["filename"] != second["filename"]
    assert len(list(tmp_path.glob("*.csv"))) == 2


def test_delete_export(tmp_path: Path) -> None:
    stored = export_service.save_export("x", tmp_path)
    assert export_service.delete_export(stored["filename"], tmp_path)
    assert not export_service.delete_export(stored["filename"], tmp_path)
    assert export_service.list_exports(tmp_path) == []


@pytest.mark.parametrize("name", ["../secret.csv", "nested/file.csv", "results.txt"])
def test_export_path_rejects_bad_names(tmp_path: Path, name: str) -> None:
    with pytest.raises(HTTPException):
        export_service.export_path(name, tmp_path)


def test_list_exports_of_missing_dir(tmp_path: Path) -> None:
    assert export_service.list_exports(tmp_path / "missing") == []
