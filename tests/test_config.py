"""
tests/test_config.py
"""
from __future__ import annotations

import pytest

from app.config import Settings, split_csv
from app.database import require_database_url


def test_split_csv_strips_and_falls_back():
    assert split_csv(" http://a.test , ,http://b.test") == ["http://a.test", "http://b.test"]
    assert split_csv("", ["http://localhost:5173"]) == ["http://localhost:5173"]


def test_missing_database_url_is_fatal():
    with pytest.raises(SystemExit) as excinfo:
        require_database_url("")
    assert excinfo.value.code == 1


def test_database_url_passes_through():
    assert require_database_url("sqlite+aiosqlite:///x.db") == "sqlite+aiosqlite:///x.db"


def test_defaults(monkeypatch):
    monkeypatch.delenv("CLOUDINARY_FOLDER", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    s = Settings(_env_file=None)
    assert s.CLOUDINARY_FOLDER == "travel-journal-app"
    assert s.PORT == 5000
    assert s.UPLOAD_TIMEOUT_SECONDS is None
