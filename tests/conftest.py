"""
tests/conftest.py
"""
from __future__ import annotations

import datetime as _dt
import itertools
import os
import tempfile
from typing import AsyncGenerator, Generator

# Settings are read at import time, so the environment goes first.
_DB_DIR = tempfile.mkdtemp(prefix="journal-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_DB_DIR}/test.sqlite3")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "123456")
os.environ.setdefault("CLOUDINARY_API_SECRET", "shh-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

import models.post  # noqa: F401  (registers tables on Base.metadata)
from app.database import Base, engine
from app.services import posts as post_service


@pytest.fixture(autouse=True)
def fake_clock(monkeypatch: pytest.MonkeyPatch):
    """
    Every call to the repository clock returns a timestamp one second later
    than the previous one, so ordering and "strictly increases" checks never
    depend on wall-clock resolution.
    """
    counter = itertools.count()
    base = _dt.datetime(2099, 1, 1)

    def _fake_now():
        return base + _dt.timedelta(seconds=next(counter))

    monkeypatch.setattr(post_service, "utc_now", _fake_now)
    return _fake_now


async def _reset_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """A test client on a freshly emptied database."""
    from app.main import app

    with TestClient(app) as c:
        c.portal.call(_reset_schema)
        yield c
        c.portal.call(engine.dispose)


@pytest.fixture
def uploads(monkeypatch: pytest.MonkeyPatch):
    """
    Replace the media host with an in-memory fake.

    Returns the list of recorded calls; each upload gets a distinct URL.
    """
    from app.api import posts as posts_api

    calls: list[tuple[bytes, str | None]] = []

    async def _fake_upload(data: bytes, content_type: str | None) -> str:
        calls.append((data, content_type))
        return f"https://media.example/travel-journal-app/img{len(calls)}.jpg"

    monkeypatch.setattr(posts_api, "upload_image", _fake_upload)
    return calls


@pytest.fixture
def failing_uploads(monkeypatch: pytest.MonkeyPatch):
    from app.api import posts as posts_api
    from app.storage.media import MediaUploadError

    async def _broken_upload(data: bytes, content_type: str | None) -> str:
        raise MediaUploadError("Invalid image file")

    monkeypatch.setattr(posts_api, "upload_image", _broken_upload)


@pytest.fixture
async def db(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """An isolated session on its own SQLite file, for repository-level tests."""
    repo_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/repo.sqlite3")
    async with repo_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = sessionmaker(repo_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await repo_engine.dispose()
