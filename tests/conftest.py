"""Pytest configuration and fixtures."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from score_archive_api.app.core.config import settings
from score_archive_api.app.core.db import init_db
from score_archive_api.app.main import app


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point the store at a fresh SQLite file for every test."""
    db_path = tmp_path / "archive.db"
    monkeypatch.setattr(settings, "database_url", str(db_path))
    monkeypatch.setattr(settings, "store_retry_backoff_seconds", 0)
    init_db()
    return db_path


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def run():
    """Drive a service coroutine to completion."""
    return asyncio.run
