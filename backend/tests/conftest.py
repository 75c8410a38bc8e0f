from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pytest
from fastapi.testclient import TestClient

from plantflow.config.settings import Settings
from plantflow.db.database import Database
from plantflow.main import create_app
from plantflow.services.record_store import RecordStore
from sheet_fixtures import FixedClock, build_workbook


@pytest.fixture
def database(tmp_path: Path):
    """Use a temporary SQLite DB per test."""
    db = Database(f"sqlite:///{(tmp_path / 'plantflow.db').as_posix()}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database: Database):
    db = database.session()
    yield db
    db.close()


@pytest.fixture
def store(session) -> RecordStore:
    return RecordStore(session)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def settings(database: Database) -> Settings:
    return Settings(database_url=str(database.engine.url), retention_days=7)


@pytest.fixture
def app(settings: Settings, database: Database, clock: FixedClock):
    return create_app(settings, database=database, clock=clock)


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def upload(client: TestClient):
    """Post a workbook to the upload endpoint."""

    def _upload(rows: Iterable[dict], filename: str = "dispatch.xlsx", columns: list[str] | None = None):
        content = build_workbook(rows, columns)
        return client.post(
            "/api/upload",
            files={
                "file": (
                    filename,
                    content,
                    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                )
            },
        )

    return _upload
