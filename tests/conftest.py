# tests/conftest.py

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from application.use_cases import TaskUseCases
from config import Settings
from infrastructure.database import Database
from main import create_app


@pytest.fixture()
def db(tmp_path: Path) -> Database:
    """A connected store backed by a fresh file per test."""
    database = Database(str(tmp_path / "tasks.sqlite3"))
    database.connect()
    yield database
    database.close()


@pytest.fixture()
def use_cases(db: Database) -> TaskUseCases:
    return TaskUseCases(db)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(app_env="test", test_database_path=str(tmp_path / "tasks.sqlite3"))


@pytest.fixture()
def client(settings: Settings, db: Database) -> TestClient:
    app = create_app(settings, db)
    with TestClient(app) as test_client:
        yield test_client
