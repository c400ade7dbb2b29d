# tests/conftest.py

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskflow.app import create_app
from taskflow.config import Settings
from taskflow.tasks import TaskService
from taskflow.users import UserService

from .helpers import TEST_SECRET


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file, with cheap bcrypt."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'tasks.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        auth_rate_limit="1000/minute",
    )


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db(app):
    session = app.state.database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def tokens(app):
    return app.state.token_service


@pytest.fixture()
def user_service(app, db) -> UserService:
    return UserService(db, app.state.password_hasher, app.state.token_service)


@pytest.fixture()
def task_service(db) -> TaskService:
    return TaskService(db)

