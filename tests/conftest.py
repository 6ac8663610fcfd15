import tempfile
from contextlib import suppress
from pathlib import Path
from typing import AsyncIterator, Callable, Dict, Iterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlmodel import Session, SQLModel

from hostmate import models  # noqa: F401  (registers tables)
from hostmate.core import database as core_database
from hostmate.core.database import create_db_engine, get_session
from hostmate.main import create_app


@pytest.fixture(scope="function")
def engine(monkeypatch):
    # Use a fresh SQLite DB file in a temp dir per test for isolation
    tmp = tempfile.TemporaryDirectory()
    db_path = Path(tmp.name) / "test.db"
    test_engine = create_db_engine(f"sqlite:///{db_path}")
    SQLModel.metadata.create_all(test_engine)

    # patch global engine/init_db so startup hooks operate on the test database
    monkeypatch.setattr(core_database, "engine", test_engine, raising=False)

    def _init_db():
        SQLModel.metadata.create_all(test_engine)

    monkeypatch.setattr(core_database, "init_db", _init_db, raising=False)

    try:
        yield test_engine
    finally:
        with suppress(Exception):
            test_engine.dispose()
        tmp.cleanup()


@pytest.fixture(scope="function")
def test_app(engine) -> Iterator[FastAPI]:
    def _override_get_session():
        with Session(engine) as session:
            yield session

    app = create_app()
    app.dependency_overrides[get_session] = _override_get_session

    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def db_session(engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def signup_and_login(client: AsyncClient) -> Callable:
    async def _login(username: str, name: str = "Host", password: str = "s3cret-pass") -> Dict[str, str]:
        resp = await client.post("/auth/signup", json={"username": username, "name": name, "password": password})
        assert resp.status_code == 200, resp.text
        resp = await client.post("/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['accessToken']}"}

    return _login


@pytest.fixture
async def host_headers(signup_and_login) -> Dict[str, str]:
    return await signup_and_login("alice", name="Alice")


@pytest.fixture
async def other_headers(signup_and_login) -> Dict[str, str]:
    return await signup_and_login("bob", name="Bob")
