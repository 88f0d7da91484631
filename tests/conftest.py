from collections.abc import Callable
from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import anki_heatmap.models  # noqa: F401
from anki_heatmap.db import Base
from anki_heatmap.db import get_db
from anki_heatmap.main import app


@pytest.fixture
def session_factory() -> sessionmaker[Session]:
    test_engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    return sessionmaker(bind=test_engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def override_db(
    session_factory: sessionmaker[Session],
) -> Callable[[FastAPI], None]:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def apply(target_app: FastAPI) -> None:
        target_app.dependency_overrides[get_db] = override_get_db

    return apply


@pytest.fixture
def db_client(override_db: Callable[[FastAPI], None]) -> Generator[TestClient, None, None]:
    override_db(app)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
