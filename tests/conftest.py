"""Shared fixtures for ordering tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app import main as app_main
from app.api.v1.deps import get_reference_now
from app.db import session as db_session
from app.db.base import Base
from app.main import app
from app.services.payment_gateway import get_payment_gateway
from tests.helpers import RecordingGateway, build_test_engine, denver

API_REFERENCE_NOW = denver(2026, 10, 20, 12)


@pytest.fixture
def session_local(tmp_path: Path) -> sessionmaker:
    engine = build_test_engine(tmp_path / "orders.db")
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def client(session_local: sessionmaker, gateway: RecordingGateway, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    engine = session_local.kw["bind"]
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", session_local)
    monkeypatch.setattr(app_main, "engine", engine)
    app.dependency_overrides[get_reference_now] = lambda: API_REFERENCE_NOW
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
