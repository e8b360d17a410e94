from collections.abc import Generator
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import Session, sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))


from gasmeter.api.dependencies import get_app_settings
from gasmeter.core.config import Settings
from gasmeter.db import session as db_session
from gasmeter.db.base import Base
from gasmeter.db.kv_store import MemoryKeyValueStore
from gasmeter.main import create_app
from gasmeter.schemas.auth import IdentityCandidate, IdentityPublic
from gasmeter.services.identity_service import IdentityService
from gasmeter.services.logging_service import ActivityLogger


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Nadpisane ustawienia z deterministycznymi wartościami."""
    return Settings(
        app_name="Test Gas",
        environment="test",
        database_url="sqlite:///:memory:",
        export_directory=str(tmp_path / "reports"),
        api_cors_origins=["*"],
    )


@pytest.fixture(autouse=True)
def memory_database() -> Generator[sessionmaker, None, None]:
    """Podmienia silnik bazy na SQLite w pamięci dla każdego testu."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, class_=Session)
    Base.metadata.create_all(bind=engine)

    original_engine = db_session.engine
    original_session_local = db_session.SessionLocal
    db_session.engine = engine
    db_session.SessionLocal = TestingSessionLocal

    yield TestingSessionLocal

    db_session.SessionLocal = original_session_local
    db_session.engine = original_engine
    engine.dispose()


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def activity(memory_database: sessionmaker) -> ActivityLogger:
    return ActivityLogger(memory_database)


@pytest.fixture
def identity_service(store: MemoryKeyValueStore, test_settings: Settings, activity: ActivityLogger) -> IdentityService:
    return IdentityService(store, test_settings, activity)


@pytest.fixture
def identity(identity_service: IdentityService) -> IdentityPublic:
    """Zarejestrowane i zalogowane konto w planie darmowym."""
    registered = identity_service.register(
        IdentityCandidate(
            email="sindico@example.com",
            password="Segredo123",
            name="Síndico",
            company_name="Condomínio Aurora",
            max_units=identity_service.settings.free_plan_max_units,
        )
    )
    assert registered is not None
    return registered


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """Udostępnia klienta API z bazą w pamięci."""
    app = create_app()
    app.dependency_overrides[get_app_settings] = lambda: test_settings

    with TestClient(app) as test_client:
        yield test_client
