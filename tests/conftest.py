"""
Configuration pytest et fixtures communes
"""

import os
import pytest

# Variables d'environnement de test, avant l'import des modules de l'application
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("VAPI_MOCK_MODE", "false")
os.environ.setdefault("DEBUG", "false")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vapi_hub.db.base import Base, get_db
from vapi_hub.db.init_db import create_tables
from vapi_hub.core.auth import get_current_user
from vapi_hub.api.dependencies import get_vapi_client_factory
from vapi_hub.services.mock_vapi import MockVapiClient, MockVapiStore
from vapi_hub.main import app


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def current_user():
    """Utilisateur authentifié; modifier `id` pour changer d'utilisateur"""
    return {"id": "user-1", "email": "owner@example.com"}


@pytest.fixture
def mock_store():
    return MockVapiStore()


class RecordingFactory:
    """Fabrique de clients simulés qui garde la trace des clés utilisées"""

    def __init__(self, store):
        self.store = store
        self.api_keys = []

    def __call__(self, api_key):
        self.api_keys.append(api_key)
        return MockVapiClient(self.store)


@pytest.fixture
def client_factory(mock_store):
    return RecordingFactory(mock_store)


@pytest.fixture
def test_client(session, current_user, client_factory):
    """Client HTTP avec base SQLite en mémoire, utilisateur et Vapi simulés"""

    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_vapi_client_factory] = lambda: client_factory

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def agent_payload():
    return {
        "name": "Support Bot",
        "external_agent_id": "agent_1",
        "api_key": "sk-1",
        "phone_number": "+15550001111",
        "description": "Handles support calls",
    }
