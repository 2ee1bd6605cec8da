"""
Configuration partagée pour tous les tests.

Deux familles de fixtures :
- client : BDD mockée (MagicMock) et identité injectée, pour tester les routers ;
- db_session / store_client : vraie session SQLite en mémoire, pour tester le
  cloisonnement par enseignant de bout en bout.
"""

import os

os.environ.setdefault("SCHEDULER_ENABLED", "false")

import uuid  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from halaqah.auth import get_current_identity  # noqa: E402
from halaqah.database import Base, get_db  # noqa: E402
from halaqah.main import app  # noqa: E402
from halaqah.models.user import User  # noqa: E402
from halaqah.schemas.auth import Identity  # noqa: E402


@pytest.fixture
def identity():
    """Enseignant authentifié injecté à la place du résolveur d'identité."""
    return Identity(id=uuid.uuid4(), email="aminah@sekolah.my", name="Cikgu Aminah")


@pytest.fixture
def client(identity):
    """Client HTTP de test avec la BDD mockée et une identité injectée."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_identity] = lambda: identity
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    """Client HTTP sans identité injectée : le vrai résolveur est appelé."""
    mock_db = MagicMock()
    mock_db.get.return_value = None
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Session sur une base SQLite en mémoire, schéma créé à partir des modèles."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_teacher(db_session):
    """Fabrique d'enseignants en base ; retourne leur Identity."""
    def _make(email: str, name: str = "Cikgu") -> Identity:
        user = User(email=email, password_hash="non-utilisé", name=name)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return Identity.model_validate(user)
    return _make


@pytest.fixture
def store_client(db_session):
    """Client HTTP branché sur la base SQLite, avec la vraie authentification par jeton."""
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
