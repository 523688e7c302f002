"""
Configuration partagée pour tous les tests.
Override la dépendance get_db pour éviter toute connexion réelle à la base,
et get_current_user pour simuler un enseignant ou un élève connecté.
"""

import os

# Avant tout import de skillverse : la configuration est lue à l'import
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_EVALUATION_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import uuid
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from skillverse.auth import CurrentUser, get_current_user
from skillverse.database import get_db
from skillverse.main import app

TEACHER = CurrentUser(id=uuid.uuid4(), email="prof@skillverse.dev", name="Mme Curie", role="teacher")
STUDENT = CurrentUser(id=uuid.uuid4(), email="eleve@skillverse.dev", name="Ada", role="student")


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def client(mock_db):
    """Client HTTP de test avec la BDD mockée, sans session."""
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def teacher_client(client):
    """Client connecté en tant qu'enseignant."""
    app.dependency_overrides[get_current_user] = lambda: TEACHER
    yield client


@pytest.fixture
def student_client(client):
    """Client connecté en tant qu'élève."""
    app.dependency_overrides[get_current_user] = lambda: STUDENT
    yield client
