"""
Tests d'intégration API pour les tableaux de bord et le contrat d'erreur global.
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from skillverse.auth import get_current_user
from skillverse.database import get_db
from skillverse.main import app
from skillverse.schemas.dashboard import StudentDashboard, StudentStats, TeacherDashboard
from conftest import STUDENT, TEACHER

DASHBOARD_SERVICE = "skillverse.routers.dashboard.dashboard_service"


def test_dashboard_enseignant(teacher_client):
    with patch(f"{DASHBOARD_SERVICE}.teacher_dashboard") as mock:
        mock.return_value = TeacherDashboard(
            nb_classes=2, total_students=31, total_assignments=5, pending_submissions=7, recent_submissions=[]
        )
        response = teacher_client.get("/api/v1/dashboard/teacher")

    assert response.status_code == 200
    assert response.json()["pending_submissions"] == 7
    assert mock.call_args[0][1] == TEACHER.id


def test_dashboard_eleve(student_client):
    with patch(f"{DASHBOARD_SERVICE}.student_dashboard") as mock:
        mock.return_value = StudentDashboard(
            nb_classes=1,
            upcoming_assignments=[],
            stats=StudentStats(total_submissions=3, graded_submissions=2, average_grade=78),
        )
        response = student_client.get("/api/v1/dashboard/student")

    assert response.status_code == 200
    assert response.json()["stats"]["average_grade"] == 78
    assert mock.call_args[0][1] == STUDENT.id


def test_dashboard_enseignant_refuse_a_un_eleve(student_client):
    assert student_client.get("/api/v1/dashboard/teacher").status_code == 403


def test_erreur_inattendue_en_500(mock_db):
    """Exception non prévue → 500 avec un message générique."""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_user] = lambda: TEACHER
    try:
        with TestClient(app, raise_server_exceptions=False) as c, \
             patch(f"{DASHBOARD_SERVICE}.teacher_dashboard", side_effect=RuntimeError("boom")):
            response = c.get("/api/v1/dashboard/teacher")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert "boom" not in response.json()["detail"]


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
