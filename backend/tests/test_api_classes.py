"""
Tests d'intégration API pour les classes et l'inscription par code.
Testent les URLs, les codes HTTP, la validation et le format des réponses.
"""

import uuid
from datetime import datetime
from unittest.mock import patch

from skillverse.exceptions import (
    AuthorizationError,
    CodeGenerationExhausted,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from skillverse.schemas.school_class import ClassResponse, ClassStudentsResponse, EnrolledStudent
from conftest import STUDENT, TEACHER

CLASS_SERVICE = "skillverse.routers.classes.class_service"


# --- Helper ---

def make_class_response(**kwargs) -> ClassResponse:
    return ClassResponse(
        id=kwargs.get("id", uuid.uuid4()),
        name=kwargs.get("name", "Algo101"),
        description=kwargs.get("description", ""),
        subject=kwargs.get("subject", "Informatique"),
        code=kwargs.get("code", "K7Q2ZD"),
        teacher_id=kwargs.get("teacher_id", TEACHER.id),
        is_active=kwargs.get("is_active", True),
        nb_students=kwargs.get("nb_students", 0),
        nb_assignments=kwargs.get("nb_assignments", 0),
        created_at=datetime.now(),
        updated_at=datetime.now(),
    )


# ============================================================
# POST /api/v1/classes
# ============================================================

def test_create_class_succes(teacher_client):
    """Création d'une classe valide → 201 avec un code de 6 caractères."""
    with patch(f"{CLASS_SERVICE}.create_class") as mock:
        mock.return_value = make_class_response(name="Algo101")

        response = teacher_client.post("/api/v1/classes", json={"name": "Algo101"})

    assert response.status_code == 201
    assert response.json()["name"] == "Algo101"
    assert len(response.json()["code"]) == 6
    assert mock.call_args[0][1] == TEACHER.id


def test_create_class_nom_vide(teacher_client):
    """Nom vide → 400."""
    response = teacher_client.post("/api/v1/classes", json={"name": "   "})
    assert response.status_code == 400


def test_create_class_body_manquant(teacher_client):
    response = teacher_client.post("/api/v1/classes")
    assert response.status_code == 400


def test_create_class_codes_epuises(teacher_client):
    with patch(f"{CLASS_SERVICE}.create_class") as mock:
        mock.side_effect = CodeGenerationExhausted(20)
        response = teacher_client.post("/api/v1/classes", json={"name": "Algo101"})

    assert response.status_code == 409


# ============================================================
# GET /api/v1/classes
# ============================================================

def test_list_classes_succes(teacher_client):
    with patch(f"{CLASS_SERVICE}.get_classes") as mock:
        mock.return_value = [make_class_response(), make_class_response(name="Web201")]
        response = teacher_client.get("/api/v1/classes")

    assert response.status_code == 200
    assert len(response.json()) == 2
    assert "nb_students" in response.json()[0]
    assert "nb_assignments" in response.json()[0]


def test_list_classes_vide(student_client):
    with patch(f"{CLASS_SERVICE}.get_classes", return_value=[]):
        response = student_client.get("/api/v1/classes")

    assert response.status_code == 200
    assert response.json() == []


def test_list_classes_sans_session(client):
    assert client.get("/api/v1/classes").status_code == 401


# ============================================================
# POST /api/v1/classes/join
# ============================================================

def test_join_class_succes(student_client):
    with patch(f"{CLASS_SERVICE}.join_class") as mock:
        mock.return_value = make_class_response(nb_students=1)
        response = student_client.post("/api/v1/classes/join", json={"code": " k7q2zd "})

    assert response.status_code == 200
    assert response.json()["nb_students"] == 1
    assert mock.call_args[0][1] == "K7Q2ZD"
    assert mock.call_args[0][2] == STUDENT.id


def test_join_class_deja_inscrit(student_client):
    with patch(f"{CLASS_SERVICE}.join_class") as mock:
        mock.side_effect = ConflictError("Vous êtes déjà inscrit à cette classe.")
        response = student_client.post("/api/v1/classes/join", json={"code": "K7Q2ZD"})

    assert response.status_code == 409
    assert "déjà inscrit" in response.json()["detail"]


def test_join_class_code_inconnu(student_client):
    with patch(f"{CLASS_SERVICE}.join_class") as mock:
        mock.side_effect = NotFoundError("Aucune classe ne correspond à ce code.")
        response = student_client.post("/api/v1/classes/join", json={"code": "ZZZZZZ"})

    assert response.status_code == 404


def test_join_class_archivee(student_client):
    with patch(f"{CLASS_SERVICE}.join_class") as mock:
        mock.side_effect = ValidationError("Cette classe est archivée.")
        response = student_client.post("/api/v1/classes/join", json={"code": "K7Q2ZD"})

    assert response.status_code == 400


def test_join_class_code_vide(student_client):
    response = student_client.post("/api/v1/classes/join", json={"code": "  "})
    assert response.status_code == 400


# ============================================================
# GET / PUT / DELETE /api/v1/classes/{id}
# ============================================================

def test_get_class_succes(student_client):
    class_id = uuid.uuid4()
    with patch(f"{CLASS_SERVICE}.get_class") as mock:
        mock.return_value = make_class_response(id=class_id)
        response = student_client.get(f"/api/v1/classes/{class_id}")

    assert response.status_code == 200
    assert response.json()["id"] == str(class_id)


def test_get_class_introuvable(teacher_client):
    with patch(f"{CLASS_SERVICE}.get_class") as mock:
        mock.side_effect = NotFoundError("Classe introuvable.")
        response = teacher_client.get(f"/api/v1/classes/{uuid.uuid4()}")

    assert response.status_code == 404


def test_get_class_uuid_invalide(teacher_client):
    response = teacher_client.get("/api/v1/classes/pas-un-uuid")
    assert response.status_code == 400


def test_get_class_non_membre(student_client):
    with patch(f"{CLASS_SERVICE}.get_class") as mock:
        mock.side_effect = AuthorizationError("Vous n'êtes pas inscrit à cette classe.")
        response = student_client.get(f"/api/v1/classes/{uuid.uuid4()}")

    assert response.status_code == 403


def test_update_class_archivage(teacher_client):
    with patch(f"{CLASS_SERVICE}.update_class") as mock:
        mock.return_value = make_class_response(is_active=False)
        response = teacher_client.put(f"/api/v1/classes/{uuid.uuid4()}", json={"is_active": False})

    assert response.status_code == 200
    assert response.json()["is_active"] is False


def test_update_class_nom_null(teacher_client):
    """null sur une colonne obligatoire → 400, le service n'est pas appelé."""
    with patch(f"{CLASS_SERVICE}.update_class") as mock:
        response = teacher_client.put(f"/api/v1/classes/{uuid.uuid4()}", json={"name": None})

    assert response.status_code == 400
    mock.assert_not_called()


def test_update_class_sujet_null_autorise(teacher_client):
    with patch(f"{CLASS_SERVICE}.update_class") as mock:
        mock.return_value = make_class_response(subject=None)
        response = teacher_client.put(f"/api/v1/classes/{uuid.uuid4()}", json={"subject": None})

    assert response.status_code == 200
    assert response.json()["subject"] is None


def test_delete_class_succes(teacher_client):
    with patch(f"{CLASS_SERVICE}.delete_class") as mock:
        response = teacher_client.delete(f"/api/v1/classes/{uuid.uuid4()}")

    assert response.status_code == 204
    mock.assert_called_once()


def test_delete_class_eleve(student_client):
    assert student_client.delete(f"/api/v1/classes/{uuid.uuid4()}").status_code == 403


# ============================================================
# Élèves d'une classe
# ============================================================

def test_list_students_succes(teacher_client):
    class_id = uuid.uuid4()
    with patch(f"{CLASS_SERVICE}.list_students") as mock:
        mock.return_value = ClassStudentsResponse(
            class_id=class_id,
            total=1,
            students=[EnrolledStudent(id=STUDENT.id, name="Ada", email=STUDENT.email, enrolled_at=datetime.now())],
        )
        response = teacher_client.get(f"/api/v1/classes/{class_id}/students")

    assert response.status_code == 200
    assert response.json()["total"] == 1
    assert response.json()["students"][0]["name"] == "Ada"


def test_remove_student_succes(teacher_client):
    with patch(f"{CLASS_SERVICE}.remove_student", return_value=True):
        response = teacher_client.delete(f"/api/v1/classes/{uuid.uuid4()}/students/{uuid.uuid4()}")
    assert response.status_code == 204


def test_remove_student_non_inscrit(teacher_client):
    with patch(f"{CLASS_SERVICE}.remove_student", return_value=False):
        response = teacher_client.delete(f"/api/v1/classes/{uuid.uuid4()}/students/{uuid.uuid4()}")

    assert response.status_code == 404
    assert "non inscrit" in response.json()["detail"]
