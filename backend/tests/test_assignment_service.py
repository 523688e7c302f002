"""
Tests unitaires pour le service des devoirs.
"""

import uuid
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from skillverse.exceptions import AuthorizationError, NotFoundError
from skillverse.models.assignment import Assignment
from skillverse.schemas.assignment import AssignmentCreate, AssignmentUpdate
from skillverse.services.assignment_service import (
    NOT_SUBMITTED,
    create_assignment,
    get_assignment,
    list_assignments,
    to_student_response,
    update_assignment,
)
from skillverse.services.languages import starter_template
from conftest import STUDENT, TEACHER


# --- Helpers ---

def make_assignment(**kwargs):
    defaults = dict(
        id=uuid.uuid4(),
        class_id=uuid.uuid4(),
        title="Somme de deux entiers",
        description="Lire a et b, afficher a + b.",
        language="python",
        starter_code="",
        test_cases=[
            {"input": "3 4", "expected_output": "7", "hidden": False},
            {"input": "100 -1", "expected_output": "99", "hidden": True},
        ],
        due_date=datetime(2099, 1, 1),
        points=100,
        is_active=True,
        created_at=datetime(2025, 9, 1),
        updated_at=datetime(2025, 9, 1),
    )
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_class(teacher_id=None):
    return SimpleNamespace(id=uuid.uuid4(), teacher_id=teacher_id or TEACHER.id, is_active=True)


def valid_payload(**kwargs):
    data = {
        "title": "Somme",
        "description": "a + b",
        "language": "python",
        "due_date": "2099-01-01T12:00:00Z",
        "test_cases": [{"input": "3 4", "expectedOutput": "7"}],
    }
    data.update(kwargs)
    return data


# --- Validation des schémas ---

def test_assignment_create_langage_invalide():
    with pytest.raises(PydanticValidationError):
        AssignmentCreate(**valid_payload(language="brainfuck"))


def test_assignment_create_langage_normalise():
    assert AssignmentCreate(**valid_payload(language=" Python ")).language == "python"


def test_assignment_create_bareme_hors_limites():
    with pytest.raises(PydanticValidationError):
        AssignmentCreate(**valid_payload(points=150))


def test_assignment_create_date_convertie_en_utc_naive():
    a = AssignmentCreate(**valid_payload(due_date="2099-01-01T14:00:00+02:00"))
    assert a.due_date == datetime(2099, 1, 1, 12, 0)
    assert a.due_date.tzinfo is None


def test_assignment_create_alias_camel_case():
    a = AssignmentCreate(**valid_payload(test_cases=[{"input": "1", "expectedOutput": "1", "isHidden": True}]))
    assert a.test_cases[0].expected_output == "1"
    assert a.test_cases[0].hidden is True


# --- create_assignment ---

def test_create_assignment_modele_par_defaut():
    db = MagicMock()

    with patch("skillverse.services.assignment_service.class_service.get_owned_class"), \
         patch("skillverse.services.assignment_service.to_response") as mock_resp:
        mock_resp.return_value = MagicMock()
        create_assignment(db, uuid.uuid4(), TEACHER.id, AssignmentCreate(**valid_payload(language="java")))

    created = db.add.call_args[0][0]
    assert isinstance(created, Assignment)
    assert created.starter_code == starter_template("java")
    assert created.test_cases == [{"input": "3 4", "expected_output": "7", "hidden": False}]
    db.commit.assert_called_once()


def test_create_assignment_classe_d_un_autre():
    db = MagicMock()
    with patch("skillverse.services.assignment_service.class_service.get_owned_class") as mock_owned:
        mock_owned.side_effect = AuthorizationError("Vous n'êtes pas l'enseignant de cette classe.")
        with pytest.raises(AuthorizationError):
            create_assignment(db, uuid.uuid4(), TEACHER.id, AssignmentCreate(**valid_payload()))
    db.add.assert_not_called()


# --- Vue élève ---

def test_to_student_response_retire_les_cas_caches():
    response = to_student_response(make_assignment(), None)

    assert len(response.test_cases) == 1
    assert response.test_cases[0].expected_output == "7"
    assert response.submission_status == NOT_SUBMITTED
    assert response.grade is None


def test_to_student_response_avec_rendu_note():
    submission = SimpleNamespace(status="graded", grade=85)

    response = to_student_response(make_assignment(), submission)

    assert response.submission_status == "graded"
    assert response.grade == 85


def test_list_assignments_eleve_non_inscrit():
    db = MagicMock()
    db.get.return_value = make_class()

    with patch("skillverse.services.assignment_service.class_service.is_enrolled", return_value=False):
        with pytest.raises(AuthorizationError):
            list_assignments(db, uuid.uuid4(), STUDENT)


def test_list_assignments_eleve_joint_ses_rendus():
    assignment = make_assignment()
    db = MagicMock()
    db.get.return_value = make_class()
    db.execute.return_value.scalars.return_value.all.side_effect = [
        [assignment],
        [SimpleNamespace(assignment_id=assignment.id, status="pending", grade=None)],
    ]

    with patch("skillverse.services.assignment_service.class_service.is_enrolled", return_value=True):
        result = list_assignments(db, assignment.class_id, STUDENT)

    assert len(result) == 1
    assert result[0].submission_status == "pending"
    assert len(result[0].test_cases) == 1


def test_get_assignment_inactif_invisible_pour_eleve():
    assignment = make_assignment(is_active=False)
    with patch("skillverse.services.assignment_service.get_assignment_with_class") as mock_get, \
         patch("skillverse.services.assignment_service.class_service.is_enrolled", return_value=True):
        mock_get.return_value = (assignment, make_class())
        with pytest.raises(NotFoundError):
            get_assignment(MagicMock(), assignment.id, STUDENT)


def test_get_assignment_enseignant_voit_les_cas_caches():
    assignment = make_assignment()
    with patch("skillverse.services.assignment_service.get_assignment_with_class") as mock_get:
        mock_get.return_value = (assignment, make_class())
        response = get_assignment(MagicMock(), assignment.id, TEACHER)

    assert len(response.test_cases) == 2
    assert response.submission_status is None


def test_update_assignment_champs_partiels():
    assignment = make_assignment()
    db = MagicMock()
    with patch("skillverse.services.assignment_service.get_assignment_with_class") as mock_get:
        mock_get.return_value = (assignment, make_class())
        response = update_assignment(db, assignment.id, TEACHER.id, AssignmentUpdate(points=50))

    assert response.points == 50
    assert response.title == "Somme de deux entiers"
    db.commit.assert_called_once()


def test_update_assignment_autre_enseignant():
    db = MagicMock()
    with patch("skillverse.services.assignment_service.get_assignment_with_class") as mock_get:
        mock_get.return_value = (make_assignment(), make_class(teacher_id=uuid.uuid4()))
        with pytest.raises(AuthorizationError):
            update_assignment(db, uuid.uuid4(), TEACHER.id, AssignmentUpdate(points=50))
    db.commit.assert_not_called()
