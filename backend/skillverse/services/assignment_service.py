"""
Service métier pour les devoirs d'une classe.

Vue élève : seuls les devoirs actifs sont visibles, les cas de test cachés sont
retirés et le statut de son propre rendu est joint à chaque devoir.
"""

import uuid
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from skillverse.auth import CurrentUser
from skillverse.exceptions import NotFoundError
from skillverse.models.assignment import Assignment
from skillverse.models.school_class import SchoolClass
from skillverse.models.submission import Submission
from skillverse.schemas.assignment import AssignmentCreate, AssignmentResponse, AssignmentUpdate
from skillverse.services import class_service
from skillverse.services.languages import starter_template

logger = logging.getLogger(__name__)

NOT_SUBMITTED = "not_submitted"


def create_assignment(
    db: Session, class_id: uuid.UUID, teacher_id: uuid.UUID, data: AssignmentCreate
) -> AssignmentResponse:
    class_service.get_owned_class(db, class_id, teacher_id)

    assignment = Assignment(
        class_id=class_id,
        title=data.title,
        description=data.description,
        language=data.language,
        starter_code=data.starter_code if data.starter_code is not None else starter_template(data.language),
        test_cases=[tc.model_dump() for tc in data.test_cases],
        due_date=data.due_date,
        points=data.points,
        is_active=data.is_active,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)

    logger.info(
        "Devoir '%s' créé dans la classe %s (%d cas de test)",
        assignment.title, class_id, len(assignment.test_cases),
    )
    return to_response(assignment)


def list_assignments(db: Session, class_id: uuid.UUID, user: CurrentUser) -> List[AssignmentResponse]:
    """Devoirs d'une classe, échéance la plus proche en premier."""
    school_class = class_service.get_class_or_404(db, class_id)
    class_service.ensure_member(db, school_class, user)

    query = select(Assignment).where(Assignment.class_id == class_id)
    if user.is_student:
        query = query.where(Assignment.is_active.is_(True))
    assignments = db.execute(query.order_by(Assignment.due_date)).scalars().all()

    if not user.is_student:
        return [to_response(a) for a in assignments]

    submissions = {}
    if assignments:
        rows = db.execute(
            select(Submission).where(
                Submission.student_id == user.id,
                Submission.assignment_id.in_([a.id for a in assignments]),
            )
        ).scalars().all()
        submissions = {s.assignment_id: s for s in rows}

    return [to_student_response(a, submissions.get(a.id)) for a in assignments]


def get_assignment(db: Session, assignment_id: uuid.UUID, user: CurrentUser) -> AssignmentResponse:
    assignment, school_class = get_assignment_with_class(db, assignment_id)
    class_service.ensure_member(db, school_class, user)

    if not user.is_student:
        return to_response(assignment)

    if not assignment.is_active:
        raise NotFoundError("Devoir introuvable.")
    submission = db.execute(
        select(Submission).where(
            Submission.assignment_id == assignment_id,
            Submission.student_id == user.id,
        )
    ).scalar()
    return to_student_response(assignment, submission)


def update_assignment(
    db: Session, assignment_id: uuid.UUID, teacher_id: uuid.UUID, data: AssignmentUpdate
) -> AssignmentResponse:
    """Met à jour les champs fournis. Les champs absents ne sont pas modifiés."""
    assignment, school_class = get_assignment_with_class(db, assignment_id)
    class_service.ensure_owner(school_class, teacher_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(assignment, field, value)

    db.commit()
    db.refresh(assignment)
    return to_response(assignment)


def delete_assignment(db: Session, assignment_id: uuid.UUID, teacher_id: uuid.UUID) -> None:
    assignment, school_class = get_assignment_with_class(db, assignment_id)
    class_service.ensure_owner(school_class, teacher_id)
    db.delete(assignment)
    db.commit()
    logger.info("Devoir %s supprimé", assignment_id)


def get_assignment_with_class(db: Session, assignment_id: uuid.UUID) -> Tuple[Assignment, SchoolClass]:
    assignment = db.get(Assignment, assignment_id)
    if assignment is None:
        raise NotFoundError("Devoir introuvable.")
    school_class = class_service.get_class_or_404(db, assignment.class_id)
    return assignment, school_class


def to_response(assignment: Assignment) -> AssignmentResponse:
    return AssignmentResponse(
        id=assignment.id,
        class_id=assignment.class_id,
        title=assignment.title,
        description=assignment.description,
        language=assignment.language,
        starter_code=assignment.starter_code or "",
        test_cases=assignment.test_cases or [],
        due_date=assignment.due_date,
        points=assignment.points,
        is_active=assignment.is_active,
        created_at=assignment.created_at,
        updated_at=assignment.updated_at,
    )


def to_student_response(assignment: Assignment, submission: Optional[Submission]) -> AssignmentResponse:
    """Retire les cas cachés et joint le statut du rendu de l'élève."""
    response = to_response(assignment)
    response.test_cases = [tc for tc in response.test_cases if not tc.hidden]
    response.submission_status = submission.status if submission else NOT_SUBMITTED
    response.grade = submission.grade if submission else None
    return response
