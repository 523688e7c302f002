"""
Indicateurs des tableaux de bord.
"""

import uuid
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from skillverse.models.assignment import Assignment
from skillverse.models.school_class import ClassStudent, SchoolClass
from skillverse.models.submission import STATUS_GRADED, STATUS_PENDING, Submission
from skillverse.schemas.dashboard import StudentDashboard, StudentStats, TeacherDashboard
from skillverse.schemas.submission import SubmissionResponse
from skillverse.services.assignment_service import to_student_response

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10
UPCOMING_LIMIT = 5
UPCOMING_DAYS = 7


def teacher_dashboard(db: Session, teacher_id: uuid.UUID) -> TeacherDashboard:
    class_ids = select(SchoolClass.id).where(SchoolClass.teacher_id == teacher_id)
    assignment_ids = select(Assignment.id).where(Assignment.class_id.in_(class_ids))

    nb_classes = db.execute(
        select(func.count()).select_from(SchoolClass).where(SchoolClass.teacher_id == teacher_id)
    ).scalar() or 0

    total_students = db.execute(
        select(func.count()).select_from(ClassStudent).where(ClassStudent.class_id.in_(class_ids))
    ).scalar() or 0

    total_assignments = db.execute(
        select(func.count()).select_from(Assignment).where(Assignment.class_id.in_(class_ids))
    ).scalar() or 0

    pending_submissions = db.execute(
        select(func.count()).select_from(Submission).where(
            Submission.assignment_id.in_(assignment_ids),
            Submission.status == STATUS_PENDING,
        )
    ).scalar() or 0

    recent = db.execute(
        select(Submission)
        .where(Submission.assignment_id.in_(assignment_ids))
        .order_by(Submission.submitted_at.desc())
        .limit(RECENT_LIMIT)
    ).scalars().all()

    return TeacherDashboard(
        nb_classes=nb_classes,
        total_students=total_students,
        total_assignments=total_assignments,
        pending_submissions=pending_submissions,
        recent_submissions=[SubmissionResponse.model_validate(s) for s in recent],
    )


def student_dashboard(db: Session, student_id: uuid.UUID) -> StudentDashboard:
    """Devoirs à rendre dans les 7 jours et statistiques de notes."""
    class_ids = select(ClassStudent.class_id).where(ClassStudent.student_id == student_id)
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    nb_classes = db.execute(
        select(func.count()).select_from(ClassStudent).where(ClassStudent.student_id == student_id)
    ).scalar() or 0

    upcoming = db.execute(
        select(Assignment)
        .where(
            Assignment.class_id.in_(class_ids),
            Assignment.is_active.is_(True),
            Assignment.due_date >= now,
            Assignment.due_date <= now + timedelta(days=UPCOMING_DAYS),
        )
        .order_by(Assignment.due_date)
        .limit(UPCOMING_LIMIT)
    ).scalars().all()

    submitted = {}
    if upcoming:
        rows = db.execute(
            select(Submission).where(
                Submission.student_id == student_id,
                Submission.assignment_id.in_([a.id for a in upcoming]),
            )
        ).scalars().all()
        submitted = {s.assignment_id: s for s in rows}

    total_submissions = db.execute(
        select(func.count()).select_from(Submission).where(Submission.student_id == student_id)
    ).scalar() or 0

    graded_submissions, average = db.execute(
        select(func.count(), func.avg(Submission.grade)).where(
            Submission.student_id == student_id,
            Submission.status == STATUS_GRADED,
        )
    ).one()

    return StudentDashboard(
        nb_classes=nb_classes,
        upcoming_assignments=[to_student_response(a, submitted.get(a.id)) for a in upcoming],
        stats=StudentStats(
            total_submissions=total_submissions,
            graded_submissions=graded_submissions or 0,
            average_grade=round(float(average)) if average is not None else 0,
        ),
    )
