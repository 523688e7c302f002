"""
Service métier pour les rendus des élèves.

Règles :
- un seul rendu par (devoir, élève) ; soumettre à nouveau écrase le code, la date
  et le statut, et vide le cache de compilation
- seul l'enseignant de la classe corrige ; la note est comprise entre 0 et 100
- le passage des tests met en cache compilation_status et le rapport texte
"""

import uuid
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skillverse.auth import CurrentUser
from skillverse.config import settings
from skillverse.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from skillverse.models.assignment import Assignment
from skillverse.models.submission import STATUS_GRADED, STATUS_PENDING, Submission
from skillverse.models.user import User
from skillverse.schemas.compiler import CaseResult
from skillverse.schemas.submission import (
    SubmissionCreate,
    SubmissionGrade,
    SubmissionResponse,
    SubmissionRunReport,
    SubmissionWithStudent,
)
from skillverse.services import assignment_service, class_service, grader
from skillverse.services.judge_client import STATUS_ERROR, STATUS_TIMEOUT, JudgeClient

logger = logging.getLogger(__name__)

COMPILATION_SUCCESS = "success"
COMPILATION_ERROR = "error"

# Statuts sans verdict sur le code : service injoignable ou délai de polling épuisé
JUDGE_UNAVAILABLE = {STATUS_ERROR, STATUS_TIMEOUT}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def submit(
    db: Session, assignment_id: uuid.UUID, student_id: uuid.UUID, data: SubmissionCreate
) -> Tuple[SubmissionResponse, bool]:
    """
    Crée ou remplace le rendu de l'élève.
    Retourne (rendu, True si créé / False si resoumis).
    """
    assignment, school_class = assignment_service.get_assignment_with_class(db, assignment_id)
    if not class_service.is_enrolled(db, school_class.id, student_id):
        raise AuthorizationError("Vous n'êtes pas inscrit à cette classe.")
    if not assignment.is_active:
        raise ValidationError("Ce devoir n'est plus actif.")

    now = _utcnow()
    if assignment.due_date is not None and now > assignment.due_date:
        raise ValidationError("La date limite de ce devoir est dépassée.")

    language = data.language or assignment.language
    submission = db.execute(
        select(Submission).where(
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id,
        )
    ).scalar()

    created = submission is None
    if created:
        submission = Submission(
            assignment_id=assignment_id,
            student_id=student_id,
            code=data.code,
            language=language,
            submitted_at=now,
            status=STATUS_PENDING,
        )
        db.add(submission)
    else:
        submission.code = data.code
        submission.language = language
        submission.submitted_at = now
        submission.status = STATUS_PENDING
        submission.compilation_status = None
        submission.output = None

    try:
        db.commit()
    except IntegrityError:
        # Deux soumissions simultanées du même élève : la contrainte unique tranche
        db.rollback()
        raise ConflictError("Un rendu est déjà en cours d'enregistrement pour ce devoir.")
    db.refresh(submission)

    logger.info(
        "Rendu %s de l'élève %s pour le devoir %s",
        "créé" if created else "remplacé", student_id, assignment_id,
    )
    return SubmissionResponse.model_validate(submission), created


def list_submissions(db: Session, assignment_id: uuid.UUID, teacher_id: uuid.UUID) -> List[SubmissionWithStudent]:
    """Rendus d'un devoir avec l'identité des élèves, les plus récents en premier."""
    _, school_class = assignment_service.get_assignment_with_class(db, assignment_id)
    class_service.ensure_owner(school_class, teacher_id)

    rows = db.execute(
        select(Submission, User)
        .join(User, User.id == Submission.student_id)
        .where(Submission.assignment_id == assignment_id)
        .order_by(Submission.submitted_at.desc())
    ).all()

    return [
        SubmissionWithStudent(
            **SubmissionResponse.model_validate(submission).model_dump(),
            student_name=student.name,
            student_email=student.email,
        )
        for submission, student in rows
    ]


def get_own_submission(db: Session, assignment_id: uuid.UUID, student_id: uuid.UUID) -> Optional[SubmissionResponse]:
    _, school_class = assignment_service.get_assignment_with_class(db, assignment_id)
    if not class_service.is_enrolled(db, school_class.id, student_id):
        raise AuthorizationError("Vous n'êtes pas inscrit à cette classe.")

    submission = db.execute(
        select(Submission).where(
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id,
        )
    ).scalar()
    if submission is None:
        return None
    return SubmissionResponse.model_validate(submission)


def grade_submission(
    db: Session, submission_id: uuid.UUID, teacher_id: uuid.UUID, data: SubmissionGrade
) -> SubmissionResponse:
    """Note un rendu. Une note hors [0, 100] est refusée sans rien modifier."""
    if not 0 <= data.grade <= 100:
        raise ValidationError("La note doit être comprise entre 0 et 100.")

    submission = db.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError("Rendu introuvable.")
    _, school_class = assignment_service.get_assignment_with_class(db, submission.assignment_id)
    class_service.ensure_owner(school_class, teacher_id)

    submission.grade = data.grade
    submission.feedback = data.feedback or ""
    submission.status = STATUS_GRADED
    submission.graded_at = _utcnow()
    submission.graded_by = teacher_id
    db.commit()
    db.refresh(submission)

    logger.info("Rendu %s noté %d/100", submission_id, data.grade)
    return SubmissionResponse.model_validate(submission)


async def run_submission_tests(
    db: Session, submission_id: uuid.UUID, user: CurrentUser, client: JudgeClient
) -> SubmissionRunReport:
    """
    Exécute les cas de test du devoir sur le rendu.
    Autorisé pour l'enseignant de la classe et pour l'auteur du rendu ;
    l'élève ne voit pas le détail des cas cachés.

    Les accès à la base passent par le pool de threads : seule l'attente du
    service de jugement occupe la boucle d'événements.
    """
    submission, assignment = await run_in_threadpool(_load_for_run, db, submission_id, user)

    results, cache = await _execute(submission, assignment, client)
    if cache is not None:
        await run_in_threadpool(_store_cache, db, submission, *cache)

    if user.is_student:
        results = grader.mask_hidden(results)

    passed, total = grader.summarize(results)
    return SubmissionRunReport(
        submission_id=submission.id,
        compilation_status=cache[0] if cache is not None else None,
        passed=passed,
        total=total,
        results=results,
    )


def _load_for_run(db: Session, submission_id: uuid.UUID, user: CurrentUser) -> Tuple[Submission, Assignment]:
    submission = db.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError("Rendu introuvable.")
    assignment, school_class = assignment_service.get_assignment_with_class(db, submission.assignment_id)
    if user.is_teacher:
        class_service.ensure_owner(school_class, user.id)
    elif submission.student_id != user.id:
        raise AuthorizationError("Ce rendu ne vous appartient pas.")
    return submission, assignment


async def evaluate_submission(
    db: Session, submission: Submission, assignment: Assignment, client: JudgeClient
) -> List[CaseResult]:
    """
    Passe le rendu sur tous les cas de test et met à jour le cache de compilation.
    Utilisé hors requête HTTP (évaluation planifiée).
    """
    results, cache = await _execute(submission, assignment, client)
    if cache is not None:
        _store_cache(db, submission, *cache)
    return results


async def _execute(
    submission: Submission, assignment: Assignment, client: JudgeClient
) -> Tuple[List[CaseResult], Optional[Tuple[str, str]]]:
    """
    Retourne (verdicts, (compilation_status, output)) ou (verdicts, None) quand le
    service de jugement n'a pas rendu de verdict : le cache reste vide et le rendu
    sera repris par l'évaluation planifiée.
    Sans cas de test, le code est exécuté une fois sans entrée.
    """
    test_cases = assignment.test_cases or []
    if test_cases:
        results = await grader.run_test_cases(
            client, submission.code, submission.language, test_cases,
            concurrency=settings.GRADER_CONCURRENCY,
        )
        if any(r.status in JUDGE_UNAVAILABLE for r in results):
            logger.warning("Rendu %s : service de jugement indisponible, résultat non mis en cache", submission.id)
            return results, None
        passed, total = grader.summarize(results)
        status = COMPILATION_SUCCESS if passed == total else COMPILATION_ERROR
        return results, (status, grader.format_report(results))

    execution = await client.execute(submission.code, submission.language, "")
    if execution.status in JUDGE_UNAVAILABLE:
        logger.warning("Rendu %s : service de jugement indisponible, résultat non mis en cache", submission.id)
        return [], None
    if execution.success:
        return [], (COMPILATION_SUCCESS, execution.stdout)
    return [], (COMPILATION_ERROR, execution.error)


def _store_cache(db: Session, submission: Submission, compilation_status: str, output: str) -> None:
    submission.compilation_status = compilation_status
    submission.output = output
    db.commit()
    db.refresh(submission)
    logger.info("Rendu %s évalué : %s", submission.id, compilation_status)


async def evaluate_pending(db: Session, client: JudgeClient, limit: int = 20) -> int:
    """Évalue les rendus en attente dont le cache est vide. Retourne le nombre traité."""
    submissions = db.execute(
        select(Submission)
        .where(
            Submission.status == STATUS_PENDING,
            Submission.compilation_status.is_(None),
        )
        .order_by(Submission.submitted_at)
        .limit(limit)
    ).scalars().all()

    for submission in submissions:
        assignment = db.get(Assignment, submission.assignment_id)
        if assignment is None:
            continue
        await evaluate_submission(db, submission, assignment, client)
    return len(submissions)
