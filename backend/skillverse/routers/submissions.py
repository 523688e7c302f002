"""
Router pour les rendus : soumission par l'élève, correction par l'enseignant,
passage des cas de test.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from skillverse.auth import CurrentUser, get_current_user, require_student, require_teacher
from skillverse.database import get_db
from skillverse.schemas.submission import (
    SubmissionCreate,
    SubmissionGrade,
    SubmissionResponse,
    SubmissionRunReport,
    SubmissionWithStudent,
)
from skillverse.services import submission_service
from skillverse.services.judge_client import JudgeClient, get_judge_client

router = APIRouter(prefix="/api/v1", tags=["Rendus"])


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionResponse,
    status_code=201,
    summary="Rendre (ou rendre à nouveau) un devoir",
)
def submit_assignment(
    assignment_id: uuid.UUID,
    data: SubmissionCreate,
    response: Response,
    user: CurrentUser = Depends(require_student),
    db: Session = Depends(get_db),
):
    """
    Premier rendu → 201. Rendu suivant → 200 : le code et la date sont remplacés,
    le statut repasse à pending et le cache de compilation est vidé.
    """
    submission, created = submission_service.submit(db, assignment_id, user.id, data)
    if not created:
        response.status_code = 200
    return submission


@router.get(
    "/assignments/{assignment_id}/submissions",
    response_model=List[SubmissionWithStudent],
    summary="Rendus d'un devoir",
)
def list_submissions(
    assignment_id: uuid.UUID,
    user: CurrentUser = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return submission_service.list_submissions(db, assignment_id, user.id)


@router.get(
    "/assignments/{assignment_id}/submissions/me",
    response_model=Optional[SubmissionResponse],
    summary="Mon rendu pour un devoir",
)
def get_my_submission(
    assignment_id: uuid.UUID,
    user: CurrentUser = Depends(require_student),
    db: Session = Depends(get_db),
):
    """Retourne null si l'élève n'a encore rien rendu."""
    return submission_service.get_own_submission(db, assignment_id, user.id)


@router.put("/submissions/{submission_id}/grade", response_model=SubmissionResponse, summary="Noter un rendu")
def grade_submission(
    submission_id: uuid.UUID,
    data: SubmissionGrade,
    user: CurrentUser = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return submission_service.grade_submission(db, submission_id, user.id, data)


@router.post(
    "/submissions/{submission_id}/run",
    response_model=SubmissionRunReport,
    summary="Passer les cas de test sur un rendu",
)
async def run_submission(
    submission_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: JudgeClient = Depends(get_judge_client),
):
    """
    Exécute le rendu sur chaque cas de test via le service de jugement et met à jour
    compilation_status / output. Si le service ne répond pas, les cas sont en échec,
    le cache reste inchangé et compilation_status vaut null ; jamais d'erreur 5xx.
    """
    return await submission_service.run_submission_tests(db, submission_id, user, client)
