"""
Router pour les devoirs d'une classe.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillverse.auth import CurrentUser, get_current_user, require_teacher
from skillverse.database import get_db
from skillverse.schemas.assignment import AssignmentCreate, AssignmentResponse, AssignmentUpdate
from skillverse.services import assignment_service

router = APIRouter(prefix="/api/v1", tags=["Devoirs"])


@router.post(
    "/classes/{class_id}/assignments",
    response_model=AssignmentResponse,
    status_code=201,
    summary="Créer un devoir",
)
def create_assignment(
    class_id: uuid.UUID,
    data: AssignmentCreate,
    user: CurrentUser = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    """Sans starter_code, le modèle du langage est utilisé comme code de départ."""
    return assignment_service.create_assignment(db, class_id, user.id, data)


@router.get(
    "/classes/{class_id}/assignments",
    response_model=List[AssignmentResponse],
    summary="Lister les devoirs d'une classe",
)
def list_assignments(class_id: uuid.UUID, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Pour un élève : devoirs actifs uniquement, sans les cas de test cachés,
    avec le statut de son rendu (not_submitted, pending, graded) et sa note.
    """
    return assignment_service.list_assignments(db, class_id, user)


@router.get("/assignments/{assignment_id}", response_model=AssignmentResponse, summary="Détail d'un devoir")
def get_assignment(assignment_id: uuid.UUID, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return assignment_service.get_assignment(db, assignment_id, user)


@router.put("/assignments/{assignment_id}", response_model=AssignmentResponse, summary="Modifier un devoir")
def update_assignment(
    assignment_id: uuid.UUID,
    data: AssignmentUpdate,
    user: CurrentUser = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return assignment_service.update_assignment(db, assignment_id, user.id, data)


@router.delete("/assignments/{assignment_id}", status_code=204, summary="Supprimer un devoir")
def delete_assignment(assignment_id: uuid.UUID, user: CurrentUser = Depends(require_teacher), db: Session = Depends(get_db)):
    assignment_service.delete_assignment(db, assignment_id, user.id)
