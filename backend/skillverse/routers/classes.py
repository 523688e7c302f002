"""
Router pour les classes : gestion par l'enseignant, inscription par code pour l'élève.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from skillverse.auth import CurrentUser, get_current_user, require_student, require_teacher
from skillverse.database import get_db
from skillverse.schemas.school_class import (
    ClassCreate,
    ClassResponse,
    ClassStudentsResponse,
    ClassUpdate,
    JoinClassRequest,
)
from skillverse.services import class_service

router = APIRouter(prefix="/api/v1/classes", tags=["Classes"])


@router.post("", response_model=ClassResponse, status_code=201, summary="Créer une classe")
def create_class(
    data: ClassCreate,
    user: CurrentUser = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    """Crée une classe et lui attribue un code d'accès unique de 6 caractères."""
    return class_service.create_class(db, user.id, data)


@router.get("", response_model=List[ClassResponse], summary="Lister mes classes")
def list_classes(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Enseignant : classes dont il est propriétaire. Élève : classes où il est inscrit."""
    return class_service.get_classes(db, user)


@router.post("/join", response_model=ClassResponse, summary="Rejoindre une classe avec son code")
def join_class(
    data: JoinClassRequest,
    user: CurrentUser = Depends(require_student),
    db: Session = Depends(get_db),
):
    """
    Inscrit l'élève connecté.
    - 404 si aucun code ne correspond
    - 409 si l'élève est déjà inscrit
    """
    return class_service.join_class(db, data.code, user.id)


@router.get("/{class_id}", response_model=ClassResponse, summary="Détail d'une classe")
def get_class(class_id: uuid.UUID, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return class_service.get_class(db, class_id, user)


@router.put("/{class_id}", response_model=ClassResponse, summary="Modifier ou archiver une classe")
def update_class(
    class_id: uuid.UUID,
    data: ClassUpdate,
    user: CurrentUser = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return class_service.update_class(db, class_id, user.id, data)


@router.delete("/{class_id}", status_code=204, summary="Supprimer une classe")
def delete_class(class_id: uuid.UUID, user: CurrentUser = Depends(require_teacher), db: Session = Depends(get_db)):
    class_service.delete_class(db, class_id, user.id)


# --- Gestion des élèves ---

@router.get("/{class_id}/students", response_model=ClassStudentsResponse, summary="Élèves inscrits")
def list_students(class_id: uuid.UUID, user: CurrentUser = Depends(require_teacher), db: Session = Depends(get_db)):
    return class_service.list_students(db, class_id, user.id)


@router.delete("/{class_id}/students/{student_id}", status_code=204, summary="Retirer un élève")
def remove_student(
    class_id: uuid.UUID,
    student_id: uuid.UUID,
    user: CurrentUser = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    """Retire un élève d'une classe."""
    success = class_service.remove_student(db, class_id, student_id, user.id)
    if not success:
        raise HTTPException(status_code=404, detail="Élève non inscrit à cette classe.")
