"""
Service métier pour la gestion des classes et des inscriptions par code.
"""

import uuid
import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skillverse.auth import CurrentUser
from skillverse.config import settings
from skillverse.exceptions import (
    AuthorizationError,
    CodeGenerationExhausted,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from skillverse.models.assignment import Assignment
from skillverse.models.school_class import ClassStudent, SchoolClass
from skillverse.models.user import User
from skillverse.schemas.school_class import (
    ClassCreate,
    ClassResponse,
    ClassStudentsResponse,
    ClassUpdate,
    EnrolledStudent,
)
from skillverse.services.join_code import generate_join_code

logger = logging.getLogger(__name__)


def generate_unique_code(db: Session) -> str:
    """Retourne un code d'accès libre ou lève CodeGenerationExhausted."""
    result = generate_join_code(
        lambda code: _code_exists(db, code),
        max_attempts=settings.JOIN_CODE_MAX_ATTEMPTS,
    )
    if result.exhausted:
        logger.error("Génération de code épuisée après %d tentatives", result.attempts)
        raise CodeGenerationExhausted(result.attempts)
    return result.code


def create_class(db: Session, teacher_id: uuid.UUID, data: ClassCreate) -> ClassResponse:
    """Crée une classe appartenant à l'enseignant, avec un code d'accès unique."""
    school_class = SchoolClass(
        name=data.name,
        description=data.description,
        subject=data.subject,
        code=generate_unique_code(db),
        teacher_id=teacher_id,
        is_active=True,
    )
    db.add(school_class)
    try:
        db.commit()
    except IntegrityError:
        # Un autre enseignant a obtenu le même code entre la vérification et l'insertion
        db.rollback()
        raise ConflictError("Ce code de classe vient d'être attribué, veuillez réessayer.")
    db.refresh(school_class)

    logger.info("Classe '%s' créée (code %s)", school_class.name, school_class.code)
    return _to_response(db, school_class)


def get_classes(db: Session, user: CurrentUser) -> List[ClassResponse]:
    """Enseignant : ses classes. Élève : les classes où il est inscrit."""
    query = select(SchoolClass)
    if user.is_teacher:
        query = query.where(SchoolClass.teacher_id == user.id)
    else:
        query = query.join(ClassStudent, ClassStudent.class_id == SchoolClass.id).where(
            ClassStudent.student_id == user.id
        )
    classes = db.execute(query.order_by(SchoolClass.created_at.desc())).scalars().all()
    return [_to_response(db, c) for c in classes]


def get_class(db: Session, class_id: uuid.UUID, user: CurrentUser) -> ClassResponse:
    school_class = get_class_or_404(db, class_id)
    ensure_member(db, school_class, user)
    return _to_response(db, school_class)


def update_class(db: Session, class_id: uuid.UUID, teacher_id: uuid.UUID, data: ClassUpdate) -> ClassResponse:
    """Met à jour les champs fournis. is_active=False archive la classe."""
    school_class = get_owned_class(db, class_id, teacher_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(school_class, field, value)

    db.commit()
    db.refresh(school_class)
    return _to_response(db, school_class)


def delete_class(db: Session, class_id: uuid.UUID, teacher_id: uuid.UUID) -> None:
    """Supprime la classe ; inscriptions, devoirs et rendus suivent en cascade."""
    school_class = get_owned_class(db, class_id, teacher_id)
    db.delete(school_class)
    db.commit()
    logger.info("Classe %s supprimée", class_id)


def join_class(db: Session, code: str, student_id: uuid.UUID) -> ClassResponse:
    """
    Inscrit un élève dans la classe correspondant au code.

    Erreurs :
    - code inconnu → NotFoundError
    - classe archivée → ValidationError
    - élève déjà inscrit → ConflictError (la liste n'est pas modifiée)
    """
    school_class = db.execute(
        select(SchoolClass).where(SchoolClass.code == code.strip().upper())
    ).scalar()
    if school_class is None:
        raise NotFoundError("Aucune classe ne correspond à ce code.")
    if not school_class.is_active:
        raise ValidationError("Cette classe est archivée.")

    if db.get(ClassStudent, (school_class.id, student_id)) is not None:
        raise ConflictError("Vous êtes déjà inscrit à cette classe.")

    db.add(ClassStudent(class_id=school_class.id, student_id=student_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Vous êtes déjà inscrit à cette classe.")
    db.refresh(school_class)

    logger.info("Élève %s inscrit à la classe %s", student_id, school_class.code)
    return _to_response(db, school_class)


def list_students(db: Session, class_id: uuid.UUID, teacher_id: uuid.UUID) -> ClassStudentsResponse:
    get_owned_class(db, class_id, teacher_id)
    rows = db.execute(
        select(User, ClassStudent.enrolled_at)
        .join(ClassStudent, ClassStudent.student_id == User.id)
        .where(ClassStudent.class_id == class_id)
        .order_by(User.name)
    ).all()

    students = [
        EnrolledStudent(id=user.id, name=user.name, email=user.email, enrolled_at=enrolled_at)
        for user, enrolled_at in rows
    ]
    return ClassStudentsResponse(class_id=class_id, total=len(students), students=students)


def remove_student(db: Session, class_id: uuid.UUID, student_id: uuid.UUID, teacher_id: uuid.UUID) -> bool:
    """Retire un élève d'une classe. Retourne True si retiré, False si lien inexistant."""
    get_owned_class(db, class_id, teacher_id)
    link = db.get(ClassStudent, (class_id, student_id))
    if link is None:
        return False
    db.delete(link)
    db.commit()
    return True


# --- Contrôles d'accès partagés avec les devoirs et les rendus ---

def get_class_or_404(db: Session, class_id: uuid.UUID) -> SchoolClass:
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        raise NotFoundError("Classe introuvable.")
    return school_class


def get_owned_class(db: Session, class_id: uuid.UUID, teacher_id: uuid.UUID) -> SchoolClass:
    school_class = get_class_or_404(db, class_id)
    ensure_owner(school_class, teacher_id)
    return school_class


def ensure_owner(school_class: SchoolClass, teacher_id: uuid.UUID) -> None:
    if school_class.teacher_id != teacher_id:
        raise AuthorizationError("Vous n'êtes pas l'enseignant de cette classe.")


def is_enrolled(db: Session, class_id: uuid.UUID, student_id: uuid.UUID) -> bool:
    return db.get(ClassStudent, (class_id, student_id)) is not None


def ensure_member(db: Session, school_class: SchoolClass, user: CurrentUser) -> None:
    """L'enseignant propriétaire ou un élève inscrit ; sinon 403."""
    if user.is_teacher:
        ensure_owner(school_class, user.id)
    elif not is_enrolled(db, school_class.id, user.id):
        raise AuthorizationError("Vous n'êtes pas inscrit à cette classe.")


def _code_exists(db: Session, code: str) -> bool:
    return db.execute(
        select(SchoolClass.id).where(SchoolClass.code == code)
    ).scalar() is not None


def _to_response(db: Session, school_class: SchoolClass) -> ClassResponse:
    """Construit le schéma de réponse avec les compteurs élèves et devoirs."""
    nb_students = db.execute(
        select(func.count())
        .select_from(ClassStudent)
        .where(ClassStudent.class_id == school_class.id)
    ).scalar() or 0

    nb_assignments = db.execute(
        select(func.count())
        .select_from(Assignment)
        .where(Assignment.class_id == school_class.id)
    ).scalar() or 0

    return ClassResponse(
        id=school_class.id,
        name=school_class.name,
        description=school_class.description or "",
        subject=school_class.subject,
        code=school_class.code,
        teacher_id=school_class.teacher_id,
        is_active=school_class.is_active,
        nb_students=nb_students,
        nb_assignments=nb_assignments,
        created_at=school_class.created_at,
        updated_at=school_class.updated_at,
    )
