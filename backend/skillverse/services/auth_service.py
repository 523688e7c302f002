"""
Service métier pour l'inscription et l'authentification des utilisateurs.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skillverse.config import settings
from skillverse.exceptions import AuthError, ConflictError
from skillverse.models.user import User
from skillverse.schemas.auth import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (TypeError, ValueError):
        # Hash absent ou dans un format inconnu
        return False


def register_user(db: Session, data: RegisterRequest) -> User:
    """
    Crée un compte élève ou enseignant.
    Lève ConflictError si l'email est déjà utilisé.
    """
    existing = db.execute(select(User).where(User.email == data.email)).scalar()
    if existing is not None:
        raise ConflictError("Un compte existe déjà avec cet email.")

    user = User(
        email=data.email,
        password_hash=hash_password(data.password),
        name=data.name,
        role=data.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Un compte existe déjà avec cet email.")
    db.refresh(user)

    logger.info("Compte %s créé (%s)", user.email, user.role)
    return user


def authenticate(db: Session, data: LoginRequest) -> User:
    """
    Vérifie les identifiants et met à jour la date de dernière connexion.
    Lève AuthError sans préciser si l'email ou le mot de passe est en cause.
    """
    user = db.execute(select(User).where(User.email == data.email)).scalar()
    if user is None or not verify_password(data.password, user.password_hash):
        logger.info("Échec de connexion pour %s", data.email)
        raise AuthError("Identifiants invalides.")

    user.last_login = datetime.now(timezone.utc).replace(tzinfo=None)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: uuid.UUID) -> Optional[User]:
    return db.get(User, user_id)
