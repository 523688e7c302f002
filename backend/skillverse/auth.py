"""
Session et contrôle d'accès par rôle.

L'identité est stockée dans le cookie de session signé (SessionMiddleware) et
reconstruite à chaque requête sous forme de CurrentUser, sans accès à la base.
"""

import uuid
from dataclasses import dataclass

from fastapi import Depends, Request

from skillverse.exceptions import AuthError, AuthorizationError
from skillverse.models.user import ROLE_STUDENT, ROLE_TEACHER

SESSION_KEY = "user"


@dataclass(frozen=True)
class CurrentUser:
    id: uuid.UUID
    email: str
    name: str
    role: str

    @property
    def is_teacher(self) -> bool:
        return self.role == ROLE_TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == ROLE_STUDENT

    def to_session(self) -> dict:
        return {"id": str(self.id), "email": self.email, "name": self.name, "role": self.role}


def open_session(request: Request, user) -> CurrentUser:
    """Enregistre l'utilisateur dans la session et retourne son identité."""
    current = CurrentUser(id=user.id, email=user.email, name=user.name, role=user.role)
    request.session[SESSION_KEY] = current.to_session()
    return current


def close_session(request: Request) -> None:
    request.session.clear()


def get_current_user(request: Request) -> CurrentUser:
    """Dépendance FastAPI : identité de la session, 401 si absente ou corrompue."""
    data = request.session.get(SESSION_KEY)
    if not data:
        raise AuthError("Authentification requise.")
    try:
        return CurrentUser(
            id=uuid.UUID(data["id"]),
            email=data["email"],
            name=data["name"],
            role=data["role"],
        )
    except (KeyError, TypeError, ValueError):
        request.session.clear()
        raise AuthError("Session invalide, veuillez vous reconnecter.")


def require_role(*roles: str):
    """Fabrique une dépendance qui refuse (403) les rôles hors de `roles`."""

    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise AuthorizationError("Accès refusé pour ce rôle.")
        return user

    return dependency


require_teacher = require_role(ROLE_TEACHER)
require_student = require_role(ROLE_STUDENT)
