"""
Router pour l'inscription, la connexion et la session.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from skillverse.auth import CurrentUser, close_session, get_current_user, open_session
from skillverse.database import get_db
from skillverse.exceptions import AuthError
from skillverse.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from skillverse.services import auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["Authentification"])


@router.post("/register", response_model=AuthResponse, status_code=201, summary="Créer un compte")
def register(data: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    """Crée un compte élève ou enseignant et ouvre directement la session."""
    user = auth_service.register_user(db, data)
    open_session(request, user)
    return AuthResponse(message="Compte créé.", user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse, summary="Se connecter")
def login(data: LoginRequest, request: Request, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, data)
    open_session(request, user)
    return AuthResponse(message="Connexion réussie.", user=UserResponse.model_validate(user))


@router.post("/logout", summary="Se déconnecter")
def logout(request: Request):
    close_session(request)
    return {"message": "Déconnexion réussie."}


@router.get("/me", response_model=UserResponse, summary="Utilisateur connecté")
def me(request: Request, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Retourne le compte de la session. 401 si le compte a été supprimé entre-temps."""
    account = auth_service.get_user(db, user.id)
    if account is None:
        close_session(request)
        raise AuthError("Compte introuvable, veuillez vous reconnecter.")
    return account
