"""
Hiérarchie des erreurs métier.
Les services lèvent ces exceptions ; main.py les traduit en réponses JSON
avec le code HTTP porté par chaque classe.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str = "Une erreur interne est survenue."):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Champ manquant ou invalide."""
    status_code = 400


class UnsupportedLanguageError(ValidationError):
    def __init__(self, language: str):
        super().__init__(f"Langage non supporté : '{language}'.")
        self.language = language


class AuthError(AppError):
    """Session absente ou identifiants invalides."""
    status_code = 401


class AuthorizationError(AppError):
    """Utilisateur authentifié mais rôle ou propriété insuffisants."""
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class CodeGenerationExhausted(ConflictError):
    def __init__(self, attempts: int):
        super().__init__(f"Impossible de générer un code de classe unique après {attempts} tentatives.")
        self.attempts = attempts


class ExternalServiceError(AppError):
    """Service de jugement injoignable, réponse malformée ou délai dépassé."""
    status_code = 502
