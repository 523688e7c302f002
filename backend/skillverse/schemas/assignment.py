"""
Schémas Pydantic pour les devoirs et leurs cas de test.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from skillverse.services.languages import LANGUAGE_IDS


def _to_naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    """Les dates sont stockées en UTC sans fuseau."""
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


def _check_language(v: str) -> str:
    v = v.strip().lower()
    if v not in LANGUAGE_IDS:
        raise ValueError(f"Langage invalide. Valeurs acceptées : {sorted(LANGUAGE_IDS)}")
    return v


def _check_points(v: int) -> int:
    if not 0 <= v <= 100:
        raise ValueError("Le barème doit être compris entre 0 et 100.")
    return v


class AssignmentTestCase(BaseModel):
    """Un cas de test : entrée standard et sortie attendue."""

    input: str = ""
    expected_output: str = Field(validation_alias=AliasChoices("expected_output", "expectedOutput"))
    hidden: bool = Field(default=False, validation_alias=AliasChoices("hidden", "isHidden"))


class AssignmentCreate(BaseModel):
    title: str
    description: str
    language: str
    starter_code: Optional[str] = None  # None → modèle du langage
    test_cases: List[AssignmentTestCase] = []
    due_date: datetime
    points: int = 100
    is_active: bool = True

    @field_validator("title", "description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Ce champ ne peut pas être vide.")
        return v.strip()

    @field_validator("language")
    @classmethod
    def valid_language(cls, v: str) -> str:
        return _check_language(v)

    @field_validator("points")
    @classmethod
    def valid_points(cls, v: int) -> int:
        return _check_points(v)

    @field_validator("due_date")
    @classmethod
    def naive_due_date(cls, v: datetime) -> datetime:
        return _to_naive_utc(v)


class AssignmentUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    language: Optional[str] = None
    starter_code: Optional[str] = None
    test_cases: Optional[List[AssignmentTestCase]] = None
    due_date: Optional[datetime] = None
    points: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("title", "description")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Ce champ ne peut pas être vide.")
        return v.strip() if v else v

    @field_validator("language")
    @classmethod
    def valid_language(cls, v: Optional[str]) -> Optional[str]:
        return _check_language(v) if v is not None else v

    @field_validator("points")
    @classmethod
    def valid_points(cls, v: Optional[int]) -> Optional[int]:
        return _check_points(v) if v is not None else v

    @field_validator("due_date")
    @classmethod
    def naive_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(v)

    @field_validator(
        "title", "description", "language", "starter_code", "test_cases", "due_date", "points", "is_active",
    )
    @classmethod
    def not_null(cls, v):
        # Colonnes NOT NULL : null ne peut pas signifier "effacer"
        if v is None:
            raise ValueError("Ce champ ne peut pas être nul.")
        return v


class AssignmentResponse(BaseModel):
    id: uuid.UUID
    class_id: uuid.UUID
    title: str
    description: str
    language: str
    starter_code: str
    test_cases: List[AssignmentTestCase]
    due_date: datetime
    points: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Renseignés uniquement pour un élève
    submission_status: Optional[str] = None  # not_submitted, pending, graded
    grade: Optional[int] = None

    model_config = {"from_attributes": True}
