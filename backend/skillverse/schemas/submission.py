"""
Schémas Pydantic pour les rendus, leur correction et le passage des tests.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from skillverse.schemas.compiler import CaseResult
from skillverse.services.languages import LANGUAGE_IDS


class SubmissionCreate(BaseModel):
    code: str
    language: Optional[str] = None  # None → langage du devoir

    @field_validator("code")
    @classmethod
    def code_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le code ne peut pas être vide.")
        return v

    @field_validator("language")
    @classmethod
    def valid_language(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        if v not in LANGUAGE_IDS:
            raise ValueError(f"Langage invalide. Valeurs acceptées : {sorted(LANGUAGE_IDS)}")
        return v


class SubmissionGrade(BaseModel):
    """Corps de requête pour noter un rendu."""
    grade: int
    feedback: Optional[str] = None

    @field_validator("grade")
    @classmethod
    def grade_in_range(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError("La note doit être comprise entre 0 et 100.")
        return v


class SubmissionResponse(BaseModel):
    id: uuid.UUID
    assignment_id: uuid.UUID
    student_id: uuid.UUID
    code: str
    language: str
    submitted_at: Optional[datetime]
    grade: Optional[int]
    feedback: Optional[str]
    status: str
    graded_at: Optional[datetime] = None
    compilation_status: Optional[str] = None
    output: Optional[str] = None

    model_config = {"from_attributes": True}


class SubmissionWithStudent(SubmissionResponse):
    """Rendu enrichi de l'identité de l'élève (vue enseignant)."""
    student_name: str
    student_email: str


class SubmissionRunReport(BaseModel):
    """Résultat du passage des tests sur un rendu."""
    submission_id: uuid.UUID
    compilation_status: Optional[str]  # success, error ; None si le service de jugement n'a pas répondu
    passed: int
    total: int
    results: List[CaseResult]
