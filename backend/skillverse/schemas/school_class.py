"""
Schémas Pydantic pour les classes et les inscriptions par code.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator


class ClassCreate(BaseModel):
    name: str
    description: str = ""
    subject: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de la classe ne peut pas être vide.")
        return v.strip()


class ClassUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom de la classe ne peut pas être vide.")
        return v.strip() if v else v

    @field_validator("name", "description", "is_active")
    @classmethod
    def not_null(cls, v):
        # Colonnes NOT NULL : null ne peut pas signifier "effacer"
        if v is None:
            raise ValueError("Ce champ ne peut pas être nul.")
        return v


class JoinClassRequest(BaseModel):
    """Corps de requête pour rejoindre une classe avec son code."""
    code: str

    @field_validator("code")
    @classmethod
    def code_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le code de la classe est obligatoire.")
        return v.strip().upper()


class ClassResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    subject: Optional[str]
    code: str
    teacher_id: uuid.UUID
    is_active: bool
    nb_students: int
    nb_assignments: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class EnrolledStudent(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    enrolled_at: Optional[datetime]


class ClassStudentsResponse(BaseModel):
    class_id: uuid.UUID
    total: int
    students: List[EnrolledStudent]
