"""
Schémas Pydantic pour l'exécution de code à la demande.
Les réponses de /compiler/{language} sont en camelCase, format attendu par les éditeurs web.
"""

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from skillverse.schemas.assignment import AssignmentTestCase


class CompileRequest(BaseModel):
    code: str
    input: str = ""

    @field_validator("code")
    @classmethod
    def code_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le code est obligatoire.")
        return v


class CompileResponse(BaseModel):
    success: bool
    output: str
    error: str
    compilation_time: Optional[float] = None
    execution_time: Optional[float] = None
    memory_used: Optional[int] = None
    status: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RunTestsRequest(BaseModel):
    code: str
    test_cases: List[AssignmentTestCase] = Field(
        validation_alias=AliasChoices("test_cases", "testCases"),
    )

    @field_validator("code")
    @classmethod
    def code_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le code est obligatoire.")
        return v

    @field_validator("test_cases")
    @classmethod
    def at_least_one(cls, v: List[AssignmentTestCase]) -> List[AssignmentTestCase]:
        if not v:
            raise ValueError("Au moins un cas de test est requis.")
        return v


class CaseResult(BaseModel):
    """Verdict d'un cas de test. Les champs sont masqués (None) pour un cas caché vu par un élève."""
    index: int
    input: Optional[str]
    expected_output: Optional[str]
    actual_output: Optional[str]
    passed: bool
    status: str
    execution_time: Optional[float] = None
    error: str = ""
    hidden: bool = False


class RunTestsResponse(BaseModel):
    results: List[CaseResult]
    passed: int
    total: int


class LanguageInfo(BaseModel):
    language: str
    judge_id: int


class TemplateResponse(BaseModel):
    language: str
    code: str
