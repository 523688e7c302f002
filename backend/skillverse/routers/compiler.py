"""
Router pour l'exécution de code à la demande (éditeur en ligne).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from skillverse.auth import CurrentUser, get_current_user
from skillverse.config import settings
from skillverse.exceptions import UnsupportedLanguageError
from skillverse.schemas.compiler import (
    CompileRequest,
    CompileResponse,
    LanguageInfo,
    RunTestsRequest,
    RunTestsResponse,
    TemplateResponse,
)
from skillverse.services import grader
from skillverse.services.judge_client import JudgeClient, get_judge_client
from skillverse.services.languages import LANGUAGE_IDS, is_supported, starter_template

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/compiler", tags=["Exécution de code"])


@router.get("/languages", response_model=List[LanguageInfo], summary="Langages disponibles")
def list_languages():
    return [LanguageInfo(language=name, judge_id=judge_id) for name, judge_id in LANGUAGE_IDS.items()]


@router.get("/templates/{language}", response_model=TemplateResponse, summary="Code de départ d'un langage")
def get_template(language: str):
    if not is_supported(language):
        raise UnsupportedLanguageError(language)
    return TemplateResponse(language=language, code=starter_template(language))


@router.post("/{language}", response_model=CompileResponse, summary="Compiler et exécuter du code")
async def compile_code(
    language: str,
    data: CompileRequest,
    user: CurrentUser = Depends(get_current_user),
    client: JudgeClient = Depends(get_judge_client),
):
    """
    Exécute le code avec l'entrée fournie. Les échecs d'exécution (erreur de
    compilation, délai dépassé, service injoignable) sont renvoyés en 200 avec
    success=false.
    """
    result = await client.execute(data.code, language, data.input)
    if not result.success:
        logger.info("Exécution %s par %s : %s", language, user.email, result.status)

    return CompileResponse(
        success=result.success,
        output=result.stdout,
        error=result.error,
        compilation_time=result.time_taken,
        execution_time=result.time_taken,
        memory_used=result.memory_used,
        status=result.status,
    )


@router.post("/{language}/test", response_model=RunTestsResponse, summary="Tester du code sur des cas")
async def run_tests(
    language: str,
    data: RunTestsRequest,
    user: CurrentUser = Depends(get_current_user),
    client: JudgeClient = Depends(get_judge_client),
):
    """Un verdict par cas, dans l'ordre des cas fournis."""
    results = await grader.run_test_cases(
        client, data.code, language, data.test_cases,
        concurrency=settings.GRADER_CONCURRENCY,
    )
    passed, total = grader.summarize(results)
    return RunTestsResponse(results=results, passed=passed, total=total)
