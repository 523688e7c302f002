"""
Correction d'un code par cas de test.

Chaque cas est exécuté indépendamment via le service de jugement. Un cas réussit
si l'exécution est acceptée ET si la sortie, débarrassée des blancs en début et
fin, est strictement égale à la sortie attendue (elle aussi « strippée »).
Aucune autre normalisation : espaces internes, fins de ligne et tolérance
numérique comptent.
"""

import asyncio
import logging
from typing import Iterable, List, Tuple, Union

from skillverse.exceptions import UnsupportedLanguageError
from skillverse.schemas.assignment import AssignmentTestCase
from skillverse.schemas.compiler import CaseResult
from skillverse.services.judge_client import ExecutionResult, JudgeClient
from skillverse.services.languages import is_supported

logger = logging.getLogger(__name__)


def outputs_match(actual: str, expected: str) -> bool:
    return actual.strip() == expected.strip()


def grade_case(index: int, case: AssignmentTestCase, result: ExecutionResult) -> CaseResult:
    actual = result.stdout.strip()
    return CaseResult(
        index=index,
        input=case.input,
        expected_output=case.expected_output,
        actual_output=actual,
        passed=result.success and outputs_match(actual, case.expected_output),
        status=result.status,
        execution_time=result.time_taken,
        error=result.error,
        hidden=case.hidden,
    )


def _as_case(case: Union[AssignmentTestCase, dict]) -> AssignmentTestCase:
    # Les cas stockés en base sont des dicts JSON
    if isinstance(case, AssignmentTestCase):
        return case
    return AssignmentTestCase.model_validate(case)


async def run_test_cases(
    client: JudgeClient,
    code: str,
    language: str,
    test_cases: Iterable[Union[AssignmentTestCase, dict]],
    concurrency: int = 1,
) -> List[CaseResult]:
    """
    Exécute le code sur chaque cas et retourne les verdicts dans l'ordre des cas.
    concurrency=1 reproduit une exécution strictement séquentielle.
    """
    if not is_supported(language):
        raise UnsupportedLanguageError(language)

    cases = [_as_case(c) for c in test_cases]
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def run_one(index: int, case: AssignmentTestCase) -> CaseResult:
        async with semaphore:
            result = await client.execute(code, language, case.input)
        return grade_case(index, case, result)

    results = await asyncio.gather(*(run_one(i, c) for i, c in enumerate(cases)))

    passed, total = summarize(results)
    logger.info("Correction %s : %d/%d cas réussis", language, passed, total)
    return list(results)


def summarize(results: Iterable[CaseResult]) -> Tuple[int, int]:
    """Retourne (nombre de cas réussis, nombre total de cas)."""
    results = list(results)
    return sum(1 for r in results if r.passed), len(results)


def mask_hidden(results: Iterable[CaseResult]) -> List[CaseResult]:
    """Masque l'entrée et les sorties des cas cachés (vue élève)."""
    return [
        r.model_copy(update={"input": None, "expected_output": None, "actual_output": None})
        if r.hidden else r
        for r in results
    ]


def format_report(results: Iterable[CaseResult]) -> str:
    """Rapport texte mis en cache dans Submission.output."""
    lines = []
    for r in results:
        verdict = "OK" if r.passed else "ÉCHEC"
        line = f"Test {r.index + 1} : {verdict} ({r.status}"
        if r.execution_time is not None:
            line += f", {r.execution_time:.3f} s"
        line += ")"
        if not r.passed and r.error:
            line += f" : {r.error.strip()}"
        lines.append(line)
    return "\n".join(lines)
