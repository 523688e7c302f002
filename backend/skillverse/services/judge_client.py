"""
Client du service de jugement externe (API compatible Judge0).

Protocole :
  1. POST /submissions?base64_encoded=true&wait=false avec le code et l'entrée
     standard encodés en base64 → le service répond par un token opaque
  2. GET /submissions/{token}?base64_encoded=true à intervalle fixe, tant que le
     statut est "In Queue" / "Processing" et que le nombre maximal de tentatives
     n'est pas atteint
  3. Décodage base64 de stdout, stderr et compile_output

L'attente entre deux interrogations est un asyncio.sleep : le worker continue de
servir les autres requêtes pendant qu'une exécution est en cours.

Les erreurs réseau ou de format ne sont jamais propagées : elles produisent un
ExecutionResult en échec (status "Error"). Un langage inconnu est refusé avant
tout appel réseau. Si les tentatives sont épuisées sans statut terminal, le
résultat porte le statut distinct "Timeout".
"""

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

import httpx

from skillverse.config import settings
from skillverse.exceptions import ExternalServiceError, UnsupportedLanguageError
from skillverse.services.languages import LANGUAGE_IDS

logger = logging.getLogger(__name__)

STATUS_ERROR = "Error"
STATUS_TIMEOUT = "Timeout"


@dataclass(frozen=True)
class PollPolicy:
    """Stratégie d'attente : intervalle, nombre de tentatives et statuts non terminaux."""

    interval: float = 1.0
    max_attempts: int = 10
    pending_status_ids: FrozenSet[int] = frozenset({1, 2})

    def is_terminal(self, status_id: Optional[int]) -> bool:
        return status_id is not None and status_id not in self.pending_status_ids

    @classmethod
    def from_settings(cls) -> "PollPolicy":
        return cls(
            interval=settings.JUDGE0_POLL_INTERVAL,
            max_attempts=settings.JUDGE0_MAX_ATTEMPTS,
            pending_status_ids=frozenset(settings.JUDGE0_PENDING_STATUS_IDS),
        )


@dataclass
class ExecutionResult:
    success: bool
    stdout: str = ""
    stderr: str = ""
    compile_output: str = ""
    status: str = STATUS_ERROR  # description Judge0 ("Accepted", ...), "Timeout" ou "Error"
    status_id: Optional[int] = None  # dernier identifiant de statut vu
    time_taken: Optional[float] = None
    memory_used: Optional[int] = None

    @property
    def error(self) -> str:
        return self.stderr or self.compile_output

    @property
    def timed_out(self) -> bool:
        return self.status == STATUS_TIMEOUT

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "status": self.status,
            "timeTaken": self.time_taken,
            "memoryUsed": self.memory_used,
        }

    @classmethod
    def failure(cls, message: str) -> "ExecutionResult":
        return cls(success=False, stderr=message, status=STATUS_ERROR)


def _b64encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _b64decode(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        # Judge0 insère des retours à la ligne dans le base64 : ignorés au décodage
        return base64.b64decode(value).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError):
        raise ExternalServiceError("Sortie du service de jugement mal encodée.")


def _to_float(value) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _to_int(value) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _json(response: httpx.Response) -> dict:
    try:
        payload = response.json()
    except ValueError:
        raise ExternalServiceError("Réponse du service de jugement illisible (JSON invalide).")
    if not isinstance(payload, dict):
        raise ExternalServiceError("Réponse du service de jugement inattendue.")
    return payload


def _status_of(payload: dict):
    status = payload.get("status")
    if not isinstance(status, dict):
        status = {}
    return _to_int(status.get("id")), status.get("description") or ""


class JudgeClient:
    """Pont asynchrone vers le service de jugement."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        host: str = "",
        timeout: float = 10.0,
        policy: Optional[PollPolicy] = None,
        accepted_status_id: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.host = host
        self.timeout = timeout
        self.policy = policy or PollPolicy()
        self.accepted_status_id = accepted_status_id
        self._transport = transport

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "JudgeClient":
        return cls(
            base_url=settings.JUDGE0_URL,
            api_key=settings.JUDGE0_API_KEY,
            host=settings.JUDGE0_HOST,
            timeout=settings.JUDGE0_TIMEOUT,
            policy=PollPolicy.from_settings(),
            accepted_status_id=settings.JUDGE0_ACCEPTED_STATUS_ID,
            transport=transport,
        )

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-RapidAPI-Key"] = self.api_key
            headers["X-RapidAPI-Host"] = self.host
        return headers

    async def execute(self, code: str, language: str, stdin: str = "") -> ExecutionResult:
        """
        Exécute `code` avec `stdin` en entrée standard et retourne le verdict.
        Lève UnsupportedLanguageError si le langage n'est pas géré ; toute autre
        erreur est convertie en résultat en échec.
        """
        language_id = LANGUAGE_IDS.get(language)
        if language_id is None:
            raise UnsupportedLanguageError(language)

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                token = await self._submit(client, code, language_id, stdin)
                return await self._poll(client, token)
        except ExternalServiceError as exc:
            logger.warning("Exécution %s en échec : %s", language, exc.message)
            return ExecutionResult.failure(exc.message)
        except httpx.HTTPError as exc:
            logger.warning("Service de jugement injoignable (%s) : %s", language, exc)
            return ExecutionResult.failure(f"Service de jugement injoignable : {exc}")

    async def _submit(self, client: httpx.AsyncClient, code: str, language_id: int, stdin: str) -> str:
        response = await client.post(
            "/submissions",
            params={"base64_encoded": "true", "wait": "false"},
            json={
                "source_code": _b64encode(code),
                "language_id": language_id,
                "stdin": _b64encode(stdin or ""),
            },
        )
        response.raise_for_status()
        token = _json(response).get("token")
        if not token:
            raise ExternalServiceError("Le service de jugement n'a pas retourné de token.")
        return token

    async def _poll(self, client: httpx.AsyncClient, token: str) -> ExecutionResult:
        payload: dict = {}
        for attempt in range(1, self.policy.max_attempts + 1):
            await asyncio.sleep(self.policy.interval)
            response = await client.get(f"/submissions/{token}", params={"base64_encoded": "true"})
            response.raise_for_status()
            payload = _json(response)

            status_id, _ = _status_of(payload)
            if self.policy.is_terminal(status_id):
                logger.debug("Soumission %s terminée après %d interrogation(s)", token, attempt)
                return self._to_result(payload)

        logger.warning(
            "Soumission %s sans statut terminal après %d interrogations",
            token, self.policy.max_attempts,
        )
        result = self._to_result(payload)
        result.success = False
        result.status = STATUS_TIMEOUT
        return result

    def _to_result(self, payload: dict) -> ExecutionResult:
        status_id, description = _status_of(payload)
        return ExecutionResult(
            success=status_id == self.accepted_status_id,
            stdout=_b64decode(payload.get("stdout")),
            stderr=_b64decode(payload.get("stderr")),
            compile_output=_b64decode(payload.get("compile_output")),
            status=description or STATUS_ERROR,
            status_id=status_id,
            time_taken=_to_float(payload.get("time")),
            memory_used=_to_int(payload.get("memory")),
        )


def get_judge_client() -> JudgeClient:
    """Dépendance FastAPI : client configuré depuis les variables d'environnement."""
    return JudgeClient.from_settings()
