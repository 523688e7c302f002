"""
Planificateur APScheduler pour l'évaluation automatique des rendus.

Le job s'exécute toutes les AUTO_EVALUATION_MINUTES minutes et passe les cas de
test sur les rendus en attente qui n'ont pas encore de résultat en cache, pour que
l'enseignant trouve le verdict déjà calculé au moment de corriger.
"""

import asyncio
import logging

from apscheduler.schedulers.background import BackgroundScheduler

from skillverse.config import settings
from skillverse.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def _evaluate_pending_submissions() -> None:
    """
    Tâche planifiée : évalue un lot de rendus en attente.
    Import local pour éviter les imports circulaires.
    """
    from skillverse.services.judge_client import JudgeClient
    from skillverse.services.submission_service import evaluate_pending

    db = SessionLocal()
    try:
        count = asyncio.run(evaluate_pending(db, JudgeClient.from_settings()))
        if count:
            logger.info("Évaluation automatique : %d rendu(s) traité(s)", count)
    except Exception as exc:
        logger.error("Erreur lors de l'évaluation automatique des rendus : %s", exc, exc_info=True)
    finally:
        db.close()


def start_scheduler() -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    if not settings.AUTO_EVALUATION_ENABLED:
        logger.info("Évaluation automatique désactivée.")
        return
    scheduler.add_job(
        _evaluate_pending_submissions,
        trigger="interval",
        minutes=settings.AUTO_EVALUATION_MINUTES,
        id="auto_evaluate_submissions",
        replace_existing=True,
        max_instances=1,
    )
    if not scheduler.running:
        scheduler.start()
    logger.info(
        "Scheduler démarré, évaluation des rendus toutes les %d minutes.",
        settings.AUTO_EVALUATION_MINUTES,
    )


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
