"""
Tests unitaires pour l'évaluation automatique planifiée.
"""

from unittest.mock import AsyncMock, MagicMock, patch

from skillverse import scheduler


def test_scheduler_desactive_aucun_job():
    with patch.object(scheduler.settings, "AUTO_EVALUATION_ENABLED", False):
        scheduler.start_scheduler()

    assert scheduler.scheduler.get_job("auto_evaluate_submissions") is None
    assert not scheduler.scheduler.running


def test_job_evalue_et_ferme_la_session():
    db = MagicMock()
    with patch("skillverse.scheduler.SessionLocal", return_value=db), \
         patch("skillverse.services.submission_service.evaluate_pending", new=AsyncMock(return_value=2)) as mock_eval:
        scheduler._evaluate_pending_submissions()

    mock_eval.assert_awaited_once()
    assert mock_eval.await_args[0][0] is db
    db.close.assert_called_once()


def test_job_erreur_journalisee_sans_propagation():
    db = MagicMock()
    with patch("skillverse.scheduler.SessionLocal", return_value=db), \
         patch("skillverse.services.submission_service.evaluate_pending", new=AsyncMock(side_effect=RuntimeError("boom"))):
        scheduler._evaluate_pending_submissions()

    db.close.assert_called_once()
