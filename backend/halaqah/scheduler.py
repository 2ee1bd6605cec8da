"""
Planificateur APScheduler pour le passage automatique des paiements en retard.

Le job s'exécute une fois par jour et passe à Overdue les paiements Pending dont
la date dépasse OVERDUE_GRACE_DAYS.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from halaqah.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def _sweep_overdue_payments() -> None:
    """
    Tâche planifiée : marque les paiements en retard.
    Import local pour éviter les imports circulaires.
    """
    from halaqah.services.payment_service import mark_overdue_payments

    db = SessionLocal()
    try:
        count = mark_overdue_payments(db)
        logger.info("Balayage des retards : %d paiement(s) passé(s) à Overdue", count)
    except Exception as exc:
        logger.error("Erreur lors du balayage des paiements en retard : %s", exc)
    finally:
        db.close()


def start_scheduler() -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    scheduler.add_job(
        _sweep_overdue_payments,
        trigger="interval",
        days=1,
        id="overdue_payments_sweep",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler démarré — balayage des paiements en retard chaque jour.")


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
