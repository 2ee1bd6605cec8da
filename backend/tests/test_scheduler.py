"""
Tests unitaires pour le job planifié de balayage des paiements en retard.
"""

from unittest.mock import MagicMock, patch

from halaqah.scheduler import _sweep_overdue_payments


def test_sweep_appelle_le_service_et_ferme_la_session():
    db = MagicMock()
    with patch("halaqah.scheduler.SessionLocal", return_value=db), \
         patch("halaqah.services.payment_service.mark_overdue_payments", return_value=3) as mock:
        _sweep_overdue_payments()

    mock.assert_called_once_with(db)
    db.close.assert_called_once()


def test_sweep_erreur_journalisee_sans_propagation():
    db = MagicMock()
    with patch("halaqah.scheduler.SessionLocal", return_value=db), \
         patch("halaqah.services.payment_service.mark_overdue_payments", side_effect=RuntimeError("boom")):
        _sweep_overdue_payments()  # ne doit pas lever

    db.close.assert_called_once()
