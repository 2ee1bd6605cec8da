"""
Statut de paiement dérivé d'un élève.

Le statut affiché sur le tableau de bord n'est pas stocké sur l'élève : c'est le
statut de son paiement le plus récent (par payment_date), Pending s'il n'en a aucun.
"""

from datetime import datetime
from typing import Iterable, Optional

from halaqah.models.payment import Payment
from halaqah.models.student import Student
from halaqah.schemas.student import StudentResponse, StudentWithPaymentResponse

DEFAULT_PAYMENT_STATUS = "Pending"


def latest_payment(payments: Iterable[Payment]) -> Optional[Payment]:
    """Paiement à la payment_date la plus récente ; à date égale, le dernier créé."""
    return max(
        payments,
        key=lambda p: (p.payment_date, p.created_at or datetime.min),
        default=None,
    )


def derive_payment_status(payments: Iterable[Payment]) -> dict:
    """Projette le dernier paiement sur payment_status, last_payment_date, last_payment_amount."""
    latest = latest_payment(payments)
    if latest is None:
        return {
            "payment_status": DEFAULT_PAYMENT_STATUS,
            "last_payment_date": None,
            "last_payment_amount": None,
        }
    return {
        "payment_status": latest.status,
        "last_payment_date": latest.payment_date,
        "last_payment_amount": latest.amount,
    }


def with_latest_payment(student: Student) -> StudentWithPaymentResponse:
    base = StudentResponse.model_validate(student).model_dump()
    return StudentWithPaymentResponse(**base, **derive_payment_status(student.payments))
