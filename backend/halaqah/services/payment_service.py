"""
Service métier pour les paiements.

Un paiement n'a pas de propriétaire direct : il appartient à l'enseignant
propriétaire de son élève. Toutes les requêtes passent donc par une jointure
payments → students filtrée sur owner_id.
"""

import uuid
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session, contains_eager

from halaqah.config import settings
from halaqah.exceptions import NotFound
from halaqah.models.payment import Payment
from halaqah.models.student import Student
from halaqah.schemas.auth import Identity
from halaqah.schemas.payment import PaymentCreate, PaymentResponse, PaymentSummary, PaymentUpdate
from halaqah.services.store import store_errors
from halaqah.services.student_service import get_owned_student

logger = logging.getLogger(__name__)

PAYMENT_NOT_FOUND = "Paiement introuvable."


def _owned(identity: Identity):
    return (
        select(Payment)
        .join(Student, Payment.student_id == Student.id)
        .where(Student.owner_id == identity.id)
        .options(contains_eager(Payment.student))
    )


def _get_owned_payment(db: Session, identity: Identity, payment_id: uuid.UUID) -> Optional[Payment]:
    with store_errors(db):
        return db.execute(
            _owned(identity).where(Payment.id == payment_id)
        ).scalar_one_or_none()


def add_payment(db: Session, identity: Identity, data: PaymentCreate) -> PaymentResponse:
    """Enregistre un paiement pour un élève de l'enseignant (NotFound sinon)."""
    student = get_owned_student(db, identity, data.student_id)

    payment = Payment(**data.model_dump())
    db.add(payment)
    with store_errors(db):
        db.commit()
    db.refresh(payment)

    logger.info(
        "Paiement créé : %s — %s %s pour l'élève %s",
        payment.id, payment.amount, payment.status, student.id,
    )
    return _to_response(payment)


def get_payments(db: Session, identity: Identity, q: Optional[str] = None) -> list[PaymentResponse]:
    """
    Retourne tous les paiements des élèves de l'enseignant, du plus récent au plus ancien.
    q filtre sur le nom de l'élève, le mode de paiement ou le statut.
    """
    query = _owned(identity)
    if q and q.strip():
        term = q.strip()
        query = query.where(or_(
            Student.name.icontains(term, autoescape=True),
            Payment.payment_method.icontains(term, autoescape=True),
            Payment.status.icontains(term, autoescape=True),
        ))

    with store_errors(db):
        payments = db.execute(
            query.order_by(Payment.created_at.desc())
        ).scalars().all()
    return [_to_response(p) for p in payments]


def get_student_payments(db: Session, identity: Identity, student_id: uuid.UUID) -> list[PaymentResponse]:
    """Historique des paiements d'un élève. NotFound si l'élève n'appartient pas à l'enseignant."""
    get_owned_student(db, identity, student_id)

    with store_errors(db):
        payments = db.execute(
            _owned(identity)
            .where(Payment.student_id == student_id)
            .order_by(Payment.created_at.desc())
        ).scalars().all()
    return [_to_response(p) for p in payments]


def get_payment(db: Session, identity: Identity, payment_id: uuid.UUID) -> PaymentResponse:
    payment = _get_owned_payment(db, identity, payment_id)
    if payment is None:
        raise NotFound(PAYMENT_NOT_FOUND)
    return _to_response(payment)


def update_payment(
    db: Session, identity: Identity, payment_id: uuid.UUID, data: PaymentUpdate
) -> PaymentResponse:
    """Applique le patch aux champs fournis. NotFound si le paiement n'appartient pas à l'enseignant."""
    payment = _get_owned_payment(db, identity, payment_id)
    if payment is None:
        raise NotFound(PAYMENT_NOT_FOUND)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(payment, field, value)

    with store_errors(db):
        db.commit()
    db.refresh(payment)
    return _to_response(payment)


def delete_payment(db: Session, identity: Identity, payment_id: uuid.UUID) -> bool:
    """Supprime un paiement. Retourne False s'il était déjà absent."""
    payment = _get_owned_payment(db, identity, payment_id)
    if payment is None:
        logger.debug("Suppression ignorée, paiement absent : %s", payment_id)
        return False

    with store_errors(db):
        db.delete(payment)
        db.commit()

    logger.info("Paiement supprimé : %s par %s", payment_id, identity.id)
    return True


def get_payment_summary(db: Session, identity: Identity) -> PaymentSummary:
    """Totaux par statut, calculés sur exactement les lignes retournées par get_payments."""
    payments = get_payments(db, identity)
    totals = {status: Decimal("0.00") for status in ("Paid", "Pending", "Overdue")}
    for p in payments:
        totals[p.status] += p.amount

    return PaymentSummary(
        total_paid=totals["Paid"],
        total_pending=totals["Pending"],
        total_overdue=totals["Overdue"],
        payment_count=len(payments),
    )


def _to_response(payment: Payment) -> PaymentResponse:
    """Construit le schéma de réponse avec le nom de l'élève."""
    return PaymentResponse(
        id=payment.id,
        student_id=payment.student_id,
        student_name=payment.student.name if payment.student is not None else None,
        amount=payment.amount,
        payment_date=payment.payment_date,
        payment_method=payment.payment_method,
        status=payment.status,
        notes=payment.notes,
        created_at=payment.created_at,
        updated_at=payment.updated_at,
    )


def mark_overdue_payments(db: Session, today: Optional[date] = None) -> int:
    """
    Tâche système (tous enseignants confondus) : les paiements Pending dont la date
    dépasse le délai de grâce passent à Overdue. Retourne le nombre de lignes modifiées.
    """
    cutoff = (today or date.today()) - timedelta(days=settings.OVERDUE_GRACE_DAYS)
    with store_errors(db):
        result = db.execute(
            update(Payment)
            .where(Payment.status == "Pending", Payment.payment_date < cutoff)
            .values(status="Overdue")
        )
        db.commit()
    return result.rowcount
