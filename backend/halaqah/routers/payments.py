"""
Router pour les paiements des élèves de l'enseignant connecté.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from halaqah.auth import get_current_identity
from halaqah.database import get_db
from halaqah.schemas.auth import Identity
from halaqah.schemas.payment import PaymentCreate, PaymentResponse, PaymentSummary, PaymentUpdate
from halaqah.services import payment_service

router = APIRouter(prefix="/api/v1/payments", tags=["Paiements"])


@router.get("", response_model=List[PaymentResponse], summary="Lister les paiements")
def list_payments(
    q: Optional[str] = Query(None, description="Recherche sur l'élève, le mode de paiement ou le statut"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return payment_service.get_payments(db, identity, q)


@router.post("", response_model=PaymentResponse, status_code=201, summary="Enregistrer un paiement")
def create_payment(
    data: PaymentCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """L'élève référencé doit appartenir à l'enseignant connecté (404 sinon)."""
    return payment_service.add_payment(db, identity, data)


@router.get("/summary", response_model=PaymentSummary, summary="Totaux par statut")
def payment_summary(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Montants cumulés Paid / Pending / Overdue sur tous les paiements visibles."""
    return payment_service.get_payment_summary(db, identity)


@router.get("/{payment_id}", response_model=PaymentResponse, summary="Détail d'un paiement")
def get_payment(
    payment_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return payment_service.get_payment(db, identity, payment_id)


@router.put("/{payment_id}", response_model=PaymentResponse, summary="Modifier un paiement")
def update_payment(
    payment_id: uuid.UUID,
    data: PaymentUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return payment_service.update_payment(db, identity, payment_id, data)


@router.delete("/{payment_id}", status_code=204, summary="Supprimer un paiement")
def delete_payment(
    payment_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Un paiement déjà absent est traité comme une suppression réussie."""
    payment_service.delete_payment(db, identity, payment_id)
