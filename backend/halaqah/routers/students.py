"""
Router pour les élèves de l'enseignant connecté.
Listage (GET /api/v1/students)
Création (POST /api/v1/students)
Tableau de bord (GET /api/v1/students/with-payments, GET /api/v1/students/stats)
Mise à jour (PUT /api/v1/students/{id})
Suppression (DELETE /api/v1/students/{id})
Historique des paiements (GET /api/v1/students/{id}/payments)
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from halaqah.auth import get_current_identity
from halaqah.database import get_db
from halaqah.schemas.auth import Identity
from halaqah.schemas.payment import PaymentResponse
from halaqah.schemas.student import (
    DashboardStats,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
    StudentWithPaymentResponse,
)
from halaqah.services import payment_service, student_service

router = APIRouter(prefix="/api/v1/students", tags=["Élèves"])


@router.get("", response_model=List[StudentResponse], summary="Lister mes élèves")
def list_students(
    q: Optional[str] = Query(None, description="Recherche sur le nom ou le lieu"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Retourne les élèves de l'enseignant, du plus récent au plus ancien."""
    return student_service.get_students(db, identity, q)


@router.post("", response_model=StudentResponse, status_code=201, summary="Créer un élève")
def create_student(
    data: StudentCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return student_service.add_student(db, identity, data)


@router.get(
    "/with-payments",
    response_model=List[StudentWithPaymentResponse],
    summary="Élèves avec statut du dernier paiement",
)
def list_students_with_payments(
    q: Optional[str] = Query(None, description="Recherche sur le nom ou le lieu"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Chaque élève porte le statut, la date et le montant de son paiement le plus récent.
    Sans paiement : payment_status = Pending, date et montant absents.
    """
    return student_service.get_students_with_payments(db, identity, q)


@router.get("/stats", response_model=DashboardStats, summary="Compteurs du tableau de bord")
def dashboard_stats(
    q: Optional[str] = Query(None, description="Recherche sur le nom ou le lieu"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return student_service.get_dashboard_stats(db, identity, q)


@router.get("/{student_id}", response_model=StudentResponse, summary="Détail d'un élève")
def get_student(
    student_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return student_service.get_student(db, identity, student_id)


@router.put("/{student_id}", response_model=StudentResponse, summary="Modifier un élève")
def update_student(
    student_id: uuid.UUID,
    data: StudentUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Met à jour les champs fournis d'un élève. Les champs absents ne sont pas modifiés."""
    return student_service.update_student(db, identity, student_id, data)


@router.delete("/{student_id}", status_code=204, summary="Supprimer un élève")
def delete_student(
    student_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Supprime définitivement un élève et ses paiements.
    Un élève déjà absent est traité comme une suppression réussie.
    """
    student_service.delete_student(db, identity, student_id)


@router.get(
    "/{student_id}/payments",
    response_model=List[PaymentResponse],
    summary="Paiements d'un élève",
)
def list_student_payments(
    student_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return payment_service.get_student_payments(db, identity, student_id)
