"""
Service métier pour les élèves.

Toutes les opérations reçoivent explicitement l'identité de l'enseignant et ne
touchent que les élèves dont il est propriétaire (students.owner_id).
Un élève d'un autre enseignant est traité exactement comme un élève inexistant.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from halaqah.exceptions import NotFound
from halaqah.models.student import Student
from halaqah.schemas.auth import Identity
from halaqah.schemas.student import (
    DashboardStats,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
    StudentWithPaymentResponse,
)
from halaqah.services.payment_status import with_latest_payment
from halaqah.services.store import store_errors

logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "Élève introuvable."


def _owned(identity: Identity):
    return select(Student).where(Student.owner_id == identity.id)


def _search(query, q: Optional[str]):
    """Filtre sur le nom ou le lieu, insensible à la casse. q vide : pas de filtre."""
    if q and q.strip():
        term = q.strip()
        query = query.where(or_(
            Student.name.icontains(term, autoescape=True),
            Student.location.icontains(term, autoescape=True),
        ))
    return query


def get_owned_student(db: Session, identity: Identity, student_id: uuid.UUID) -> Student:
    """Retourne l'élève s'il appartient à l'enseignant, sinon lève NotFound."""
    with store_errors(db):
        student = db.execute(
            _owned(identity).where(Student.id == student_id)
        ).scalar_one_or_none()
    if student is None:
        raise NotFound(STUDENT_NOT_FOUND)
    return student


def add_student(db: Session, identity: Identity, data: StudentCreate) -> StudentResponse:
    """Crée un élève ; owner_id est toujours celui de l'identité, jamais celui du client."""
    student = Student(owner_id=identity.id, **data.model_dump())
    db.add(student)
    with store_errors(db):
        db.commit()
    db.refresh(student)

    logger.info("Élève créé : %s (%s) par %s", student.name, student.id, identity.id)
    return StudentResponse.model_validate(student)


def get_students(db: Session, identity: Identity, q: Optional[str] = None) -> list[StudentResponse]:
    """
    Retourne les élèves de l'enseignant, du plus récent au plus ancien.
    q filtre sur le nom ou le lieu (insensible à la casse).
    """
    with store_errors(db):
        students = db.execute(
            _search(_owned(identity), q).order_by(Student.created_at.desc())
        ).scalars().all()
    return [StudentResponse.model_validate(s) for s in students]


def get_student(db: Session, identity: Identity, student_id: uuid.UUID) -> StudentResponse:
    return StudentResponse.model_validate(get_owned_student(db, identity, student_id))


def update_student(
    db: Session, identity: Identity, student_id: uuid.UUID, data: StudentUpdate
) -> StudentResponse:
    """Applique le patch aux champs fournis. NotFound si l'élève n'appartient pas à l'enseignant."""
    student = get_owned_student(db, identity, student_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(student, field, value)

    with store_errors(db):
        db.commit()
    db.refresh(student)
    return StudentResponse.model_validate(student)


def delete_student(db: Session, identity: Identity, student_id: uuid.UUID) -> bool:
    """
    Supprime définitivement un élève et ses paiements (cascade).
    Retourne True si supprimé, False s'il était déjà absent (ou appartient à un autre enseignant).
    """
    with store_errors(db):
        student = db.execute(
            _owned(identity).where(Student.id == student_id)
        ).scalar_one_or_none()
        if student is None:
            logger.debug("Suppression ignorée, élève absent : %s", student_id)
            return False

        db.delete(student)
        db.commit()

    logger.info("Élève supprimé : %s par %s", student_id, identity.id)
    return True


def get_students_with_payments(
    db: Session, identity: Identity, q: Optional[str] = None
) -> list[StudentWithPaymentResponse]:
    """Élèves de l'enseignant avec le statut dérivé de leur dernier paiement, même filtre q que get_students."""
    with store_errors(db):
        students = db.execute(
            _search(_owned(identity), q)
            .options(selectinload(Student.payments))
            .order_by(Student.created_at.desc())
        ).scalars().all()
    return [with_latest_payment(s) for s in students]


def get_dashboard_stats(db: Session, identity: Identity, q: Optional[str] = None) -> DashboardStats:
    # Les compteurs portent sur la liste filtrée affichée
    students = get_students_with_payments(db, identity, q)
    return DashboardStats(
        total_students=len(students),
        unpaid_students=sum(1 for s in students if s.payment_status != "Paid"),
        fluent_students=sum(1 for s in students if s.performance == "Lancar"),
    )
