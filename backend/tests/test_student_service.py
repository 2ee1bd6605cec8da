"""
Tests du service élèves sur une vraie base SQLite : cloisonnement par enseignant.
"""

import uuid
from datetime import date, datetime, time
from decimal import Decimal

import pytest
from pydantic import ValidationError

from halaqah.exceptions import NotFound
from halaqah.models.payment import Payment
from halaqah.models.student import Student
from halaqah.schemas.payment import PaymentCreate
from halaqah.schemas.student import StudentCreate, StudentUpdate
from halaqah.services import payment_service, student_service


# --- Helpers ---

def student_data(**overrides) -> StudentCreate:
    fields = {
        "name": "Ahmad bin Ali",
        "age": 10,
        "current_surah": "Al-Mulk",
        "current_ayat": 5,
        "class_time": time(17, 30),
        "location": "Surau Al-Ikhlas",
        "performance": "Lancar",
    }
    fields.update(overrides)
    return StudentCreate(**fields)


def pay(db, teacher, student_id, when, status, amount="50.00"):
    return payment_service.add_payment(db, teacher, PaymentCreate(
        student_id=student_id,
        amount=Decimal(amount),
        payment_date=when,
        payment_method="Cash",
        status=status,
    ))


# --- Validation des schémas ---

def test_student_create_nom_vide_rejete():
    with pytest.raises(ValidationError):
        student_data(name="   ")


def test_student_create_age_negatif_rejete():
    with pytest.raises(ValidationError):
        student_data(age=0)


def test_student_create_performance_invalide():
    with pytest.raises(ValidationError):
        student_data(performance="Cemerlang")


def test_student_update_owner_id_interdit():
    """Le patch n'accepte que les champs modifiables : owner_id et id sont rejetés."""
    with pytest.raises(ValidationError):
        StudentUpdate(owner_id=uuid.uuid4())
    with pytest.raises(ValidationError):
        StudentUpdate(id=uuid.uuid4())


def test_student_update_null_rejete():
    with pytest.raises(ValidationError) as exc:
        StudentUpdate(name=None)
    assert "name" in str(exc.value)


# --- add_student / get_students ---

def test_add_student_visible_par_son_enseignant(db_session, make_teacher):
    teacher = make_teacher("aminah@sekolah.my")

    created = student_service.add_student(db_session, teacher, student_data())

    assert created.id is not None
    assert created.owner_id == teacher.id
    listed = student_service.get_students(db_session, teacher)
    assert [s.id for s in listed] == [created.id]
    assert listed[0].owner_id == teacher.id


def test_eleves_invisibles_pour_un_autre_enseignant(db_session, make_teacher):
    teacher_a = make_teacher("a@sekolah.my")
    teacher_b = make_teacher("b@sekolah.my")
    student_service.add_student(db_session, teacher_a, student_data(name="Ahmad"))
    student_service.add_student(db_session, teacher_a, student_data(name="Fatimah"))

    assert student_service.get_students(db_session, teacher_b) == []
    assert len(student_service.get_students(db_session, teacher_a)) == 2


def test_get_students_tri_du_plus_recent(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    old = student_service.add_student(db_session, teacher, student_data(name="Ancien"))
    new = student_service.add_student(db_session, teacher, student_data(name="Nouveau"))
    db_session.get(Student, old.id).created_at = datetime(2024, 1, 1)
    db_session.get(Student, new.id).created_at = datetime(2024, 6, 1)
    db_session.commit()

    names = [s.name for s in student_service.get_students(db_session, teacher)]
    assert names == ["Nouveau", "Ancien"]


def test_get_students_recherche_nom_ou_lieu(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    student_service.add_student(db_session, teacher, student_data(name="Ahmad", location="Surau Al-Ikhlas"))
    student_service.add_student(db_session, teacher, student_data(name="Fatimah", location="Masjid Jamek"))

    assert [s.name for s in student_service.get_students(db_session, teacher, "ahm")] == ["Ahmad"]
    assert [s.name for s in student_service.get_students(db_session, teacher, "JAMEK")] == ["Fatimah"]
    assert student_service.get_students(db_session, teacher, "100%") == []


# --- get_student / update_student ---

def test_get_student_autre_enseignant_introuvable(db_session, make_teacher):
    teacher_a = make_teacher("a@sekolah.my")
    teacher_b = make_teacher("b@sekolah.my")
    created = student_service.add_student(db_session, teacher_a, student_data())

    with pytest.raises(NotFound):
        student_service.get_student(db_session, teacher_b, created.id)


def test_update_student_champs_partiels(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    created = student_service.add_student(db_session, teacher, student_data())

    updated = student_service.update_student(
        db_session, teacher, created.id,
        StudentUpdate(current_surah="Yasin", current_ayat=12),
    )

    assert updated.current_surah == "Yasin"
    assert updated.current_ayat == 12
    assert updated.name == created.name
    assert updated.owner_id == teacher.id


def test_update_student_autre_enseignant_inchange(db_session, make_teacher):
    teacher_a = make_teacher("a@sekolah.my")
    teacher_b = make_teacher("b@sekolah.my")
    created = student_service.add_student(db_session, teacher_a, student_data(name="Ahmad"))

    with pytest.raises(NotFound):
        student_service.update_student(db_session, teacher_b, created.id, StudentUpdate(name="Pirate"))

    db_session.expire_all()
    assert student_service.get_student(db_session, teacher_a, created.id).name == "Ahmad"


def test_update_student_inexistant(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    with pytest.raises(NotFound, match="introuvable"):
        student_service.update_student(db_session, teacher, uuid.uuid4(), StudentUpdate(age=11))


# --- delete_student ---

def test_delete_student_puis_liste(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    created = student_service.add_student(db_session, teacher, student_data())

    assert student_service.delete_student(db_session, teacher, created.id) is True
    assert student_service.get_students(db_session, teacher) == []


def test_delete_student_deja_absent(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    assert student_service.delete_student(db_session, teacher, uuid.uuid4()) is False


def test_delete_student_autre_enseignant_sans_effet(db_session, make_teacher):
    teacher_a = make_teacher("a@sekolah.my")
    teacher_b = make_teacher("b@sekolah.my")
    created = student_service.add_student(db_session, teacher_a, student_data())

    assert student_service.delete_student(db_session, teacher_b, created.id) is False
    assert len(student_service.get_students(db_session, teacher_a)) == 1


def test_delete_student_supprime_ses_paiements(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    created = student_service.add_student(db_session, teacher, student_data())
    pay(db_session, teacher, created.id, date(2024, 1, 10), "Paid")

    student_service.delete_student(db_session, teacher, created.id)

    assert db_session.query(Payment).count() == 0


# --- get_students_with_payments / get_dashboard_stats ---

def test_students_with_payments_dernier_statut(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    created = student_service.add_student(db_session, teacher, student_data())
    pay(db_session, teacher, created.id, date(2024, 1, 10), "Paid", "50.00")
    pay(db_session, teacher, created.id, date(2024, 2, 15), "Overdue", "80.00")

    [row] = student_service.get_students_with_payments(db_session, teacher)

    assert row.payment_status == "Overdue"
    assert row.last_payment_date == date(2024, 2, 15)
    assert row.last_payment_amount == Decimal("80.00")


def test_students_with_payments_sans_paiement(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    student_service.add_student(db_session, teacher, student_data())

    [row] = student_service.get_students_with_payments(db_session, teacher)

    assert row.payment_status == "Pending"
    assert row.last_payment_date is None
    assert row.last_payment_amount is None


def test_dashboard_stats(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    other = make_teacher("b@sekolah.my")
    paid = student_service.add_student(db_session, teacher, student_data(name="Ahmad", performance="Lancar"))
    student_service.add_student(db_session, teacher, student_data(name="Fatimah", performance="Perlu Latihan"))
    student_service.add_student(db_session, other, student_data(name="Ailleurs", performance="Lancar"))
    pay(db_session, teacher, paid.id, date(2024, 2, 1), "Paid")

    stats = student_service.get_dashboard_stats(db_session, teacher)

    assert stats.total_students == 2
    assert stats.unpaid_students == 1
    assert stats.fluent_students == 1


def test_dashboard_filtre_par_recherche(db_session, make_teacher):
    teacher = make_teacher("a@sekolah.my")
    student_service.add_student(db_session, teacher, student_data(name="Zaid", performance="Lancar"))
    student_service.add_student(db_session, teacher, student_data(name="Fatimah", location="Masjid Jamek"))

    rows = student_service.get_students_with_payments(db_session, teacher, "zaid")
    stats = student_service.get_dashboard_stats(db_session, teacher, "Zaid")

    assert [r.name for r in rows] == ["Zaid"]
    assert stats.total_students == 1
    assert stats.unpaid_students == 1
    assert stats.fluent_students == 1
    assert student_service.get_dashboard_stats(db_session, teacher, "jamek").total_students == 1
    assert student_service.get_dashboard_stats(db_session, teacher, "  ").total_students == 2
