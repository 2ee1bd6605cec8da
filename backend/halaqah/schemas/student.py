"""
Schémas Pydantic pour les élèves.

Note : on importe datetime en tant que module (dt) pour éviter le conflit de nommage
entre les champs et les types `datetime.date` / `datetime.time` dans Pydantic v2.
"""

import uuid
import datetime as dt
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

VALID_PERFORMANCES = {"Lancar", "Perlu Latihan"}


class StudentCreate(BaseModel):
    """Schéma de création d'un élève (POST /students)."""
    name: str
    age: int
    current_surah: str
    current_ayat: int
    class_time: dt.time
    location: str
    performance: str

    @field_validator("name", "current_surah", "location")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()

    @field_validator("age", "current_ayat")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("La valeur doit être un entier positif.")
        return v

    @field_validator("performance")
    @classmethod
    def valid_performance(cls, v: str) -> str:
        if v not in VALID_PERFORMANCES:
            raise ValueError(f"Prestation invalide. Valeurs acceptées : {VALID_PERFORMANCES}")
        return v


class StudentUpdate(BaseModel):
    """
    Patch d'un élève (PUT /students/{id}).
    Seuls les champs fournis sont modifiés ; tout champ inconnu (id, owner_id…) est rejeté.
    """
    name: Optional[str] = None
    age: Optional[int] = None
    current_surah: Optional[str] = None
    current_ayat: Optional[int] = None
    class_time: Optional[dt.time] = None
    location: Optional[str] = None
    performance: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        # Un champ explicitement envoyé à null écraserait une colonne NOT NULL
        if isinstance(data, dict):
            nulls = sorted(k for k, v in data.items() if v is None)
            if nulls:
                raise ValueError(f"Champs ne pouvant pas être nuls : {', '.join(nulls)}")
        return data

    @field_validator("name", "current_surah", "location")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()

    @field_validator("age", "current_ayat")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("La valeur doit être un entier positif.")
        return v

    @field_validator("performance")
    @classmethod
    def valid_performance(cls, v: str) -> str:
        if v not in VALID_PERFORMANCES:
            raise ValueError(f"Prestation invalide. Valeurs acceptées : {VALID_PERFORMANCES}")
        return v


class StudentResponse(BaseModel):
    """Schéma de réponse pour un élève (GET /students)."""
    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    age: int
    current_surah: str
    current_ayat: int
    class_time: dt.time
    location: str
    performance: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StudentWithPaymentResponse(StudentResponse):
    """Élève enrichi du statut de son dernier paiement (tableau de bord)."""
    payment_status: str = "Pending"
    last_payment_date: Optional[dt.date] = None
    last_payment_amount: Optional[Decimal] = None


class DashboardStats(BaseModel):
    """Compteurs affichés en tête du tableau de bord."""
    total_students: int
    unpaid_students: int     # statut dérivé différent de Paid
    fluent_students: int     # performance == Lancar
