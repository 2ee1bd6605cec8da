"""
Schémas Pydantic pour les paiements.
"""

import uuid
import datetime as dt
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

VALID_PAYMENT_METHODS = {"Cash", "Online Banking", "Touch n Go", "Other"}
VALID_PAYMENT_STATUSES = {"Paid", "Pending", "Overdue"}


def _clean_notes(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    return v.strip() or None


class PaymentCreate(BaseModel):
    """Schéma de création d'un paiement (POST /payments)."""
    student_id: uuid.UUID
    amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    payment_date: dt.date
    payment_method: str
    status: str
    notes: Optional[str] = None

    @field_validator("payment_method")
    @classmethod
    def valid_method(cls, v: str) -> str:
        if v not in VALID_PAYMENT_METHODS:
            raise ValueError(f"Mode de paiement invalide. Valeurs acceptées : {VALID_PAYMENT_METHODS}")
        return v

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        if v not in VALID_PAYMENT_STATUSES:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {VALID_PAYMENT_STATUSES}")
        return v

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return _clean_notes(v)


class PaymentUpdate(BaseModel):
    """
    Patch d'un paiement (PUT /payments/{id}).
    Un paiement reste attaché à son élève : student_id est refusé comme champ inconnu.
    """
    amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    payment_date: Optional[dt.date] = None
    payment_method: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        # notes est la seule colonne nullable
        if isinstance(data, dict):
            nulls = sorted(k for k, v in data.items() if v is None and k != "notes")
            if nulls:
                raise ValueError(f"Champs ne pouvant pas être nuls : {', '.join(nulls)}")
        return data

    @field_validator("payment_method")
    @classmethod
    def valid_method(cls, v: str) -> str:
        if v not in VALID_PAYMENT_METHODS:
            raise ValueError(f"Mode de paiement invalide. Valeurs acceptées : {VALID_PAYMENT_METHODS}")
        return v

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        if v not in VALID_PAYMENT_STATUSES:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {VALID_PAYMENT_STATUSES}")
        return v

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return _clean_notes(v)


class PaymentResponse(BaseModel):
    id: uuid.UUID
    student_id: uuid.UUID
    student_name: Optional[str] = None
    amount: Decimal
    payment_date: dt.date
    payment_method: str
    status: str
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PaymentSummary(BaseModel):
    """Totaux par statut, calculés sur les paiements visibles par l'enseignant."""
    total_paid: Decimal
    total_pending: Decimal
    total_overdue: Decimal
    payment_count: int
