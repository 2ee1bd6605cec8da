"""
Schémas Pydantic pour les comptes enseignants et l'identité de session.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # limite de bcrypt


class RegisterRequest(BaseModel):
    """Inscription d'un enseignant (POST /auth/register)."""
    email: EmailStr
    password: str
    name: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Le mot de passe doit contenir au moins {MIN_PASSWORD_LENGTH} caractères.")
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Le mot de passe ne peut pas dépasser {MAX_PASSWORD_BYTES} octets.")
        return v

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom ne peut pas être vide.")
        return v.strip()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TeacherResponse(BaseModel):
    id: uuid.UUID
    email: str
    name: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class Identity(BaseModel):
    """Enseignant authentifié à l'origine de la requête. Passé explicitement à chaque service."""
    id: uuid.UUID
    email: str
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)
