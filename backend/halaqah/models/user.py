"""
Modèle SQLAlchemy pour les comptes enseignants.
Chaque élève appartient à exactement un enseignant (students.owner_id).
"""

import uuid
from sqlalchemy import Column, DateTime, String, Uuid, func

from halaqah.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
