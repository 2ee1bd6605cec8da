"""
Modèle SQLAlchemy pour la table students.
Un élève est visible et modifiable uniquement par son enseignant (owner_id).
"""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Time, Uuid, func
from sqlalchemy.orm import relationship

from halaqah.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)
    current_surah = Column(String(100), nullable=False)
    current_ayat = Column(Integer, nullable=False)
    class_time = Column(Time, nullable=False)
    location = Column(String(255), nullable=False)
    performance = Column(String(20), nullable=False)  # Lancar, Perlu Latihan
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Suppression d'un élève → suppression de ses paiements
    payments = relationship(
        "Payment",
        back_populates="student",
        cascade="all, delete-orphan",
    )
