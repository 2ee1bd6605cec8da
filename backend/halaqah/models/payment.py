"""
Modèle SQLAlchemy pour les paiements de frais de cours.
La propriété d'un paiement passe par son élève (payments.student_id → students.owner_id).
"""

import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import relationship

from halaqah.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_method = Column(String(20), nullable=False)  # Cash, Online Banking, Touch n Go, Other
    status = Column(String(20), nullable=False, default="Pending")  # Paid, Pending, Overdue
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    student = relationship("Student", back_populates="payments")
