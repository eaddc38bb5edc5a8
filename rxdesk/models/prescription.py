# FILE: rxdesk/models/prescription.py
from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    JSON,
    DateTime,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from rxdesk.db.base import Base


class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, index=True)

    # plain references: a deleted patient/doctor leaves them dangling
    patient_id = Column(Integer, index=True, nullable=False)
    doctor_id = Column(Integer, index=True, nullable=False)

    tests = Column(JSON, nullable=False, default=list)
    # diagnosis lines, printed in order
    description = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)

    medicines = relationship("PrescriptionMedicine",
                             cascade="all, delete-orphan",
                             order_by="PrescriptionMedicine.position",
                             back_populates="prescription")


class PrescriptionMedicine(Base):
    __tablename__ = "prescription_medicines"

    id = Column(Integer, primary_key=True)
    prescription_id = Column(Integer,
                             ForeignKey("prescriptions.id",
                                        ondelete="CASCADE"),
                             index=True,
                             nullable=False)
    position = Column(Integer, nullable=False, default=0)

    drug = Column(String(191), nullable=False)
    dose = Column(String(64), nullable=False)
    frequency = Column(String(64), nullable=False)
    day = Column(String(32), nullable=False)
    remarks = Column(String(255), nullable=True)

    prescription = relationship("Prescription", back_populates="medicines")
