# FILE: rxdesk/models/doctor.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    Table,
)
from sqlalchemy.orm import relationship

from rxdesk.db.base import Base

doctor_patients = Table(
    "doctor_patients",
    Base.metadata,
    Column("doctor_id",
           Integer,
           ForeignKey("doctors.id", ondelete="CASCADE"),
           primary_key=True),
    Column("patient_id",
           Integer,
           ForeignKey("patients.id", ondelete="CASCADE"),
           primary_key=True),
)


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    doctor_name = Column(String(120), nullable=False)
    email = Column(String(191), unique=True, index=True, nullable=False)
    phone_no = Column(String(20), nullable=False)
    password_hash = Column(String(255), nullable=False)

    # clinic identity (printed on prescription header)
    clinic_name = Column(String(191), nullable=True)
    clinic_address_line1 = Column(String(191), nullable=True)
    clinic_address_line2 = Column(String(191), nullable=True)
    clinic_city = Column(String(120), nullable=True)
    clinic_state = Column(String(120), nullable=True)
    clinic_pincode = Column(String(20), nullable=True)

    # relative to STORAGE_DIR
    signature = Column(String(255), nullable=True)

    patients = relationship("Patient",
                            secondary=doctor_patients,
                            order_by="Patient.id",
                            back_populates="doctors")
