# FILE: rxdesk/models/patient.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    JSON,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from rxdesk.db.base import Base


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    age = Column(Integer, nullable=False)
    sex = Column(String(16), nullable=False)
    phone = Column(String(20), nullable=False)
    mail = Column(String(191), nullable=True)
    guardian_name = Column(String(120), nullable=True)

    # address
    address_line1 = Column(String(191), nullable=True)
    address_line2 = Column(String(191), nullable=True)
    city = Column(String(120), nullable=True)
    state = Column(String(120), nullable=True)
    pincode = Column(String(20), nullable=True)

    # vitals are kept as entered (cm / kg / bpm / mmHg)
    height = Column(String(16), nullable=True)
    weight = Column(String(16), nullable=True)
    pulse = Column(String(16), nullable=True)
    bp = Column(String(32), nullable=True)

    medical_history = Column(JSON, nullable=False, default=list)

    # owning doctor
    parent_id = Column(Integer,
                       ForeignKey("doctors.id", ondelete="SET NULL"),
                       index=True,
                       nullable=True)

    doctors = relationship("Doctor",
                           secondary="doctor_patients",
                           back_populates="patients")
    prescriptions = relationship(
        "Prescription",
        primaryjoin="Patient.id == foreign(Prescription.patient_id)",
        order_by="Prescription.id",
        viewonly=True,
    )
