# rxdesk/models/__init__.py
from .doctor import Doctor, doctor_patients
from .patient import Patient
from .prescription import Prescription, PrescriptionMedicine
from .misc import MiscItem, MISC_TYPES

__all__ = [
    "Doctor",
    "doctor_patients",
    "Patient",
    "Prescription",
    "PrescriptionMedicine",
    "MiscItem",
    "MISC_TYPES",
]
