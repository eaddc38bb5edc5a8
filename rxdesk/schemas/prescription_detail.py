# rxdesk/schemas/prescription_detail.py
from typing import Optional

from rxdesk.schemas.doctor import DoctorOut
from rxdesk.schemas.patient import PatientOut
from rxdesk.schemas.prescription import PrescriptionBrief


class PrescriptionOut(PrescriptionBrief):
    # resolved references, None when dangling
    patient: Optional[PatientOut] = None
    doctor: Optional[DoctorOut] = None
