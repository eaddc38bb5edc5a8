# rxdesk/schemas/doctor.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List

from rxdesk.db.base import MAX_ID
from rxdesk.schemas.patient import PatientOut


class DoctorUpdate(BaseModel):
    doctor_name: Optional[str] = Field(None, max_length=120)
    email: Optional[EmailStr] = None
    phone_no: Optional[str] = Field(None, max_length=20)
    password: Optional[str] = None
    clinic_name: Optional[str] = Field(None, max_length=191)
    clinic_address_line1: Optional[str] = Field(None, max_length=191)
    clinic_address_line2: Optional[str] = Field(None, max_length=191)
    clinic_city: Optional[str] = Field(None, max_length=120)
    clinic_state: Optional[str] = Field(None, max_length=120)
    clinic_pincode: Optional[str] = Field(None, max_length=20)


class DoctorOut(BaseModel):
    id: int
    doctor_name: str
    email: str
    phone_no: str
    clinic_name: Optional[str] = None
    clinic_address_line1: Optional[str] = None
    clinic_address_line2: Optional[str] = None
    clinic_city: Optional[str] = None
    clinic_state: Optional[str] = None
    clinic_pincode: Optional[str] = None
    signature: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DoctorDetailOut(DoctorOut):
    patients: List[PatientOut] = Field(default_factory=list)


class AddPatientIn(BaseModel):
    patient_id: int = Field(..., gt=0, le=MAX_ID)
