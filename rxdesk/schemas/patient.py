# rxdesk/schemas/patient.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List

from rxdesk.db.base import MAX_ID
from rxdesk.schemas.prescription import PrescriptionBrief


class PatientBase(BaseModel):
    address_line1: Optional[str] = Field("", max_length=191)
    address_line2: Optional[str] = Field("", max_length=191)
    city: Optional[str] = Field("", max_length=120)
    state: Optional[str] = Field("", max_length=120)
    pincode: Optional[str] = Field("", max_length=20)
    mail: Optional[str] = Field(None, max_length=191)
    guardian_name: Optional[str] = Field(None, max_length=120)
    height: Optional[str] = Field(None, max_length=16)
    weight: Optional[str] = Field(None, max_length=16)
    pulse: Optional[str] = Field(None, max_length=16)
    bp: Optional[str] = Field(None, max_length=32)
    medical_history: List[str] = Field(default_factory=list)
    parent_id: Optional[int] = Field(None, gt=0, le=MAX_ID)


class PatientCreate(PatientBase):
    name: str = Field(..., min_length=1, max_length=120)
    age: int = Field(..., gt=0, le=150)
    sex: str = Field(..., min_length=1, max_length=16)
    phone: str = Field(..., min_length=1, max_length=20)

    @field_validator("name", "sex", "phone")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class PatientUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=120)
    age: Optional[int] = Field(None, gt=0, le=150)
    sex: Optional[str] = Field(None, max_length=16)
    phone: Optional[str] = Field(None, max_length=20)
    address_line1: Optional[str] = Field(None, max_length=191)
    address_line2: Optional[str] = Field(None, max_length=191)
    city: Optional[str] = Field(None, max_length=120)
    state: Optional[str] = Field(None, max_length=120)
    pincode: Optional[str] = Field(None, max_length=20)
    mail: Optional[str] = Field(None, max_length=191)
    guardian_name: Optional[str] = Field(None, max_length=120)
    height: Optional[str] = Field(None, max_length=16)
    weight: Optional[str] = Field(None, max_length=16)
    pulse: Optional[str] = Field(None, max_length=16)
    bp: Optional[str] = Field(None, max_length=32)
    medical_history: Optional[List[str]] = None
    parent_id: Optional[int] = Field(None, gt=0, le=MAX_ID)


class PatientOut(PatientBase):
    id: int
    name: str
    age: int
    sex: str
    phone: str

    model_config = ConfigDict(from_attributes=True)


class PatientDetailOut(PatientOut):
    prescriptions: List[PrescriptionBrief] = Field(default_factory=list)
