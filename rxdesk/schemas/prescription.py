# rxdesk/schemas/prescription.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from rxdesk.db.base import MAX_ID


class MedicineIn(BaseModel):
    drug: str = Field(..., min_length=1, max_length=191)
    dose: str = Field(..., min_length=1, max_length=64)
    frequency: str = Field(..., min_length=1, max_length=64)
    day: str = Field(..., min_length=1, max_length=32)
    remarks: Optional[str] = Field(None, max_length=255)


class MedicineOut(MedicineIn):
    model_config = ConfigDict(from_attributes=True)


class PrescriptionCreate(BaseModel):
    patient_id: int = Field(..., gt=0, le=MAX_ID)
    doctor_id: int = Field(..., gt=0, le=MAX_ID)
    medicines: List[MedicineIn] = Field(..., min_length=1)
    tests: List[str] = Field(default_factory=list)
    description: List[str] = Field(default_factory=list)


class PrescriptionUpdate(BaseModel):
    patient_id: Optional[int] = Field(None, gt=0, le=MAX_ID)
    doctor_id: Optional[int] = Field(None, gt=0, le=MAX_ID)
    medicines: Optional[List[MedicineIn]] = Field(None, min_length=1)
    tests: Optional[List[str]] = None
    description: Optional[List[str]] = None


class PrescriptionBrief(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    medicines: List[MedicineOut] = Field(default_factory=list)
    tests: List[str] = Field(default_factory=list)
    description: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
