# rxdesk/api/routes_patients.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi import Path as FPath
from sqlalchemy.orm import Session, selectinload

from rxdesk.api.deps import get_db, current_doctor
from rxdesk.db.base import MAX_ID
from rxdesk.models import Doctor, Patient
from rxdesk.schemas.common import MessageOut
from rxdesk.schemas.patient import (PatientCreate, PatientUpdate, PatientOut,
                                    PatientDetailOut)

router = APIRouter()

_REQUIRED = ("name", "age", "sex", "phone")


def _get_patient_or_404(db: Session, patient_id: int) -> Patient:
    p = db.get(Patient, patient_id)
    if not p:
        raise HTTPException(status_code=404, detail="Patient not found")
    return p


@router.get("/", response_model=List[PatientDetailOut])
def list_patients(
        parent_id: Optional[int] = Query(None, gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    qry = db.query(Patient).options(selectinload(Patient.prescriptions))
    if parent_id is not None:
        qry = qry.filter(Patient.parent_id == parent_id)
    return qry.order_by(Patient.id.asc()).all()


@router.get("/{patient_id}", response_model=PatientDetailOut)
def get_patient(
        patient_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    return _get_patient_or_404(db, patient_id)


@router.post("/", response_model=PatientOut, status_code=201)
def create_patient(
        payload: PatientCreate,
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    if payload.parent_id is not None and not db.get(Doctor, payload.parent_id):
        raise HTTPException(status_code=400, detail="Invalid parent_id")

    p = Patient(**payload.model_dump())
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@router.put("/{patient_id}", response_model=PatientDetailOut)
def update_patient(
        payload: PatientUpdate,
        patient_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    p = _get_patient_or_404(db, patient_id)
    data = payload.model_dump(exclude_unset=True)

    for k in _REQUIRED:
        if k in data and data[k] in (None, ""):
            raise HTTPException(status_code=400, detail=f"{k} is required")
    if data.get("parent_id") is not None and not db.get(
            Doctor, data["parent_id"]):
        raise HTTPException(status_code=400, detail="Invalid parent_id")

    for k, v in data.items():
        setattr(p, k, v)
    db.commit()
    db.refresh(p)
    return p


@router.delete("/{patient_id}", response_model=MessageOut)
def delete_patient(
        patient_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    p = _get_patient_or_404(db, patient_id)
    db.delete(p)
    db.commit()
    return {"message": "Patient deleted successfully"}
