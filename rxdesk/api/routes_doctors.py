# rxdesk/api/routes_doctors.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi import Path as FPath
from sqlalchemy.orm import Session, selectinload

from rxdesk.api.deps import get_db, current_doctor
from rxdesk.db.base import MAX_ID
from rxdesk.api.routes_auth import find_doctor_by_email
from rxdesk.core.security import hash_password
from rxdesk.models import Doctor, Patient
from rxdesk.schemas.common import MessageOut
from rxdesk.schemas.doctor import (DoctorOut, DoctorDetailOut, DoctorUpdate,
                                   AddPatientIn)
from rxdesk.utils.files import save_upload

router = APIRouter()


def _get_doctor_or_404(db: Session, doctor_id: int) -> Doctor:
    d = db.get(Doctor, doctor_id)
    if not d:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return d


@router.get("/", response_model=List[DoctorDetailOut])
def list_doctors(
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    return (db.query(Doctor).options(selectinload(Doctor.patients)).order_by(
        Doctor.id.asc()).all())


@router.get("/{doctor_id}", response_model=DoctorDetailOut)
def get_doctor(
        doctor_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    return _get_doctor_or_404(db, doctor_id)


@router.put("/{doctor_id}", response_model=DoctorOut)
def update_doctor(
        payload: DoctorUpdate,
        doctor_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    d = _get_doctor_or_404(db, doctor_id)
    data = payload.model_dump(exclude_unset=True)

    password = data.pop("password", None)
    if password:
        d.password_hash = hash_password(password)

    email = data.pop("email", None)
    if email:
        other = find_doctor_by_email(db, email)
        if other and other.id != d.id:
            raise HTTPException(status_code=400,
                                detail="Email already registered")
        d.email = email.strip().lower()

    for k, v in data.items():
        if k in ("doctor_name", "phone_no") and not v:
            continue
        setattr(d, k, v)

    db.commit()
    db.refresh(d)
    return d


@router.delete("/{doctor_id}", response_model=MessageOut)
def delete_doctor(
        doctor_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    d = _get_doctor_or_404(db, doctor_id)
    db.delete(d)
    db.commit()
    return {"message": "Doctor deleted successfully"}


@router.put("/{doctor_id}/patients", response_model=DoctorDetailOut)
def add_patient(
        payload: AddPatientIn,
        doctor_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    d = _get_doctor_or_404(db, doctor_id)
    p = db.get(Patient, payload.patient_id)
    if not p:
        raise HTTPException(status_code=404, detail="Patient not found")

    # adding twice is a no-op
    if p not in d.patients:
        d.patients.append(p)
        db.commit()
        db.refresh(d)
    return d


@router.post("/{doctor_id}/signature", response_model=DoctorOut)
def upload_signature(
        doctor_id: int = FPath(..., gt=0, le=MAX_ID),
        file: UploadFile = File(...),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    d = _get_doctor_or_404(db, doctor_id)
    saved = save_upload(file, "signatures")
    d.signature = saved["relative_path"]
    db.commit()
    db.refresh(d)
    return d
