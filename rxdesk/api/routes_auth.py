# rxdesk/api/routes_auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from rxdesk.api.deps import get_db
from rxdesk.core.security import hash_password, verify_password
from rxdesk.models import Doctor
from rxdesk.schemas.auth import SignupIn, LoginIn, LoginOut, ProfileOut
from rxdesk.schemas.common import MessageOut
from rxdesk.utils.jwt import create_access_token

router = APIRouter()
logger = logging.getLogger(__name__)


def find_doctor_by_email(db: Session, email: str) -> Doctor | None:
    # emails are matched case-insensitively
    return (db.query(Doctor).filter(
        func.lower(Doctor.email) == (email or "").strip().lower()).first())


@router.post("/signup", response_model=MessageOut, status_code=201)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    if find_doctor_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="Doctor already exists")

    doctor = Doctor(
        doctor_name=payload.doctor_name.strip(),
        email=payload.email.strip().lower(),
        phone_no=payload.phone_no.strip(),
        password_hash=hash_password(payload.password),
    )
    db.add(doctor)
    db.commit()
    logger.info("Registered doctor id=%s", doctor.id)
    return {"message": "Doctor registered successfully"}


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    doctor = find_doctor_by_email(db, payload.email)
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")

    if not verify_password(payload.password, doctor.password_hash):
        logger.info("Invalid password for doctor id=%s", doctor.id)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(doctor.id)
    return LoginOut(
        message="Login successful",
        access_token=token,
        profile=ProfileOut(
            id=doctor.id,
            doctor_name=doctor.doctor_name,
            email=doctor.email,
            phone_no=doctor.phone_no,
        ),
    )
