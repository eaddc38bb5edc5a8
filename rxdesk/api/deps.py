# rxdesk/api/deps.py
from __future__ import annotations

from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from rxdesk.db.session import SessionLocal
from rxdesk.models import Doctor
from rxdesk.utils.jwt import decode_access_token


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def current_doctor(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Doctor:
    raw = _extract_bearer(authorization)
    if not raw:
        raise HTTPException(status_code=401, detail="Missing token")

    doctor_id = decode_access_token(raw)
    if doctor_id is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    doctor = db.get(Doctor, doctor_id)
    if not doctor:
        raise HTTPException(status_code=401, detail="Doctor not found")
    return doctor
