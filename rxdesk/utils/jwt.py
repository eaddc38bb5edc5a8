# rxdesk/utils/jwt.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from rxdesk.core.config import settings


def create_access_token(
    doctor_id: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    delta = expires_delta or timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(doctor_id),  # doctor id
        "iat": now,
        "exp": now + delta,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str) -> Optional[int]:
    """
    Return the doctor id carried by a valid token, else None.
    """
    try:
        payload = jwt.decode(token,
                             settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALG])
    except JWTError:
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
