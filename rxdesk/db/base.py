# rxdesk/db/base.py
from sqlalchemy.orm import DeclarativeBase

# largest value a 64-bit INTEGER primary key can hold
MAX_ID = 2**63 - 1


class Base(DeclarativeBase):
    """All clinic tables (doctors, patients, prescriptions, vocabulary) inherit from this."""
    pass
