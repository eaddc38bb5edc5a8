# FILE: rxdesk/services/entity_store.py
from __future__ import annotations

from typing import Any, Optional, Protocol

from sqlalchemy.orm import Session, selectinload

from rxdesk.db.base import MAX_ID
from rxdesk.models import Doctor, Patient, Prescription


class EntityStore(Protocol):

    def get_prescription_by_id(self, prescription_id: Any) -> Optional[Any]:
        ...

    def get_patient_by_id(self, patient_id: Any) -> Optional[Any]:
        ...

    def get_doctor_by_id(self, doctor_id: Any) -> Optional[Any]:
        ...


class SqlEntityStore:
    """Read-only lookups over the request's SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _int_id(v: Any) -> Optional[int]:
        try:
            n = int(v)
        except (TypeError, ValueError):
            return None
        # out-of-range ids cannot be bound to an INTEGER column
        return n if -MAX_ID - 1 <= n <= MAX_ID else None

    def get_prescription_by_id(self,
                               prescription_id: Any) -> Optional[Prescription]:
        pk = self._int_id(prescription_id)
        if pk is None:
            return None
        return (self.db.query(Prescription).options(
            selectinload(Prescription.medicines)).filter(
                Prescription.id == pk).first())

    def get_patient_by_id(self, patient_id: Any) -> Optional[Patient]:
        pk = self._int_id(patient_id)
        return self.db.get(Patient, pk) if pk is not None else None

    def get_doctor_by_id(self, doctor_id: Any) -> Optional[Doctor]:
        pk = self._int_id(doctor_id)
        return self.db.get(Doctor, pk) if pk is not None else None
