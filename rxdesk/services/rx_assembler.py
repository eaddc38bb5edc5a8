# FILE: rxdesk/services/rx_assembler.py
from __future__ import annotations

import logging
from typing import Any, Iterable, Tuple

from rxdesk.services.entity_store import EntityStore
from rxdesk.services.errors import NotFoundError
from rxdesk.services.render_model import (
    REMARKS_PLACEHOLDER,
    ClinicView,
    MedicineLine,
    PatientView,
    PractitionerView,
    RenderModel,
)
from rxdesk.services.vitals import compute_bmi

logger = logging.getLogger(__name__)


# -------------------------------
# Helpers
# -------------------------------
def _g(obj: Any, key: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _safe(v: Any) -> str:
    return "" if v is None else str(v).strip()


def _age(v: Any) -> int:
    try:
        n = int(v)
    except (TypeError, ValueError):
        return 0
    return n if n > 0 else 0


def _texts(values: Iterable[Any] | None) -> Tuple[str, ...]:
    return tuple(_safe(v) for v in (values or []))


# -------------------------------
# Views
# -------------------------------
def _clinic_view(doctor: Any) -> ClinicView:
    return ClinicView(
        name=_safe(_g(doctor, "clinic_name")),
        address_line1=_safe(_g(doctor, "clinic_address_line1")),
        city=_safe(_g(doctor, "clinic_city")),
        state=_safe(_g(doctor, "clinic_state")),
        pincode=_safe(_g(doctor, "clinic_pincode")),
    )


def _practitioner_view(doctor: Any) -> PractitionerView:
    return PractitionerView(
        display_name=_safe(_g(doctor, "doctor_name")),
        email=_safe(_g(doctor, "email")),
        phone=_safe(_g(doctor, "phone_no")),
        signature_ref=_safe(_g(doctor, "signature")) or None,
    )


def _patient_view(patient: Any) -> PatientView:
    height = _safe(_g(patient, "height"))
    weight = _safe(_g(patient, "weight"))
    return PatientView(
        name=_safe(_g(patient, "name")),
        age=_age(_g(patient, "age")),
        sex=_safe(_g(patient, "sex")),
        phone=_safe(_g(patient, "phone")),
        address_line1=_safe(_g(patient, "address_line1")),
        height=height,
        weight=weight,
        pulse=_safe(_g(patient, "pulse")),
        blood_pressure=_safe(_g(patient, "bp")),
        bmi=compute_bmi(height, weight),
    )


def _medicine_line(ln: Any) -> MedicineLine:
    return MedicineLine(
        name=_safe(_g(ln, "drug")),
        dose=_safe(_g(ln, "dose")),
        frequency=_safe(_g(ln, "frequency")),
        duration_days=_safe(_g(ln, "day")),
        remarks=_safe(_g(ln, "remarks")) or REMARKS_PLACEHOLDER,
    )


# -------------------------------
# Public API
# -------------------------------
def assemble(store: EntityStore, prescription_id: Any) -> RenderModel:
    """
    Resolve prescription -> patient -> doctor and build the render model.

    Raises NotFoundError naming the first reference that does not resolve;
    nothing is rendered in that case.
    """
    rx = store.get_prescription_by_id(prescription_id)
    if rx is None:
        raise NotFoundError("prescription", prescription_id)

    patient_id = _g(rx, "patient_id")
    patient = store.get_patient_by_id(patient_id)
    if patient is None:
        logger.warning("Prescription %s points at missing patient %s",
                       prescription_id, patient_id)
        raise NotFoundError("patient", patient_id)

    doctor_id = _g(rx, "doctor_id")
    doctor = store.get_doctor_by_id(doctor_id)
    if doctor is None:
        logger.warning("Prescription %s points at missing doctor %s",
                       prescription_id, doctor_id)
        raise NotFoundError("doctor", doctor_id)

    return RenderModel(
        clinic=_clinic_view(doctor),
        practitioner=_practitioner_view(doctor),
        patient=_patient_view(patient),
        diagnosis=_texts(_g(rx, "description")),
        medicine_lines=tuple(
            _medicine_line(ln) for ln in (_g(rx, "medicines") or [])),
        test_lines=_texts(_g(rx, "tests")),
    )
