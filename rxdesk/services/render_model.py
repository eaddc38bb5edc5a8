# FILE: rxdesk/services/render_model.py
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple, Union

from rxdesk.services.errors import DerivedFieldError

REMARKS_PLACEHOLDER = "-"


@dataclass(frozen=True)
class ClinicView:
    name: str = ""
    address_line1: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""


@dataclass(frozen=True)
class PractitionerView:
    display_name: str = ""
    email: str = ""
    phone: str = ""
    signature_ref: Optional[str] = None


@dataclass(frozen=True)
class PatientView:
    name: str = ""
    age: int = 0
    sex: str = ""
    phone: str = ""
    address_line1: str = ""
    height: str = ""
    weight: str = ""
    pulse: str = ""
    blood_pressure: str = ""
    # filled by the assembler from height/weight; None when not computed
    bmi: Union[Decimal, DerivedFieldError, None] = None


@dataclass(frozen=True)
class MedicineLine:
    name: str
    dose: str
    frequency: str
    duration_days: str
    remarks: str = REMARKS_PLACEHOLDER


@dataclass(frozen=True)
class RenderModel:
    """
    Denormalised, read-only snapshot of everything one prescription PDF needs.
    """

    clinic: ClinicView
    practitioner: PractitionerView
    patient: PatientView
    diagnosis: Tuple[str, ...] = field(default_factory=tuple)
    medicine_lines: Tuple[MedicineLine, ...] = field(default_factory=tuple)
    test_lines: Tuple[str, ...] = field(default_factory=tuple)
