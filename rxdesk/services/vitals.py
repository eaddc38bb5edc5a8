# FILE: rxdesk/services/vitals.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Union

from rxdesk.services.errors import DerivedFieldError

BMI_PLACEHOLDER = "—"

_ONE_DP = Decimal("0.1")


def _positive_decimal(field: str, v: Any) -> Union[Decimal, DerivedFieldError]:
    s = "" if v is None else str(v).strip()
    if not s:
        return DerivedFieldError(field=field, reason="missing")
    try:
        d = Decimal(s)
    except InvalidOperation:
        return DerivedFieldError(field=field, reason="not a number")
    if not d.is_finite():
        return DerivedFieldError(field=field, reason="not a number")
    if d <= 0:
        return DerivedFieldError(field=field, reason="must be positive")
    return d


def compute_bmi(height_cm: Any,
                weight_kg: Any) -> Union[Decimal, DerivedFieldError]:
    """
    BMI = weight(kg) / height(m)^2, one decimal, half away from zero.

    Example: compute_bmi("170", "70") -> Decimal("24.2")
    Height is validated before weight, so a bad pair reports "height".
    """
    h = _positive_decimal("height", height_cm)
    if isinstance(h, DerivedFieldError):
        return h
    w = _positive_decimal("weight", weight_kg)
    if isinstance(w, DerivedFieldError):
        return w

    metres = h / Decimal(100)
    # ROUND_HALF_UP on Decimal rounds ties away from zero
    try:
        return (w / (metres * metres)).quantize(_ONE_DP,
                                                rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return DerivedFieldError(field="weight", reason="out of range")


def format_bmi(bmi: Union[Decimal, DerivedFieldError, None]) -> str:
    if bmi is None or isinstance(bmi, DerivedFieldError):
        return BMI_PLACEHOLDER
    return str(bmi)
