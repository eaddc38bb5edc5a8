from decimal import Decimal

import pytest

from rxdesk.services.errors import DerivedFieldError
from rxdesk.services.vitals import BMI_PLACEHOLDER, compute_bmi, format_bmi


def test_bmi_reference_value():
    assert compute_bmi("170", "70") == Decimal("24.2")


def test_bmi_accepts_numbers_and_padded_text():
    assert compute_bmi(170, 70) == Decimal("24.2")
    assert compute_bmi(" 180.0 ", "81") == Decimal("25.0")


@pytest.mark.parametrize("weight, expected", [
    ("22.25", Decimal("22.3")),
    ("22.35", Decimal("22.4")),
    ("22.24", Decimal("22.2")),
])
def test_bmi_rounds_half_away_from_zero(weight, expected):
    # height 100 cm makes BMI == weight, so ties are exact
    assert compute_bmi("100", weight) == expected


@pytest.mark.parametrize("height, weight, field", [
    ("0", "70", "height"),
    ("170", "0", "weight"),
    ("-170", "70", "height"),
    ("170", "-5", "weight"),
    ("abc", "70", "height"),
    ("170", "", "weight"),
    (None, "70", "height"),
    ("NaN", "70", "height"),
    ("170", "Infinity", "weight"),
    ("0", "0", "height"),
])
def test_bmi_invalid_inputs_return_error(height, weight, field):
    res = compute_bmi(height, weight)
    assert isinstance(res, DerivedFieldError)
    assert res.field == field


def test_format_bmi_uses_placeholder_on_error():
    assert format_bmi(compute_bmi("170", "70")) == "24.2"
    assert format_bmi(compute_bmi("170", "0")) == BMI_PLACEHOLDER
    assert format_bmi(None) == BMI_PLACEHOLDER
    assert BMI_PLACEHOLDER == "—"


def test_bmi_out_of_range_is_an_error():
    res = compute_bmi("100", "1e40")
    assert isinstance(res, DerivedFieldError)
    assert res.reason == "out of range"
