"""Tests for BMI helpers."""
import pytest

from healthflow.utils.bmi import bmi_status, calculate_bmi, format_bmi


def test_calculate_bmi():
    assert calculate_bmi(170, 70) == pytest.approx(24.22, abs=0.01)
    assert calculate_bmi(170, 85) == pytest.approx(29.41, abs=0.01)


@pytest.mark.parametrize('bmi, status', [
    (18, 'Underweight'),
    (18.5, 'Normal'),
    (24, 'Normal'),
    (25, 'Overweight'),
    (28, 'Overweight'),
    (30, 'Obese'),
    (32, 'Obese'),
])
def test_bmi_status(bmi, status):
    assert bmi_status(bmi) == status


def test_format_bmi():
    assert format_bmi(calculate_bmi(180, 80)) == '24.7'
