"""
Body mass index helpers.
"""


def calculate_bmi(height_cm: float, weight_kg: float) -> float:
    """BMI from height in centimetres and weight in kilograms."""
    return weight_kg / ((height_cm / 100) ** 2)


def bmi_status(bmi: float) -> str:
    if bmi < 18.5:
        return 'Underweight'
    if bmi < 25:
        return 'Normal'
    if bmi < 30:
        return 'Overweight'
    return 'Obese'


def format_bmi(bmi: float) -> str:
    return f'{bmi:.1f}'
