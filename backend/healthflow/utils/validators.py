"""
Input validation for credentials, profile updates, and readings.
"""
import math
import re
from datetime import datetime
from email_validator import validate_email, EmailNotValidError

VALID_GENDERS = ['male', 'female', 'other']
MIN_PASSWORD_LENGTH = 8


def _int_in_range(data: dict, key: str, label: str, low: int, high: int, errors: list):
    value = data.get(key)
    try:
        v = int(value)
    except (ValueError, TypeError, OverflowError):
        errors.append(f'{label} must be an integer')
        return
    if isinstance(value, float) and not value.is_integer():
        errors.append(f'{label} must be an integer')
    elif v < low or v > high:
        errors.append(f'{label} must be between {low} and {high}')


def _number_in_range(data: dict, key: str, label: str, low: float, high: float, errors: list):
    try:
        v = float(data.get(key))
    except (ValueError, TypeError):
        errors.append(f'{label} must be a number')
        return
    if not math.isfinite(v):
        errors.append(f'{label} must be a number')
    elif v < low or v > high:
        errors.append(f'{label} must be between {low:g} and {high:g}')


def validate_credentials(data: dict) -> list:
    """Validate login / registration input. Returns list of error strings (empty = valid)."""
    email = data.get('email') or ''
    password = data.get('password') or ''
    if not isinstance(email, str) or not isinstance(password, str):
        return ['Email and password must be text']

    email = email.strip()
    password = password.strip()
    if not email or not password:
        return ['Please fill in email and password']

    errors = []
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        errors.append('Invalid email format')

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

    return errors


def validate_profile(data: dict) -> list:
    """Validate a full profile update. All fields are required."""
    required = ('name', 'age', 'gender', 'height', 'weight')
    if any(data.get(key) in (None, '') for key in required):
        return ['Please fill in all fields']
    if not str(data['name']).strip():
        return ['Please fill in all fields']

    errors = []
    if len(str(data['name']).strip()) > 200:
        errors.append('Name must be 200 characters or fewer')

    _int_in_range(data, 'age', 'Age', 1, 120, errors)

    if str(data['gender']).strip().lower() not in VALID_GENDERS:
        errors.append('Gender must be one of: ' + ', '.join(VALID_GENDERS))

    _number_in_range(data, 'height', 'Height', 50, 250, errors)
    _number_in_range(data, 'weight', 'Weight', 20, 350, errors)

    return errors


def validate_bmi_input(data: dict) -> list:
    """Validate a height/weight pair for a BMI preview."""
    errors = []
    if data.get('height') in (None, '') or data.get('weight') in (None, ''):
        return ['Height and weight are required']
    _number_in_range(data, 'height', 'Height', 50, 250, errors)
    _number_in_range(data, 'weight', 'Weight', 20, 350, errors)
    return errors


def validate_reading(data: dict) -> list:
    """Validate blood pressure reading input. Returns list of error strings."""
    errors = []

    for key, label, low, high in (
        ('systolic', 'Systolic', 60, 300),
        ('diastolic', 'Diastolic', 30, 200),
        ('pulse', 'Pulse', 30, 250),
    ):
        if data.get(key) is None:
            errors.append(f'{label} is required')
        else:
            _int_in_range(data, key, label, low, high, errors)

    reading_date = data.get('date')
    if not reading_date:
        errors.append('Date is required')
    elif not re.match(r'^\d{4}-\d{2}-\d{2}$', str(reading_date)):
        errors.append('Date must be in YYYY-MM-DD format')
    else:
        try:
            parsed = datetime.strptime(str(reading_date), '%Y-%m-%d')
            if parsed.date() > datetime.now().date():
                errors.append('Date cannot be in the future')
        except ValueError:
            errors.append('Date is not a valid date')

    reading_time = data.get('time')
    if not reading_time:
        errors.append('Time is required')
    elif not re.match(r'^\d{2}:\d{2}$', str(reading_time)):
        errors.append('Time must be in HH:MM format')
    else:
        try:
            datetime.strptime(str(reading_time), '%H:%M')
        except ValueError:
            errors.append('Time is not a valid time')

    return errors
