"""Tests for request validation."""
from datetime import date, timedelta

from healthflow.utils.validators import (
    validate_bmi_input,
    validate_credentials,
    validate_profile,
    validate_reading,
)

VALID_PROFILE = {'name': 'John Doe', 'age': 45, 'gender': 'male', 'height': 180, 'weight': 80}
VALID_READING = {'systolic': 125, 'diastolic': 82, 'pulse': 70, 'date': '2024-03-01', 'time': '07:45'}


class TestCredentials:

    def test_valid(self):
        assert validate_credentials({'email': 'a@example.com', 'password': 'long-enough'}) == []

    def test_missing_fields(self):
        assert validate_credentials({}) == ['Please fill in email and password']
        assert validate_credentials({'email': 'a@example.com', 'password': '   '}) == [
            'Please fill in email and password'
        ]

    def test_non_string_values_are_rejected(self):
        assert validate_credentials({'email': 'a@example.com', 'password': 12345678}) == [
            'Email and password must be text'
        ]
        assert validate_credentials({'email': ['a@example.com'], 'password': 'long-enough'}) == [
            'Email and password must be text'
        ]

    def test_bad_email_and_short_password(self):
        errors = validate_credentials({'email': 'not-an-email', 'password': 'short'})
        assert 'Invalid email format' in errors
        assert 'Password must be at least 8 characters' in errors


class TestProfile:

    def test_valid(self):
        assert validate_profile(VALID_PROFILE) == []

    def test_every_field_is_required(self):
        for key in VALID_PROFILE:
            data = dict(VALID_PROFILE, **{key: ''})
            assert validate_profile(data) == ['Please fill in all fields']

    def test_ranges(self):
        data = dict(VALID_PROFILE, age=0, gender='unknown', height=20, weight='heavy')
        errors = validate_profile(data)
        assert 'Age must be between 1 and 120' in errors
        assert 'Gender must be one of: male, female, other' in errors
        assert 'Height must be between 50 and 250' in errors
        assert 'Weight must be a number' in errors

    def test_non_finite_numbers(self):
        errors = validate_profile(dict(VALID_PROFILE, height='nan', weight=float('inf')))
        assert 'Height must be a number' in errors
        assert 'Weight must be a number' in errors
        assert validate_bmi_input({'height': 'NaN', 'weight': 70}) == ['Height must be a number']

    def test_bmi_input(self):
        assert validate_bmi_input({'height': 170, 'weight': 70}) == []
        assert validate_bmi_input({'height': 170}) == ['Height and weight are required']


class TestReading:

    def test_valid(self):
        assert validate_reading(VALID_READING) == []

    def test_numeric_strings_are_accepted(self):
        data = dict(VALID_READING, systolic='125', diastolic='82', pulse='70')
        assert validate_reading(data) == []

    def test_required(self):
        errors = validate_reading({})
        assert 'Systolic is required' in errors
        assert 'Diastolic is required' in errors
        assert 'Pulse is required' in errors
        assert 'Date is required' in errors
        assert 'Time is required' in errors

    def test_ranges(self):
        data = dict(VALID_READING, systolic=400, diastolic=10, pulse=12.5)
        errors = validate_reading(data)
        assert 'Systolic must be between 60 and 300' in errors
        assert 'Diastolic must be between 30 and 200' in errors
        assert 'Pulse must be an integer' in errors

    def test_infinite_values_are_not_integers(self):
        errors = validate_reading(dict(VALID_READING, systolic=float('inf')))
        assert errors == ['Systolic must be an integer']

    def test_date_and_time_formats(self):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        assert 'Date cannot be in the future' in validate_reading(dict(VALID_READING, date=tomorrow))
        assert 'Date must be in YYYY-MM-DD format' in validate_reading(dict(VALID_READING, date='03/01/2024'))
        assert 'Date is not a valid date' in validate_reading(dict(VALID_READING, date='2024-02-30'))
        assert 'Time must be in HH:MM format' in validate_reading(dict(VALID_READING, time='7am'))
        assert 'Time is not a valid time' in validate_reading(dict(VALID_READING, time='25:00'))
