"""
Password hashing for local accounts.

The analysis code never imports this module; routes hand it the submitted
password and the stored hash and get back a yes/no.
"""
from werkzeug.security import generate_password_hash, check_password_hash


def hash_password(password: str) -> str:
    """Return a salted hash suitable for storing on the user row."""
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """Check a submitted password against a stored hash."""
    if not password_hash or not password:
        return False
    return check_password_hash(password_hash, password)
