"""
Session tokens for the patient API.

The logged-in user travels with each request as a bearer JWT instead of
living in a module-level global; routes read it from flask.g.
"""
import secrets
import jwt
from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, g, current_app

from healthflow import db


def _jwt_secret() -> str:
    secret = current_app.config.get('JWT_SECRET_KEY')
    if not secret:
        raise RuntimeError('JWT_SECRET_KEY environment variable is required')
    return secret


def generate_token(user_id: int, email: str) -> str:
    """
    Generate a session JWT for a user.
    Expiry comes from JWT_ACCESS_TOKEN_EXPIRES (seconds, default 1 hour).
    """
    expires = int(current_app.config.get('JWT_ACCESS_TOKEN_EXPIRES', 3600))
    now = datetime.now(timezone.utc)

    payload = {
        'user_id': user_id,
        'email': email,
        'jti': secrets.token_hex(16),  # Unique token ID, used for revocation
        'exp': now + timedelta(seconds=expires),
        'iat': now,
    }

    return jwt.encode(payload, _jwt_secret(), algorithm='HS256')


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token. Returns None if expired or invalid."""
    try:
        return jwt.decode(token, _jwt_secret(), algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def token_required(f):
    """Decorator to require a valid bearer token for a route.

    Also checks:
    - Token has not been revoked (logout)
    - The user it names still exists
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        if not auth_header:
            return jsonify({'error': 'Missing authorization header'}), 401

        parts = auth_header.split()
        if len(parts) != 2 or parts[0].lower() != 'bearer':
            return jsonify({'error': 'Invalid authorization header format'}), 401

        payload = decode_token(parts[1])
        if not payload:
            return jsonify({'error': 'Invalid or expired token'}), 401

        jti = payload.get('jti')

        from healthflow.models.revoked_token import RevokedToken
        if RevokedToken.is_token_revoked(jti):
            return jsonify({'error': 'Token has been revoked'}), 401

        from healthflow.models.user import User
        user = db.session.get(User, payload.get('user_id'))
        if not user:
            return jsonify({'error': 'Account not found'}), 401

        g.user_id = user.id
        g.user_email = payload.get('email')
        g.token_jti = jti
        g.token_exp = payload.get('exp')

        return f(*args, **kwargs)
    return wrapper
