"""Tests for the application factory and CLI commands."""
from datetime import datetime, timedelta

import pytest

from healthflow import create_app, db
from healthflow.models import RevokedToken, User


def test_secret_key_is_required(monkeypatch):
    monkeypatch.delenv('SECRET_KEY', raising=False)
    with pytest.raises(RuntimeError, match='SECRET_KEY'):
        create_app({'JWT_SECRET_KEY': 'jwt'})


def test_jwt_secret_is_required(monkeypatch):
    monkeypatch.delenv('JWT_SECRET_KEY', raising=False)
    with pytest.raises(RuntimeError, match='JWT_SECRET_KEY'):
        create_app({'SECRET_KEY': 'secret'})


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json() == {'status': 'healthy'}


def test_security_headers(client):
    response = client.get('/health')
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['X-Frame-Options'] == 'DENY'
    assert 'no-store' in response.headers['Cache-Control']


def test_init_db_command(tmp_path):
    app = create_app({
        'SECRET_KEY': 'secret',
        'JWT_SECRET_KEY': 'jwt',
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'fresh.db'}",
        'AUDIT_LOG_FILE': str(tmp_path / 'audit.log'),
    })
    result = app.test_cli_runner().invoke(args=['init-db'])
    assert 'Initialized database' in result.output
    with app.app_context():
        assert User.query.count() == 0
        db.engine.dispose()


def test_cleanup_revoked_tokens_command(app):
    with app.app_context():
        user = User(email='old@example.com', password_hash='x')
        db.session.add(user)
        db.session.flush()
        db.session.add_all([
            RevokedToken(jti='expired', user_id=user.id,
                         expires_at=datetime.utcnow() - timedelta(hours=1)),
            RevokedToken(jti='live', user_id=user.id,
                         expires_at=datetime.utcnow() + timedelta(hours=1)),
        ])
        db.session.commit()

    result = app.test_cli_runner().invoke(args=['cleanup-revoked-tokens'])
    assert 'Removed 1 expired revoked token(s).' in result.output

    with app.app_context():
        assert RevokedToken.is_token_revoked('live')
        assert not RevokedToken.is_token_revoked('expired')
