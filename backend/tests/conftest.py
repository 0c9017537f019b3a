import pytest

from healthflow import create_app, db

TEST_PASSWORD = 'correct-horse-9'


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'JWT_SECRET_KEY': 'test-jwt-secret',
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'healthflow-test.db'}",
        'AUDIT_LOG_FILE': str(tmp_path / 'audit.log'),
    })
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email='patient@example.com', password=TEST_PASSWORD):
    response = client.post('/patient/register', json={'email': email, 'password': password})
    assert response.status_code == 201, response.get_json()
    return response.get_json()['token']


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


def add_reading(client, headers, systolic, diastolic, pulse=72, date='2024-03-01', time='08:30'):
    response = client.post('/patient/readings', headers=headers, json={
        'systolic': systolic,
        'diastolic': diastolic,
        'pulse': pulse,
        'date': date,
        'time': time,
    })
    assert response.status_code == 201, response.get_json()
    return response.get_json()


@pytest.fixture
def auth_headers(client):
    return bearer(register(client))
