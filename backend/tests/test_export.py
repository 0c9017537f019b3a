"""Tests for CSV / PDF export and the demo seed."""
import csv
import io

from healthflow import create_app
from healthflow.models import User
from healthflow.utils.bp_analysis import ProgressStatus, long_term_progress
from tests.conftest import add_reading


def test_csv_export(client, auth_headers):
    add_reading(client, auth_headers, 118, 76, date='2024-03-01', time='07:00')
    add_reading(client, auth_headers, 145, 95, date='2024-03-02', time='19:15')

    response = client.get('/patient/readings/export', headers=auth_headers)
    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    assert 'attachment; filename=healthflow_readings_' in response.headers['Content-Disposition']

    rows = list(csv.DictReader(io.StringIO(response.get_data(as_text=True))))
    assert [r['systolic'] for r in rows] == ['145', '118']
    assert rows[0] == {
        'date': '2024-03-02', 'time': '19:15', 'systolic': '145',
        'diastolic': '95', 'pulse': '72', 'category': 'Stage 2 Hypertension',
    }
    assert rows[1]['category'] == 'Normal'


def test_csv_export_empty(client, auth_headers):
    response = client.get('/patient/readings/export', headers=auth_headers)
    assert response.get_data(as_text=True).strip() == 'date,time,systolic,diastolic,pulse,category'


def test_pdf_report(client, auth_headers):
    client.put('/patient/profile', headers=auth_headers,
               json={'name': 'Jane <Doe>', 'age': 52, 'gender': 'female', 'height': 165, 'weight': 70})
    for systolic, diastolic in [(140, 92), (138, 90), (136, 89), (126, 80), (124, 79), (120, 78)]:
        add_reading(client, auth_headers, systolic, diastolic)

    response = client.get('/patient/report', headers=auth_headers)
    assert response.status_code == 200
    assert response.mimetype == 'application/pdf'
    assert response.data.startswith(b'%PDF')


def test_pdf_report_without_data(client, auth_headers):
    response = client.get('/patient/report', headers=auth_headers)
    assert response.status_code == 200
    assert response.data.startswith(b'%PDF')


def test_exports_require_token(client):
    assert client.get('/patient/readings/export').status_code == 401
    assert client.get('/patient/report').status_code == 401


def test_seed_creates_demo_history(tmp_path, monkeypatch):
    monkeypatch.setenv('SECRET_KEY', 'seed-secret')
    monkeypatch.setenv('JWT_SECRET_KEY', 'seed-jwt')
    monkeypatch.setenv('DATABASE_URL', f"sqlite:///{tmp_path / 'seed.db'}")
    monkeypatch.setenv('AUDIT_LOG_FILE', str(tmp_path / 'audit.log'))

    import seed
    seed.seed()
    seed.seed()  # second run is a no-op

    app = create_app()
    with app.app_context():
        user = User.find_by_email(seed.DEMO_EMAIL)
        assert user.is_profile_complete
        history = user.history()
        assert len(history) == len(seed.DEMO_READINGS)
        assert history[0].systolic == seed.DEMO_READINGS[-1][0]
        assert long_term_progress(history).status is ProgressStatus.IMPROVING
