"""
Patient API routes.
"""
import logging
from datetime import datetime, timezone
from flask import Blueprint, request, jsonify, g, Response
from healthflow import db
from healthflow.models import User, BloodPressureReading, RevokedToken
from healthflow.utils.auth import generate_token, token_required
from healthflow.utils.audit_logger import audit_log, audit_phi_access
from healthflow.utils.bmi import calculate_bmi, bmi_status, format_bmi
from healthflow.utils.bp_analysis import summarize
from healthflow.utils.credentials import hash_password, verify_password
from healthflow.utils.export import generate_readings_csv, generate_dashboard_pdf
from healthflow.utils.validators import (
    validate_credentials, validate_profile, validate_bmi_input, validate_reading,
)

logger = logging.getLogger(__name__)

patient_bp = Blueprint('patient', __name__)


def _current_user():
    return db.session.get(User, g.user_id)


def serialize_summary(summary: dict) -> dict:
    """JSON shape of bp_analysis.summarize()."""
    latest = summary['latest']
    if latest is not None:
        reading = latest['reading']
        latest = {
            'systolic': reading.systolic,
            'diastolic': reading.diastolic,
            'pulse': reading.pulse,
            'date': reading.date.isoformat() if reading.date else None,
            'time': reading.time.strftime('%H:%M') if reading.time else None,
            'category': latest['category'].value,
            'status': latest['status'],
            'tip': latest['tip'],
        }
    return {
        'latest': latest,
        'trend': summary['trend'].to_dict(),
        'progress': summary['progress'].to_dict(),
        'chart': summary['chart'].to_dict(),
    }


@patient_bp.route('/register', methods=['POST'])
def register():
    """Create a local account with an empty profile and log it in."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'Request body is required'}), 400

    errors = validate_credentials(data)
    if errors:
        return jsonify({'error': errors}), 400

    email = data['email'].strip().lower()
    password = data['password'].strip()
    if User.find_by_email(email):
        return jsonify({'error': 'User already exists'}), 409

    user = User(email=email, password_hash=hash_password(password))
    db.session.add(user)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Registration failed')
        return jsonify({'error': 'Registration failed. Please try again.'}), 500

    token = generate_token(user.id, email)
    audit_log('CREATE', 'user', resource_id=str(user.id),
              details={'action': 'registration'}, user_id=str(user.id))

    return jsonify({'token': token, 'userId': user.id}), 201


@patient_bp.route('/login', methods=['POST'])
def login():
    """Password login. Returns a session token."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'Request body is required'}), 400

    email = str(data.get('email') or '').strip().lower()
    password = str(data.get('password') or '').strip()
    if not email or not password:
        return jsonify({'error': 'Please fill in email and password'}), 400

    user = User.find_by_email(email)
    if not user or not verify_password(user.password_hash, password):
        audit_log('LOGIN_FAILED', 'user',
                  resource_id=str(user.id) if user else None,
                  details={'reason': 'bad_credentials' if user else 'not_found'})
        return jsonify({'error': 'Invalid email or password'}), 401

    token = generate_token(user.id, user.email)
    audit_log('LOGIN', 'user', resource_id=str(user.id),
              details={'action': 'login'}, user_id=str(user.id))

    return jsonify({
        'token': token,
        'userId': user.id,
        'profileComplete': user.is_profile_complete,
    }), 200


@patient_bp.route('/logout', methods=['POST'])
@token_required
def logout():
    """Revoke the current token (logout)."""
    revoked = RevokedToken(
        jti=g.token_jti,
        user_id=g.user_id,
        expires_at=datetime.fromtimestamp(g.token_exp, tz=timezone.utc).replace(tzinfo=None)
    )
    db.session.add(revoked)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Logout failed for user_id=%s', g.user_id)
        return jsonify({'error': 'Logout failed. Please try again.'}), 500

    audit_log('LOGOUT', 'user', resource_id=str(g.user_id),
              details={'action': 'logout'})

    return jsonify({'message': 'Successfully logged out'}), 200


@patient_bp.route('/profile', methods=['GET'])
@token_required
@audit_phi_access('READ', 'user')
def get_profile():
    """Return the authenticated user's profile with derived BMI."""
    user = _current_user()
    return jsonify(user.to_dict()), 200


@patient_bp.route('/profile', methods=['PUT'])
@token_required
def update_profile():
    """Save the full profile. BMI follows from height and weight."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'Request body is required'}), 400

    errors = validate_profile(data)
    if errors:
        return jsonify({'error': errors}), 400

    user = _current_user()
    user.name = str(data['name']).strip()
    user.age = int(data['age'])
    user.gender = str(data['gender']).strip().lower()
    user.height_cm = float(data['height'])
    user.weight_kg = float(data['weight'])

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Profile update failed for user_id=%s', g.user_id)
        return jsonify({'error': 'Profile update failed. Please try again.'}), 500

    audit_log('UPDATE', 'user', resource_id=str(user.id),
              details={'action': 'profile_update'})

    return jsonify(user.to_dict()), 200


@patient_bp.route('/bmi', methods=['POST'])
def preview_bmi():
    """Live BMI preview while the profile form is being filled in."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'Request body is required'}), 400

    errors = validate_bmi_input(data)
    if errors:
        return jsonify({'error': errors}), 400

    bmi = calculate_bmi(float(data['height']), float(data['weight']))
    return jsonify({'bmi': format_bmi(bmi), 'status': bmi_status(bmi)}), 200


@patient_bp.route('/readings', methods=['POST'])
@token_required
def create_reading():
    """Record a blood pressure reading at the front of the history."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'Request body is required'}), 400

    errors = validate_reading(data)
    if errors:
        return jsonify({'error': errors}), 400

    reading = BloodPressureReading(
        user_id=g.user_id,
        systolic=int(data['systolic']),
        diastolic=int(data['diastolic']),
        pulse=int(data['pulse']),
        reading_date=datetime.strptime(str(data['date']), '%Y-%m-%d').date(),
        reading_time=datetime.strptime(str(data['time']), '%H:%M').time(),
    )
    db.session.add(reading)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Saving reading failed for user_id=%s', g.user_id)
        return jsonify({'error': 'Saving reading failed. Please try again.'}), 500

    audit_log('CREATE', 'reading', resource_id=str(reading.id))

    return jsonify(reading.to_dict()), 201


@patient_bp.route('/readings', methods=['GET'])
@token_required
@audit_phi_access('READ', 'reading')
def get_readings():
    """Return the user's readings, most recently recorded first."""
    readings = _current_user().readings.all()
    return jsonify([r.to_dict() for r in readings]), 200


@patient_bp.route('/dashboard', methods=['GET'])
@token_required
@audit_phi_access('READ', 'dashboard')
def get_dashboard():
    """Latest reading, short-term trend, kidney risk, long-term progress and chart data."""
    summary = summarize(_current_user().history())
    return jsonify(serialize_summary(summary)), 200


@patient_bp.route('/readings/export', methods=['GET'])
@token_required
def export_readings():
    """Download the reading history as CSV."""
    readings = _current_user().readings.all()
    csv_data = generate_readings_csv(readings)

    audit_log('EXPORT', 'reading', details={'format': 'csv', 'count': len(readings)})

    filename = f"healthflow_readings_{datetime.now().strftime('%Y%m%d')}.csv"
    return Response(
        csv_data,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


@patient_bp.route('/report', methods=['GET'])
@token_required
def export_report():
    """Download the dashboard as a PDF report."""
    user = _current_user()
    pdf_output = generate_dashboard_pdf(user, user.history())

    audit_log('EXPORT', 'dashboard', resource_id=str(user.id), details={'format': 'pdf'})

    filename = f"healthflow_report_{datetime.now().strftime('%Y%m%d')}.pdf"
    return Response(
        pdf_output.getvalue(),
        mimetype='application/pdf',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )
