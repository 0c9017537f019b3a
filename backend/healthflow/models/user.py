"""
User model: local account plus profile.
"""
import logging
from datetime import datetime
from healthflow import db
from healthflow.utils.bmi import calculate_bmi, bmi_status, format_bmi

logger = logging.getLogger(__name__)


class User(db.Model):
    """
    A local HealthFlow account.
    Only a salted password hash is stored. BMI is derived from height and
    weight on every read and cannot be set directly.
    """
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Profile
    name = db.Column(db.String(200), nullable=True)
    age = db.Column(db.Integer, nullable=True)
    gender = db.Column(db.String(20), nullable=True)
    height_cm = db.Column(db.Float, nullable=True)
    weight_kg = db.Column(db.Float, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Most recently recorded first
    readings = db.relationship('BloodPressureReading', backref='user', lazy='dynamic',
                               order_by='BloodPressureReading.id.desc()',
                               cascade='all, delete-orphan')

    @property
    def bmi(self):
        if not self.height_cm or not self.weight_kg:
            return None
        return calculate_bmi(self.height_cm, self.weight_kg)

    @property
    def is_profile_complete(self) -> bool:
        return all([self.name, self.age, self.gender, self.height_cm, self.weight_kg])

    def history(self):
        """Readings as engine records, most recent first."""
        return [r.to_reading() for r in self.readings]

    def to_dict(self):
        bmi = self.bmi
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'age': self.age,
            'gender': self.gender,
            'height': self.height_cm,
            'weight': self.weight_kg,
            'bmi': format_bmi(bmi) if bmi is not None else None,
            'bmi_status': bmi_status(bmi) if bmi is not None else 'Not calculated',
            'profile_complete': self.is_profile_complete,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    @staticmethod
    def find_by_email(email: str):
        """Find a user by email, case-insensitively."""
        return User.query.filter_by(email=email.strip().lower()).first()

    def __repr__(self):
        return f'<User {self.id}>'
