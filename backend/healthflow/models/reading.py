"""
Blood Pressure Reading model.
"""
from datetime import datetime
from healthflow import db
from healthflow.utils.bp_analysis import Reading, classify, status_class


class BloodPressureReading(db.Model):
    """
    Blood pressure reading model.
    Rows are never edited once written. History order is insertion order,
    newest first, regardless of the date and time the patient entered.
    """
    __tablename__ = 'blood_pressure_readings'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    systolic = db.Column(db.Integer, nullable=False)
    diastolic = db.Column(db.Integer, nullable=False)
    pulse = db.Column(db.Integer, nullable=False)

    reading_date = db.Column(db.Date, nullable=False)
    reading_time = db.Column(db.Time, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_reading(self) -> Reading:
        return Reading(
            systolic=self.systolic,
            diastolic=self.diastolic,
            pulse=self.pulse,
            date=self.reading_date,
            time=self.reading_time,
        )

    def to_dict(self):
        category = classify(self.systolic, self.diastolic)
        return {
            'id': self.id,
            'systolic': self.systolic,
            'diastolic': self.diastolic,
            'pulse': self.pulse,
            'date': self.reading_date.isoformat() if self.reading_date else None,
            'time': self.reading_time.strftime('%H:%M') if self.reading_time else None,
            'category': category.value,
            'status': status_class(category),
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<BloodPressureReading {self.id}: {self.systolic}/{self.diastolic}>'
