"""
Seed script that creates a demo account with a few weeks of readings.
Run from backend/: python seed.py
"""
from datetime import date, time, timedelta

from healthflow import create_app, db
from healthflow.models import User, BloodPressureReading
from healthflow.utils.credentials import hash_password

DEMO_EMAIL = 'demo@example.com'
DEMO_PASSWORD = 'demo-password'

# Oldest first; inserted in this order so the last one is the latest reading
DEMO_READINGS = [
    (142, 92, 78),
    (138, 90, 76),
    (136, 88, 75),
    (130, 84, 74),
    (128, 82, 72),
    (124, 79, 70),
]


def seed():
    app = create_app()
    with app.app_context():
        db.create_all()

        if User.find_by_email(DEMO_EMAIL):
            print(f"  Demo user {DEMO_EMAIL} already exists, skipping.")
            return

        user = User(email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD))
        user.name = 'Demo Patient'
        user.age = 45
        user.gender = 'female'
        user.height_cm = 165
        user.weight_kg = 68
        db.session.add(user)
        db.session.flush()

        start = date.today() - timedelta(days=len(DEMO_READINGS) * 3)
        for i, (systolic, diastolic, pulse) in enumerate(DEMO_READINGS):
            db.session.add(BloodPressureReading(
                user_id=user.id,
                systolic=systolic,
                diastolic=diastolic,
                pulse=pulse,
                reading_date=start + timedelta(days=i * 3),
                reading_time=time(8, 0),
            ))
        db.session.commit()
        print(f"  Created demo user (id={user.id}, email={DEMO_EMAIL}) "
              f"with {len(DEMO_READINGS)} readings.")

        print("\nDone.")


if __name__ == "__main__":
    seed()
