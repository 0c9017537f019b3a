from .user import User
from .reading import BloodPressureReading
from .revoked_token import RevokedToken
