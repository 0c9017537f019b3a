from .audit_logger import audit_log, audit_phi_access
from .auth import generate_token, token_required
from .credentials import hash_password, verify_password
from .validators import validate_credentials, validate_profile, validate_reading
