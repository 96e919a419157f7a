"""Security utilities for admin credential checks."""

import secrets

from passlib.context import CryptContext

from app.core.config import settings

pwd_context: CryptContext = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a plaintext password, e.g. to produce an ADMIN_PASS_HASH value."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def verify_admin_credentials(username: str, password: str) -> bool:
    """Check submitted admin credentials against configured values.

    A configured ``ADMIN_PASS_HASH`` takes precedence over the plaintext
    ``ADMIN_PASS``. With neither configured, every login is rejected.
    """
    if not secrets.compare_digest(username.strip().encode("utf-8"), settings.admin_user.encode("utf-8")):
        return False
    if settings.admin_pass_hash:
        return verify_password(password, settings.admin_pass_hash)
    if not settings.admin_pass:
        return False
    return secrets.compare_digest(password.encode("utf-8"), settings.admin_pass.encode("utf-8"))
