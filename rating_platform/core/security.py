"""
Security utilities: password hashing, credential verification and the
password strength predicate.
"""
import logging
import re
from typing import Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Return the bcrypt hash of *plain_password*."""
    logger.trace("Hashing user password")
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Return True if *plain_password* matches *hashed_password*.

    Accounts without a stored hash (federated sign-in) never verify.
    """
    logger.trace("Verifying password hash")
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


# ---------------------------------------------------------------------------
# Password rules
# ---------------------------------------------------------------------------

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 16
_SPECIAL_CHARS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def password_problems(password: str) -> list[str]:
    """Return the human readable rule violations for *password* (empty if ok)."""
    problems: list[str] = []
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        problems.append(
            f"Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters"
        )
    if not any(c.isupper() for c in password):
        problems.append("Password must contain at least one uppercase letter")
    if not _SPECIAL_CHARS.search(password):
        problems.append("Password must contain at least one special character")
    return problems
