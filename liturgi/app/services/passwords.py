"""
Password Hashing

Argon2id with the cost parameters from ApplicationConfig.
"""

import re
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from config import ApplicationConfig

_hasher = PasswordHasher(
    time_cost=ApplicationConfig.ARGON2_TIME_COST,
    memory_cost=ApplicationConfig.ARGON2_MEMORY_COST,
    parallelism=ApplicationConfig.ARGON2_PARALLELISM,
)

# Used to equalize timing when the account does not exist
_DUMMY_HASH = _hasher.hash("liturgi-dummy-password")


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: Optional[str], password: str) -> bool:
    """Timing-safe check. Malformed or missing hashes verify as False."""
    if not password_hash:
        burn_verification(password)
        return False
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def burn_verification(password: str) -> None:
    """Spend the same time as a real verification for unknown accounts."""
    verify_password(_DUMMY_HASH, password)


def validate_password(password: str) -> Optional[str]:
    """
    Check the password policy.

    Returns:
        None when valid, otherwise a message naming the first failed rule
    """
    if len(password) < 8:
        return "Password must be at least 8 characters"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[0-9]", password):
        return "Password must contain at least one number"
    return None
