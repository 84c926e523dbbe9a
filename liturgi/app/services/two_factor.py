"""
Two-Factor Authentication

TOTP (RFC 6238) secrets and single-use backup codes.
"""

import hashlib
import secrets
from typing import List, Optional, Tuple

import pyotp

BACKUP_CODE_COUNT = 10
ISSUER_NAME = "Liturgi"


def generate_secret() -> str:
    """160-bit base32 secret"""
    return pyotp.random_base32(length=32)


def provisioning_uri(secret: str, email: str) -> str:
    return pyotp.TOTP(secret).provisioning_uri(name=email, issuer_name=ISSUER_NAME)


def verify_totp(secret: Optional[str], code: str) -> bool:
    """Accepts the current code and one time-step either side."""
    if not secret or not code:
        return False
    return pyotp.TOTP(secret).verify(code.strip(), valid_window=1)


def hash_backup_code(code: str) -> str:
    return hashlib.sha256(code.strip().upper().encode()).hexdigest()


def generate_backup_codes(count: int = BACKUP_CODE_COUNT) -> Tuple[List[str], List[str]]:
    """
    Returns:
        (plain codes to show the user once, hashes to store)
    """
    codes = [secrets.token_hex(4).upper() for _ in range(count)]
    return codes, [hash_backup_code(code) for code in codes]


def consume_backup_code(
    stored_hashes: Optional[List[str]], code: str
) -> Tuple[bool, List[str]]:
    """
    Returns:
        (matched, remaining hashes). A matched code is removed.
    """
    remaining = list(stored_hashes or [])
    candidate = hash_backup_code(code)
    for stored in remaining:
        if secrets.compare_digest(stored, candidate):
            remaining.remove(stored)
            return True, remaining
    return False, remaining
