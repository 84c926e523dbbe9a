import hashlib
import secrets


def generate_token() -> str:
    """Unguessable URL-safe token (256 bits)"""
    return secrets.token_urlsafe(32)


def generate_invite_code() -> str:
    return secrets.token_hex(16)


def hash_token(token: str) -> str:
    """Tokens are stored as SHA-256 hashes, never in plain text"""
    return hashlib.sha256(token.encode()).hexdigest()
