"""
Plain-text bearer token format shared by the token adapters.

A token is "<record id>|<secret>". Only the SHA-256 digest of the secret
is stored, so a leaked token table cannot be replayed. The record id
lets the store find the row without scanning digests.
"""

import hashlib
import secrets

SECRET_BYTES = 30  # 40 url-safe characters


def generate_secret() -> str:
    """Generate the random part of a new token."""
    return secrets.token_urlsafe(SECRET_BYTES)


def digest(secret: str) -> str:
    """SHA-256 hex digest stored in place of the secret."""
    return hashlib.sha256(secret.encode()).hexdigest()


def format_token(record_id: int, secret: str) -> str:
    return f"{record_id}|{secret}"


def parse_token(token: str) -> tuple[int, str] | None:
    """
    Split a presented token into (record id, secret).

    Returns:
        None if the token is not of the form "<digits>|<non-empty secret>"
    """
    record_id, sep, secret = token.partition("|")
    if not sep or not secret:
        return None
    if not (record_id.isascii() and record_id.isdigit()) or len(record_id) > 18:
        return None
    return int(record_id), secret


def digest_matches(secret: str, stored_digest: str) -> bool:
    """Constant-time comparison of a presented secret against its stored digest."""
    return secrets.compare_digest(digest(secret).encode(), stored_digest.encode())
