"""Security utilities: API token checks and customer password hashing."""

import base64
import hashlib
import hmac
import secrets

PASSWORD_ALGORITHM = "pbkdf2_sha256"
PASSWORD_ITERATIONS = 260_000


def token_matches(authorization: str | None, api_token: str) -> bool:
    """Check an ``Authorization`` header against the configured API token.

    Args:
        authorization: Raw header value, e.g. ``"Bearer abc"``
        api_token: Token from configuration

    Returns:
        True if the header is exactly ``Bearer <api_token>``
    """
    if not authorization or not api_token:
        return False
    expected = f"Bearer {api_token}"
    return hmac.compare_digest(authorization.encode(), expected.encode())


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("utf-8").rstrip("=")


def hash_password(password: str, salt: str | None = None) -> str:
    """Hash a password with PBKDF2-SHA256 and a random salt.

    Returns:
        ``pbkdf2_sha256$<iterations>$<salt>$<hash>``
    """
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), PASSWORD_ITERATIONS
    )
    return f"{PASSWORD_ALGORITHM}${PASSWORD_ITERATIONS}${salt}${_b64(digest)}"


def verify_password(password: str, encoded: str | None) -> bool:
    """Constant-time check of ``password`` against a ``hash_password`` value."""
    if not encoded:
        return False
    try:
        algorithm, iterations, salt, expected = encoded.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != PASSWORD_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), rounds
    )
    return hmac.compare_digest(_b64(digest), expected)
