"""
GitHub App authentication helpers.

GitHub App endpoints (``/app``, ``/app/installations``...) require a short
lived JSON Web Token signed with the app's private key instead of a user
token.
"""

import base64
import binascii
import time

import jwt
import structlog

logger = structlog.get_logger(__name__)


def decode_private_key(private_key_base64: str) -> str:
    """
    Decodes a base64-encoded PEM private key.

    Returns:
        The decoded private key as a string.
    """
    try:
        return base64.b64decode(private_key_base64, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        logger.error("private_key_decode_failed", error=str(e))
        raise ValueError("Invalid private key format. Expected base64-encoded PEM key.") from e


def generate_app_jwt(app_id: str, private_key: str, expires_in: int = 60) -> str:
    """Generates a JSON Web Token (JWT) to authenticate as the GitHub App."""
    now = int(time.time())
    payload = {
        "iat": now,
        "exp": now + expires_in,
        "iss": app_id,
    }
    return jwt.encode(payload, private_key, algorithm="RS256")
