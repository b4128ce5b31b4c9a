"""
Security utilities: JWT verification for tokens issued by the identity provider.

Sign-up, sign-in and token refresh live with the external provider. This
module only needs the shared secret to verify incoming bearer tokens;
``create_access_token`` exists for local tooling and the test-suite.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import logging

from jose import jwt

from toystock.core.config import settings
import toystock.core.logging_config  # noqa: F401  registers Logger.trace

logger = logging.getLogger(__name__)


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Build and sign an access token for *user_id*."""
    now = datetime.now(tz=timezone.utc)
    expires_delta = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + expires_delta,
    }
    if email:
        payload["email"] = email
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    logger.info("Issued access token for subject=%s", user_id)
    return token


def decode_token(token: str) -> dict:
    """
    Decode and verify a JWT.

    Raises:
        jose.JWTError: if the token is invalid or expired.
    """
    logger.trace("Decoding JWT token")
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
