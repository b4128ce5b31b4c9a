"""
FastAPI dependency injection helpers for the database, the authenticated
user and the per-user stock list session.
"""
from typing import Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
import logging

from toystock.core.security import decode_token
from toystock.db.database import get_db
from toystock.models.user import UserContext
from toystock.services.stock_list import StockListSession, sessions

logger = logging.getLogger(__name__)

# Tokens are issued by the external identity provider.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


# ---------------------------------------------------------------------------
# DB dependency
# ---------------------------------------------------------------------------

def db_dependency() -> Generator:
    """Yield a database connection for the duration of a request."""
    logger.trace("Creating database dependency connection")
    with get_db() as conn:
        yield conn


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

def get_current_user(token: str = Depends(oauth2_scheme)) -> UserContext:
    """
    Decode the Bearer access token and return the caller's UserContext.
    Raises HTTP 401 if the token is invalid, expired, or has no subject.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token)
    except JWTError:
        logger.warning("Failed to decode access token", exc_info=True)
        raise credentials_exception
    if payload.get("type", "access") != "access":
        logger.warning("Access token type mismatch")
        raise credentials_exception
    if not payload.get("sub"):
        logger.warning("Access token missing subject")
        raise credentials_exception

    user = UserContext.from_claims(payload)
    logger.info("Authenticated user id=%s", user.id)
    return user


def get_stock_session(
    current_user: UserContext = Depends(get_current_user),
) -> StockListSession:
    """Return the stock list session owned by the current user."""
    return sessions.get(current_user)
