"""
JWT utilities and the auth gate dependencies.

Functions
---------
create_access_token(data: dict) -> str
    Creates a signed JWT access token with issue (`iat`) and expiration (`exp`) claims.
verify_token(token: str) -> dict | None
    Verify a JWT's signature & expiration and return its claims if valid.
get_current_user(...) -> CurrentUser
    FastAPI dependency: bearer token → user record attached to the request.
require_admin(...) -> CurrentUser
    FastAPI dependency: same as above, plus the admin role check.

Environment contract (from `settings`)
--------------------------------------
SECRET_KEY : str
    HMAC signing key for JWTs.
ALGORITHM : str
    JWT signing algorithm (e.g., "HS256").
ACCESS_TOKEN_EXPIRE_MINUTES : int
    Token lifetime window in minutes (1440 = 24 hours). There is no refresh.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from backend.api.models import CurrentUser
from backend.database.config.config import settings
from backend.database.core.funcs import get_user

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT access token.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (``sub`` = user id as string, ``email``).
    expires_delta : timedelta, optional
        Overrides the configured lifetime.

    Returns
    -------
    str
        Encoded JWT string.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=int(settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    issued_at = datetime.now(timezone.utc)
    encoding = data.copy()
    # exp / iat are NumericDates (seconds since epoch)
    encoding.update({
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_delta).timestamp()),
    })
    return jwt.encode(encoding, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify a JWT and return its claims.

    Returns
    ----------
    dict | None
        The decoded payload if the signature and expiration are valid,
        otherwise None (invalid signature, expired, malformed).
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Rejected access token: %s", e)
        return None


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """
    Auth gate: resolve the bearer token to a user and attach it to `request.state.user`.

    Raises
    ------
    HTTPException
        401 when the token is missing or its subject no longer exists,
        403 when the token is invalid or expired.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Token de acesso requerido")

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise HTTPException(status_code=403, detail="Token inválido")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=403, detail="Token inválido")

    user = get_user(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Usuário não encontrado")

    current_user = CurrentUser(
        id=user["id"],
        name=user["name"],
        email=user["email"],
        role=user["role"],
        is_admin=user["role"] == ADMIN_ROLE,
    )
    request.state.user = current_user
    return current_user


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Admin gate: 403 unless the caller holds the admin role."""
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Acesso negado")
    return current_user
