# polity/domains/auth/dependencies.py
from typing import Any, Optional

import jwt
from fastapi import Depends, Header, HTTPException, status
from jwt import PyJWKClient

from polity.core.settings import settings
from polity.shared.exceptions import InvalidTokenError

from .types import JwtPayload

_jwks_client = PyJWKClient(settings.JWKS_URL) if settings.JWKS_URL else None


def _decode_options() -> dict[str, Any]:
    if settings.JWT_AUDIENCE:
        return {"audience": settings.JWT_AUDIENCE}
    return {"options": {"verify_aud": False}}


def decode_access_token(token: str) -> JwtPayload:
    """
    Verifies a JWT access token. Uses JWT_SECRET for development mode if
    available, otherwise falls back to the JWKS endpoint for production.
    """
    # Development mode: prefer JWT_SECRET if available
    if settings.JWT_SECRET:
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=["HS256"],
                **_decode_options(),
            )
            return JwtPayload(**dict(payload))
        except jwt.PyJWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
            )

    # Production mode: use the JWKS key set
    if not _jwks_client:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication not configured",
        )
    try:
        signing_key = _jwks_client.get_signing_key_from_jwt(token).key
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=["RS256"],
            **_decode_options(),
        )
        return JwtPayload(**dict(payload))
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_optional_user_id(authorization: str = Header(None)) -> Optional[str]:
    """
    Returns the user ID from the `sub` claim of a bearer token, or None when
    no token was sent. A token that is present but invalid is still rejected.
    """
    if not authorization:
        return None
    if not authorization.startswith("Bearer "):
        raise InvalidTokenError()

    token = authorization.split(" ", 1)[1]
    payload = decode_access_token(token)
    return payload.sub or None


def get_current_user_id(
    user_id: Optional[str] = Depends(get_optional_user_id),
) -> str:
    """Requires an authenticated user and returns its ID."""
    if not user_id:
        raise InvalidTokenError()
    return user_id
