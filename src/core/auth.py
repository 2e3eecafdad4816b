"""
Shopper authentication.

Accounts, passwords and sessions live in Supabase Auth; this service only
verifies the access token it issues and turns it into a ShopperUser for the
cart, wishlist and order endpoints.

Usage:
    from core.auth import require_auth, ShopperUser

    @router.get("/api/cart")
    def get_cart(user: ShopperUser = Depends(require_auth)):
        ...
"""

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config.settings import get_settings
from core.logging import bind_context


security = HTTPBearer(
    scheme_name="Supabase JWT",
    description="Access token from Supabase Auth (sign up / sign in happen there).",
    auto_error=False,
)


@dataclass
class ShopperUser:
    """
    Authenticated shopper.

    Attributes:
        id: User UUID (from the 'sub' claim)
        email: Email address, when the token carries one
        name: Display name from user_metadata, when present
        role: Postgres role (usually 'authenticated')
    """
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str = "authenticated"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_jwt(token: str) -> dict:
    """
    Verify and decode a Supabase access token.

    Raises:
        HTTPException: 401 if the token is invalid, expired, or malformed
    """
    settings = get_settings()
    if not settings.supabase_jwt_secret:
        raise _unauthorized("Authentication is not configured")

    try:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidAudienceError:
        raise _unauthorized("Invalid token audience")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {e}")


def extract_user(payload: dict) -> ShopperUser:
    """Build a ShopperUser from a verified token payload."""
    metadata = payload.get("user_metadata") or {}
    return ShopperUser(
        id=payload["sub"],
        email=payload.get("email"),
        name=metadata.get("name") or metadata.get("full_name"),
        role=payload.get("role", "authenticated"),
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[ShopperUser]:
    """
    Resolve the shopper if a bearer token is present, otherwise None.
    """
    if not credentials or not credentials.credentials:
        return None

    user = extract_user(verify_jwt(credentials.credentials))
    bind_context(user_id=user.id)
    return user


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> ShopperUser:
    """
    FastAPI dependency that requires authentication.

    Raises 401 if no valid token is provided.
    """
    if not credentials:
        raise _unauthorized("Authorization header required")

    if not credentials.credentials:
        raise _unauthorized("Token required")

    user = extract_user(verify_jwt(credentials.credentials))
    bind_context(user_id=user.id)
    return user
