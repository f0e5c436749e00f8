"""
Authentication Dependency for FastAPI.

- Extracts and validates the JWT from the Authorization header (Bearer scheme)
- Returns AuthUser (user id from `sub`, plus `email`) for route handlers
- Raises HTTPException 401 if unauthorized

The realtime endpoint has no headers to speak of, so it passes the token as a
query parameter and calls decode_service_token() directly.

Config needed (from friendchat.config.settings):
- SERVICE_AUTH_SECRET
- SERVICE_AUTH_ISSUER
- SERVICE_AUTH_AUDIENCE
"""

import jwt
from dataclasses import dataclass
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from friendchat.domain.value_objects.user_email import UserEmail
from friendchat.domain.value_objects.user_id import UserId
from friendchat.config.settings import Config


@dataclass
class AuthUser:
    id: UserId
    email: UserEmail

    def __post_init__(self):
        if not self.id or not self.email:
            raise ValueError("AuthUser must have both id and email defined.")


class InvalidTokenClaims(Exception):
    """Token decoded but does not identify a user."""


security = HTTPBearer()


def decode_service_token(token: str) -> AuthUser:
    """
    Decode an HS256 service token into an AuthUser.

    Raises:
        jwt.InvalidTokenError: bad signature, expired, wrong aud/iss
        InvalidTokenClaims: `sub` or `email` missing or malformed
    """
    claims = jwt.decode(
        token,
        Config.SERVICE_AUTH_SECRET,
        algorithms=["HS256"],
        audience=Config.SERVICE_AUTH_AUDIENCE,
        issuer=Config.SERVICE_AUTH_ISSUER,
        options={"require": ["exp", "iat", "aud", "iss", "sub"]},
    )

    user_id = claims.get("sub")
    email = claims.get("email")
    if not user_id or not email:
        raise InvalidTokenClaims("Missing required claims in token")

    try:
        return AuthUser(id=UserId(user_id), email=UserEmail(email))
    except ValueError as e:
        raise InvalidTokenClaims(f"Invalid token claims: {e}") from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthUser:
    """
    Extract and validate user from JWT token.

    Raises:
        HTTPException 401 if token is invalid, expired, or missing required claims
    """
    try:
        return decode_service_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )
    except InvalidTokenClaims as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
