"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
One token type only: an access token carrying the user id as `sub`
and an `exp` 24 hours after issuance. There is no refresh token and
no revocation list — expiry is the only lifecycle bound.

The secret defaults to settings.jwt_secret but can be passed in, which
is how tests prove that a token signed with one secret is rejected by
a verifier holding another.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from issuehub.config import settings


class TokenError(Exception):
    """Raised when token creation/verification fails."""


class SigningError(TokenError):
    """The signing call itself failed. Always an internal error."""


class InvalidToken(TokenError):
    """Bad signature, malformed token, or expired."""


class InvalidSubject(TokenError):
    """Signature is fine but `sub` is not a user id."""


def create_access_token(
    user_id: uuid.UUID | str,
    secret: Optional[str] = None,
    expires_hours: Optional[int] = None,
) -> str:
    """Create a JWT access token for a user."""
    now = datetime.now(timezone.utc)
    hours = settings.access_token_expire_hours if expires_hours is None else expires_hours
    payload = {
        "sub": str(user_id),
        "exp": now + timedelta(hours=hours),
        "iat": now,
    }
    try:
        return jwt.encode(
            payload,
            secret or settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
    except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
        raise SigningError(f"Token generation failed: {e}") from e


def verify_token(token: str, secret: Optional[str] = None) -> uuid.UUID:
    """Verify a JWT and return the user id it was issued for.

    Raises InvalidToken for anything wrong with the token itself and
    InvalidSubject when the subject is not a UUID.
    """
    try:
        payload = jwt.decode(
            token,
            secret or settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token has expired")
    except jwt.InvalidTokenError as e:
        raise InvalidToken(f"Invalid token: {e}")

    try:
        return uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise InvalidSubject("Invalid token subject")
