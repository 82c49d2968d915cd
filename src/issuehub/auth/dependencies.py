"""Identity extraction — the single authentication choke point.

Learn: extract_user_id() is a pure function over the raw header value,
so the whole failure table is unit-testable without a transport:

    header missing or blank       → MissingCredential
    not "<scheme> <token>"        → MalformedCredential
    scheme is not Bearer          → InvalidCredential
    token bad / expired / bad sub → InvalidCredential

get_current_user() is the FastAPI wrapper. api/__init__.py mounts it on
every protected router, so a failed extraction short-circuits the
request before any handler, validation, or storage access runs.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Header

from issuehub.auth.jwt import TokenError, verify_token
from issuehub.errors import InvalidCredential, MalformedCredential, MissingCredential

logger = structlog.get_logger()

BEARER_SCHEME = "bearer"


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated caller, passed explicitly into every service call."""

    user_id: uuid.UUID


def extract_user_id(
    authorization: Optional[str],
    secret: Optional[str] = None,
) -> uuid.UUID:
    """Resolve the user id from an Authorization header value."""
    if authorization is None or not authorization.strip():
        raise MissingCredential()

    parts = authorization.strip().split(" ")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedCredential()

    scheme, token = parts
    if scheme.lower() != BEARER_SCHEME:
        raise InvalidCredential("Expected Bearer token")

    try:
        return verify_token(token, secret=secret)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=type(e).__name__)
        raise InvalidCredential(str(e)) from e


async def get_current_user(
    authorization: Optional[str] = Header(None),
) -> CurrentIdentity:
    """FastAPI dependency — 401 unless a valid bearer token is present."""
    return CurrentIdentity(user_id=extract_user_id(authorization))
