"""User service — signup, login, and profile lookup.

Learn: Signup and login are the only open endpoints that touch the
database. Both return a freshly issued access token alongside the
user, so the client can go straight to authenticated calls.

Emails are normalized (trimmed, lower-cased) on every path, so the
same person can sign up as "Bob@x.io" and be invited as "bob@x.io".
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from issuehub.auth.jwt import SigningError, create_access_token
from issuehub.auth.password import hash_password, verify_password
from issuehub.db.models import User
from issuehub.errors import BadRequest, InternalError, InvalidCredential, NotFound
from issuehub.validation import (
    NAME_MAX_LENGTH,
    is_blank,
    normalize_email,
    require_text,
    validate_password,
)

logger = structlog.get_logger()


def issue_token_for(user: User) -> str:
    """Issue an access token, mapping signing failures to InternalError."""
    try:
        return create_access_token(user.id)
    except SigningError as e:
        logger.error("auth.token_signing_failed", user_id=str(user.id), error=str(e))
        raise InternalError("Token generation failed") from e


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    # ─── Signup ─────────────────────────────────────────

    async def signup(self, email: str, name: str, password: str) -> tuple[User, str]:
        """Create an account and return (user, token)."""
        if is_blank(email) or is_blank(name) or is_blank(password):
            raise BadRequest("All fields are required")
        email = normalize_email(email)
        name = require_text(name, "name", NAME_MAX_LENGTH)
        password = validate_password(password)

        if await self.get_by_email(email) is not None:
            raise BadRequest("Email already exists")

        user = User(email=email, name=name, password_hash=hash_password(password))
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email.
            await self.db.rollback()
            raise BadRequest("Email already exists")
        await self.db.refresh(user)

        logger.info("auth.signup", user_id=str(user.id))
        return user, issue_token_for(user)

    # ─── Login ──────────────────────────────────────────

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and return (user, token)."""
        if is_blank(email) or is_blank(password):
            raise BadRequest("Email and password are required")

        user = await self.get_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            logger.info("auth.login_failed")
            raise InvalidCredential("Invalid credentials")

        logger.info("auth.login", user_id=str(user.id))
        return user, issue_token_for(user)
