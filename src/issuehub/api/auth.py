"""Auth API — signup and login.

Learn: Both routes are open (no bearer token needed) and both answer
with {token, token_type, user}. The token is a 24h access JWT; there
is no refresh endpoint — clients log in again when it expires.
- POST /auth/signup → create account (201)
- POST /auth/login  → email/password → token
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from issuehub.db.engine import get_db
from issuehub.schemas.user import AuthResponse, LoginRequest, SignupRequest, UserRead
from issuehub.services.user_service import UserService

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(body: SignupRequest, svc: UserService = Depends(_svc)):
    """Create a new user account and log it in."""
    user, token = await svc.signup(
        email=body.email, name=body.name, password=body.password
    )
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: UserService = Depends(_svc)):
    """Login with email and password → JWT."""
    user, token = await svc.login(email=body.email, password=body.password)
    return AuthResponse(token=token, user=UserRead.model_validate(user))
