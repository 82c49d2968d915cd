"""Current-user profile."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from issuehub.auth.dependencies import CurrentIdentity, get_current_user
from issuehub.db.engine import get_db
from issuehub.schemas.user import UserRead
from issuehub.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The authenticated user's profile. 404 if the account is gone."""
    return await UserService(db).get_user(identity.user_id)
