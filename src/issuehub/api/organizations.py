"""Organization API routes.

Learn: FastAPI routers define HTTP endpoints. Each route function
receives dependencies (db session, caller identity) via Depends() and
delegates to the service layer. Path ids are taken as strings and
parsed with validation.parse_id, so a malformed id is a 400 with the
same message shape as every other validation failure.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from issuehub.auth.dependencies import CurrentIdentity, get_current_user
from issuehub.db.engine import get_db
from issuehub.schemas.organization import OrgAddMember, OrgCreate, OrgRead
from issuehub.schemas.user import UserRead
from issuehub.services.organization_service import OrganizationService
from issuehub.validation import parse_id

router = APIRouter(prefix="/organizations")


def _svc(db: AsyncSession = Depends(get_db)) -> OrganizationService:
    return OrganizationService(db)


@router.get("", response_model=list[OrgRead])
async def list_orgs(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: OrganizationService = Depends(_svc),
):
    return await svc.list_orgs(identity)


@router.post("", response_model=OrgRead, status_code=201)
async def create_org(
    body: OrgCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: OrganizationService = Depends(_svc),
):
    """Create an organization owned by the caller."""
    return await svc.create_org(identity, name=body.name, key=body.key)


@router.get("/{org_id}", response_model=OrgRead)
async def get_org(
    org_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: OrganizationService = Depends(_svc),
):
    return await svc.get_org(identity, parse_id(org_id))


@router.delete("/{org_id}")
async def delete_org(
    org_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: OrganizationService = Depends(_svc),
):
    """Owner-only. Also deletes every issue in the organization."""
    await svc.delete_org(identity, parse_id(org_id))
    return {"ok": True}


# ─── Members ────────────────────────────────────────────

@router.post("/{org_id}/members", response_model=OrgRead)
async def add_member(
    org_id: str,
    body: OrgAddMember,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: OrganizationService = Depends(_svc),
):
    """Owner-only. Adds an existing user by email."""
    return await svc.add_member(identity, parse_id(org_id), email=body.email)


@router.get("/{org_id}/members", response_model=list[UserRead])
async def list_members(
    org_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: OrganizationService = Depends(_svc),
):
    return await svc.list_members(identity, parse_id(org_id))
