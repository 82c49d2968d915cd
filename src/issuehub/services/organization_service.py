"""Organization service — tenants, owners, and members.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. Every method
takes the caller's CurrentIdentity explicitly and runs the same
sequence: load → authorize → validate → cross-check → mutate.

Disclosure rules differ on purpose:
- get_org filters by membership, so a stranger gets NotFound
- add_member / delete_org / list_members report NotFound only when
  the org is really absent, and Forbidden when the caller lacks rights
"""

import uuid

import structlog
from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from issuehub.auth.dependencies import CurrentIdentity
from issuehub.auth.membership import MembershipOracle, OrgAccess
from issuehub.auth.policies import Action, authorize
from issuehub.db.models import Issue, Organization, OrganizationMember, User
from issuehub.errors import BadRequest, Forbidden, NotFound
from issuehub.validation import (
    NAME_MAX_LENGTH,
    normalize_email,
    normalize_org_key,
    require_text,
)

logger = structlog.get_logger()


class OrganizationService:
    """Business logic for organization management."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.membership = MembershipOracle(db)

    async def _require_access(
        self, org_id: uuid.UUID, identity: CurrentIdentity
    ) -> tuple[Organization, OrgAccess]:
        org = await self.db.get(Organization, org_id)
        if org is None:
            raise NotFound("Organization not found")
        return org, OrgAccess.from_org(org, identity.user_id)

    # ─── Create ─────────────────────────────────────────

    async def create_org(
        self, identity: CurrentIdentity, name: str, key: str
    ) -> Organization:
        """Create an organization. The caller becomes owner and first member."""
        authorize(Action.CREATE_ORGANIZATION)
        name = require_text(name, "name", NAME_MAX_LENGTH)
        key = normalize_org_key(key)

        existing = await self.db.execute(
            select(Organization.id).where(Organization.key == key)
        )
        if existing.first() is not None:
            raise BadRequest("Organization key already exists")

        org = Organization(name=name, key=key, owner_id=identity.user_id)
        org.members = [OrganizationMember(user_id=identity.user_id)]
        self.db.add(org)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise BadRequest("Organization key already exists")
        await self.db.refresh(org)

        logger.info(
            "organization.created",
            org_id=str(org.id),
            key=org.key,
            owner_id=str(identity.user_id),
        )
        return org

    # ─── Read ───────────────────────────────────────────

    async def list_orgs(self, identity: CurrentIdentity) -> list[Organization]:
        """Organizations the caller belongs to, sorted by name."""
        member_of = select(OrganizationMember.org_id).where(
            OrganizationMember.user_id == identity.user_id
        )
        result = await self.db.execute(
            select(Organization)
            .where(
                or_(
                    Organization.owner_id == identity.user_id,
                    Organization.id.in_(member_of),
                )
            )
            .order_by(Organization.name)
        )
        return list(result.scalars().all())

    async def get_org(
        self, identity: CurrentIdentity, org_id: uuid.UUID
    ) -> Organization:
        """Membership-filtered lookup: non-members see NotFound, not Forbidden."""
        org = await self.db.get(Organization, org_id)
        if org is None:
            raise NotFound("Organization not found")
        try:
            authorize(Action.READ_ORGANIZATION, OrgAccess.from_org(org, identity.user_id))
        except Forbidden:
            raise NotFound("Organization not found")
        return org

    async def list_members(
        self, identity: CurrentIdentity, org_id: uuid.UUID
    ) -> list[User]:
        org, access = await self._require_access(org_id, identity)
        authorize(Action.LIST_MEMBERS, access)

        result = await self.db.execute(
            select(User).where(User.id.in_(org.member_ids)).order_by(User.name)
        )
        return list(result.scalars().all())

    # ─── Members ────────────────────────────────────────

    async def add_member(
        self, identity: CurrentIdentity, org_id: uuid.UUID, email: str
    ) -> Organization:
        """Owner-only: add an existing user, found by email. Idempotent."""
        org, access = await self._require_access(org_id, identity)
        authorize(Action.ADD_MEMBER, access)
        email = normalize_email(email)

        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalars().first()
        if user is None:
            raise BadRequest("User not found")

        if not await self.membership.is_member(org.id, user.id):
            org.members.append(OrganizationMember(user_id=user.id))
            try:
                await self.db.commit()
            except IntegrityError:
                # A concurrent request added the same user first.
                await self.db.rollback()
                await self.db.refresh(org)
                return org
            await self.db.refresh(org)
            logger.info(
                "organization.member_added",
                org_id=str(org.id),
                user_id=str(user.id),
            )
        return org

    # ─── Delete ─────────────────────────────────────────

    async def delete_org(self, identity: CurrentIdentity, org_id: uuid.UUID) -> None:
        """Owner-only: delete the org, its members, and all of its issues.

        Learn: All three deletes run in the session's single transaction,
        so a failure part-way leaves the organization and its issues
        exactly as they were.
        """
        org, access = await self._require_access(org_id, identity)
        authorize(Action.DELETE_ORGANIZATION, access)

        try:
            issues = await self.db.execute(
                delete(Issue).where(Issue.organization_id == org_id)
            )
            await self.db.execute(
                delete(OrganizationMember).where(OrganizationMember.org_id == org_id)
            )
            await self.db.execute(delete(Organization).where(Organization.id == org_id))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "organization.deleted",
            org_id=str(org_id),
            issues_deleted=issues.rowcount,
        )
