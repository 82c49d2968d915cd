"""Membership oracle — read-only organization membership lookups.

Learn: "member" means the effective member set: every row in
organization_members for the org, plus the owner. Owners get a member
row at creation, but OrgAccess also accepts owner_id directly so
"owner is always a member" holds even for rows created outside the
service layer (e.g. seed scripts, manual SQL). Services use the
OrgAccess snapshot directly; is_member/is_owner are thin wrappers
over it for callers that only hold ids.

"owner" is a separate, stronger predicate used for owner-only actions.
Nothing here writes; calling any method twice in one request is safe.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from issuehub.db.models import Organization


@dataclass(frozen=True)
class OrgAccess:
    """A caller's standing in one organization, read in one go."""

    org_id: uuid.UUID
    user_id: uuid.UUID
    owner_id: uuid.UUID
    member_ids: frozenset[uuid.UUID]

    @property
    def is_owner(self) -> bool:
        return self.user_id == self.owner_id

    @property
    def is_member(self) -> bool:
        return self.is_owner or self.user_id in self.member_ids

    def has_member(self, user_id: uuid.UUID) -> bool:
        """Whether any given user is in the effective member set."""
        return user_id == self.owner_id or user_id in self.member_ids

    @classmethod
    def from_org(cls, org: Organization, user_id: uuid.UUID) -> "OrgAccess":
        return cls(
            org_id=org.id,
            user_id=user_id,
            owner_id=org.owner_id,
            member_ids=frozenset(org.member_ids),
        )


class MembershipOracle:
    """Answers membership and ownership questions for one request.

    Every answer is derived from load_access(), so OrgAccess is the
    only place the owner-or-member-row rule is written down.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_access(
        self, org_id: uuid.UUID, user_id: uuid.UUID
    ) -> Optional[OrgAccess]:
        """Load the org and the caller's standing. None if the org is absent."""
        org = await self.db.get(Organization, org_id)
        if org is None:
            return None
        return OrgAccess.from_org(org, user_id)

    async def is_member(self, org_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        access = await self.load_access(org_id, user_id)
        return access is not None and access.is_member

    async def is_owner(self, org_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        access = await self.load_access(org_id, user_id)
        return access is not None and access.is_owner
