"""Issue service — create, read, update, delete, list, and search.

Learn: This is the one canonical write path for issues. Create and
update share the same validation and cross-reference checks:

    1. the caller is a member of the issue's organization
    2. title/description are non-blank, status normalizes
       (backlog → in_review), ids parse
    3. assignee (if any) is a member of the organization
    4. parent (if any) is an issue of the same organization

Parent links are not checked for cycles; only self-parenting is
rejected.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from issuehub.auth.dependencies import CurrentIdentity
from issuehub.auth.membership import MembershipOracle, OrgAccess
from issuehub.auth.policies import Action, authorize, check_assignee
from issuehub.config import settings
from issuehub.db.models import Issue
from issuehub.errors import BadRequest, NotFound
from issuehub.schemas.issue import IssueWrite
from issuehub.validation import (
    TITLE_MAX_LENGTH,
    normalize_status,
    parse_id,
    parse_optional_id,
    require_text,
)

logger = structlog.get_logger()


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class IssueService:
    """Business logic for issue CRUD scoped to organization membership."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.membership = MembershipOracle(db)

    # ─── Helpers ────────────────────────────────────────

    async def _authorize_org(
        self, identity: CurrentIdentity, org_id: uuid.UUID, action: Action
    ) -> OrgAccess:
        access = await self.membership.load_access(org_id, identity.user_id)
        authorize(action, access)
        return access

    async def _require_issue(
        self, identity: CurrentIdentity, issue_id: uuid.UUID, action: Action
    ) -> tuple[Issue, OrgAccess]:
        issue = await self.db.get(Issue, issue_id)
        if issue is None:
            raise NotFound("Issue not found")
        access = await self._authorize_org(identity, issue.organization_id, action)
        return issue, access

    @staticmethod
    def _validate_fields(body: IssueWrite) -> dict:
        require_text(body.status, "status")
        return {
            "title": require_text(body.title, "title", TITLE_MAX_LENGTH),
            "description": require_text(body.description, "description"),
            "status": normalize_status(body.status),
            "assignee_id": parse_optional_id(body.assignee_id, "assignee_id"),
            "parent_issue_id": parse_optional_id(
                body.parent_issue_id, "parent_issue_id"
            ),
        }

    async def _check_references(self, access: OrgAccess, fields: dict) -> None:
        check_assignee(access, fields["assignee_id"])

        parent_id = fields["parent_issue_id"]
        if parent_id is not None:
            result = await self.db.execute(
                select(Issue.id).where(
                    Issue.id == parent_id,
                    Issue.organization_id == access.org_id,
                )
            )
            if result.first() is None:
                raise BadRequest("parent_issue_id not found in organization")

    # ─── Create ─────────────────────────────────────────

    async def create_issue(self, identity: CurrentIdentity, body: IssueWrite) -> Issue:
        org_id = parse_id(body.organization_id, "organization_id")
        access = await self._authorize_org(identity, org_id, Action.CREATE_ISSUE)
        fields = self._validate_fields(body)
        await self._check_references(access, fields)

        issue = Issue(organization_id=org_id, **fields)
        self.db.add(issue)
        await self.db.commit()
        await self.db.refresh(issue)

        logger.info(
            "issue.created",
            issue_id=str(issue.id),
            org_id=str(org_id),
            status=issue.status,
        )
        return issue

    # ─── Read ───────────────────────────────────────────

    async def get_issue(self, identity: CurrentIdentity, issue_id: uuid.UUID) -> Issue:
        issue, _ = await self._require_issue(identity, issue_id, Action.READ_ISSUE)
        return issue

    async def list_issues(
        self,
        identity: CurrentIdentity,
        organization_id: Optional[str],
        parent_issue_id: Optional[str] = None,
    ) -> list[Issue]:
        """Issues of one organization, newest first, optionally one parent's children."""
        org_id = parse_id(organization_id, "organization_id")
        await self._authorize_org(identity, org_id, Action.LIST_ISSUES)
        parent_id = parse_optional_id(parent_issue_id, "parent_issue_id")

        query = select(Issue).where(Issue.organization_id == org_id)
        if parent_id is not None:
            query = query.where(Issue.parent_issue_id == parent_id)
        result = await self.db.execute(query.order_by(Issue.created_at.desc()))
        return list(result.scalars().all())

    async def search_issues(
        self,
        identity: CurrentIdentity,
        q: Optional[str],
        organization_id: Optional[str],
    ) -> list[Issue]:
        """Case-insensitive substring search on title and description."""
        org_id = parse_id(organization_id, "organization_id")
        await self._authorize_org(identity, org_id, Action.SEARCH_ISSUES)

        term = (q or "").strip()
        if not term:
            return []

        pattern = f"%{_escape_like(term)}%"
        result = await self.db.execute(
            select(Issue)
            .where(
                Issue.organization_id == org_id,
                or_(
                    Issue.title.ilike(pattern, escape="\\"),
                    Issue.description.ilike(pattern, escape="\\"),
                ),
            )
            .order_by(Issue.created_at.desc())
            .limit(settings.search_limit)
        )
        return list(result.scalars().all())

    # ─── Update ─────────────────────────────────────────

    async def update_issue(
        self, identity: CurrentIdentity, issue_id: uuid.UUID, body: IssueWrite
    ) -> Issue:
        """Full replace of an issue's editable fields. Orgs cannot change."""
        issue, access = await self._require_issue(
            identity, issue_id, Action.UPDATE_ISSUE
        )
        org_id = parse_id(body.organization_id, "organization_id")
        if org_id != issue.organization_id:
            raise BadRequest("Issues cannot be moved between organizations")
        fields = self._validate_fields(body)
        if fields["parent_issue_id"] == issue.id:
            raise BadRequest("An issue cannot be its own parent")
        await self._check_references(access, fields)

        for name, value in fields.items():
            setattr(issue, name, value)
        await self.db.commit()
        await self.db.refresh(issue)

        logger.info("issue.updated", issue_id=str(issue.id), status=issue.status)
        return issue

    # ─── Delete ─────────────────────────────────────────

    async def delete_issue(self, identity: CurrentIdentity, issue_id: uuid.UUID) -> None:
        """Delete one issue. Children keep their (now dangling) parent id."""
        issue, _ = await self._require_issue(identity, issue_id, Action.DELETE_ISSUE)
        await self.db.delete(issue)
        await self.db.commit()
        logger.info(
            "issue.deleted",
            issue_id=str(issue_id),
            org_id=str(issue.organization_id),
        )
