"""Issue API routes.

Learn: These routes are the HTTP interface to IssueService. The
service does all membership checks and validation; routes only
translate HTTP to service calls.

Key patterns:
- organization_id is a required query param for list and search
- PUT is a full replace (title, description, status all required)
- /issues/search is declared before /issues/{issue_id} so "search"
  is never parsed as an id
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from issuehub.auth.dependencies import CurrentIdentity, get_current_user
from issuehub.db.engine import get_db
from issuehub.schemas.issue import IssueRead, IssueWrite
from issuehub.services.issue_service import IssueService
from issuehub.validation import parse_id

router = APIRouter(prefix="/issues")


def _svc(db: AsyncSession = Depends(get_db)) -> IssueService:
    return IssueService(db)


@router.get("", response_model=list[IssueRead])
async def list_issues(
    organization_id: Optional[str] = Query(None),
    parent_issue_id: Optional[str] = Query(None, description="Only children of this issue"),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: IssueService = Depends(_svc),
):
    return await svc.list_issues(identity, organization_id, parent_issue_id)


@router.get("/search", response_model=list[IssueRead])
async def search_issues(
    q: Optional[str] = Query(None, description="Text to match in title or description"),
    organization_id: Optional[str] = Query(None),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: IssueService = Depends(_svc),
):
    return await svc.search_issues(identity, q, organization_id)


@router.post("", response_model=IssueRead, status_code=201)
async def create_issue(
    body: IssueWrite,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: IssueService = Depends(_svc),
):
    return await svc.create_issue(identity, body)


@router.get("/{issue_id}", response_model=IssueRead)
async def get_issue(
    issue_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: IssueService = Depends(_svc),
):
    return await svc.get_issue(identity, parse_id(issue_id))


@router.put("/{issue_id}", response_model=IssueRead)
async def update_issue(
    issue_id: str,
    body: IssueWrite,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: IssueService = Depends(_svc),
):
    return await svc.update_issue(identity, parse_id(issue_id), body)


@router.delete("/{issue_id}")
async def delete_issue(
    issue_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: IssueService = Depends(_svc),
):
    await svc.delete_issue(identity, parse_id(issue_id))
    return {"ok": True}
