"""Pydantic schemas for issues.

Learn: Ids arrive as strings, not uuid.UUID, on purpose — a malformed
organization_id must become a 400 from validation.parse_id, raised
after the caller has been authenticated, rather than a 422 from
request parsing.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class IssueWrite(BaseModel):
    """Body for both create (POST) and full replace (PUT)."""

    organization_id: str = ""
    title: str = ""
    description: str = ""
    status: str = ""
    assignee_id: Optional[str] = None
    parent_issue_id: Optional[str] = None


class IssueRead(BaseModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    title: str
    description: str
    status: str
    assignee_id: Optional[uuid.UUID] = None
    parent_issue_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
