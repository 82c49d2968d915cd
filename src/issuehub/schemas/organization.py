"""Pydantic schemas for organizations and membership."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class OrgCreate(BaseModel):
    name: str = ""
    key: str = ""


class OrgAddMember(BaseModel):
    email: str = ""


class OrgRead(BaseModel):
    id: uuid.UUID
    name: str
    key: str
    owner_id: uuid.UUID
    member_ids: list[uuid.UUID]
    created_at: datetime

    model_config = {"from_attributes": True}
