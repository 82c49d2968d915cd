"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Relationships, constraints, and indexes defined here.
Alembic auto-generates migrations by comparing these models to the actual DB.

Key concepts:
- UUID primary keys via the portable Uuid type (native UUID on PostgreSQL,
  CHAR(32) on SQLite — the test suite runs on SQLite)
- Organization membership is its own table, not an array column, so the
  membership check is one indexed lookup
- parent/assignee references on issues are weak: ids only, validated by
  the service layer at write time, no FOREIGN KEY constraint
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


# ══════════════════════════════════════════════════════════════
# Users
# ══════════════════════════════════════════════════════════════


class User(Base):
    """A human user. Can own and belong to many organizations.

    Learn: email is stored trimmed + lower-cased, so the unique
    constraint is effectively case-insensitive.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )


# ══════════════════════════════════════════════════════════════
# Organizations
# ══════════════════════════════════════════════════════════════


class Organization(Base):
    """Multi-tenant root. Every issue belongs to exactly one organization.

    Learn: key is a short code like "ACME". It is upper-cased before
    storage and before every comparison, so "acme" and "ACME" collide
    on the unique constraint.
    """

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    key: Mapped[str] = mapped_column(String(8), unique=True, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    # Relationships
    members: Mapped[list["OrganizationMember"]] = relationship(
        back_populates="organization",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def member_ids(self) -> list[uuid.UUID]:
        """Effective member set: member rows plus the owner."""
        ids = [m.user_id for m in self.members]
        if self.owner_id not in ids:
            ids.insert(0, self.owner_id)
        return ids


class OrganizationMember(Base):
    """Organization membership — links users to organizations.

    Learn: The owner gets a row here at creation time too. The
    unique constraint makes "add member" idempotent.
    """

    __tablename__ = "organization_members"
    __table_args__ = (
        UniqueConstraint("org_id", "user_id", name="uq_organization_members"),
        Index("idx_organization_members_user", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    org_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    organization: Mapped["Organization"] = relationship(back_populates="members")


# ══════════════════════════════════════════════════════════════
# Issues
# ══════════════════════════════════════════════════════════════


class Issue(Base):
    """A unit of work inside an organization.

    Learn: status is always one of the canonical values
    (todo, in_progress, in_review, done). Legacy "backlog" is
    normalized to in_review before it ever reaches this table.

    parent_issue_id and assignee_id are plain columns: the service
    checks "parent is in the same org" and "assignee is a member"
    on every write instead of relying on FK constraints.
    """

    __tablename__ = "issues"
    __table_args__ = (
        Index("idx_issues_org", "organization_id"),
        Index("idx_issues_parent", "parent_issue_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="todo")
    assignee_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    parent_issue_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
