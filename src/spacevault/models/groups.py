"""Group and GroupMembership models.

Provides ``GroupBase`` / ``GroupMembershipBase`` (non-table) and the concrete
``Group`` / ``GroupMembership`` tables.  Subclass a base with ``table=True``
and a custom ``__tablename__`` to use different table names, but keep the
private-group partial unique index: provisioning relies on it.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, DateTime, Index, UniqueConstraint, text
from sqlmodel import Field, SQLModel


class GroupKind(str, Enum):
    """Access-scope kind of a group."""

    REGULAR = "regular"
    PRIVATE = "private"


class MembershipStatus(str, Enum):
    """Lifecycle state of a group membership."""

    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"


class GroupBase(SQLModel):
    """Base fields for a group. Subclass with ``table=True`` for a concrete table."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    workplace_id: str = Field(index=True)
    name: str = Field(default="")
    description: str | None = Field(default=None)
    kind: str = Field(default=GroupKind.REGULAR.value, index=True)
    created_by: str = Field(index=True)
    is_active: bool = Field(default=True)
    settings: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    group_metadata: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )

    @property
    def is_private(self) -> bool:
        return self.kind == GroupKind.PRIVATE.value


_PRIVATE_ONLY = text("kind = 'private'")


class Group(GroupBase, table=True):
    """Default group table — ``spacevault_groups``.

    At most one private group per (workplace, creator).
    """

    __tablename__ = "spacevault_groups"
    __table_args__ = (
        Index(
            "uq_spacevault_private_group",
            "workplace_id",
            "created_by",
            unique=True,
            sqlite_where=_PRIVATE_ONLY,
            postgresql_where=_PRIVATE_ONLY,
        ),
    )


class GroupMembershipBase(SQLModel):
    """Base fields for a membership. Subclass with ``table=True`` for a concrete table."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    group_id: str = Field(index=True)
    user_id: str = Field(index=True)
    role: str = Field(default="member")
    status: str = Field(default=MembershipStatus.ACTIVE.value)
    joined_at: datetime | None = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )


class GroupMembership(GroupMembershipBase, table=True):
    """Default membership table — ``spacevault_group_memberships``."""

    __tablename__ = "spacevault_group_memberships"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_spacevault_membership"),
    )
