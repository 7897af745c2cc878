"""SQLMembershipDirectory — groups and memberships in SQL.

Stateless apart from its session factory and models, following the
service-per-model pattern: each call runs in its own short transaction so
that a constraint violation from a concurrent writer is observable by the
caller instead of poisoning a shared session.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from spacevault.exceptions import DuplicatePrivateGroupError, GroupNotFoundError
from spacevault.models.groups import (
    Group,
    GroupKind,
    GroupMembership,
    MembershipStatus,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from spacevault.models.groups import GroupBase, GroupMembershipBase

logger = logging.getLogger(__name__)


def private_group_defaults(display_name: str) -> dict[str, Any]:
    """Column values for a freshly provisioned private space."""
    return {
        "name": f"{display_name}'s Private Space",
        "description": f"Private group for {display_name} - personal file storage",
        "settings": {
            "allow_member_invites": False,
            "require_approval": False,
            "visibility": "private",
            "default_role": "admin",
        },
        "group_metadata": {
            "tags": ["personal", "private"],
            "category": "personal",
            "department": None,
        },
    }


class SQLMembershipDirectory:
    """Membership directory backed by the group and membership tables.

    Constructor receives the session factory and, optionally, the concrete
    models so callers can use custom SQLModel subclasses.
    """

    def __init__(
        self,
        session_factory: Callable[..., AsyncSession],
        *,
        group_model: type[GroupBase] | None = None,
        membership_model: type[GroupMembershipBase] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._group_model: type[GroupBase] = group_model or Group
        self._membership_model: type[GroupMembershipBase] = membership_model or GroupMembership

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def is_active_member(self, user_id: str, group_id: str) -> bool:
        model = self._membership_model
        async with self._session_factory() as session:
            result = await session.execute(
                select(model.id).where(
                    model.user_id == user_id,
                    model.group_id == group_id,
                    model.status == MembershipStatus.ACTIVE.value,
                )
            )
            return result.first() is not None

    async def get_group(self, group_id: str) -> GroupBase | None:
        async with self._session_factory() as session:
            return await session.get(self._group_model, group_id)

    async def get_private_group(self, user_id: str, workplace_id: str) -> GroupBase | None:
        model = self._group_model
        async with self._session_factory() as session:
            result = await session.execute(
                select(model).where(
                    model.workplace_id == workplace_id,
                    model.created_by == user_id,
                    model.kind == GroupKind.PRIVATE.value,
                )
            )
            return result.scalar_one_or_none()

    async def active_group_ids(self, user_id: str, workplace_id: str) -> list[str]:
        group = self._group_model
        member = self._membership_model
        async with self._session_factory() as session:
            result = await session.execute(
                select(member.group_id)
                .join(group, group.id == member.group_id)  # type: ignore[arg-type]
                .where(
                    member.user_id == user_id,
                    member.status == MembershipStatus.ACTIVE.value,
                    group.workplace_id == workplace_id,
                )
            )
            return [row[0] for row in result.all()]

    async def list_groups(
        self,
        workplace_id: str,
        *,
        kind: GroupKind | None = None,
        active_only: bool = True,
    ) -> list[GroupBase]:
        """List groups in a workplace, newest first."""
        model = self._group_model
        query = select(model).where(model.workplace_id == workplace_id)
        if kind is not None:
            query = query.where(model.kind == kind.value)
        if active_only:
            query = query.where(model.is_active.is_(True))  # type: ignore[attr-defined]
        query = query.order_by(model.created_at.desc())  # type: ignore[attr-defined]
        async with self._session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_private_group(
        self,
        workplace_id: str,
        owner_id: str,
        display_name: str,
    ) -> GroupBase:
        """Insert a private group and its owner membership in one transaction.

        Raises ``DuplicatePrivateGroupError`` if the private-group unique
        index rejects the insert.
        """
        group = self._group_model(
            workplace_id=workplace_id,
            created_by=owner_id,
            kind=GroupKind.PRIVATE.value,
            is_active=True,
            **private_group_defaults(display_name),
        )
        membership = self._membership_model(
            group_id=group.id,
            user_id=owner_id,
            role="admin",
            status=MembershipStatus.ACTIVE.value,
            joined_at=datetime.now(UTC),
        )
        try:
            async with self._session_factory() as session, session.begin():
                session.add(group)
                await session.flush()
                session.add(membership)
        except IntegrityError as exc:
            raise DuplicatePrivateGroupError(
                f"Private group already exists for user {owner_id} in workplace {workplace_id}"
            ) from exc
        return group

    async def create_group(
        self,
        workplace_id: str,
        created_by: str,
        name: str,
        *,
        description: str | None = None,
        settings: dict[str, Any] | None = None,
    ) -> GroupBase:
        """Create a regular group with its creator as an active admin."""
        group = self._group_model(
            workplace_id=workplace_id,
            created_by=created_by,
            name=name,
            description=description,
            kind=GroupKind.REGULAR.value,
            settings=settings or {},
        )
        async with self._session_factory() as session, session.begin():
            session.add(group)
            await session.flush()
            session.add(
                self._membership_model(
                    group_id=group.id,
                    user_id=created_by,
                    role="admin",
                    status=MembershipStatus.ACTIVE.value,
                )
            )
        logger.info("Group created: %s (%s) in workplace %s", name, group.id, workplace_id)
        return group

    async def add_member(
        self,
        group_id: str,
        user_id: str,
        *,
        role: str = "member",
        status: MembershipStatus = MembershipStatus.ACTIVE,
    ) -> GroupMembershipBase:
        """Add or update a membership. Returns the stored row."""
        model = self._membership_model
        async with self._session_factory() as session, session.begin():
            if await session.get(self._group_model, group_id) is None:
                raise GroupNotFoundError(f"Group not found: {group_id}")
            result = await session.execute(
                select(model).where(model.group_id == group_id, model.user_id == user_id)
            )
            membership = result.scalar_one_or_none()
            if membership is None:
                membership = model(group_id=group_id, user_id=user_id, role=role)
                session.add(membership)
            membership.role = role
            membership.status = status.value
            if status is MembershipStatus.ACTIVE and membership.joined_at is None:
                membership.joined_at = datetime.now(UTC)
        return membership
