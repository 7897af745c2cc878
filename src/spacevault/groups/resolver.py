"""AccessResolver — decides which group a file operation is scoped to."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from spacevault.exceptions import AccessDeniedError
from spacevault.types import ResolvedGroup

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from spacevault.protocols import MembershipDirectory

    from .private_space import PrivateSpaceProvisioner

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "User"


class AccessResolver:
    """Membership-based access checks and group resolution.

    Every create/upload path goes through :meth:`resolve_group_for_file`
    before touching storage, so no file can be created in a group the acting
    user cannot access.  Read, delete, and download paths guard with
    :meth:`require_access`.
    """

    def __init__(
        self,
        directory: MembershipDirectory,
        provisioner: PrivateSpaceProvisioner,
        *,
        display_name_lookup: Callable[[str], Awaitable[str | None]] | None = None,
    ) -> None:
        self._directory = directory
        self._provisioner = provisioner
        self._display_name_lookup = display_name_lookup

    async def validate_access(self, user_id: str, group_id: str) -> bool:
        """True if *user_id* is an active member of *group_id*. No side effects."""
        if not user_id or not group_id:
            return False
        return await self._directory.is_active_member(user_id, group_id)

    async def require_access(self, user_id: str, group_id: str) -> None:
        """Raise ``AccessDeniedError`` unless :meth:`validate_access` holds."""
        if not await self.validate_access(user_id, group_id):
            logger.debug("Access denied: user %s to group %s", user_id, group_id)
            raise AccessDeniedError(
                f"User {user_id} does not have access to group {group_id}",
                user_id=user_id,
                group_id=group_id,
            )

    async def resolve_group(
        self,
        user_id: str,
        workplace_id: str,
        explicit_group_id: str | None = None,
        display_name: str | None = None,
    ) -> ResolvedGroup:
        """Resolve the target group and report whether it is a private space.

        An explicit group is returned unchanged if the user is an active
        member and it belongs to *workplace_id*; otherwise
        ``AccessDeniedError``.  Without one, the user's private space is
        provisioned on demand.
        """
        if explicit_group_id:
            await self.require_access(user_id, explicit_group_id)
            group = await self._directory.get_group(explicit_group_id)
            if group is None or group.workplace_id != workplace_id:
                raise AccessDeniedError(
                    f"Group {explicit_group_id} is not part of workplace {workplace_id}",
                    user_id=user_id,
                    group_id=explicit_group_id,
                )
            return ResolvedGroup(
                group_id=explicit_group_id,
                is_private=group.is_private and group.created_by == user_id,
            )

        name = display_name or await self._lookup_display_name(user_id)
        private = await self._provisioner.ensure_private_group(user_id, workplace_id, name)
        return ResolvedGroup(group_id=private.id, is_private=True)

    async def resolve_group_for_file(
        self,
        user_id: str,
        workplace_id: str,
        explicit_group_id: str | None = None,
        display_name: str | None = None,
    ) -> str:
        """Return the id of the group a new file or note must be placed in."""
        resolved = await self.resolve_group(
            user_id, workplace_id, explicit_group_id, display_name
        )
        return resolved.group_id

    async def _lookup_display_name(self, user_id: str) -> str:
        if self._display_name_lookup is None:
            return DEFAULT_DISPLAY_NAME
        name = await self._display_name_lookup(user_id)
        return (name or "").strip() or DEFAULT_DISPLAY_NAME
