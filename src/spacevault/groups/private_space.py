"""PrivateSpaceProvisioner — one private group per (user, workplace)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from spacevault.exceptions import (
    CapabilityNotSupportedError,
    DuplicatePrivateGroupError,
    StorageUnavailableError,
)
from spacevault.models.groups import GroupKind
from spacevault.protocols import SupportsGroupListing

if TYPE_CHECKING:
    from spacevault.models.groups import GroupBase
    from spacevault.protocols import MembershipDirectory

logger = logging.getLogger(__name__)


class PrivateSpaceProvisioner:
    """Lazily provisions a user's private space.

    Correctness under concurrent first use comes from the directory's
    uniqueness guarantee, not from a lock: when two callers race, the loser's
    insert is rejected and it adopts the winner's group.
    """

    def __init__(self, directory: MembershipDirectory) -> None:
        self._directory = directory

    async def get_private_group(self, user_id: str, workplace_id: str) -> GroupBase | None:
        return await self._directory.get_private_group(user_id, workplace_id)

    async def ensure_private_group(
        self,
        user_id: str,
        workplace_id: str,
        display_name: str,
    ) -> GroupBase:
        """Return the user's private group, creating it on first use.

        Never returns more than one group id for a given (user, workplace).
        """
        existing = await self._directory.get_private_group(user_id, workplace_id)
        if existing is not None:
            return existing

        try:
            group = await self._directory.create_private_group(
                workplace_id, user_id, display_name
            )
        except DuplicatePrivateGroupError as exc:
            winner = await self._directory.get_private_group(user_id, workplace_id)
            if winner is None:
                raise StorageUnavailableError(
                    f"Private group for user {user_id} in workplace {workplace_id} "
                    "was rejected as a duplicate but could not be read back",
                    operation="provision",
                ) from exc
            logger.debug(
                "Lost private-group race for user %s in workplace %s; using %s",
                user_id,
                workplace_id,
                winner.id,
            )
            return winner

        logger.info(
            "Private group created for user %s in workplace %s: %s",
            user_id,
            workplace_id,
            group.id,
        )
        return group

    async def is_private_group(self, group_id: str) -> bool:
        group = await self._directory.get_group(group_id)
        return group is not None and group.kind == GroupKind.PRIVATE.value

    async def list_regular_groups(self, workplace_id: str) -> list[GroupBase]:
        """Active regular groups of a workplace, newest first.

        Private spaces are never listed here.
        """
        if not isinstance(self._directory, SupportsGroupListing):
            raise CapabilityNotSupportedError(
                f"{type(self._directory).__name__} does not support listing groups"
            )
        return await self._directory.list_groups(
            workplace_id, kind=GroupKind.REGULAR, active_only=True
        )
