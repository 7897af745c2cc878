"""Collaborator protocols — runtime-checkable interfaces.

``MembershipDirectory`` answers membership questions and creates private
groups; ``ObjectStore`` signs URLs and talks to an S3-compatible backend.
``SQLMembershipDirectory`` and ``S3ObjectStore`` are the shipped
implementations; tests and embedding applications may supply their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from spacevault.models.groups import GroupBase, GroupKind


@runtime_checkable
class MembershipDirectory(Protocol):
    """Groups and memberships as seen by the access layer."""

    async def is_active_member(self, user_id: str, group_id: str) -> bool:
        """Return True if *user_id* has an ``active`` membership in *group_id*."""
        ...

    async def get_group(self, group_id: str) -> GroupBase | None:
        """Return the group, or None if it does not exist."""
        ...

    async def get_private_group(self, user_id: str, workplace_id: str) -> GroupBase | None:
        """Return the user's private group in the workplace, if any."""
        ...

    async def create_private_group(
        self,
        workplace_id: str,
        owner_id: str,
        display_name: str,
    ) -> GroupBase:
        """Create the private group and the owner's membership atomically.

        Raises ``DuplicatePrivateGroupError`` when one already exists.
        """
        ...

    async def active_group_ids(self, user_id: str, workplace_id: str) -> list[str]:
        """Ids of groups in *workplace_id* where *user_id* is an active member."""
        ...


@runtime_checkable
class ObjectStore(Protocol):
    """S3-style object storage used by the intent issuers and file service."""

    @property
    def bucket(self) -> str: ...

    async def presign_upload(
        self,
        key: str,
        content_type: str,
        expires_in: int,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        """Return a signed PUT URL for *key*."""
        ...

    async def presign_download(self, key: str, expires_in: int) -> str:
        """Return a signed GET URL for *key*."""
        ...

    async def exists(self, key: str) -> bool:
        """HEAD the object. False on 404; other failures raise."""
        ...

    async def read(self, key: str) -> bytes:
        """Return the object's bytes."""
        ...

    async def delete(self, key: str) -> None:
        """Delete the object.

        Backend failures should raise ``StorageUnavailableError``.  Callers
        deleting files treat any failure here as best-effort and still
        remove the file record.
        """
        ...


@runtime_checkable
class SupportsGroupListing(Protocol):
    """Opt-in: directories that can enumerate a workplace's groups."""

    async def list_groups(
        self,
        workplace_id: str,
        *,
        kind: GroupKind | None = None,
        active_only: bool = True,
    ) -> list[GroupBase]: ...
