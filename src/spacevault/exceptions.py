"""Custom exception hierarchy for spacevault."""

from __future__ import annotations


class SpaceVaultError(Exception):
    """Base exception for all spacevault errors."""


class AccessDeniedError(SpaceVaultError):
    """Raised when a user has no active membership in the target group."""

    def __init__(self, message: str, *, user_id: str | None = None, group_id: str | None = None):
        super().__init__(message)
        self.user_id = user_id
        self.group_id = group_id


class GroupNotFoundError(SpaceVaultError):
    """Raised when a group id does not exist."""


class FileMissingError(SpaceVaultError):
    """Raised when a file record, or the bytes behind it, do not exist."""


class StorageObjectMissingError(FileMissingError):
    """Raised when an object key has no corresponding object in storage."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.key = key


class StorageUnavailableError(SpaceVaultError):
    """Raised on transient storage failures (sign, HEAD, GET, DELETE).

    Callers may retry; nothing inside spacevault retries on its own.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        key: str | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.key = key


class ValidationError(SpaceVaultError):
    """Raised when a required field is missing or invalid."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class DuplicatePrivateGroupError(SpaceVaultError):
    """A concurrent creator already inserted the private group.

    Internal: the provisioner resolves it by re-fetching the winner's group.
    """


class CapabilityNotSupportedError(SpaceVaultError):
    """Raised when a collaborator doesn't support a requested capability."""
