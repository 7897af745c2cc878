"""Result and domain types: StoredFile, UploadIntent, DownloadIntent, etc."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datetime import datetime


# =============================================================================
# Storage references
# =============================================================================


@dataclass(frozen=True, slots=True)
class ObjectRef:
    """Object-storage location of a blob."""

    key: str
    bucket: str | None = None


@dataclass(frozen=True, slots=True)
class LegacyRef:
    """Pre-migration blob stored on local disk, relative to the upload dir."""

    path: str


StorageRef = ObjectRef | LegacyRef


# =============================================================================
# File bodies
# =============================================================================


@dataclass(frozen=True, slots=True)
class Note:
    """Inline structured content; no external object."""

    content: Any = None


@dataclass(frozen=True, slots=True)
class Blob:
    """Reference to uploaded bytes."""

    ref: StorageRef
    mime_type: str | None = None
    size: int | None = None
    public_url: str | None = None

    @property
    def is_legacy(self) -> bool:
        return isinstance(self.ref, LegacyRef)


@dataclass(frozen=True, slots=True)
class StoredFile:
    """A file or note as seen by callers.

    Common fields are shared; the kind-specific part lives in ``body``.
    """

    id: str
    name: str
    owner_id: str
    workplace_id: str
    group_id: str
    body: Note | Blob
    icon: str = ""
    title: str | None = None
    last_modified: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_note(self) -> bool:
        return isinstance(self.body, Note)


# =============================================================================
# Group resolution
# =============================================================================


@dataclass(frozen=True, slots=True)
class ResolvedGroup:
    """Outcome of group resolution for a create/upload operation."""

    group_id: str
    is_private: bool


# =============================================================================
# Intents and downloads
# =============================================================================


@dataclass(frozen=True)
class UploadIntent:
    """Signed PUT URL plus the key the client must upload to."""

    upload_url: str
    storage_key: str
    bucket: str
    expires_in: int
    group_id: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DownloadIntent:
    """Signed GET URL for an existing object."""

    download_url: str
    expires_in: int


@dataclass(frozen=True)
class DownloadLink:
    """How a caller should fetch a file.

    Notes come back inline (``content``); object-backed blobs come back with
    a signed URL and the public CDN URL.
    """

    file_id: str
    file_name: str
    kind: str
    content: Any = None
    download_url: str | None = None
    cdn_url: str | None = None
    mime_type: str | None = None
    size: int | None = None
    expires_in: int | None = None


@dataclass(frozen=True)
class DownloadedFile:
    """Bytes of a file fetched through the server."""

    data: bytes
    file_name: str
    content_type: str


@dataclass(frozen=True)
class DeleteResult:
    """Result of a file delete."""

    file_id: str
    file_name: str
    object_deleted: bool = False
    legacy_deleted: bool = False
