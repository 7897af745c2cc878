"""spacevault: group-scoped file storage.

Private spaces, membership-based access control, and signed object-storage
uploads and downloads for notes and files.
"""

__version__ = "0.1.0"

from spacevault.config import VaultConfig
from spacevault.db import create_session_factory, init_models
from spacevault.exceptions import (
    AccessDeniedError,
    CapabilityNotSupportedError,
    FileMissingError,
    GroupNotFoundError,
    SpaceVaultError,
    StorageObjectMissingError,
    StorageUnavailableError,
    ValidationError,
)
from spacevault.files import FileRecordStore, FileService
from spacevault.groups import AccessResolver, PrivateSpaceProvisioner, SQLMembershipDirectory
from spacevault.models import FileRecord, Group, GroupKind, GroupMembership, MembershipStatus
from spacevault.protocols import MembershipDirectory, ObjectStore, SupportsGroupListing
from spacevault.storage import (
    DownloadIntentIssuer,
    FileCategory,
    LegacyLocalStore,
    S3ObjectStore,
    UploadIntentIssuer,
)
from spacevault.types import (
    Blob,
    DeleteResult,
    DownloadedFile,
    DownloadIntent,
    DownloadLink,
    LegacyRef,
    Note,
    ObjectRef,
    ResolvedGroup,
    StoredFile,
    UploadIntent,
)

__all__ = [
    "AccessDeniedError",
    "AccessResolver",
    "Blob",
    "CapabilityNotSupportedError",
    "DeleteResult",
    "DownloadIntent",
    "DownloadIntentIssuer",
    "DownloadLink",
    "DownloadedFile",
    "FileCategory",
    "FileMissingError",
    "FileRecord",
    "FileRecordStore",
    "FileService",
    "Group",
    "GroupKind",
    "GroupMembership",
    "GroupNotFoundError",
    "LegacyLocalStore",
    "LegacyRef",
    "MembershipDirectory",
    "MembershipStatus",
    "Note",
    "ObjectRef",
    "ObjectStore",
    "PrivateSpaceProvisioner",
    "ResolvedGroup",
    "S3ObjectStore",
    "SQLMembershipDirectory",
    "SpaceVaultError",
    "StorageObjectMissingError",
    "StorageUnavailableError",
    "StoredFile",
    "SupportsGroupListing",
    "UploadIntent",
    "UploadIntentIssuer",
    "ValidationError",
    "VaultConfig",
    "create_session_factory",
    "init_models",
]
