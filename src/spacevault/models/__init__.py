"""SQLModel database models for spacevault."""

from spacevault.models.files import FileKind, FileRecord, FileRecordBase
from spacevault.models.groups import (
    Group,
    GroupBase,
    GroupKind,
    GroupMembership,
    GroupMembershipBase,
    MembershipStatus,
)

__all__ = [
    "FileKind",
    "FileRecord",
    "FileRecordBase",
    "Group",
    "GroupBase",
    "GroupKind",
    "GroupMembership",
    "GroupMembershipBase",
    "MembershipStatus",
]
