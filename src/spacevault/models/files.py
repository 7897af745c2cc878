"""FileRecord model — metadata row for notes and uploaded blobs.

One table with a ``kind`` discriminator.  Note content and each kind of
storage reference live in their own columns; the domain view
(:class:`spacevault.types.StoredFile`) is built by the record store.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, DateTime
from sqlmodel import Field, SQLModel


class FileKind(str, Enum):
    """Discriminator for the ``kind`` column."""

    NOTE = "note"
    BLOB = "blob"


class FileRecordBase(SQLModel):
    """Base fields for a file record. Subclass with ``table=True`` for a concrete table."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str
    kind: str = Field(index=True)
    icon: str = Field(default="")
    title: str | None = Field(default=None)
    owner_id: str = Field(index=True)
    workplace_id: str = Field(index=True)
    group_id: str = Field(index=True)

    # Note body
    note_content: Any = Field(default=None, sa_type=JSON)

    # Blob body
    size_bytes: int | None = Field(default=None)
    mime_type: str | None = Field(default=None)
    storage_key: str | None = Field(default=None, index=True)
    storage_bucket: str | None = Field(default=None)
    legacy_path: str | None = Field(default=None)
    public_url: str | None = Field(default=None)

    last_modified: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )


class FileRecord(FileRecordBase, table=True):
    """Default file table — ``spacevault_files``."""

    __tablename__ = "spacevault_files"
