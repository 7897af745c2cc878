"""FileRecordStore — persistence of file metadata rows."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlmodel import select

from spacevault.exceptions import FileMissingError
from spacevault.models.files import FileKind, FileRecord
from spacevault.types import Blob, LegacyRef, Note, ObjectRef, StoredFile

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from spacevault.models.files import FileRecordBase

logger = logging.getLogger(__name__)

UNSET: Any = object()


def record_to_stored_file(record: FileRecordBase) -> StoredFile:
    """Convert a row into the caller-facing tagged representation."""
    body: Note | Blob
    if record.kind == FileKind.NOTE.value:
        body = Note(content=record.note_content)
    else:
        ref: ObjectRef | LegacyRef
        if record.storage_key:
            ref = ObjectRef(key=record.storage_key, bucket=record.storage_bucket)
        elif record.legacy_path:
            ref = LegacyRef(path=record.legacy_path)
        else:
            raise FileMissingError(f"File {record.id} has no storage reference")
        body = Blob(
            ref=ref,
            mime_type=record.mime_type,
            size=record.size_bytes,
            public_url=record.public_url,
        )
    return StoredFile(
        id=record.id,
        name=record.name,
        owner_id=record.owner_id,
        workplace_id=record.workplace_id,
        group_id=record.group_id,
        body=body,
        icon=record.icon,
        title=record.title,
        last_modified=record.last_modified,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class FileRecordStore:
    """Reads and writes file rows; no access control of its own.

    Callers (the file service) check access before and after lookups.
    Constructor receives the session factory and, optionally, a custom
    ``FileRecordBase`` table subclass.
    """

    def __init__(
        self,
        session_factory: Callable[..., AsyncSession],
        file_model: type[FileRecordBase] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._file_model: type[FileRecordBase] = file_model or FileRecord

    @property
    def file_model(self) -> type[FileRecordBase]:
        return self._file_model

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def _add(self, record: FileRecordBase) -> FileRecordBase:
        async with self._session_factory() as session, session.begin():
            session.add(record)
        return record

    async def add_blob(
        self,
        *,
        name: str,
        owner_id: str,
        workplace_id: str,
        group_id: str,
        storage_key: str,
        storage_bucket: str | None,
        size_bytes: int,
        mime_type: str,
        public_url: str | None,
        icon: str = "",
    ) -> FileRecordBase:
        """Persist an object-backed blob. Legacy blobs are never created."""
        record = self._file_model(
            name=name,
            kind=FileKind.BLOB.value,
            icon=icon,
            owner_id=owner_id,
            workplace_id=workplace_id,
            group_id=group_id,
            size_bytes=size_bytes,
            mime_type=mime_type,
            storage_key=storage_key,
            storage_bucket=storage_bucket,
            public_url=public_url,
        )
        return await self._add(record)

    async def add_note(
        self,
        *,
        name: str,
        owner_id: str,
        workplace_id: str,
        group_id: str,
        content: Any = None,
        title: str | None = None,
        icon: str = "",
    ) -> FileRecordBase:
        record = self._file_model(
            name=name,
            kind=FileKind.NOTE.value,
            icon=icon,
            title=title,
            owner_id=owner_id,
            workplace_id=workplace_id,
            group_id=group_id,
            note_content=content,
        )
        return await self._add(record)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get(self, file_id: str) -> FileRecordBase | None:
        async with self._session_factory() as session:
            return await session.get(self._file_model, file_id)

    async def list_in_groups(
        self,
        workplace_id: str,
        group_ids: list[str],
        *,
        kind: FileKind | None = None,
    ) -> list[FileRecordBase]:
        """Files of *workplace_id* in any of *group_ids*, most recent first."""
        if not group_ids:
            return []
        model = self._file_model
        query = select(model).where(
            model.workplace_id == workplace_id,
            model.group_id.in_(group_ids),  # type: ignore[attr-defined]
        )
        if kind is not None:
            query = query.where(model.kind == kind.value)
        query = query.order_by(model.last_modified.desc())  # type: ignore[attr-defined]
        async with self._session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    async def update_note(
        self,
        file_id: str,
        *,
        name: str | None = None,
        title: Any = UNSET,
        content: Any = UNSET,
    ) -> FileRecordBase:
        """Update a note's fields and bump ``last_modified``."""
        async with self._session_factory() as session, session.begin():
            record = await session.get(self._file_model, file_id)
            if record is None or record.kind != FileKind.NOTE.value:
                raise FileMissingError(f"Note not found: {file_id}")
            if name is not None:
                record.name = name
            if title is not UNSET:
                record.title = title
            if content is not UNSET:
                record.note_content = content
            now = datetime.now(UTC)
            record.last_modified = now
            record.updated_at = now
        return record

    async def delete(self, file_id: str) -> bool:
        """Delete the row. Returns False if it was already gone."""
        async with self._session_factory() as session, session.begin():
            record = await session.get(self._file_model, file_id)
            if record is None:
                return False
            await session.delete(record)
        return True
