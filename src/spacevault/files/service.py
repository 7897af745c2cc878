"""FileService — service-facing API for files, notes, uploads, and downloads."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from spacevault.exceptions import (
    FileMissingError,
    SpaceVaultError,
    StorageObjectMissingError,
    ValidationError,
)
from spacevault.groups.directory import SQLMembershipDirectory
from spacevault.groups.private_space import PrivateSpaceProvisioner
from spacevault.groups.resolver import AccessResolver
from spacevault.models.files import FileKind
from spacevault.storage.intents import (
    DownloadIntentIssuer,
    UploadIntentIssuer,
    validate_upload,
)
from spacevault.storage.legacy import LegacyLocalStore
from spacevault.storage.s3 import S3ObjectStore
from spacevault.types import (
    DeleteResult,
    DownloadedFile,
    DownloadLink,
    LegacyRef,
    Note,
    ObjectRef,
    StoredFile,
)
from spacevault.utils import file_type_for, icon_for, validate_file_name

from .records import UNSET, FileRecordStore, record_to_stored_file

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from spacevault.config import VaultConfig
    from spacevault.models.files import FileRecordBase
    from spacevault.protocols import MembershipDirectory, ObjectStore
    from spacevault.storage.keys import FileCategory
    from spacevault.types import UploadIntent

logger = logging.getLogger(__name__)


class FileService:
    """Facade wiring access resolution, storage, and file records.

    Every operation takes the acting user's id.  Access is checked against
    the file's group before any storage call is made.

    Typical wiring::

        config = VaultConfig.from_env()
        factory = create_session_factory(engine)
        service = FileService(config, factory)
        intent = await service.create_upload_intent(
            "report.pdf", "application/pdf", 2048, user_id, workplace_id
        )
        # client PUTs the bytes to intent.upload_url
        stored = await service.complete_upload(
            intent.storage_key, "report.pdf", "application/pdf", 2048,
            user_id, workplace_id, intent.group_id,
        )

    *directory*, *store* and *legacy_store* default to the SQL directory,
    the boto3 store and the configured legacy upload directory.
    """

    def __init__(
        self,
        config: VaultConfig,
        session_factory: Callable[..., AsyncSession],
        *,
        store: ObjectStore | None = None,
        directory: MembershipDirectory | None = None,
        legacy_store: LegacyLocalStore | None = None,
        display_name_lookup: Callable[[str], Awaitable[str | None]] | None = None,
        file_model: type[FileRecordBase] | None = None,
    ) -> None:
        self._config = config
        self._store: ObjectStore = store if store is not None else S3ObjectStore(config)
        self._directory: MembershipDirectory = (
            directory if directory is not None else SQLMembershipDirectory(session_factory)
        )
        self._legacy = (
            legacy_store if legacy_store is not None else LegacyLocalStore(config.legacy_upload_dir)
        )
        self._records = FileRecordStore(session_factory, file_model=file_model)
        self._provisioner = PrivateSpaceProvisioner(self._directory)
        self._resolver = AccessResolver(
            self._directory,
            self._provisioner,
            display_name_lookup=display_name_lookup,
        )
        self._uploads = UploadIntentIssuer(config, self._store, self._resolver)
        self._downloads = DownloadIntentIssuer(config, self._store)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def resolver(self) -> AccessResolver:
        return self._resolver

    @property
    def provisioner(self) -> PrivateSpaceProvisioner:
        return self._provisioner

    @property
    def records(self) -> FileRecordStore:
        return self._records

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get_accessible(self, file_id: str, user_id: str) -> FileRecordBase:
        """Fetch a record and check access to its group.

        A missing record raises ``FileMissingError`` before any access
        check; there is nothing to leak about a row that doesn't exist.
        """
        record = await self._records.get(file_id)
        if record is None:
            raise FileMissingError(f"File not found: {file_id}")
        await self._resolver.require_access(user_id, record.group_id)
        return record

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    async def create_upload_intent(
        self,
        file_name: str,
        mime_type: str,
        file_size: int,
        user_id: str,
        workplace_id: str,
        explicit_group_id: str | None = None,
        category: str | FileCategory | None = None,
        *,
        display_name: str | None = None,
    ) -> UploadIntent:
        return await self._uploads.create_upload_intent(
            file_name,
            mime_type,
            file_size,
            user_id,
            workplace_id,
            explicit_group_id,
            category,
            display_name=display_name,
        )

    async def complete_upload(
        self,
        storage_key: str,
        file_name: str,
        mime_type: str,
        file_size: int,
        user_id: str,
        workplace_id: str,
        group_id: str,
    ) -> StoredFile:
        """Persist a Blob record for bytes the client has uploaded.

        Not idempotent: completing the same key twice yields two records.
        """
        validate_upload(file_name, mime_type, file_size, self._config.max_upload_bytes)
        if not storage_key or not storage_key.strip():
            raise ValidationError("Storage key is required", field="storage_key")
        if not group_id:
            raise ValidationError("Group id is required", field="group_id")
        resolved = await self._resolver.resolve_group(user_id, workplace_id, group_id)

        if self._config.verify_uploads and not await self._store.exists(storage_key):
            raise StorageObjectMissingError(
                f"Uploaded object not found in storage: {storage_key}", key=storage_key
            )

        record = await self._records.add_blob(
            name=file_name,
            owner_id=user_id,
            workplace_id=workplace_id,
            group_id=resolved.group_id,
            storage_key=storage_key,
            storage_bucket=self._store.bucket,
            size_bytes=file_size,
            mime_type=mime_type,
            public_url=self._downloads.get_cdn_url(storage_key),
            icon=icon_for(file_type_for(file_name)),
        )
        logger.info(
            "Upload completed: %s -> file %s (group=%s)",
            storage_key,
            record.id,
            resolved.group_id,
        )
        return record_to_stored_file(record)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_file_by_id(self, file_id: str, user_id: str) -> StoredFile:
        record = await self._get_accessible(file_id, user_id)
        return record_to_stored_file(record)

    async def list_files(
        self,
        user_id: str,
        workplace_id: str,
        group_id: str | None = None,
    ) -> list[StoredFile]:
        """Files visible to the user, most recently modified first.

        With *group_id*, only that group (access required).  Without it, every
        group in the workplace where the user is an active member.
        """
        if group_id:
            await self._resolver.require_access(user_id, group_id)
            group_ids = [group_id]
        else:
            group_ids = await self._directory.active_group_ids(user_id, workplace_id)
        records = await self._records.list_in_groups(workplace_id, group_ids)
        return [record_to_stored_file(r) for r in records]

    async def list_my_space_files(self, user_id: str, workplace_id: str) -> list[StoredFile]:
        """Files in the user's private space; never provisions it."""
        private = await self._provisioner.get_private_group(user_id, workplace_id)
        if private is None:
            return []
        records = await self._records.list_in_groups(workplace_id, [private.id])
        return [record_to_stored_file(r) for r in records]

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    async def create_note(
        self,
        user_id: str,
        workplace_id: str,
        name: str,
        content: Any = None,
        group_id: str | None = None,
        title: str | None = None,
        *,
        display_name: str | None = None,
    ) -> StoredFile:
        valid, error = validate_file_name(name)
        if not valid:
            raise ValidationError(error, field="name")
        resolved_group_id = await self._resolver.resolve_group_for_file(
            user_id, workplace_id, group_id, display_name
        )
        record = await self._records.add_note(
            name=name,
            owner_id=user_id,
            workplace_id=workplace_id,
            group_id=resolved_group_id,
            content=content,
            title=title,
            icon=icon_for(FileKind.NOTE.value),
        )
        logger.info("Note created: %s (group=%s)", record.id, resolved_group_id)
        return record_to_stored_file(record)

    async def get_note(self, note_id: str, user_id: str) -> StoredFile:
        record = await self._get_accessible(note_id, user_id)
        if record.kind != FileKind.NOTE.value:
            raise FileMissingError(f"Note not found: {note_id}")
        return record_to_stored_file(record)

    async def update_note(
        self,
        note_id: str,
        user_id: str,
        name: str | None = None,
        title: Any = UNSET,
        content: Any = UNSET,
    ) -> StoredFile:
        """Update a note in place; omitted fields are left untouched."""
        await self.get_note(note_id, user_id)
        record = await self._records.update_note(
            note_id, name=name, title=title, content=content
        )
        return record_to_stored_file(record)

    # ------------------------------------------------------------------
    # Downloads
    # ------------------------------------------------------------------

    async def get_download_link(
        self,
        file_id: str,
        user_id: str,
        expires_in: int | None = None,
    ) -> DownloadLink:
        """Return inline content for notes, signed + CDN URLs for objects."""
        stored = record_to_stored_file(await self._get_accessible(file_id, user_id))
        body = stored.body
        if isinstance(body, Note):
            return DownloadLink(
                file_id=stored.id,
                file_name=stored.name,
                kind=FileKind.NOTE.value,
                content=body.content,
            )
        if isinstance(body.ref, LegacyRef):
            raise FileMissingError(
                f"File {stored.id} is stored on local disk and has no download URL"
            )
        intent = await self._downloads.create_download_intent(body.ref.key, expires_in)
        return DownloadLink(
            file_id=stored.id,
            file_name=stored.name,
            kind=FileKind.BLOB.value,
            download_url=intent.download_url,
            cdn_url=body.public_url or self._downloads.get_cdn_url(body.ref.key),
            mime_type=body.mime_type,
            size=body.size,
            expires_in=intent.expires_in,
        )

    async def download_file(self, file_id: str, user_id: str) -> DownloadedFile:
        """Fetch a file's bytes through the server."""
        stored = record_to_stored_file(await self._get_accessible(file_id, user_id))
        body = stored.body
        if isinstance(body, Note):
            data = json.dumps(body.content, indent=2, default=str).encode("utf-8")
            return DownloadedFile(
                data=data,
                file_name=f"{stored.name}.json",
                content_type="application/json",
            )

        content_type = body.mime_type or "application/octet-stream"
        if isinstance(body.ref, ObjectRef):
            data = await self._store.read(body.ref.key)
        else:
            try:
                data = await self._legacy.read_bytes(body.ref.path)
            except PermissionError as exc:
                raise FileMissingError(f"File not found on disk: {body.ref.path}") from exc
        return DownloadedFile(data=data, file_name=stored.name, content_type=content_type)

    def get_cdn_url(self, storage_key: str) -> str:
        return self._downloads.get_cdn_url(storage_key)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_file(self, file_id: str, user_id: str) -> DeleteResult:
        """Delete a file.

        Backing bytes are removed best-effort (failures are logged and
        swallowed); the metadata row is always removed last.
        """
        stored = record_to_stored_file(await self._get_accessible(file_id, user_id))
        object_deleted = False
        legacy_deleted = False

        body = stored.body
        if not isinstance(body, Note):
            if isinstance(body.ref, ObjectRef):
                try:
                    await self._store.delete(body.ref.key)
                    object_deleted = True
                except Exception as exc:
                    logger.warning(
                        "Failed to delete object %s for file %s: %s", body.ref.key, file_id, exc
                    )
            else:
                try:
                    legacy_deleted = await self._legacy.delete(body.ref.path)
                except (OSError, SpaceVaultError) as exc:
                    logger.warning(
                        "Failed to delete legacy file %s for file %s: %s",
                        body.ref.path,
                        file_id,
                        exc,
                    )

        await self._records.delete(file_id)
        logger.info("File deleted: %s (%s) by user %s", stored.name, file_id, user_id)
        return DeleteResult(
            file_id=file_id,
            file_name=stored.name,
            object_deleted=object_deleted,
            legacy_deleted=legacy_deleted,
        )
