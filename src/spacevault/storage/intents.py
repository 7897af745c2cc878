"""Upload and download intents — signed URLs for direct client transfer.

The server never proxies bytes on these paths: the client PUTs to the
upload URL and GETs from the download URL.  Nothing is persisted when an
upload intent is issued; an intent that is never used simply expires.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from spacevault.exceptions import StorageObjectMissingError, ValidationError
from spacevault.types import DownloadIntent, UploadIntent
from spacevault.utils import file_extension, file_type_for, icon_for, validate_file_name

from .keys import build_storage_key, parse_category

if TYPE_CHECKING:
    from spacevault.config import VaultConfig
    from spacevault.groups.resolver import AccessResolver
    from spacevault.protocols import ObjectStore

    from .keys import FileCategory

logger = logging.getLogger(__name__)


def validate_upload(
    file_name: str,
    mime_type: str,
    file_size: int,
    max_bytes: int,
) -> None:
    """Raise ``ValidationError`` on a missing or out-of-range upload field."""
    valid, error = validate_file_name(file_name)
    if not valid:
        raise ValidationError(error, field="file_name")
    if not mime_type or not mime_type.strip():
        raise ValidationError("File type is required", field="mime_type")
    if isinstance(file_size, bool) or not isinstance(file_size, int):
        raise ValidationError("File size must be an integer", field="file_size")
    if file_size < 0:
        raise ValidationError("File size must not be negative", field="file_size")
    if file_size > max_bytes:
        raise ValidationError(
            f"File size {file_size} exceeds the maximum of {max_bytes} bytes",
            field="file_size",
        )


def cdn_url(config: VaultConfig, storage_key: str) -> str:
    """Map a storage key to its public CDN URL.

    Absolute ``http(s)://`` URLs are returned unchanged.  A scheme-less key
    that starts with a known storage host (``bucket.s3.region.amazonaws.com/...``)
    has the host stripped before the CDN base is prepended.
    """
    key = storage_key.strip()
    if key.startswith(("http://", "https://")):
        return key
    for host in config.known_storage_hosts:
        bare_host = host.split("://", 1)[-1]
        if key.startswith(bare_host + "/"):
            key = key[len(bare_host) + 1 :]
            break
    return f"{config.cdn_base_url}/{key.lstrip('/')}"


class UploadIntentIssuer:
    """Issues signed PUT URLs after resolving the target group."""

    def __init__(
        self,
        config: VaultConfig,
        store: ObjectStore,
        resolver: AccessResolver,
    ) -> None:
        self._config = config
        self._store = store
        self._resolver = resolver

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
        validate_upload(file_name, mime_type, file_size, self._config.max_upload_bytes)
        parsed_category = parse_category(category)

        resolved = await self._resolver.resolve_group(
            user_id, workplace_id, explicit_group_id, display_name
        )

        key = build_storage_key(
            file_name,
            mime_type,
            user_id,
            workplace_id,
            resolved.group_id,
            is_private=resolved.is_private,
            explicit_group=bool(explicit_group_id),
            category=parsed_category,
        )
        expires_in = self._config.upload_expires_in
        object_metadata = {
            "original-name": file_name,
            "user-id": user_id,
            "workplace-id": workplace_id,
            "group-id": resolved.group_id,
            "category": parsed_category.value if parsed_category else "file",
            "uploaded-at": datetime.now(UTC).isoformat(),
            "file-extension": file_extension(file_name).lstrip("."),
        }
        upload_url = await self._store.presign_upload(
            key, mime_type, expires_in, metadata=object_metadata
        )

        logger.info(
            "Upload intent created: %s (user=%s, workplace=%s, group=%s)",
            key,
            user_id,
            workplace_id,
            resolved.group_id,
        )
        return UploadIntent(
            upload_url=upload_url,
            storage_key=key,
            bucket=self._store.bucket,
            expires_in=expires_in,
            group_id=resolved.group_id,
            metadata={
                "file_name": file_name,
                "file_type": mime_type,
                "file_size": file_size,
                "icon": icon_for(file_type_for(file_name)),
                "resolved_group_id": resolved.group_id,
                "user_id": user_id,
                "workplace_id": workplace_id,
            },
        )


class DownloadIntentIssuer:
    """Issues signed GET URLs for existing objects and CDN URLs for public reads."""

    def __init__(self, config: VaultConfig, store: ObjectStore) -> None:
        self._config = config
        self._store = store

    async def create_download_intent(
        self,
        storage_key: str,
        expires_in: int | None = None,
    ) -> DownloadIntent:
        """Sign a GET URL once the object is confirmed to exist.

        Raises ``StorageObjectMissingError`` (a ``FileMissingError``) instead
        of signing a URL that would 404.
        """
        if expires_in is None:
            expires_in = self._config.download_expires_in
        if expires_in <= 0:
            raise ValidationError("expires_in must be positive", field="expires_in")

        if not await self._store.exists(storage_key):
            logger.warning("Download requested for missing object: %s", storage_key)
            raise StorageObjectMissingError(
                f"File not found in storage: {storage_key}", key=storage_key
            )

        download_url = await self._store.presign_download(storage_key, expires_in)
        logger.info("Download intent created: %s (expires_in=%s)", storage_key, expires_in)
        return DownloadIntent(download_url=download_url, expires_in=expires_in)

    def get_cdn_url(self, storage_key: str) -> str:
        return cdn_url(self._config, storage_key)
