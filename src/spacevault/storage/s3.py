"""S3ObjectStore — boto3-backed object storage with presigned URLs.

boto3 is synchronous; every call is dispatched with ``asyncio.to_thread``
so the event loop never blocks on the network.  URL signing is a local
computation, HEAD/GET/DELETE hit the backend.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from spacevault.exceptions import StorageObjectMissingError, StorageUnavailableError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from spacevault.config import VaultConfig

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _is_not_found(exc: ClientError) -> bool:
    error = exc.response.get("Error", {})
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return error.get("Code") in _NOT_FOUND_CODES or status == 404


class S3ObjectStore:
    """S3-compatible object store for a single bucket.

    Implements the ``ObjectStore`` protocol.  Pass *client* to reuse an
    existing boto3 client (tests attach a ``Stubber`` to it); otherwise one is
    created lazily from the config.
    """

    def __init__(self, config: VaultConfig, client: Any = None) -> None:
        self._config = config
        self._client = client

    @property
    def bucket(self) -> str:
        return self._config.bucket

    @property
    def client(self) -> Any:
        """Get or create the boto3 S3 client (lazy initialization)."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self) -> Any:
        cfg = self._config
        client_kwargs: dict[str, Any] = {
            "service_name": "s3",
            "region_name": cfg.region,
            "config": Config(signature_version="s3v4", retries={"max_attempts": 1}),
        }
        if cfg.endpoint_url:
            client_kwargs["endpoint_url"] = cfg.endpoint_url
        if cfg.access_key and cfg.secret_key:
            client_kwargs["aws_access_key_id"] = cfg.access_key
            client_kwargs["aws_secret_access_key"] = cfg.secret_key
        client = boto3.client(**client_kwargs)
        logger.info(
            "S3 client initialized (bucket=%s, region=%s, endpoint=%s)",
            cfg.bucket,
            cfg.region,
            cfg.endpoint_url or "aws",
        )
        return client

    def _unavailable(self, exc: Exception, key: str, operation: str) -> StorageUnavailableError:
        logger.warning("S3 %s failed for %s: %s", operation, key, exc)
        return StorageUnavailableError(
            f"Storage {operation} failed for {key}: {exc}",
            operation=operation,
            key=key,
        )

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------

    async def presign_upload(
        self,
        key: str,
        content_type: str,
        expires_in: int,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        params: dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": key,
            "ContentType": content_type,
        }
        if metadata:
            params["Metadata"] = dict(metadata)
        try:
            return await asyncio.to_thread(
                self.client.generate_presigned_url,
                "put_object",
                Params=params,
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._unavailable(exc, key, "presign") from exc

    async def presign_download(self, key: str, expires_in: int) -> str:
        try:
            return await asyncio.to_thread(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._unavailable(exc, key, "presign") from exc

    # ------------------------------------------------------------------
    # Backend calls
    # ------------------------------------------------------------------

    async def exists(self, key: str) -> bool:
        try:
            await asyncio.to_thread(self.client.head_object, Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            raise self._unavailable(exc, key, "head") from exc
        except BotoCoreError as exc:
            raise self._unavailable(exc, key, "head") from exc
        return True

    async def read(self, key: str) -> bytes:
        try:
            response = await asyncio.to_thread(
                self.client.get_object, Bucket=self.bucket, Key=key
            )
            return await asyncio.to_thread(response["Body"].read)
        except ClientError as exc:
            if _is_not_found(exc):
                raise StorageObjectMissingError(f"Object not found: {key}", key=key) from exc
            raise self._unavailable(exc, key, "get") from exc
        except BotoCoreError as exc:
            raise self._unavailable(exc, key, "get") from exc

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._unavailable(exc, key, "delete") from exc
        logger.info("Object deleted from S3: %s", key)
