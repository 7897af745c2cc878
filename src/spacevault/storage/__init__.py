"""Object storage: key derivation, S3 adapter, signed intents, legacy disk fallback."""

from spacevault.storage.intents import (
    DownloadIntentIssuer,
    UploadIntentIssuer,
    cdn_url,
    validate_upload,
)
from spacevault.storage.keys import FileCategory, build_storage_key, content_family
from spacevault.storage.legacy import LegacyLocalStore
from spacevault.storage.s3 import S3ObjectStore

__all__ = [
    "DownloadIntentIssuer",
    "FileCategory",
    "LegacyLocalStore",
    "S3ObjectStore",
    "UploadIntentIssuer",
    "build_storage_key",
    "cdn_url",
    "content_family",
    "validate_upload",
]
