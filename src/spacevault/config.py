"""VaultConfig — storage settings built once at process startup."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_UPLOAD_EXPIRES_IN = 15 * 60
DEFAULT_DOWNLOAD_EXPIRES_IN = 60 * 60
DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024  # 100MB

MIN_UPLOAD_EXPIRES_IN = 60
MAX_UPLOAD_EXPIRES_IN = 60 * 60

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class VaultConfig:
    """Object-storage, CDN, and legacy-disk settings.

    Constructed once (explicitly or via :meth:`from_env`) and passed by
    reference into the intent issuers, the S3 adapter, and the file service.
    """

    bucket: str
    cdn_base_url: str = ""
    region: str = "us-east-1"
    endpoint_url: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    storage_hosts: tuple[str, ...] = field(default_factory=tuple)
    upload_expires_in: int = DEFAULT_UPLOAD_EXPIRES_IN
    download_expires_in: int = DEFAULT_DOWNLOAD_EXPIRES_IN
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    legacy_upload_dir: str = "uploads"
    verify_uploads: bool = False

    def __post_init__(self) -> None:
        if not self.bucket:
            raise ValueError("bucket is required")
        if not MIN_UPLOAD_EXPIRES_IN <= self.upload_expires_in <= MAX_UPLOAD_EXPIRES_IN:
            raise ValueError(
                f"upload_expires_in must be between {MIN_UPLOAD_EXPIRES_IN} and "
                f"{MAX_UPLOAD_EXPIRES_IN} seconds, got {self.upload_expires_in}"
            )
        if self.download_expires_in <= 0:
            raise ValueError("download_expires_in must be positive")
        if self.max_upload_bytes <= 0:
            raise ValueError("max_upload_bytes must be positive")
        # Normalise so URL joins never double up slashes.
        object.__setattr__(self, "cdn_base_url", self.cdn_base_url.rstrip("/"))

    @property
    def known_storage_hosts(self) -> tuple[str, ...]:
        """Host prefixes stripped by CDN translation.

        Always includes the virtual-hosted and path-style S3 hosts for the
        configured bucket, plus the custom endpoint when one is set.
        """
        hosts = [
            f"https://{self.bucket}.s3.{self.region}.amazonaws.com",
            f"https://{self.bucket}.s3.amazonaws.com",
            f"https://s3.{self.region}.amazonaws.com/{self.bucket}",
        ]
        if self.endpoint_url:
            hosts.append(f"{self.endpoint_url.rstrip('/')}/{self.bucket}")
        hosts.extend(h.rstrip("/") for h in self.storage_hosts)
        return tuple(hosts)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> VaultConfig:
        """Load configuration from environment variables."""
        env = os.environ if environ is None else environ

        bucket = env.get("SPACEVAULT_S3_BUCKET", "")
        if not bucket:
            raise ValueError(
                "Missing required storage configuration. Set SPACEVAULT_S3_BUCKET."
            )

        hosts = tuple(
            h.strip() for h in env.get("SPACEVAULT_STORAGE_HOSTS", "").split(",") if h.strip()
        )

        return cls(
            bucket=bucket,
            cdn_base_url=env.get("SPACEVAULT_CDN_BASE_URL", ""),
            region=env.get("AWS_DEFAULT_REGION") or "us-east-1",
            endpoint_url=env.get("SPACEVAULT_S3_ENDPOINT_URL") or None,
            access_key=env.get("AWS_ACCESS_KEY_ID") or None,
            secret_key=env.get("AWS_SECRET_ACCESS_KEY") or None,
            storage_hosts=hosts,
            upload_expires_in=int(
                env.get("SPACEVAULT_UPLOAD_EXPIRES_IN", DEFAULT_UPLOAD_EXPIRES_IN)
            ),
            download_expires_in=int(
                env.get("SPACEVAULT_DOWNLOAD_EXPIRES_IN", DEFAULT_DOWNLOAD_EXPIRES_IN)
            ),
            max_upload_bytes=int(env.get("SPACEVAULT_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
            legacy_upload_dir=env.get("SPACEVAULT_LEGACY_UPLOAD_DIR", "uploads"),
            verify_uploads=env.get("SPACEVAULT_VERIFY_UPLOADS", "false").lower() in _TRUTHY,
        )
