"""Tests for VaultConfig — validation and environment loading."""

from __future__ import annotations

import pytest

from spacevault.config import (
    DEFAULT_DOWNLOAD_EXPIRES_IN,
    DEFAULT_MAX_UPLOAD_BYTES,
    DEFAULT_UPLOAD_EXPIRES_IN,
    VaultConfig,
)

# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_defaults(self):
        config = VaultConfig(bucket="b")
        assert config.upload_expires_in == DEFAULT_UPLOAD_EXPIRES_IN == 900
        assert config.download_expires_in == DEFAULT_DOWNLOAD_EXPIRES_IN == 3600
        assert config.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
        assert config.legacy_upload_dir == "uploads"
        assert config.verify_uploads is False

    def test_bucket_required(self):
        with pytest.raises(ValueError, match="bucket"):
            VaultConfig(bucket="")

    def test_cdn_trailing_slash_stripped(self):
        config = VaultConfig(bucket="b", cdn_base_url="https://cdn.example.com///")
        assert config.cdn_base_url == "https://cdn.example.com"

    @pytest.mark.parametrize("expires", [59, 3601, 0])
    def test_upload_expiry_bounds(self, expires):
        with pytest.raises(ValueError, match="upload_expires_in"):
            VaultConfig(bucket="b", upload_expires_in=expires)

    def test_upload_expiry_edges_accepted(self):
        assert VaultConfig(bucket="b", upload_expires_in=60).upload_expires_in == 60
        assert VaultConfig(bucket="b", upload_expires_in=3600).upload_expires_in == 3600

    def test_non_positive_download_expiry(self):
        with pytest.raises(ValueError, match="download_expires_in"):
            VaultConfig(bucket="b", download_expires_in=0)

    def test_frozen(self):
        config = VaultConfig(bucket="b")
        with pytest.raises(AttributeError):
            config.bucket = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# known_storage_hosts
# ---------------------------------------------------------------------------


class TestKnownStorageHosts:
    def test_s3_hosts_for_bucket(self):
        config = VaultConfig(bucket="files", region="eu-west-1")
        hosts = config.known_storage_hosts
        assert "https://files.s3.eu-west-1.amazonaws.com" in hosts
        assert "https://files.s3.amazonaws.com" in hosts
        assert "https://s3.eu-west-1.amazonaws.com/files" in hosts

    def test_custom_endpoint_and_extra_hosts(self):
        config = VaultConfig(
            bucket="files",
            endpoint_url="http://minio:9000/",
            storage_hosts=("https://storage.internal/",),
        )
        hosts = config.known_storage_hosts
        assert "http://minio:9000/files" in hosts
        assert "https://storage.internal" in hosts


# ---------------------------------------------------------------------------
# from_env
# ---------------------------------------------------------------------------


class TestFromEnv:
    def test_missing_bucket(self):
        with pytest.raises(ValueError, match="SPACEVAULT_S3_BUCKET"):
            VaultConfig.from_env({})

    def test_minimal(self):
        config = VaultConfig.from_env({"SPACEVAULT_S3_BUCKET": "files"})
        assert config.bucket == "files"
        assert config.region == "us-east-1"
        assert config.endpoint_url is None
        assert config.access_key is None
        assert config.storage_hosts == ()

    def test_full(self):
        env = {
            "SPACEVAULT_S3_BUCKET": "files",
            "AWS_DEFAULT_REGION": "ap-south-1",
            "SPACEVAULT_S3_ENDPOINT_URL": "http://localhost:9000",
            "AWS_ACCESS_KEY_ID": "key",
            "AWS_SECRET_ACCESS_KEY": "secret",
            "SPACEVAULT_CDN_BASE_URL": "https://cdn.example.com/",
            "SPACEVAULT_STORAGE_HOSTS": "https://a.example.com, ,https://b.example.com",
            "SPACEVAULT_UPLOAD_EXPIRES_IN": "600",
            "SPACEVAULT_DOWNLOAD_EXPIRES_IN": "120",
            "SPACEVAULT_MAX_UPLOAD_BYTES": "1024",
            "SPACEVAULT_LEGACY_UPLOAD_DIR": "/srv/uploads",
            "SPACEVAULT_VERIFY_UPLOADS": "yes",
        }
        config = VaultConfig.from_env(env)
        assert config.region == "ap-south-1"
        assert config.endpoint_url == "http://localhost:9000"
        assert config.access_key == "key"
        assert config.secret_key == "secret"
        assert config.cdn_base_url == "https://cdn.example.com"
        assert config.storage_hosts == ("https://a.example.com", "https://b.example.com")
        assert config.upload_expires_in == 600
        assert config.download_expires_in == 120
        assert config.max_upload_bytes == 1024
        assert config.legacy_upload_dir == "/srv/uploads"
        assert config.verify_uploads is True

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("SPACEVAULT_S3_BUCKET", "from-env")
        monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
        assert VaultConfig.from_env().bucket == "from-env"
