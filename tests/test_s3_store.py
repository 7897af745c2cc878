"""Tests for S3ObjectStore — boto3 calls stubbed with botocore's Stubber."""

from __future__ import annotations

import io
from urllib.parse import parse_qs, urlparse

import boto3
import pytest
from botocore.config import Config
from botocore.response import StreamingBody
from botocore.stub import Stubber

from spacevault.config import VaultConfig
from spacevault.exceptions import (
    FileMissingError,
    StorageObjectMissingError,
    StorageUnavailableError,
)
from spacevault.protocols import ObjectStore
from spacevault.storage import S3ObjectStore

BUCKET = "test-bucket"
KEY = "workplaces/W1/groups/G1/files/documents/abc.pdf"


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        config=Config(signature_version="s3v4"),
    )


@pytest.fixture
def stubber(s3_client):
    with Stubber(s3_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def store(s3_client) -> S3ObjectStore:
    return S3ObjectStore(VaultConfig(bucket=BUCKET), client=s3_client)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_satisfies_protocol(self, store: S3ObjectStore):
        assert isinstance(store, ObjectStore)
        assert store.bucket == BUCKET

    def test_lazy_client_from_config(self):
        config = VaultConfig(
            bucket=BUCKET,
            region="eu-west-1",
            endpoint_url="http://localhost:9000",
            access_key="key",
            secret_key="secret",
        )
        store = S3ObjectStore(config)
        client = store.client
        assert client is store.client
        assert client.meta.region_name == "eu-west-1"
        assert client.meta.endpoint_url == "http://localhost:9000"


# ---------------------------------------------------------------------------
# Signing
# ---------------------------------------------------------------------------


class TestPresign:
    async def test_presign_upload(self, store: S3ObjectStore):
        url = await store.presign_upload(
            KEY, "application/pdf", 900, metadata={"original-name": "report.pdf"}
        )
        parsed = urlparse(url)
        assert KEY in parsed.path
        query = parse_qs(parsed.query)
        assert query["X-Amz-Expires"] == ["900"]
        assert "X-Amz-Signature" in query

    async def test_presign_download(self, store: S3ObjectStore):
        url = await store.presign_download(KEY, 3600)
        query = parse_qs(urlparse(url).query)
        assert query["X-Amz-Expires"] == ["3600"]
        assert BUCKET in url


# ---------------------------------------------------------------------------
# exists
# ---------------------------------------------------------------------------


class TestExists:
    async def test_present(self, store: S3ObjectStore, stubber: Stubber):
        stubber.add_response(
            "head_object", {"ContentLength": 4}, {"Bucket": BUCKET, "Key": KEY}
        )
        assert await store.exists(KEY) is True

    async def test_absent(self, store: S3ObjectStore, stubber: Stubber):
        stubber.add_client_error(
            "head_object",
            service_error_code="404",
            http_status_code=404,
            expected_params={"Bucket": BUCKET, "Key": KEY},
        )
        assert await store.exists(KEY) is False

    async def test_backend_failure(self, store: S3ObjectStore, stubber: Stubber):
        stubber.add_client_error(
            "head_object", service_error_code="InternalError", http_status_code=500
        )
        with pytest.raises(StorageUnavailableError) as exc_info:
            await store.exists(KEY)
        assert exc_info.value.operation == "head"
        assert exc_info.value.key == KEY


# ---------------------------------------------------------------------------
# read
# ---------------------------------------------------------------------------


class TestRead:
    async def test_read(self, store: S3ObjectStore, stubber: Stubber):
        body = StreamingBody(io.BytesIO(b"%PDF-1.7"), len(b"%PDF-1.7"))
        stubber.add_response("get_object", {"Body": body}, {"Bucket": BUCKET, "Key": KEY})
        assert await store.read(KEY) == b"%PDF-1.7"

    async def test_missing(self, store: S3ObjectStore, stubber: Stubber):
        stubber.add_client_error(
            "get_object", service_error_code="NoSuchKey", http_status_code=404
        )
        with pytest.raises(StorageObjectMissingError) as exc_info:
            await store.read(KEY)
        assert isinstance(exc_info.value, FileMissingError)
        assert exc_info.value.key == KEY

    async def test_backend_failure(self, store: S3ObjectStore, stubber: Stubber):
        stubber.add_client_error(
            "get_object", service_error_code="SlowDown", http_status_code=503
        )
        with pytest.raises(StorageUnavailableError):
            await store.read(KEY)


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


class TestDelete:
    async def test_delete(self, store: S3ObjectStore, stubber: Stubber):
        stubber.add_response("delete_object", {}, {"Bucket": BUCKET, "Key": KEY})
        await store.delete(KEY)

    async def test_delete_failure(self, store: S3ObjectStore, stubber: Stubber):
        stubber.add_client_error(
            "delete_object", service_error_code="AccessDenied", http_status_code=403
        )
        with pytest.raises(StorageUnavailableError) as exc_info:
            await store.delete(KEY)
        assert exc_info.value.operation == "delete"
