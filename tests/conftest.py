"""Shared fixtures for spacevault tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

import spacevault.models  # noqa: F401  (registers tables on SQLModel.metadata)
from spacevault.config import VaultConfig
from spacevault.exceptions import StorageObjectMissingError, StorageUnavailableError
from spacevault.files import FileService
from spacevault.groups import AccessResolver, PrivateSpaceProvisioner, SQLMembershipDirectory
from spacevault.storage import LegacyLocalStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping

    from sqlalchemy.ext.asyncio import AsyncEngine

    from spacevault.models.groups import GroupBase


class FakeObjectStore:
    """In-memory ``ObjectStore`` recording every call.

    ``objects`` maps key to bytes; set ``fail_delete`` / ``fail_head`` to
    simulate a backend outage.
    """

    def __init__(self, bucket: str = "test-bucket") -> None:
        self._bucket = bucket
        self.objects: dict[str, bytes] = {}
        self.object_metadata: dict[str, dict[str, str]] = {}
        self.signed_uploads: list[str] = []
        self.signed_downloads: list[str] = []
        self.deleted: list[str] = []
        self.fail_delete = False
        self.fail_head = False

    @property
    def bucket(self) -> str:
        return self._bucket

    async def presign_upload(
        self,
        key: str,
        content_type: str,
        expires_in: int,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        self.signed_uploads.append(key)
        self.object_metadata[key] = dict(metadata or {})
        return f"https://signed.example.com/put/{key}?expires={expires_in}"

    async def presign_download(self, key: str, expires_in: int) -> str:
        self.signed_downloads.append(key)
        return f"https://signed.example.com/get/{key}?expires={expires_in}"

    async def exists(self, key: str) -> bool:
        if self.fail_head:
            raise StorageUnavailableError("HEAD failed", operation="head", key=key)
        return key in self.objects

    async def read(self, key: str) -> bytes:
        if key not in self.objects:
            raise StorageObjectMissingError(f"Object not found: {key}", key=key)
        return self.objects[key]

    async def delete(self, key: str) -> None:
        if self.fail_delete:
            raise StorageUnavailableError("DELETE failed", operation="delete", key=key)
        self.deleted.append(key)
        self.objects.pop(key, None)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Async in-memory SQLite engine with all tables created."""
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


# ---------------------------------------------------------------------------
# Groups and access
# ---------------------------------------------------------------------------


@pytest.fixture
def directory(session_factory: async_sessionmaker[AsyncSession]) -> SQLMembershipDirectory:
    return SQLMembershipDirectory(session_factory)


@pytest.fixture
def provisioner(directory: SQLMembershipDirectory) -> PrivateSpaceProvisioner:
    return PrivateSpaceProvisioner(directory)


@pytest.fixture
def resolver(
    directory: SQLMembershipDirectory, provisioner: PrivateSpaceProvisioner
) -> AccessResolver:
    return AccessResolver(directory, provisioner)


@pytest.fixture
async def team_group(directory: SQLMembershipDirectory) -> GroupBase:
    """Regular group ``Design`` in workplace W1, created by (and admin-ed by) U1."""
    return await directory.create_group("W1", "U1", "Design")


# ---------------------------------------------------------------------------
# Storage and service
# ---------------------------------------------------------------------------


@pytest.fixture
def config() -> VaultConfig:
    return VaultConfig(bucket="test-bucket", cdn_base_url="https://cdn.example.com/")


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore("test-bucket")


@pytest.fixture
def legacy_store(tmp_path) -> LegacyLocalStore:
    root = tmp_path / "uploads"
    root.mkdir()
    return LegacyLocalStore(root)


@pytest.fixture
def service(
    config: VaultConfig,
    session_factory: async_sessionmaker[AsyncSession],
    object_store: FakeObjectStore,
    directory: SQLMembershipDirectory,
    legacy_store: LegacyLocalStore,
) -> FileService:
    return FileService(
        config,
        session_factory,
        store=object_store,
        directory=directory,
        legacy_store=legacy_store,
    )
