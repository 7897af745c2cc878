"""Engine helpers — session factory and table creation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spacevault.models.files import FileRecord
from spacevault.models.groups import Group, GroupMembership

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine
    from sqlmodel import SQLModel


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by every store.

    ``expire_on_commit=False`` keeps returned rows readable after their
    session closes.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_models(
    engine: AsyncEngine,
    *,
    group_model: type[SQLModel] | None = None,
    membership_model: type[SQLModel] | None = None,
    file_model: type[SQLModel] | None = None,
) -> None:
    """Create the group, membership and file tables (with indexes) if missing."""
    models = (
        group_model or Group,
        membership_model or GroupMembership,
        file_model or FileRecord,
    )
    async with engine.begin() as conn:
        for model in models:
            table = model.__table__  # type: ignore[attr-defined]
            await conn.run_sync(lambda c, t=table: t.create(c, checkfirst=True))
