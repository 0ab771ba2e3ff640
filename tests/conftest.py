"""Shared models, filters and fixtures for the filter engine tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime, timedelta
from pathlib import Path
from typing import Annotated

import pytest
from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from dynamic_filters import FilterableId, FilterSpec
from dynamic_filters.operators_memory import build_default_registry

BASE_DATE = datetime(2024, 1, 1)
USER_COUNT = 25

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class UserRecord(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    name = Column(String)
    active = Column(Boolean)
    count = Column(Integer)
    created_date = Column(DateTime)
    account_id = Column(Integer)


class UserFilter(FilterSpec):
    id: int | None = None
    name: str | None = None
    active: bool | None = None
    count: int | None = None
    created_date: datetime | None = None
    account_id: Annotated[int | None, FilterableId()] = None
    ownerId: int | None = None


def seed_users() -> list[UserRecord]:
    """
    25 users: every fifth is named "John <i>", even ids are active,
    ``count == id``, created one day apart from ``BASE_DATE``.
    """
    return [
        UserRecord(
            id=i,
            name=f"John {i}" if i % 5 == 0 else f"User {i}",
            active=i % 2 == 0,
            count=i,
            created_date=BASE_DATE + timedelta(days=i),
            account_id=i % 3,
        )
        for i in range(1, USER_COUNT + 1)
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry():
    """Default in-memory operator registry."""
    return build_default_registry()


@pytest.fixture
async def session_factory(
    tmp_path: Path,
) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    # File database: fetch and count use separate connections.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'filters.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        session.add_all(seed_users())
        await session.commit()
    yield factory
    await engine.dispose()
