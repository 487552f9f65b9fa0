"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production ORM models are plain columns, so the
real ``Base`` metadata is created directly.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.domain.entities import GeoNode, StreetEdge
from src.infrastructure.database import Base


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


# ── Sample data ───────────────────────────────────────────────────────

# Three nodes ~55 m apart: 1 -> 2 -> 3 is cheaper than the direct 1 -> 3.
TRIANGLE_NODES = [
    GeoNode(1, 0.0, 0.0),
    GeoNode(2, 0.0, 0.0005),
    GeoNode(3, 0.0005, 0.0005),
]
TRIANGLE_EDGES = [
    StreetEdge(1, 2, 50.0, "A St"),
    StreetEdge(2, 3, 50.0, "B St"),
    StreetEdge(1, 3, 150.0, "C St"),
]


@pytest.fixture
def triangle_nodes() -> list[GeoNode]:
    return list(TRIANGLE_NODES)


@pytest.fixture
def triangle_edges() -> list[StreetEdge]:
    return list(TRIANGLE_EDGES)


@pytest.fixture
def grid_nodes() -> list[GeoNode]:
    """4 x 4 grid, ~55 m spacing, ids 1..16 row by row."""
    step = 0.0005
    return [
        GeoNode(row * 4 + col + 1, 24.78 + row * step, -107.39 + col * step)
        for row in range(4)
        for col in range(4)
    ]


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, then drop everything."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
