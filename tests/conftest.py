"""Shared test fixtures for the rotation planner."""

from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import umacrown.models  # noqa: F401  registers every table on Base
from umacrown.models.database import Base
from umacrown.rotation.types import (
    CharacterProfile,
    Distance,
    Grade,
    RaceRecord,
    RotationInputs,
    Surface,
)

TURF, DIRT = Surface.TURF, Surface.DIRT
SPRINT, MILE, MEDIUM, LONG = Distance.SPRINT, Distance.MILE, Distance.MEDIUM, Distance.LONG


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session() as session:
        yield session


def make_race(
    race_id: int,
    name: str,
    surface: Surface = TURF,
    distance: Distance = MEDIUM,
    month: int = 4,
    second_half: bool = False,
    stages: str = "c",
    rank: int = 1,
    final: bool = False,
    larc: bool = False,
) -> RaceRecord:
    """Build a race; ``stages`` holds j/c/s for junior, classic, senior."""
    return RaceRecord(
        race_id=race_id,
        name=name,
        surface=surface,
        distance=distance,
        rank=rank,
        junior="j" in stages,
        classic="c" in stages,
        senior="s" in stages,
        month=month,
        second_half=second_half,
        is_primary_final=final,
        is_secondary_exclusive=larc,
    )


def make_profile(**grades: str) -> CharacterProfile:
    """Profile with every category at A unless overridden by letter."""
    values = {c: Grade.parse(grades.get(c, "A")) for c in ("turf", "dirt", "sprint", "mile", "medium", "long")}
    return CharacterProfile(character_id=1, name=grades.get("name", "Test Runner"), **values)


@pytest.fixture
def race_factory():
    return make_race


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
def turf_profile() -> CharacterProfile:
    """Turf middle-distance specialist who can't handle dirt."""
    return make_profile(turf="A", dirt="G", sprint="F", mile="B", medium="A", long="C")


@pytest.fixture
def catalog() -> list[RaceRecord]:
    """Small but realistic catalog: two finals, their routes, the L'Arc races, extras."""
    return [
        make_race(1, "BC Turf", TURF, MEDIUM, 11, False, "s", final=True),
        make_race(2, "BC Classic", DIRT, MEDIUM, 11, False, "s", final=True),
        make_race(3, "Hopeful Stakes", TURF, MEDIUM, 12, True, "j"),
        make_race(4, "Japanese Derby", TURF, MEDIUM, 5, True, "c"),
        make_race(5, "Japan Cup", TURF, MEDIUM, 11, True, "cs"),
        make_race(6, "Takarazuka Kinen", TURF, MEDIUM, 6, True, "cs"),
        make_race(7, "Zen-Nippon Nisai Yushun", DIRT, MILE, 12, True, "j"),
        make_race(8, "Japan Dirt Derby", DIRT, MEDIUM, 7, False, "c"),
        make_race(9, "JBC Classic", DIRT, MEDIUM, 11, False, "cs"),
        make_race(10, "Teio Sho", DIRT, MEDIUM, 6, True, "cs"),
        make_race(11, "Satsuki Sho", TURF, MEDIUM, 4, False, "c"),
        make_race(12, "Tenno Sho (Autumn)", TURF, MEDIUM, 10, True, "cs"),
        make_race(13, "Osaka Hai", TURF, MEDIUM, 4, False, "s"),
        make_race(14, "Kikuka Sho", TURF, LONG, 10, True, "c"),
        make_race(15, "Stayers Stakes", TURF, LONG, 12, False, "cs", rank=2),
        make_race(16, "Prix de l'Arc de Triomphe", TURF, MEDIUM, 10, False, "cs", larc=True),
        make_race(17, "Prix Niel", TURF, MEDIUM, 9, False, "c", rank=2, larc=True),
        make_race(18, "Prix Foy", TURF, MEDIUM, 9, False, "s", rank=2, larc=True),
    ]


@pytest.fixture
def inputs(turf_profile, catalog) -> RotationInputs:
    return RotationInputs(profile=turf_profile, catalog=tuple(catalog))
