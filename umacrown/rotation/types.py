"""Value types shared by the rotation planner.

Everything here is immutable except ``PatternGrid``, which is owned by
exactly one builder invocation and only mutated through its own methods.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum, IntEnum
from typing import Any, Iterator, Optional


class Grade(IntEnum):
    """Aptitude grade. D (0) is the runnable floor, C (1) the comfortable one."""

    G = -3
    F = -2
    E = -1
    D = 0
    C = 1
    B = 2
    A = 3
    S = 4

    @classmethod
    def parse(cls, letter: Optional[str]) -> "Grade":
        """Parse a grade letter; unknown or blank values count as D."""
        if not letter:
            return cls.D
        try:
            return cls[letter.strip().upper()]
        except KeyError:
            return cls.D

    def raised(self, steps: int) -> "Grade":
        """Grade after ``steps`` factor boosts, saturating at S."""
        return Grade(min(self.value + max(steps, 0), Grade.S.value))


class Surface(IntEnum):
    TURF = 0
    DIRT = 1


class Distance(IntEnum):
    SPRINT = 1
    MILE = 2
    MEDIUM = 3
    LONG = 4


class Stage(str, Enum):
    """Career life stage."""

    JUNIOR = "junior"
    CLASSIC = "classic"
    SENIOR = "senior"


class Scenario(str, Enum):
    PRIMARY = "bc"
    SECONDARY = "larc"


class Category(str, Enum):
    """Enhanceable aptitude categories (the inherited-factor types)."""

    TURF = "turf"
    DIRT = "dirt"
    SPRINT = "sprint"
    MILE = "mile"
    MEDIUM = "medium"
    LONG = "long"

    @classmethod
    def for_surface(cls, surface: Surface) -> "Category":
        return cls.TURF if surface == Surface.TURF else cls.DIRT

    @classmethod
    def for_distance(cls, distance: Distance) -> "Category":
        return _DISTANCE_CATEGORIES[Distance(distance)]


_DISTANCE_CATEGORIES = {
    Distance.SPRINT: Category.SPRINT,
    Distance.MILE: Category.MILE,
    Distance.MEDIUM: Category.MEDIUM,
    Distance.LONG: Category.LONG,
}


@dataclass(frozen=True)
class Slot:
    """One half-month placement opportunity in a given life stage."""

    stage: Stage
    month: int
    second_half: bool

    @property
    def key(self) -> str:
        return f"{self.stage.value}|{self.month}|{'back' if self.second_half else 'front'}"


@dataclass(frozen=True)
class RaceRecord:
    """Immutable catalog entry for a race."""

    race_id: int
    name: str
    surface: Surface
    distance: Distance
    rank: int  # 1=G1, 2=G2, 3=G3, 4+ open races named by a template
    junior: bool
    classic: bool
    senior: bool
    month: int
    second_half: bool
    is_primary_final: bool = False
    is_secondary_exclusive: bool = False

    @property
    def surface_category(self) -> Category:
        return Category.for_surface(self.surface)

    @property
    def distance_category(self) -> Category:
        return Category.for_distance(self.distance)


@dataclass(frozen=True)
class CharacterProfile:
    """Innate aptitudes of a trainable character."""

    character_id: int
    name: str
    turf: Grade
    dirt: Grade
    sprint: Grade
    mile: Grade
    medium: Grade
    long: Grade
    front_runner: Grade = Grade.D
    pace_chaser: Grade = Grade.D
    late_surger: Grade = Grade.D
    end_closer: Grade = Grade.D

    def grade(self, category: Category) -> Grade:
        return getattr(self, category.value)


@dataclass(frozen=True)
class AptitudeState:
    """Effective grades for each enhanceable category."""

    turf: Grade
    dirt: Grade
    sprint: Grade
    mile: Grade
    medium: Grade
    long: Grade

    def grade(self, category: Category) -> Grade:
        return getattr(self, category.value)

    def with_grade(self, category: Category, grade: Grade) -> "AptitudeState":
        return replace(self, **{category.value: grade})

    def to_dict(self) -> dict[str, str]:
        return {c.value: self.grade(c).name for c in Category}


@dataclass(frozen=True)
class Strategy:
    """Inherited-factor counts per category."""

    turf: int = 0
    dirt: int = 0
    sprint: int = 0
    mile: int = 0
    medium: int = 0
    long: int = 0

    @classmethod
    def of(cls, counts: dict[Category, int]) -> "Strategy":
        return cls(**{c.value: n for c, n in counts.items()})

    def get(self, category: Category) -> int:
        return getattr(self, category.value)

    def items(self) -> Iterator[tuple[Category, int]]:
        """Non-zero entries in category order."""
        for c in Category:
            n = self.get(c)
            if n:
                yield c, n

    @property
    def total(self) -> int:
        return sum(getattr(self, f.name) for f in fields(self))

    def merged(self, other: "Strategy") -> "Strategy":
        return Strategy(**{c.value: self.get(c) + other.get(c) for c in Category})

    def to_dict(self) -> dict[str, int]:
        return {c.value: n for c, n in self.items()}


@dataclass
class PatternGrid:
    """A rotation being built: slot assignments plus its strategy and aptitude."""

    scenario: Scenario
    aptitude: AptitudeState
    strategy: Optional[Strategy] = None
    final_race: Optional[RaceRecord] = None
    slots: dict[Slot, RaceRecord] = field(default_factory=dict)
    pre_placed_ids: set[int] = field(default_factory=set)

    def is_free(self, slot: Slot) -> bool:
        return slot not in self.slots

    def place(self, slot: Slot, race: RaceRecord) -> None:
        if slot in self.slots:
            raise ValueError(f"Slot {slot.key} already holds {self.slots[slot].name}")
        if any(r.race_id == race.race_id for r in self.slots.values()):
            raise ValueError(f"{race.name} is already placed in this grid")
        self.slots[slot] = race

    def race_ids(self) -> set[int]:
        return {r.race_id for r in self.slots.values()}

    def __len__(self) -> int:
        return len(self.slots)


@dataclass(frozen=True)
class PlacedRace:
    """One occupied slot of a finalized pattern."""

    race_id: int
    name: str
    surface: Surface
    distance: Distance
    rank: int
    month: int
    second_half: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "race_id": self.race_id,
            "race_name": self.name,
            "surface": self.surface.name.lower(),
            "distance": self.distance.name.lower(),
            "rank": self.rank,
            "month": self.month,
            "half": "back" if self.second_half else "front",
        }


@dataclass(frozen=True)
class PatternResult:
    """Finalized, read-only rotation ready for display."""

    scenario: Scenario
    strategy: Optional[Strategy]
    aptitude: AptitudeState
    junior: tuple[PlacedRace, ...]
    classic: tuple[PlacedRace, ...]
    senior: tuple[PlacedRace, ...]
    main_surface: Surface
    main_distance: Distance
    factors: tuple[str, ...]
    total_races: int

    def race_ids(self) -> list[int]:
        return [r.race_id for r in (*self.junior, *self.classic, *self.senior)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario.value,
            "strategy": self.strategy.to_dict() if self.strategy else None,
            "aptitude_state": self.aptitude.to_dict(),
            "junior": [r.to_dict() for r in self.junior],
            "classic": [r.to_dict() for r in self.classic],
            "senior": [r.to_dict() for r in self.senior],
            "surface": self.main_surface.name.lower(),
            "distance": self.main_distance.name.lower(),
            "factors": list(self.factors),
            "total_races": self.total_races,
        }


@dataclass(frozen=True)
class RotationInputs:
    """Immutable inputs of one generation run, fetched before it starts."""

    profile: CharacterProfile
    catalog: tuple[RaceRecord, ...]  # graded races plus any template races, in id order
    completed_ids: frozenset[int] = frozenset()

    @property
    def remaining(self) -> list[RaceRecord]:
        """Outstanding graded races in catalog order."""
        return [
            r for r in self.catalog
            if r.rank <= 3 and r.race_id not in self.completed_ids
        ]

    @property
    def finals(self) -> list[RaceRecord]:
        return [r for r in self.catalog if r.is_primary_final]

    def by_name(self) -> dict[str, RaceRecord]:
        # First catalog entry wins when names repeat
        lookup: dict[str, RaceRecord] = {}
        for race in self.catalog:
            lookup.setdefault(race.name, race)
        return lookup
