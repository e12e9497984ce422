"""Turn working grids into read-only patterns ready for display.

Also recommends the six inherited factors each pattern needs.
"""

import logging
from collections import Counter
from typing import Iterable, Optional, Sequence

from umacrown.rotation.constants import CANONICAL_SLOTS, FACTOR_SORT_ORDER, FREE_FACTOR
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.types import (
    Category,
    CharacterProfile,
    Distance,
    Grade,
    PatternGrid,
    PatternResult,
    PlacedRace,
    RaceRecord,
    Scenario,
    Stage,
    Strategy,
    Surface,
)

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────
# Factor composition
# ──────────────────────────────────────────────

MAX_FACTORS_PER_CATEGORY = 4
FILL_CEILING = Grade.A  # no point stacking factors once a category reaches A

SURFACE_FILL_ORDER = (Category.DIRT, Category.TURF)
DISTANCE_FILL_ORDER = (Category.LONG, Category.MEDIUM, Category.MILE, Category.SPRINT)

# Order weak categories are considered in when there is no strategy
REPAIR_ORDER = (
    Category.LONG, Category.MEDIUM, Category.MILE, Category.SPRINT,
    Category.DIRT, Category.TURF,
)


def _base_grades(profile: CharacterProfile, scenario: Scenario) -> dict[Category, int]:
    base = {c: int(profile.grade(c)) for c in Category}
    if scenario == Scenario.SECONDARY:
        base[Category.TURF] = int(Grade.A)
        base[Category.MEDIUM] = int(Grade.A)
    return base


def fill_factors(factors: list[str], base: dict[Category, int], slots: int) -> list[str]:
    """Top up ``factors`` towards ``slots`` with useful extra boosts.

    Surfaces alternate dirt/turf; when neither takes one, the distance with
    the lowest effective grade goes next. A category stops receiving factors
    at grade A or after four factors.
    """
    counts = Counter(f for f in factors if f != FREE_FACTOR)

    def effective(category: Category) -> int:
        return base[category] + counts[category.value]

    def can_add(category: Category) -> bool:
        return effective(category) < FILL_CEILING and counts[category.value] < MAX_FACTORS_PER_CATEGORY

    def add(category: Category) -> None:
        factors.append(category.value)
        counts[category.value] += 1

    surface_turn = 0
    while len(factors) < slots:
        added = False
        for offset in range(len(SURFACE_FILL_ORDER)):
            category = SURFACE_FILL_ORDER[(surface_turn + offset) % len(SURFACE_FILL_ORDER)]
            if can_add(category):
                add(category)
                surface_turn = (surface_turn + 1) % len(SURFACE_FILL_ORDER)
                added = True
                break

        if not added:
            options = sorted((c for c in DISTANCE_FILL_ORDER if can_add(c)), key=effective)
            if options:
                add(options[0])
                added = True

        if not added:
            break

    return factors


def _sorted_slots(factors: list[str], slots: int) -> tuple[str, ...]:
    padded = factors + [FREE_FACTOR] * max(0, slots - len(factors))
    padded.sort(key=lambda f: FACTOR_SORT_ORDER.get(f, 98))
    return tuple(padded[:slots])


def factor_composition(
    profile: CharacterProfile,
    races: Iterable[RaceRecord],
    strategy: Optional[Strategy],
    scenario: Scenario,
    slots: int = 6,
) -> tuple[str, ...]:
    """Recommended inherited factors for a pattern, in display order."""
    base = _base_grades(profile, scenario)
    factors: list[str] = []

    if strategy and scenario == Scenario.PRIMARY:
        for category, count in strategy.items():
            factors.extend([category.value] * count)
        fill_factors(factors, base, slots)
        return _sorted_slots(factors, slots)

    races = list(races)
    used = {r.surface_category for r in races} | {r.distance_category for r in races}

    weak = [(base[c], c) for c in REPAIR_ORDER if c in used and base[c] < Grade.D]
    weak.sort(key=lambda pair: pair[0])
    for grade, category in weak:
        if len(factors) >= slots:
            break
        if category.value in factors:
            continue
        factors.extend([category.value] * min(-grade, slots - len(factors)))

    if scenario != Scenario.SECONDARY:
        # Weak unused distances too, so later races in the band stay open
        spare = [
            (base[c], c) for c in DISTANCE_FILL_ORDER
            if base[c] < Grade.D and c.value not in factors
        ]
        spare.sort(key=lambda pair: pair[0])
        for grade, category in spare:
            if len(factors) >= slots:
                break
            factors.extend([category.value] * min(-grade, slots - len(factors)))

        fill_factors(factors, base, slots)

    return _sorted_slots(factors, slots)


# ──────────────────────────────────────────────
# Pattern assembly
# ──────────────────────────────────────────────


def main_conditions(races: Sequence[RaceRecord]) -> tuple[Surface, Distance]:
    """Most frequent surface and distance; ties go to the lower value."""
    if not races:
        return Surface.TURF, Distance.SPRINT
    surfaces = Counter(r.surface for r in races)
    distances = Counter(r.distance for r in races)
    surface = max(sorted(surfaces), key=lambda s: surfaces[s])
    distance = max(sorted(distances), key=lambda d: distances[d])
    return Surface(surface), Distance(distance)


def _placed(race: RaceRecord) -> PlacedRace:
    return PlacedRace(
        race_id=race.race_id,
        name=race.name,
        surface=race.surface,
        distance=race.distance,
        rank=race.rank,
        month=race.month,
        second_half=race.second_half,
    )


def finalize_grid(
    grid: PatternGrid, profile: CharacterProfile, rules: Optional[RotationRules] = None,
) -> Optional[PatternResult]:
    """Read-only view of ``grid``, or None if it holds no races."""
    rules = rules or RotationRules()
    if not grid.slots:
        return None

    by_stage: dict[Stage, list[PlacedRace]] = {stage: [] for stage in Stage}
    races: list[RaceRecord] = []
    for slot in CANONICAL_SLOTS:
        race = grid.slots.get(slot)
        if race is None:
            continue
        by_stage[slot.stage].append(_placed(race))
        races.append(race)

    surface, distance = main_conditions(races)
    return PatternResult(
        scenario=grid.scenario,
        strategy=grid.strategy,
        aptitude=grid.aptitude,
        junior=tuple(by_stage[Stage.JUNIOR]),
        classic=tuple(by_stage[Stage.CLASSIC]),
        senior=tuple(by_stage[Stage.SENIOR]),
        main_surface=surface,
        main_distance=distance,
        factors=factor_composition(profile, races, grid.strategy, grid.scenario, rules.factor_slots),
        total_races=len(races),
    )


def finalize(
    grids: Iterable[PatternGrid], profile: CharacterProfile, rules: Optional[RotationRules] = None,
) -> list[PatternResult]:
    """Finalize grids in order, dropping empty ones."""
    results = []
    for grid in grids:
        result = finalize_grid(grid, profile, rules)
        if result is None:
            logger.debug(f"Dropping empty {grid.scenario.value} grid")
            continue
        results.append(result)
    return results
