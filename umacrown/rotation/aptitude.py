"""Aptitude engine: effective grades, strategies and runnability.

A race only cares about two categories: its surface and its distance band.
Each inherited factor raises one category by one grade.
"""

from typing import Optional

from umacrown.rotation.rules import RotationRules
from umacrown.rotation.types import (
    AptitudeState,
    Category,
    CharacterProfile,
    Grade,
    RaceRecord,
    Strategy,
)

DEFAULT_RULES = RotationRules()


def project_state(profile: CharacterProfile) -> AptitudeState:
    """Working state equal to the character's innate grades."""
    return AptitudeState(
        turf=profile.turf,
        dirt=profile.dirt,
        sprint=profile.sprint,
        mile=profile.mile,
        medium=profile.medium,
        long=profile.long,
    )


def apply_strategy(state: AptitudeState, strategy: Optional[Strategy]) -> AptitudeState:
    """Raise each category by its factor count, saturating at S."""
    if not strategy:
        return state
    result = state
    for category, steps in strategy.items():
        result = result.with_grade(category, result.grade(category).raised(steps))
    return result


def state_for(profile: CharacterProfile, strategy: Optional[Strategy]) -> AptitudeState:
    """Projected state of ``profile`` with ``strategy`` applied."""
    return apply_strategy(project_state(profile), strategy)


def _race_grades(race: RaceRecord, grades) -> tuple[Grade, Grade]:
    return grades.grade(race.surface_category), grades.grade(race.distance_category)


def is_runnable(
    race: RaceRecord, state: AptitudeState, rules: RotationRules = DEFAULT_RULES,
) -> bool:
    """Both the surface and distance grades reach the runnable floor."""
    surface, distance = _race_grades(race, state)
    return surface >= rules.runnable_floor and distance >= rules.runnable_floor


def compute_natural_strategy(
    final: RaceRecord, profile: CharacterProfile, rules: RotationRules = DEFAULT_RULES,
) -> Optional[Strategy]:
    """Factors needed to bring a final race's categories up to a comfortable grade.

    Returns None when the character is already comfortable on both the
    surface and the distance. Each category is capped at
    ``rules.natural_strategy_cap`` factors.
    """
    surface, distance = _race_grades(final, profile)
    target = rules.comfortable_grade
    surface_needed = max(0, target - surface)
    distance_needed = max(0, target - distance)

    if surface_needed == 0 and distance_needed == 0:
        return None

    counts: dict[Category, int] = {}
    if surface_needed:
        counts[final.surface_category] = min(surface_needed, rules.natural_strategy_cap)
    if distance_needed:
        counts[final.distance_category] = min(distance_needed, rules.natural_strategy_cap)
    return Strategy.of(counts)


def compute_enhancement(
    race: RaceRecord,
    state: AptitudeState,
    strategy: Optional[Strategy],
    rules: RotationRules = DEFAULT_RULES,
) -> Optional[Strategy]:
    """Extra factors that would make ``race`` runnable on top of ``state``.

    Returns None if the race is already runnable, or if the boosts needed
    exceed the factor slots ``strategy`` leaves free.
    """
    surface, distance = _race_grades(race, state)
    floor = rules.runnable_floor
    if surface >= floor and distance >= floor:
        return None

    used = strategy.total if strategy else 0
    free = rules.enhancement_budget - used
    if free <= 0:
        return None

    surface_needed = max(0, floor - surface)
    distance_needed = max(0, floor - distance)
    if surface_needed + distance_needed > free:
        return None

    counts: dict[Category, int] = {}
    if surface_needed:
        counts[race.surface_category] = surface_needed
    if distance_needed:
        counts[race.distance_category] = distance_needed
    return Strategy.of(counts)


def thematic_match(
    race: RaceRecord,
    state: AptitudeState,
    reference_final: Optional[RaceRecord] = None,
    rules: RotationRules = DEFAULT_RULES,
) -> bool:
    """Whether ``race`` fits the theme of a rotation.

    With a reference final the race must share its surface and distance, so
    a strong unrelated aptitude doesn't pull races into the wrong pattern.
    Without one, both of the race's grades must be comfortable.
    """
    if reference_final is not None:
        return (
            race.surface == reference_final.surface
            and race.distance == reference_final.distance
        )
    surface, distance = _race_grades(race, state)
    return surface >= rules.comfortable_grade and distance >= rules.comfortable_grade


def floor_raised(state: AptitudeState, categories: tuple[Category, ...], minimum: Grade) -> AptitudeState:
    """Raise ``categories`` to at least ``minimum``."""
    result = state
    for category in categories:
        if result.grade(category) < minimum:
            result = result.with_grade(category, minimum)
    return result
