"""Secondary ("Larc") scenario builder.

The overseas route fixes its key races, and the scenario itself grants
turf and medium aptitude, so only one rotation is built and no strategy is
ever invested in it. Placement is first-fit, with no scoring.
"""

import logging
from typing import Iterable, Optional

from umacrown.rotation.aptitude import floor_raised, is_runnable, project_state
from umacrown.rotation.calendar import available_slots, is_restricted, violates_consecutive_limit
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.types import (
    AptitudeState,
    Category,
    CharacterProfile,
    PatternGrid,
    RaceRecord,
    RotationInputs,
    Scenario,
    Slot,
)

logger = logging.getLogger(__name__)

BOOSTED_CATEGORIES = (Category.TURF, Category.MEDIUM)


def secondary_live(remaining: Iterable[RaceRecord], rules: Optional[RotationRules] = None) -> bool:
    """True when any outstanding race belongs to the secondary scenario."""
    rules = rules or RotationRules()
    return any(
        r.is_secondary_exclusive or r.name in rules.secondary_specific_names
        for r in remaining
    )


def secondary_aptitude(profile: CharacterProfile, rules: RotationRules) -> AptitudeState:
    return floor_raised(project_state(profile), BOOSTED_CATEGORIES, rules.secondary_bonus_grade)


def build_secondary(
    inputs: RotationInputs,
    pool: Iterable[RaceRecord],
    consumed_ids: set[int],
    rules: Optional[RotationRules] = None,
) -> PatternGrid:
    """Build the single secondary rotation from races not yet consumed."""
    rules = rules or RotationRules()
    grid = PatternGrid(
        scenario=Scenario.SECONDARY,
        aptitude=secondary_aptitude(inputs.profile, rules),
    )

    by_name = inputs.by_name()
    for stage, name, month, second_half in rules.secondary_template:
        slot = Slot(stage, month, second_half)
        if not grid.is_free(slot):
            continue
        race = by_name.get(name)
        if race is None:
            logger.warning(f"Secondary mandatory race '{name}' not in catalog, skipping")
            continue
        if race.race_id in grid.race_ids():
            # The Arc appears once per stage in the template; one run is enough
            continue
        grid.place(slot, race)
        grid.pre_placed_ids.add(race.race_id)

    placed = 0
    for race in pool:
        if race.race_id in consumed_ids or race.race_id in grid.race_ids():
            continue
        if not is_runnable(race, grid.aptitude, rules):
            continue
        for slot in available_slots(race):
            if not grid.is_free(slot) or is_restricted(Scenario.SECONDARY, slot):
                continue
            if violates_consecutive_limit(grid.slots, slot, rules.max_consecutive_races):
                continue
            grid.place(slot, race)
            placed += 1
            break

    logger.debug(f"Secondary: {len(grid.pre_placed_ids)} mandatory, {placed} first-fit placements")
    return grid
