"""Primary ("BC") scenario builder.

One rotation per outstanding final. Each is seeded with its final and the
template races its route requires, takes the natural strategy of its final,
then competes with the others for the remaining races chronologically.
"""

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Optional, Sequence

from umacrown.rotation.aptitude import compute_natural_strategy, project_state
from umacrown.rotation.assignment import assign_chronologically, rebase
from umacrown.rotation.constants import PRIMARY_FINAL_SLOT
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.scoring import Scorer
from umacrown.rotation.types import (
    CharacterProfile,
    PatternGrid,
    RaceRecord,
    RotationInputs,
    Scenario,
    Slot,
)

logger = logging.getLogger(__name__)


@dataclass
class PrimaryBuild:
    """Outcome of the primary pass, handed on to the later builders."""

    grids: list[PatternGrid]
    pool: list[RaceRecord]  # races offered to the greedy pass, pool order
    assigned_ids: set[int] = field(default_factory=set)

    @property
    def pre_placed_ids(self) -> set[int]:
        ids: set[int] = set()
        for grid in self.grids:
            ids |= grid.pre_placed_ids
        return ids


def order_finals(
    finals: Sequence[RaceRecord], profile: CharacterProfile, rules: RotationRules,
) -> list[RaceRecord]:
    """Finals needing investment first; otherwise the given order is kept."""
    return sorted(
        finals,
        key=lambda f: compute_natural_strategy(f, profile, rules) is None,
    )


def place_mandatory(
    grid: PatternGrid,
    final: RaceRecord,
    by_name: dict[str, RaceRecord],
    completed_ids: frozenset[int],
    rules: RotationRules,
    skip_ids: AbstractSet[int] = frozenset(),
) -> None:
    """Put the final and its template races into their fixed slots.

    Template races in ``skip_ids`` are left out.
    """
    grid.final_race = final
    if grid.is_free(PRIMARY_FINAL_SLOT):
        grid.place(PRIMARY_FINAL_SLOT, final)

    for stage, name, month, second_half in rules.primary_templates.get(final.name, []):
        slot = Slot(stage, month, second_half)
        if not grid.is_free(slot):
            continue
        race = by_name.get(name)
        if race is None:
            logger.warning(f"Mandatory race '{name}' for {final.name} not in catalog, skipping")
            continue
        if race.race_id in completed_ids and not rules.place_completed_mandatory:
            continue
        if race.race_id in grid.race_ids() or race.race_id in skip_ids:
            continue
        grid.place(slot, race)
        grid.pre_placed_ids.add(race.race_id)


def project_strategy(grid: PatternGrid, profile: CharacterProfile, rules: RotationRules) -> None:
    """Adopt the final's natural strategy and the aptitude it produces."""
    strategy = None
    if grid.final_race is not None:
        strategy = compute_natural_strategy(grid.final_race, profile, rules)
    rebase(grid, strategy, profile)


def seed_grid(
    final: RaceRecord, inputs: RotationInputs, rules: RotationRules,
    by_name: Optional[dict[str, RaceRecord]] = None,
    skip_ids: AbstractSet[int] = frozenset(),
) -> PatternGrid:
    """A primary grid holding ``final``, its template races and its strategy."""
    grid = PatternGrid(scenario=Scenario.PRIMARY, aptitude=project_state(inputs.profile))
    place_mandatory(grid, final, by_name or inputs.by_name(), inputs.completed_ids, rules, skip_ids)
    project_strategy(grid, inputs.profile, rules)
    return grid


def build_primary(
    inputs: RotationInputs,
    secondary_live: bool = False,
    rules: Optional[RotationRules] = None,
    scorer: Optional[Scorer] = None,
) -> PrimaryBuild:
    """Build one rotation per outstanding primary final.

    When ``secondary_live`` the secondary scenario's reserved races are kept
    out of the pool so its builder can place them.
    """
    rules = rules or RotationRules()
    remaining = inputs.remaining
    by_name = inputs.by_name()

    finals = order_finals([r for r in remaining if r.is_primary_final], inputs.profile, rules)
    grids = [seed_grid(final, inputs, rules, by_name) for final in finals]

    pre_placed: set[int] = set()
    for grid in grids:
        pre_placed |= grid.pre_placed_ids

    pool = [
        r for r in remaining
        if not r.is_primary_final
        and r.race_id not in pre_placed
        and not (secondary_live and r.name in rules.secondary_exclusive_names)
    ]

    logger.debug(f"Primary: {len(grids)} finals, {len(pre_placed)} pre-placed, pool of {len(pool)}")

    assigned = assign_chronologically(
        grids, pool, inputs.profile, Scenario.PRIMARY, rules, scorer,
    )
    return PrimaryBuild(grids=grids, pool=pool, assigned_ids=assigned)
