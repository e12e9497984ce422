"""Overflow builder: extra primary rotations for races nobody took.

Two things decide how many extra rotations are needed. Template races left
over each need the rotation of the final they belong to, and half-month
slots that many leftover races compete for need one rotation per race.
"""

import logging
import math
from dataclasses import dataclass
from fractions import Fraction
from typing import AbstractSet, Optional, Sequence

from umacrown.rotation.aptitude import compute_natural_strategy, is_runnable, project_state
from umacrown.rotation.assignment import assign_chronologically, merge_enhancement, rebase
from umacrown.rotation.calendar import available_slots, is_restricted
from umacrown.rotation.constants import PRIMARY_FINAL_SLOT
from umacrown.rotation.primary import order_finals, seed_grid
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.scoring import Scorer
from umacrown.rotation.types import PatternGrid, RaceRecord, RotationInputs, Scenario, Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverflowSizing:
    """How many overflow rotations are needed, and why."""

    final_names: tuple[str, ...]  # finals whose template races are left over
    pool: tuple[RaceRecord, ...]  # leftovers minus those template races
    n_from_pressure: int

    @property
    def n_from_intermediate(self) -> int:
        return len(self.final_names)

    @property
    def count(self) -> int:
        return max(self.n_from_intermediate, self.n_from_pressure)


def template_owner_map(rules: RotationRules) -> dict[str, str]:
    """Template race name to the final it belongs to.

    Names shared between templates resolve to the final listed last.
    """
    owners: dict[str, str] = {}
    for final_name, entries in rules.primary_templates.items():
        for _, name, _, _ in entries:
            owners[name] = final_name
    return owners


def slot_pressure(pool: Sequence[RaceRecord]) -> int:
    """Rotations needed so every race has somewhere to go.

    Each race spreads one unit of demand evenly over its non-restricted
    slots; the busiest slot, rounded up, is the answer.
    """
    demand: dict[Slot, Fraction] = {}
    for race in pool:
        slots = [s for s in available_slots(race) if not is_restricted(Scenario.PRIMARY, s)]
        if not slots:
            continue
        share = Fraction(1, len(slots))
        for slot in slots:
            demand[slot] = demand.get(slot, Fraction(0)) + share
    if not demand:
        return 0
    return math.ceil(max(demand.values()))


def size_overflow(leftovers: Sequence[RaceRecord], rules: Optional[RotationRules] = None) -> OverflowSizing:
    rules = rules or RotationRules()
    owners = template_owner_map(rules)

    final_names: dict[str, None] = {}
    pool = []
    for race in leftovers:
        owner = owners.get(race.name)
        if owner is not None:
            final_names.setdefault(owner, None)
        else:
            pool.append(race)

    return OverflowSizing(
        final_names=tuple(final_names),
        pool=tuple(pool),
        n_from_pressure=slot_pressure(pool),
    )


def choose_final(grid: PatternGrid, finals: Sequence[RaceRecord], inputs: RotationInputs,
                 rules: RotationRules) -> Optional[RaceRecord]:
    """First final the grid can already run, preferring ones needing no investment."""
    runnable = [f for f in finals if is_runnable(f, grid.aptitude, rules)]
    for final in runnable:
        if compute_natural_strategy(final, inputs.profile, rules) is None:
            return final
    return runnable[0] if runnable else None


def build_overflow(
    inputs: RotationInputs,
    leftovers: Sequence[RaceRecord],
    rules: Optional[RotationRules] = None,
    scorer: Optional[Scorer] = None,
    consumed_ids: AbstractSet[int] = frozenset(),
) -> list[PatternGrid]:
    """Extra primary rotations for ``leftovers``; empty if none are needed.

    Template races already sitting in an earlier rotation (``consumed_ids``)
    are not placed again when a grid is seeded for their final.
    """
    rules = rules or RotationRules()
    sizing = size_overflow(leftovers, rules)
    if sizing.count == 0:
        return []

    logger.debug(
        f"Overflow: {sizing.count} grids "
        f"(intermediate={sizing.n_from_intermediate}, pressure={sizing.n_from_pressure})"
    )

    by_name = inputs.by_name()
    seeded_finals = [by_name[n] for n in sizing.final_names if n in by_name]
    for name in sizing.final_names:
        if name not in by_name:
            logger.warning(f"Final '{name}' not in catalog, its overflow grid starts empty")

    grids: list[PatternGrid] = [
        seed_grid(final, inputs, rules, by_name, skip_ids=consumed_ids)
        for final in order_finals(seeded_finals, inputs.profile, rules)
    ]
    while len(grids) < sizing.count:
        grids.append(PatternGrid(scenario=Scenario.PRIMARY, aptitude=project_state(inputs.profile)))

    assign_chronologically(grids, sizing.pool, inputs.profile, Scenario.PRIMARY, rules, scorer)

    finals = inputs.finals
    for grid in grids:
        if grid.final_race is not None or not grid.is_free(PRIMARY_FINAL_SLOT):
            continue
        final = choose_final(grid, finals, inputs, rules)
        if final is None or final.race_id in grid.race_ids():
            continue
        grid.final_race = final
        grid.place(PRIMARY_FINAL_SLOT, final)
        natural = compute_natural_strategy(final, inputs.profile, rules)
        if natural is not None:
            rebase(grid, merge_enhancement(grid.strategy, natural), inputs.profile)

    return grids
