"""Chronological greedy assignment of races to a set of rotations.

Walks the canonical calendar once. At each slot every feasible
(race, grid) pair is scored, then pairs are accepted best-first so that each
grid and each race is used at most once per slot. A fallback pass places
whatever is still feasible, trading score for coverage.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from umacrown.rotation.aptitude import (
    compute_enhancement,
    compute_natural_strategy,
    is_runnable,
    state_for,
    thematic_match,
)
from umacrown.rotation.calendar import (
    available_slots,
    consecutive_run_length,
    is_restricted,
    violates_consecutive_limit,
)
from umacrown.rotation.constants import CANONICAL_SLOTS
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.scoring import GreedyScorer, PlacementContext, Scorer
from umacrown.rotation.types import (
    CharacterProfile,
    PatternGrid,
    RaceRecord,
    Scenario,
    Slot,
    Strategy,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    race: RaceRecord
    grid_index: int
    score: int
    adopts_strategy: bool
    enhancement: Optional[Strategy]


def merge_enhancement(strategy: Optional[Strategy], enhancement: Strategy) -> Strategy:
    """Strategy after adding ``enhancement`` to a possibly undecided one."""
    return (strategy or Strategy()).merged(enhancement)


def rebase(grid: PatternGrid, strategy: Optional[Strategy], profile: CharacterProfile) -> None:
    """Replace the grid's strategy and recompute its aptitude from the profile."""
    grid.strategy = strategy
    grid.aptitude = state_for(profile, strategy)


def _collect_candidates(
    slot: Slot,
    races: Iterable[RaceRecord],
    grids: Sequence[PatternGrid],
    profile: CharacterProfile,
    rules: RotationRules,
    scorer: Scorer,
) -> list[Candidate]:
    candidates = []
    for race in races:
        for gi, grid in enumerate(grids):
            if not grid.is_free(slot):
                continue
            if race.race_id in grid.race_ids():
                continue
            if violates_consecutive_limit(grid.slots, slot, rules.max_consecutive_races):
                continue

            enhancement = None
            if not is_runnable(race, grid.aptitude, rules):
                enhancement = compute_enhancement(race, grid.aptitude, grid.strategy, rules)
                if enhancement is None:
                    continue

            ctx = PlacementContext(
                race=race,
                enhancement=enhancement,
                thematic=thematic_match(race, grid.aptitude, grid.final_race, rules),
                grid_undecided=grid.strategy is None,
                race_needs_strategy=compute_natural_strategy(race, profile, rules) is not None,
                run_length=consecutive_run_length(grid.slots, slot),
            )
            result = scorer.score(ctx)
            candidates.append(Candidate(race, gi, result.value, result.adopts_strategy, enhancement))
    return candidates


def assign_chronologically(
    grids: Sequence[PatternGrid],
    pool: Sequence[RaceRecord],
    profile: CharacterProfile,
    scenario: Scenario = Scenario.PRIMARY,
    rules: Optional[RotationRules] = None,
    scorer: Optional[Scorer] = None,
) -> set[int]:
    """Place races from ``pool`` into ``grids``; returns the ids consumed.

    Grids are updated in place (they belong to the calling builder). Races
    with no feasible pair are left out and stay available to later builders.
    """
    rules = rules or RotationRules()
    scorer = scorer or GreedyScorer()
    assigned: set[int] = set()
    if not grids:
        return assigned

    slots_by_race = {race.race_id: available_slots(race) for race in pool}

    for slot in CANONICAL_SLOTS:
        if is_restricted(scenario, slot):
            continue

        races = [
            r for r in pool
            if r.race_id not in assigned and slot in slots_by_race[r.race_id]
        ]
        if not races:
            continue

        candidates = _collect_candidates(slot, races, grids, profile, rules, scorer)
        if not candidates:
            continue

        # Stable sort keeps pool order between equal scores
        candidates.sort(key=lambda c: c.score, reverse=True)

        used_grids: set[int] = set()

        def accept(c: Candidate, allow_adopt: bool) -> None:
            grid = grids[c.grid_index]
            if allow_adopt and c.adopts_strategy:
                adopted = compute_natural_strategy(c.race, profile, rules)
                if adopted is not None:
                    rebase(grid, adopted, profile)
            if c.enhancement is not None:
                rebase(grid, merge_enhancement(grid.strategy, c.enhancement), profile)
            grid.place(slot, c.race)
            used_grids.add(c.grid_index)
            assigned.add(c.race.race_id)

        for c in candidates:
            if c.score <= 0:
                continue
            if c.grid_index in used_grids or c.race.race_id in assigned:
                continue
            accept(c, allow_adopt=True)

        # Fallback: anything still feasible, regardless of score
        for c in candidates:
            if c.grid_index in used_grids or c.race.race_id in assigned:
                continue
            accept(c, allow_adopt=False)

    logger.debug(f"Chronological assignment placed {len(assigned)}/{len(pool)} races into {len(grids)} grids")
    return assigned
