"""Heuristic scoring of (race, grid) placement candidates.

The assignment loop only sees the ``Scorer`` protocol, so alternative
weightings can be swapped in and tested without touching it.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from umacrown.rotation.types import RaceRecord, Strategy

# ──────────────────────────────────────────────
# Default weights
# ──────────────────────────────────────────────

THEMATIC_BONUS = 10  # runnable as-is and fits the rotation's theme
UNDECIDED_NATURAL_BONUS = 5  # undecided rotation, race needs no investment
UNDECIDED_ADOPT_BONUS = 2  # undecided rotation, race would set its strategy
ENHANCEMENT_BONUS = 1  # runnable only after extra factors
RANK_CEILING = 4  # rank bonus is RANK_CEILING - rank (G1 scores 3)


@dataclass(frozen=True)
class PlacementContext:
    """What a scorer may look at for one candidate pair."""

    race: RaceRecord
    enhancement: Optional[Strategy]  # factors needed to make the race runnable
    thematic: bool
    grid_undecided: bool  # grid strategy still None
    race_needs_strategy: bool  # race's own natural strategy is not None
    run_length: int  # consecutive run the slot would join, itself included


@dataclass(frozen=True)
class Score:
    value: int
    adopts_strategy: bool = False


class Scorer(Protocol):
    def score(self, ctx: PlacementContext) -> Score: ...


class GreedyScorer:
    """Default weighting: theme first, then undecided rotations, then prestige."""

    def __init__(
        self,
        thematic_bonus: int = THEMATIC_BONUS,
        undecided_natural_bonus: int = UNDECIDED_NATURAL_BONUS,
        undecided_adopt_bonus: int = UNDECIDED_ADOPT_BONUS,
        enhancement_bonus: int = ENHANCEMENT_BONUS,
        rank_ceiling: int = RANK_CEILING,
    ):
        self.thematic_bonus = thematic_bonus
        self.undecided_natural_bonus = undecided_natural_bonus
        self.undecided_adopt_bonus = undecided_adopt_bonus
        self.enhancement_bonus = enhancement_bonus
        self.rank_ceiling = rank_ceiling

    def score(self, ctx: PlacementContext) -> Score:
        value = 0
        adopts = False

        if ctx.enhancement is not None:
            value += self.enhancement_bonus
        elif ctx.thematic:
            value += self.thematic_bonus
        elif ctx.grid_undecided:
            if ctx.race_needs_strategy:
                value += self.undecided_adopt_bonus
                adopts = True
            else:
                value += self.undecided_natural_bonus

        value -= ctx.run_length
        value += self.rank_ceiling - ctx.race.rank
        return Score(value, adopts)
