"""All-crown progress: remaining-race counts and a training-run estimate."""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from umacrown.rotation.calendar import available_slots
from umacrown.rotation.repository import (
    fetch_catalog,
    fetch_completed_by_character,
    fetch_registrations,
    fetch_scenario_races,
)
from umacrown.rotation.types import CharacterProfile, Distance, RaceRecord, Surface

logger = logging.getLogger(__name__)

# Buckets that exist in the catalog; there is no long-distance dirt race
BUCKETS: tuple[tuple[Surface, Distance], ...] = (
    (Surface.TURF, Distance.SPRINT),
    (Surface.TURF, Distance.MILE),
    (Surface.TURF, Distance.MEDIUM),
    (Surface.TURF, Distance.LONG),
    (Surface.DIRT, Distance.SPRINT),
    (Surface.DIRT, Distance.MILE),
    (Surface.DIRT, Distance.MEDIUM),
)


@dataclass
class RemainingSummary:
    character_id: int
    character_name: str
    total: int
    counts: dict[tuple[Surface, Distance], int] = field(default_factory=dict)
    estimated_runs: int = 1

    @property
    def is_all_crown(self) -> bool:
        return self.total == 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "character_id": self.character_id,
            "character_name": self.character_name,
            "is_all_crown": self.is_all_crown,
            "total": self.total,
            "counts": {
                f"{s.name.lower()}_{d.name.lower()}": self.counts.get((s, d), 0)
                for s, d in BUCKETS
            },
            "estimated_runs": self.estimated_runs,
        }


def count_by_turn(races: Iterable[RaceRecord]) -> Counter:
    """Races per turn. A race open to several stages counts half in each."""
    turns: Counter = Counter()
    for race in races:
        slots = available_slots(race)
        weight = 0.5 if len(slots) > 1 else 1.0
        for slot in slots:
            turns[slot] += weight
    return turns


def estimate_training_runs(
    remaining: Sequence[RaceRecord],
    scenario_races: Iterable[RaceRecord] = (),
) -> int:
    """Rough number of careers still needed to win every remaining race.

    Races sharing a turn compete for it, so the busiest turn decides. Remaining
    races falling in the same half-month as one of the character's scenario
    objectives are also counted on their own, and a turn needs whichever of
    the two counts is larger.
    """
    half_months = {(r.month, r.second_half) for r in scenario_races}
    conflicting = [r for r in remaining if (r.month, r.second_half) in half_months]

    turns = count_by_turn(remaining)
    conflicts = count_by_turn(conflicting)

    busiest = 1.0
    for slot in turns.keys() | conflicts.keys():
        busiest = max(busiest, turns[slot], conflicts[slot])
    return math.ceil(busiest)


def summarize_remaining(
    profile: CharacterProfile,
    remaining: Sequence[RaceRecord],
    scenario_races: Iterable[RaceRecord] = (),
) -> RemainingSummary:
    counts = Counter((r.surface, r.distance) for r in remaining)
    return RemainingSummary(
        character_id=profile.character_id,
        character_name=profile.name,
        total=len(remaining),
        counts={bucket: counts.get(bucket, 0) for bucket in BUCKETS},
        estimated_runs=estimate_training_runs(remaining, scenario_races),
    )


async def fetch_remaining_summaries(db: AsyncSession, user_id: str) -> list[RemainingSummary]:
    """Progress for every character the user has registered.

    Sorted by fewest remaining races first, then by name.
    """
    registrations = await fetch_registrations(db, user_id)
    catalog = [r for r in await fetch_catalog(db) if r.rank <= 3]
    completed = await fetch_completed_by_character(db, user_id)

    summaries = []
    for registration in registrations:
        profile = registration.character.to_profile()
        done = completed.get(profile.character_id, set())
        remaining = [r for r in catalog if r.race_id not in done]
        objectives = [sr.race.to_record() for sr in await fetch_scenario_races(db, profile.character_id)]
        summaries.append(summarize_remaining(profile, remaining, objectives))

    summaries.sort(key=lambda s: (s.total, s.character_name))
    logger.debug(f"Summarized progress for {len(summaries)} characters of user {user_id}")
    return summaries
