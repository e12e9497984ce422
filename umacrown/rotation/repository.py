"""Read-only queries that gather the planner's inputs."""

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from umacrown.models.character import CompletedRace, RegisteredCharacter, ScenarioRace
from umacrown.models.race import Race
from umacrown.rotation.errors import CharacterNotFoundError
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.types import CharacterProfile, RaceRecord, RotationInputs

logger = logging.getLogger(__name__)

GRADED_RANKS = (1, 2, 3)


def template_race_names(rules: Optional[RotationRules] = None) -> set[str]:
    """Every race name a mandatory template refers to."""
    rules = rules or RotationRules()
    names = {name for entries in rules.primary_templates.values() for _, name, _, _ in entries}
    names.update(name for _, name, _, _ in rules.secondary_template)
    return names


async def fetch_profile(db: AsyncSession, user_id: str, character_id: int) -> CharacterProfile:
    """Profile of a character registered to ``user_id``."""
    result = await db.execute(
        select(RegisteredCharacter).where(
            RegisteredCharacter.user_id == user_id,
            RegisteredCharacter.character_id == character_id,
        )
    )
    registration = result.scalars().first()
    if registration is None:
        logger.error(f"Character {character_id} not registered for user {user_id}")
        raise CharacterNotFoundError(user_id, character_id)
    return registration.character.to_profile()


async def fetch_completed_ids(db: AsyncSession, user_id: str, character_id: int) -> frozenset[int]:
    result = await db.execute(
        select(CompletedRace.race_id).where(
            CompletedRace.user_id == user_id,
            CompletedRace.character_id == character_id,
        )
    )
    return frozenset(result.scalars().all())


async def fetch_catalog(db: AsyncSession, rules: Optional[RotationRules] = None) -> tuple[RaceRecord, ...]:
    """Graded races plus any template races, in id order."""
    result = await db.execute(
        select(Race)
        .where(or_(Race.rank.in_(GRADED_RANKS), Race.name.in_(template_race_names(rules))))
        .order_by(Race.id)
    )
    return tuple(race.to_record() for race in result.scalars().all())


async def fetch_outstanding_races(
    db: AsyncSession,
    user_id: str,
    character_id: int,
    rules: Optional[RotationRules] = None,
) -> RotationInputs:
    """Everything a generation run needs, fetched in one go.

    Raises:
        CharacterNotFoundError: if the character isn't registered to the user.
    """
    profile = await fetch_profile(db, user_id, character_id)
    completed = await fetch_completed_ids(db, user_id, character_id)
    catalog = await fetch_catalog(db, rules)
    logger.debug(
        f"Fetched {len(catalog)} catalog races, {len(completed)} completed for {profile.name}"
    )
    return RotationInputs(profile=profile, catalog=catalog, completed_ids=completed)


async def fetch_scenario_races(db: AsyncSession, character_id: int) -> list[ScenarioRace]:
    """The character's own scenario objectives, in objective order."""
    result = await db.execute(
        select(ScenarioRace)
        .where(ScenarioRace.character_id == character_id)
        .order_by(ScenarioRace.race_number)
    )
    return list(result.scalars().all())


async def fetch_registrations(db: AsyncSession, user_id: str) -> list[RegisteredCharacter]:
    result = await db.execute(
        select(RegisteredCharacter)
        .where(RegisteredCharacter.user_id == user_id)
        .order_by(RegisteredCharacter.character_id)
    )
    return list(result.scalars().all())


async def fetch_completed_by_character(db: AsyncSession, user_id: str) -> dict[int, set[int]]:
    """Completed race ids per character for one user."""
    result = await db.execute(
        select(CompletedRace.character_id, CompletedRace.race_id).where(
            CompletedRace.user_id == user_id
        )
    )
    completed: dict[int, set[int]] = {}
    for character_id, race_id in result.all():
        completed.setdefault(character_id, set()).add(race_id)
    return completed
