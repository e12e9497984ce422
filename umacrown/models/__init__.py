"""Database models for the rotation planner."""

from umacrown.models.database import Base, get_db, init_db
from umacrown.models.race import Race
from umacrown.models.character import Character, CompletedRace, RegisteredCharacter, ScenarioRace

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "Race",
    "Character",
    "CompletedRace",
    "RegisteredCharacter",
    "ScenarioRace",
]
