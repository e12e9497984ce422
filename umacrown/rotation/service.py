"""Async entry point: fetch a character's inputs, then generate patterns."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from umacrown.rotation.generator import generate_patterns
from umacrown.rotation.repository import fetch_outstanding_races
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.scoring import Scorer
from umacrown.rotation.types import PatternResult

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    character_name: str
    patterns: list[PatternResult] = field(default_factory=list)
    completed_race_ids: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "character_name": self.character_name,
            "patterns": [p.to_dict() for p in self.patterns],
            "completed_race_ids": self.completed_race_ids,
        }


class RotationService:
    """Generates rotation patterns for registered characters."""

    def __init__(self, rules: Optional[RotationRules] = None, scorer: Optional[Scorer] = None):
        self.rules = rules or RotationRules.from_settings()
        self.scorer = scorer

    async def generate(self, db: AsyncSession, user_id: str, character_id: int) -> GenerationResult:
        """Patterns for one character; raises CharacterNotFoundError if unregistered."""
        inputs = await fetch_outstanding_races(db, user_id, character_id, self.rules)
        logger.info(
            f"Generating patterns for {inputs.profile.name} "
            f"({len(inputs.remaining)} outstanding, {len(inputs.completed_ids)} completed)"
        )
        patterns = generate_patterns(inputs, self.rules, self.scorer)
        return GenerationResult(
            character_name=inputs.profile.name,
            patterns=patterns,
            completed_race_ids=sorted(inputs.completed_ids),
        )
