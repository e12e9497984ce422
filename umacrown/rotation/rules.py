"""Tunable game-balance parameters for rotation generation."""

from dataclasses import dataclass, field
from typing import Optional

from umacrown.config import Settings, get_settings
from umacrown.rotation.constants import (
    PRIMARY_MANDATORY,
    SECONDARY_EXCLUSIVE_NAMES,
    SECONDARY_MANDATORY,
    SECONDARY_SPECIFIC_NAMES,
    MandatoryEntry,
)
from umacrown.rotation.types import Grade


@dataclass(frozen=True)
class RotationRules:
    """Parameters every builder reads. Defaults mirror ``Settings``."""

    max_consecutive_races: int = 3
    enhancement_budget: int = 6
    natural_strategy_cap: int = 3
    factor_slots: int = 6
    place_completed_mandatory: bool = False
    runnable_floor: Grade = Grade.D
    comfortable_grade: Grade = Grade.C
    secondary_bonus_grade: Grade = Grade.A
    primary_templates: dict[str, list[MandatoryEntry]] = field(
        default_factory=lambda: fetch_mandatory_templates()
    )
    secondary_template: list[MandatoryEntry] = field(
        default_factory=lambda: list(SECONDARY_MANDATORY)
    )
    secondary_exclusive_names: frozenset[str] = SECONDARY_EXCLUSIVE_NAMES
    secondary_specific_names: frozenset[str] = SECONDARY_SPECIFIC_NAMES

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RotationRules":
        settings = settings or get_settings()
        return cls(
            max_consecutive_races=settings.max_consecutive_races,
            enhancement_budget=settings.enhancement_budget,
            natural_strategy_cap=settings.natural_strategy_cap,
            factor_slots=settings.factor_slots,
            place_completed_mandatory=settings.place_completed_mandatory,
        )


def fetch_mandatory_templates() -> dict[str, list[MandatoryEntry]]:
    """Static per-final mandatory race templates for the primary scenario."""
    return {final: list(entries) for final, entries in PRIMARY_MANDATORY.items()}


def fetch_exclusive_names() -> frozenset[str]:
    """Race names reserved for the secondary scenario."""
    return SECONDARY_EXCLUSIVE_NAMES
