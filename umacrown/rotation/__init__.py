"""Race rotation planner: builds all-crown career patterns for a character."""

from umacrown.rotation.generator import generate_patterns
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.scoring import GreedyScorer, Scorer
from umacrown.rotation.types import PatternResult, RotationInputs

__all__ = [
    "generate_patterns",
    "RotationRules",
    "GreedyScorer",
    "Scorer",
    "PatternResult",
    "RotationInputs",
]
