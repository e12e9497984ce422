"""Pattern generation pipeline: primary, secondary, overflow, finalize.

Pure and deterministic. All inputs arrive in ``RotationInputs``; nothing
here touches the database.
"""

import logging
from typing import Optional

from umacrown.rotation.finalizer import finalize
from umacrown.rotation.overflow import build_overflow
from umacrown.rotation.primary import build_primary
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.scoring import Scorer
from umacrown.rotation.secondary import build_secondary, secondary_live
from umacrown.rotation.types import PatternGrid, PatternResult, RotationInputs

logger = logging.getLogger(__name__)


def generate_patterns(
    inputs: RotationInputs,
    rules: Optional[RotationRules] = None,
    scorer: Optional[Scorer] = None,
) -> list[PatternResult]:
    """Build every rotation needed to cover the character's outstanding races."""
    rules = rules or RotationRules()
    remaining = inputs.remaining
    if not remaining:
        logger.info(f"{inputs.profile.name}: nothing outstanding, no patterns")
        return []

    live = secondary_live(remaining, rules)
    primary = build_primary(inputs, live, rules, scorer)
    consumed = set(primary.assigned_ids)
    grids: list[PatternGrid] = list(primary.grids)

    if live:
        secondary = build_secondary(inputs, primary.pool, consumed, rules)
        consumed |= secondary.race_ids()
        grids.append(secondary)

    leftovers = [r for r in primary.pool if r.race_id not in consumed]
    if leftovers:
        placed_earlier: set[int] = set()
        for grid in grids:
            placed_earlier |= grid.race_ids()
        grids.extend(build_overflow(inputs, leftovers, rules, scorer, placed_earlier))

    placed: set[int] = set()
    for grid in grids:
        placed |= grid.race_ids()
    unplaced = [r for r in remaining if r.race_id not in placed]
    if unplaced:
        names = ", ".join(r.name for r in unplaced[:5])
        more = f" (+{len(unplaced) - 5} more)" if len(unplaced) > 5 else ""
        logger.info(f"{inputs.profile.name}: {len(unplaced)} races fit no rotation: {names}{more}")

    patterns = finalize(grids, inputs.profile, rules)
    logger.info(
        f"{inputs.profile.name}: {len(patterns)} patterns for {len(remaining)} outstanding races"
    )
    return patterns
