"""Calendar model: slot eligibility, scenario restrictions, run-length checks."""

from typing import Mapping

from umacrown.rotation.constants import CANONICAL_SLOTS, SLOT_INDEX
from umacrown.rotation.types import RaceRecord, Scenario, Slot, Stage


def available_slots(race: RaceRecord) -> tuple[Slot, ...]:
    """Every slot the race could occupy, one per eligible stage, in career order."""
    slots = []
    if race.junior:
        slots.append(Slot(Stage.JUNIOR, race.month, race.second_half))
    if race.classic:
        slots.append(Slot(Stage.CLASSIC, race.month, race.second_half))
    if race.senior:
        slots.append(Slot(Stage.SENIOR, race.month, race.second_half))
    return tuple(slots)


def _is_primary_restricted(slot: Slot) -> bool:
    # Nothing runs after the senior November final
    if slot.stage == Stage.SENIOR:
        if slot.month == 11 and slot.second_half:
            return True
        if slot.month == 12:
            return True
    return False


def _is_secondary_restricted(slot: Slot) -> bool:
    if slot.stage == Stage.CLASSIC:
        if slot.month == 5 and slot.second_half:
            return True  # forced Derby slot
        if 7 <= slot.month <= 9:
            return True  # overseas expedition
        if slot.month == 10 and not slot.second_half:
            return True
    if slot.stage == Stage.SENIOR:
        if slot.month >= 7:
            return True
        if slot.month == 6 and slot.second_half:
            return True
    return False


def is_restricted(scenario: Scenario, slot: Slot) -> bool:
    """True if the general placement passes of ``scenario`` must skip ``slot``."""
    if scenario == Scenario.PRIMARY:
        return _is_primary_restricted(slot)
    return _is_secondary_restricted(slot)


def consecutive_run_length(grid: Mapping[Slot, RaceRecord], slot: Slot) -> int:
    """Length of the back-to-back run ``slot`` would belong to, counting itself."""
    idx = SLOT_INDEX.get(slot)
    if idx is None:
        return 1

    start = idx
    i = idx - 1
    while i >= 0 and CANONICAL_SLOTS[i] in grid:
        start = i
        i -= 1

    end = idx
    i = idx + 1
    while i < len(CANONICAL_SLOTS) and CANONICAL_SLOTS[i] in grid:
        end = i
        i += 1

    return end - start + 1


def violates_consecutive_limit(
    grid: Mapping[Slot, RaceRecord], slot: Slot, limit: int = 3,
) -> bool:
    """True if placing at ``slot`` would create a run longer than ``limit``."""
    return consecutive_run_length(grid, slot) > limit
