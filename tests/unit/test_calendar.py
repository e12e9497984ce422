"""Tests for the half-month calendar model."""

from umacrown.rotation.calendar import (
    available_slots,
    consecutive_run_length,
    is_restricted,
    violates_consecutive_limit,
)
from umacrown.rotation.constants import CANONICAL_SLOTS, PRIMARY_FINAL_SLOT
from umacrown.rotation.types import Scenario, Slot, Stage

J, C, S = Stage.JUNIOR, Stage.CLASSIC, Stage.SENIOR


def _grid(race, *slots):
    return {slot: race for slot in slots}


class TestCanonicalCalendar:
    def test_sixty_slots(self):
        assert len(CANONICAL_SLOTS) == 60

    def test_bounds(self):
        assert CANONICAL_SLOTS[0] == Slot(J, 7, False)
        assert CANONICAL_SLOTS[11] == Slot(J, 12, True)
        assert CANONICAL_SLOTS[12] == Slot(C, 1, False)
        assert CANONICAL_SLOTS[-1] == Slot(S, 12, True)

    def test_front_half_before_back_half(self):
        assert CANONICAL_SLOTS.index(Slot(C, 3, False)) + 1 == CANONICAL_SLOTS.index(Slot(C, 3, True))

    def test_slot_key(self):
        assert Slot(C, 5, True).key == "classic|5|back"


class TestAvailableSlots:
    def test_one_slot_per_stage_in_career_order(self, race_factory):
        race = race_factory(1, "Open Race", month=12, second_half=True, stages="jcs")
        assert available_slots(race) == (
            Slot(J, 12, True),
            Slot(C, 12, True),
            Slot(S, 12, True),
        )

    def test_single_stage(self, race_factory):
        race = race_factory(1, "Classic Only", month=4, stages="c")
        assert available_slots(race) == (Slot(C, 4, False),)


class TestRestrictedSlots:
    def test_primary_final_slot_open(self):
        assert not is_restricted(Scenario.PRIMARY, PRIMARY_FINAL_SLOT)

    def test_primary_after_final(self):
        assert is_restricted(Scenario.PRIMARY, Slot(S, 11, True))
        assert is_restricted(Scenario.PRIMARY, Slot(S, 12, False))
        assert is_restricted(Scenario.PRIMARY, Slot(S, 12, True))

    def test_primary_classic_december_open(self):
        assert not is_restricted(Scenario.PRIMARY, Slot(C, 12, True))

    def test_secondary_expedition(self):
        assert is_restricted(Scenario.SECONDARY, Slot(C, 5, True))
        assert not is_restricted(Scenario.SECONDARY, Slot(C, 5, False))
        for month in (7, 8, 9):
            assert is_restricted(Scenario.SECONDARY, Slot(C, month, False))
            assert is_restricted(Scenario.SECONDARY, Slot(C, month, True))
        assert is_restricted(Scenario.SECONDARY, Slot(C, 10, False))
        assert not is_restricted(Scenario.SECONDARY, Slot(C, 10, True))

    def test_secondary_senior_second_half_of_year(self):
        assert not is_restricted(Scenario.SECONDARY, Slot(S, 6, False))
        assert is_restricted(Scenario.SECONDARY, Slot(S, 6, True))
        assert is_restricted(Scenario.SECONDARY, Slot(S, 7, False))
        assert is_restricted(Scenario.SECONDARY, Slot(S, 12, True))

    def test_secondary_junior_unrestricted(self):
        assert not is_restricted(Scenario.SECONDARY, Slot(J, 8, False))


class TestConsecutiveRuns:
    def test_isolated_slot(self, race_factory):
        race = race_factory(1, "Filler")
        assert consecutive_run_length({}, Slot(C, 4, False)) == 1
        grid = _grid(race, Slot(C, 1, False))
        assert consecutive_run_length(grid, Slot(C, 4, False)) == 1

    def test_joins_neighbours_on_both_sides(self, race_factory):
        race = race_factory(1, "Filler")
        grid = _grid(race, Slot(C, 1, False), Slot(C, 2, False))
        assert consecutive_run_length(grid, Slot(C, 1, True)) == 3

    def test_run_crosses_stage_boundary(self, race_factory):
        race = race_factory(1, "Filler")
        grid = _grid(race, Slot(J, 12, True))
        assert consecutive_run_length(grid, Slot(C, 1, False)) == 2

    def test_fourth_in_a_row_violates(self, race_factory):
        race = race_factory(1, "Filler")
        grid = _grid(race, Slot(C, 1, False), Slot(C, 1, True), Slot(C, 2, False))
        assert consecutive_run_length(grid, Slot(C, 2, True)) == 4
        assert violates_consecutive_limit(grid, Slot(C, 2, True))
        assert not violates_consecutive_limit(grid, Slot(C, 2, True), limit=4)

    def test_third_in_a_row_allowed(self, race_factory):
        race = race_factory(1, "Filler")
        grid = _grid(race, Slot(C, 1, False), Slot(C, 1, True))
        assert not violates_consecutive_limit(grid, Slot(C, 2, False))
