"""Tests for the primary (BC) scenario builder."""

import logging

from umacrown.rotation.constants import PRIMARY_FINAL_SLOT
from umacrown.rotation.primary import build_primary, order_finals, seed_grid
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.types import Grade, RotationInputs, Scenario, Slot, Stage, Strategy

J, C, S = Stage.JUNIOR, Stage.CLASSIC, Stage.SENIOR


def _by_name(grids):
    return {g.final_race.name: g for g in grids}


class TestOrderFinals:
    def test_investment_first(self, inputs):
        finals = inputs.finals
        assert [f.name for f in finals] == ["BC Turf", "BC Classic"]
        ordered = order_finals(finals, inputs.profile, RotationRules())
        assert [f.name for f in ordered] == ["BC Classic", "BC Turf"]

    def test_stable_when_equal(self, profile_factory, catalog):
        ordered = order_finals(
            [r for r in catalog if r.is_primary_final], profile_factory(), RotationRules()
        )
        assert [f.name for f in ordered] == ["BC Turf", "BC Classic"]


class TestSeedGrid:
    def test_final_and_template_placed(self, inputs):
        final = inputs.by_name()["BC Turf"]
        grid = seed_grid(final, inputs, RotationRules())

        assert grid.scenario == Scenario.PRIMARY
        assert grid.final_race is final
        assert grid.slots[PRIMARY_FINAL_SLOT] is final
        assert grid.slots[Slot(J, 12, True)].name == "Hopeful Stakes"
        assert grid.slots[Slot(C, 5, True)].name == "Japanese Derby"
        assert grid.slots[Slot(C, 11, True)].name == "Japan Cup"
        assert grid.slots[Slot(S, 6, True)].name == "Takarazuka Kinen"
        assert grid.pre_placed_ids == {3, 4, 5, 6}

    def test_natural_strategy_projected(self, inputs):
        grid = seed_grid(inputs.by_name()["BC Classic"], inputs, RotationRules())
        assert grid.strategy == Strategy(dirt=3)
        assert grid.aptitude.dirt == Grade.D

    def test_comfortable_final_stays_undecided(self, inputs):
        grid = seed_grid(inputs.by_name()["BC Turf"], inputs, RotationRules())
        assert grid.strategy is None
        assert grid.aptitude.turf == Grade.A

    def test_completed_template_race_skipped(self, turf_profile, catalog):
        inputs = RotationInputs(turf_profile, tuple(catalog), frozenset({3}))
        grid = seed_grid(inputs.by_name()["BC Turf"], inputs, RotationRules())
        assert Slot(J, 12, True) not in grid.slots
        assert 3 not in grid.pre_placed_ids

    def test_completed_template_race_placed_when_configured(self, turf_profile, catalog):
        inputs = RotationInputs(turf_profile, tuple(catalog), frozenset({3}))
        rules = RotationRules(place_completed_mandatory=True)
        grid = seed_grid(inputs.by_name()["BC Turf"], inputs, rules)
        assert grid.slots[Slot(J, 12, True)].name == "Hopeful Stakes"

    def test_missing_template_race_warns(self, turf_profile, catalog, caplog):
        trimmed = tuple(r for r in catalog if r.name != "Hopeful Stakes")
        inputs = RotationInputs(turf_profile, trimmed)
        with caplog.at_level(logging.WARNING):
            grid = seed_grid(inputs.by_name()["BC Turf"], inputs, RotationRules())
        assert "Hopeful Stakes" in caplog.text
        assert Slot(J, 12, True) not in grid.slots
        assert len(grid.pre_placed_ids) == 3


class TestBuildPrimary:
    def test_one_grid_per_outstanding_final(self, inputs):
        build = build_primary(inputs)
        assert [g.final_race.name for g in build.grids] == ["BC Classic", "BC Turf"]

    def test_completed_final_gets_no_grid(self, turf_profile, catalog):
        inputs = RotationInputs(turf_profile, tuple(catalog), frozenset({2}))
        build = build_primary(inputs)
        assert [g.final_race.name for g in build.grids] == ["BC Turf"]

    def test_pool_excludes_finals_and_pre_placed(self, inputs):
        build = build_primary(inputs)
        pool_ids = {r.race_id for r in build.pool}
        assert not pool_ids & {1, 2}
        assert not pool_ids & build.pre_placed_ids
        assert 16 in pool_ids  # Arc is fair game without the secondary scenario

    def test_pool_reserves_secondary_races_when_live(self, inputs):
        build = build_primary(inputs, secondary_live=True)
        names = {r.name for r in build.pool}
        assert "Prix de l'Arc de Triomphe" not in names
        assert "Prix Niel" not in names
        assert "Satsuki Sho" in names

    def test_greedy_placements_disjoint(self, inputs):
        build = build_primary(inputs)
        placed = [g.race_ids() - g.pre_placed_ids - {g.final_race.race_id} for g in build.grids]
        assert not placed[0] & placed[1]
        assert placed[0] | placed[1] == build.assigned_ids

    def test_no_slot_double_booked(self, inputs):
        for grid in build_primary(inputs).grids:
            ids = [r.race_id for r in grid.slots.values()]
            assert len(ids) == len(set(ids))

    def test_nothing_after_the_final(self, inputs):
        for grid in build_primary(inputs).grids:
            assert Slot(S, 11, True) not in grid.slots
            assert not any(s.stage == S and s.month == 12 for s in grid.slots)

    def test_turf_races_go_to_turf_rotation(self, inputs):
        grids = _by_name(build_primary(inputs).grids)
        assert 11 in grids["BC Turf"].race_ids()  # Satsuki Sho, thematic for BC Turf
