"""End-to-end tests for pattern generation."""

import logging
from collections import Counter

from umacrown.rotation.generator import generate_patterns
from umacrown.rotation.repository import template_race_names
from umacrown.rotation.rules import RotationRules
from umacrown.rotation.types import Distance, RotationInputs, Scenario, Surface

TURF, DIRT = Surface.TURF, Surface.DIRT


def _slots(pattern):
    stages = (("junior", pattern.junior), ("classic", pattern.classic), ("senior", pattern.senior))
    return [(stage, r.month, r.second_half) for stage, races in stages for r in races]


class TestEdgeCases:
    def test_nothing_outstanding(self, turf_profile, catalog):
        done = frozenset(r.race_id for r in catalog)
        assert generate_patterns(RotationInputs(turf_profile, tuple(catalog), done)) == []

    def test_single_final_no_expedition(self, turf_profile, catalog):
        keep = {"BC Turf", "Hopeful Stakes", "Japanese Derby", "Japan Cup", "Takarazuka Kinen", "Satsuki Sho"}
        inputs = RotationInputs(turf_profile, tuple(r for r in catalog if r.name in keep))

        patterns = generate_patterns(inputs)

        assert len(patterns) == 1
        assert patterns[0].scenario == Scenario.PRIMARY
        assert patterns[0].strategy is None
        assert patterns[0].total_races == 6

    def test_only_rank_four_races_left(self, turf_profile, race_factory):
        race = race_factory(1, "Oxalis Sho", DIRT, Distance.SPRINT, 11, stages="j", rank=4)
        assert generate_patterns(RotationInputs(turf_profile, (race,))) == []


class TestFullCatalog:
    def test_one_secondary_pattern(self, inputs):
        patterns = generate_patterns(inputs)
        secondary = [p for p in patterns if p.scenario == Scenario.SECONDARY]

        assert len(secondary) == 1
        classic = {(r.month, r.second_half): r.name for r in secondary[0].classic}
        assert classic[(5, True)] == "Japanese Derby"
        assert classic[(9, False)] == "Prix Niel"
        assert classic[(10, False)] == "Prix de l'Arc de Triomphe"
        senior = {(r.month, r.second_half): r.name for r in secondary[0].senior}
        assert senior[(6, True)] == "Takarazuka Kinen"
        assert senior[(9, False)] == "Prix Foy"

    def test_primary_patterns_first_investment_leading(self, inputs):
        patterns = generate_patterns(inputs)
        assert patterns[0].scenario == Scenario.PRIMARY
        assert patterns[0].strategy is not None
        assert patterns[0].strategy.dirt == 3

    def test_every_pattern_non_empty(self, inputs):
        for pattern in generate_patterns(inputs):
            assert pattern.total_races >= 1
            assert len(pattern.factors) == 6

    def test_one_race_per_slot_and_slot_per_race(self, inputs):
        for pattern in generate_patterns(inputs):
            ids = pattern.race_ids()
            assert len(ids) == len(set(ids))
            slots = _slots(pattern)
            assert len(slots) == len(set(slots))

    def test_only_fixed_races_repeat_across_patterns(self, inputs):
        rules = RotationRules()
        fixed = template_race_names(rules) | {r.name for r in inputs.finals}
        names = {r.race_id: r.name for r in inputs.catalog}

        counts = Counter(rid for p in generate_patterns(inputs) for rid in p.race_ids())
        repeated = {names[rid] for rid, n in counts.items() if n > 1}
        assert repeated <= fixed

    def test_deterministic(self, inputs):
        first = [p.to_dict() for p in generate_patterns(inputs)]
        second = [p.to_dict() for p in generate_patterns(inputs)]
        assert first == second

    def test_no_secondary_pattern_once_expedition_done(self, turf_profile, catalog):
        inputs = RotationInputs(turf_profile, tuple(catalog), frozenset({16, 17, 18}))
        assert all(p.scenario == Scenario.PRIMARY for p in generate_patterns(inputs))


class TestBudget:
    def test_race_beyond_budget_never_assigned(self, profile_factory, catalog, race_factory):
        profile = profile_factory(dirt="G", sprint="G")
        capella = race_factory(40, "Capella Stakes", DIRT, Distance.SPRINT, 12, False, "cs", rank=3)
        inputs = RotationInputs(profile, (*catalog, capella))
        rules = RotationRules(enhancement_budget=4)

        patterns = generate_patterns(inputs, rules)

        assert all(40 not in p.race_ids() for p in patterns)

    def test_capacity_note_logged(self, profile_factory, catalog, race_factory, caplog):
        profile = profile_factory(dirt="G", sprint="G")
        capella = race_factory(40, "Capella Stakes", DIRT, Distance.SPRINT, 12, False, "cs", rank=3)
        inputs = RotationInputs(profile, (*catalog, capella))

        with caplog.at_level(logging.INFO):
            generate_patterns(inputs, RotationRules(enhancement_budget=4))
        assert "Capella Stakes" in caplog.text
