"""Tests for rule set loading, validation and the bundled rule files."""

import datetime
import json

import pytest

from app.adaptation.categories import is_known_category
from app.adaptation.loader import (
    DEFAULT_RULES_DIR,
    RULE_SET_FILENAMES,
    load_default_rule_set,
    load_default_rule_sets,
    validate_rule_set,
)
from app.adaptation.snapshot import assemble
from app.schemas.adaptation import (
    AdaptationRule,
    AdaptationType,
    Emphasis,
    PhaseBriefing,
    RuleAction,
    RuleScope,
    RuleSet,
)
from app.schemas.cycle import CyclePhase
from app.schemas.routine import BaseRoutine, RoutineStep, TimeOfDay

CYCLE = AdaptationType.CYCLE
WEATHER = AdaptationType.WEATHER


# ======================================================================
# Helpers
# ======================================================================


def _make_rule(rule_id: str, category: str = "retinol", token: str = "luteal") -> AdaptationRule:
    return AdaptationRule(
        id=rule_id, product_category=category, context_token=token,
        action=RuleAction(emphasis=Emphasis.REDUCE),
    )


def _write_rule_set(directory, adaptation_type: AdaptationType, payload: dict) -> None:
    (directory / RULE_SET_FILENAMES[adaptation_type]).write_text(json.dumps(payload), encoding="utf-8")


# ======================================================================
# Bundled rule sets
# ======================================================================


class TestBundledRuleSets:
    def test_all_types_load(self):
        rule_sets = load_default_rule_sets()
        assert set(rule_sets) == set(AdaptationType)

    @pytest.mark.parametrize("adaptation_type", list(AdaptationType))
    def test_bundled_sets_are_clean(self, adaptation_type):
        rule_set = load_default_rule_set(adaptation_type)
        assert rule_set is not None
        assert rule_set.type == adaptation_type
        assert validate_rule_set(rule_set) == []

    def test_cycle_briefing_for_every_phase(self):
        rule_set = load_default_rule_set(CYCLE)
        for phase in CyclePhase:
            assert rule_set.briefing_for(phase.value) is not None

    @pytest.mark.parametrize("token", ["winter", "spring", "summer", "fall", "uv_low", "uv_extreme"])
    def test_weather_briefings_cover_fallbacks(self, token):
        assert load_default_rule_set(WEATHER).briefing_for(token) is not None

    def test_bundled_categories_are_known(self):
        for rule_set in load_default_rule_sets().values():
            for rule in rule_set.rules:
                assert is_known_category(rule.product_category), rule.id

    def test_menstrual_high_uv_exfoliator_skipped(self):
        routine = BaseRoutine(id=1, steps=[
            RoutineStep(id="exf", product_category="exfoliator", time_of_day=TimeOfDay.WEEKLY, order=0),
            RoutineStep(id="am-ret", product_category="retinol", time_of_day=TimeOfDay.MORNING, order=0),
        ])
        snapshot = assemble(
            routine,
            {CYCLE: ["menstrual"], WEATHER: ["uv_high"]},
            load_default_rule_sets(),
            datetime.date(2026, 7, 1),
        )
        by_id = {s.step_id: s for s in snapshot.adapted_steps}
        assert by_id["exf"].emphasis == Emphasis.SKIP
        assert by_id["exf"].warnings
        assert by_id["am-ret"].should_show is False
        assert "Skip retinoids in high UV" in by_id["am-ret"].warnings
        assert snapshot.briefing.context_token == "menstrual"

    @pytest.mark.parametrize("token", ["uv_high", "uv_extreme"])
    def test_evening_retinol_kept_under_strong_uv(self, token):
        routine = BaseRoutine(id=1, steps=[
            RoutineStep(id="pm-ret", product_category="retinol", time_of_day=TimeOfDay.EVENING, order=0,
                        description="Pea-sized amount"),
        ])
        snapshot = assemble(routine, {WEATHER: [token]}, load_default_rule_sets(), datetime.date(2026, 7, 1))
        step = snapshot.adapted_steps[0]
        assert step.should_show is True
        assert step.emphasis == Emphasis.NORMAL
        assert step.guidance_text == "Pea-sized amount"

    def test_cold_wind_softens_exfoliation(self):
        routine = BaseRoutine(id=1, steps=[
            RoutineStep(id="exf", product_category="exfoliator", time_of_day=TimeOfDay.WEEKLY, order=0),
        ])
        rule_sets = load_default_rule_sets()
        day = datetime.date(2026, 1, 10)
        windy_only = assemble(routine, {WEATHER: ["windy"]}, rule_sets, day).adapted_steps[0]
        cold_and_windy = assemble(routine, {WEATHER: ["cold", "windy"]}, rule_sets, day).adapted_steps[0]
        assert windy_only.emphasis == Emphasis.NORMAL
        assert cold_and_windy.emphasis == Emphasis.REDUCE
        assert "Cold wind weakens the skin barrier" in cold_and_windy.warnings


# ======================================================================
# Loading from a directory
# ======================================================================


class TestLoadDefaultRuleSet:
    def test_missing_file_returns_none(self, tmp_path):
        assert load_default_rule_set(CYCLE, tmp_path) is None

    def test_invalid_json_returns_none(self, tmp_path):
        (tmp_path / RULE_SET_FILENAMES[CYCLE]).write_text("{not json", encoding="utf-8")
        assert load_default_rule_set(CYCLE, tmp_path) is None

    def test_invalid_schema_returns_none(self, tmp_path):
        _write_rule_set(tmp_path, CYCLE, {"type": "cycle", "version": "1", "rules": [{"id": "x"}]})
        assert load_default_rule_set(CYCLE, tmp_path) is None

    def test_wrong_type_returns_none(self, tmp_path):
        _write_rule_set(tmp_path, CYCLE, {"type": "weather", "version": "1"})
        assert load_default_rule_set(CYCLE, tmp_path) is None

    def test_loads_valid_document(self, tmp_path):
        _write_rule_set(tmp_path, CYCLE, {
            "type": "cycle",
            "version": "2.0",
            "rules": [{
                "id": "r1", "product_category": "retinol", "context_token": "luteal",
                "action": {"emphasis": "skip"},
            }],
        })
        rule_set = load_default_rule_set(CYCLE, tmp_path)
        assert rule_set.version == "2.0"
        assert rule_set.rules[0].action.emphasis == Emphasis.SKIP

    def test_partial_directory(self, tmp_path):
        _write_rule_set(tmp_path, WEATHER, {"type": "weather", "version": "1"})
        assert set(load_default_rule_sets(tmp_path)) == {WEATHER}


# ======================================================================
# Validation
# ======================================================================


class TestValidateRuleSet:
    def test_clean(self):
        rule_set = RuleSet(type=CYCLE, version="1", rules=[_make_rule("r1")],
                           briefings=[PhaseBriefing(context_token="luteal", title="Luteal")])
        assert validate_rule_set(rule_set) == []

    def test_duplicate_ids(self):
        rule_set = RuleSet(type=CYCLE, version="1",
                           rules=[_make_rule("r1"), _make_rule("r1", category="toner")],
                           briefings=[PhaseBriefing(context_token="luteal", title="Luteal")])
        assert validate_rule_set(rule_set) == ["Duplicate rule id 'r1': 2 rules"]

    def test_duplicate_category_token(self):
        rule_set = RuleSet(type=CYCLE, version="1",
                           rules=[_make_rule("r1", "Face Mask"), _make_rule("r2", "face_mask")],
                           briefings=[PhaseBriefing(context_token="luteal", title="Luteal")])
        assert validate_rule_set(rule_set) == ["Duplicate rules for facemask/luteal: 2 rules"]

    def test_scoped_rules_are_not_duplicates(self):
        evening = _make_rule("r2").model_copy(update={"applies_to": RuleScope.PM})
        rule_set = RuleSet(type=CYCLE, version="1", rules=[_make_rule("r1"), evening],
                           briefings=[PhaseBriefing(context_token="luteal", title="Luteal")])
        assert validate_rule_set(rule_set) == []

    def test_duplicate_scoped_rules(self):
        first = _make_rule("r1").model_copy(update={"applies_to": RuleScope.AM, "when": ["cold"]})
        second = _make_rule("r2").model_copy(update={"applies_to": RuleScope.AM, "when": ["cold"]})
        rule_set = RuleSet(type=CYCLE, version="1", rules=[first, second],
                           briefings=[PhaseBriefing(context_token="luteal", title="Luteal")])
        assert validate_rule_set(rule_set) == ["Duplicate rules for retinol/luteal@am+cold: 2 rules"]

    def test_unknown_category(self):
        rule_set = RuleSet(type=CYCLE, version="1", rules=[_make_rule("r1", "jade_roller")],
                           briefings=[PhaseBriefing(context_token="luteal", title="Luteal")])
        assert validate_rule_set(rule_set) == ["Unknown product categories: jade_roller"]

    def test_missing_briefings(self):
        rule_set = RuleSet(type=CYCLE, version="1", rules=[_make_rule("r1"), _make_rule("r2", token="menstrual")])
        assert validate_rule_set(rule_set) == ["Missing briefings for contexts: luteal, menstrual"]

    def test_default_dir_exists(self):
        assert DEFAULT_RULES_DIR.is_dir()
