"""Tests for the routine adapter service.

The service reads through the SQLite-backed repositories (see the
``session`` fixture) and applies the bundled rule sets.
"""

import datetime

import pytest
from fastapi import HTTPException

from app.adaptation.cache import SnapshotCache, snapshot_cache
from app.adaptation.loader import load_default_rule_sets
from app.db.repositories.cycle_profile import CycleProfileRepository
from app.db.repositories.routine import RoutineRepository
from app.db.repositories.weather_preferences import WeatherPreferencesRepository
from app.schemas.adaptation import (
    AdaptationOrigin,
    AdaptationRule,
    AdaptationType,
    Emphasis,
    RuleAction,
)
from app.schemas.cycle import CycleProfileUpdate
from app.schemas.routine import AttachmentUpdate, RoutineCreate, RoutineStepCreate, TimeOfDay
from app.schemas.weather import WeatherPreferencesUpdate, WeatherReading
from app.services.cycle_profile_service import CycleProfileService
from app.services.routine_adapter_service import RoutineAdapterService
from app.services.routine_service import RoutineService
from app.services.weather_service import WeatherService

USER = "user-1"
NOW = datetime.datetime(2026, 7, 3, 8, 0, tzinfo=datetime.timezone.utc)
TODAY = NOW.date()


# ======================================================================
# Helpers
# ======================================================================


def _create_routine(session, adaptation_type=None, enabled=True) -> int:
    data = RoutineCreate(
        user_id=USER,
        title="My routine",
        adaptation_enabled=enabled and adaptation_type is not None,
        adaptation_type=adaptation_type,
        steps=[
            RoutineStepCreate(product_category="cleanser", time_of_day=TimeOfDay.MORNING, order=0,
                              description="Wash face"),
            RoutineStepCreate(product_category="sunscreen", time_of_day=TimeOfDay.MORNING, order=1),
            RoutineStepCreate(product_category="retinol", time_of_day=TimeOfDay.EVENING, order=0,
                              description="Pea-sized amount"),
            RoutineStepCreate(product_category="exfoliator", time_of_day=TimeOfDay.WEEKLY, order=0),
        ],
    )
    return RoutineService(session).create_routine(data).id


def _set_profile(session, start: datetime.date) -> None:
    CycleProfileService(session).set_profile(USER, CycleProfileUpdate(last_period_start_date=start))


def _enable_weather(session, reading: WeatherReading | None = None) -> None:
    service = WeatherService(session)
    service.update_preferences(USER, WeatherPreferencesUpdate(weather_adaptation_enabled=True))
    if reading is not None:
        service.record_reading(USER, reading)


def _high_uv_reading(timestamp=NOW) -> WeatherReading:
    return WeatherReading(uv_index=9, humidity=20, wind_speed_kmh=10, temperature_c=22, timestamp=timestamp)


def _make_service(session, cache=None) -> RoutineAdapterService:
    return RoutineAdapterService(
        routines=RoutineRepository(session),
        cycle_profiles=CycleProfileRepository(session),
        weather=WeatherPreferencesRepository(session),
        rule_sets=load_default_rule_sets(),
        cache=cache,
    )


def _by_category(snapshot):
    return {s.product_category: s for s in snapshot.adapted_steps}


# ======================================================================
# Active types
# ======================================================================


class TestActiveTypes:
    def test_routine_type_only(self, session):
        routine_id = _create_routine(session, AdaptationType.CYCLE)
        assert _make_service(session).active_types(routine_id, USER) == [AdaptationType.CYCLE]

    def test_weather_added_when_enabled(self, session):
        routine_id = _create_routine(session, AdaptationType.CYCLE)
        _enable_weather(session)
        assert _make_service(session).active_types(routine_id, USER) == [
            AdaptationType.CYCLE, AdaptationType.WEATHER,
        ]

    def test_disabled_routine_adaptation(self, session):
        routine_id = _create_routine(session, AdaptationType.CYCLE, enabled=False)
        assert _make_service(session).active_types(routine_id, USER) == []

    def test_weather_not_duplicated(self, session):
        routine_id = _create_routine(session, AdaptationType.WEATHER)
        _enable_weather(session)
        assert _make_service(session).active_types(routine_id, USER) == [AdaptationType.WEATHER]


# ======================================================================
# Snapshots
# ======================================================================


class TestGetSnapshot:
    def test_unknown_routine(self, session):
        with pytest.raises(HTTPException) as exc:
            _make_service(session).get_snapshot(999, now=NOW)
        assert exc.value.status_code == 404

    def test_unadapted_routine(self, session):
        routine_id = _create_routine(session)
        snapshot = _make_service(session).get_snapshot(routine_id, now=NOW)
        assert snapshot.active_tokens == []
        assert all(s.emphasis == Emphasis.NORMAL for s in snapshot.adapted_steps)
        assert _by_category(snapshot)["retinol"].guidance_text == "Pea-sized amount"
        assert snapshot.briefing.context_token == "baseline"
        assert snapshot.weather_recommendation is None

    def test_cycle_phase_applied(self, session):
        routine_id = _create_routine(session, AdaptationType.CYCLE)
        _set_profile(session, TODAY - datetime.timedelta(days=1))  # day 2, menstrual
        snapshot = _make_service(session).get_snapshot(routine_id, now=NOW)
        assert snapshot.active_tokens == ["menstrual"]
        assert _by_category(snapshot)["exfoliator"].emphasis == Emphasis.REDUCE
        assert snapshot.briefing.title == "Menstrual phase"

    def test_cycle_without_profile_is_unadapted(self, session):
        routine_id = _create_routine(session, AdaptationType.CYCLE)
        snapshot = _make_service(session).get_snapshot(routine_id, now=NOW)
        assert snapshot.active_tokens == []
        assert snapshot.briefing.context_token == "baseline"

    def test_on_date_drives_phase(self, session):
        routine_id = _create_routine(session, AdaptationType.CYCLE)
        _set_profile(session, TODAY)
        snapshot = _make_service(session).get_snapshot(routine_id, TODAY + datetime.timedelta(days=20), NOW)
        assert snapshot.active_tokens == ["luteal"]

    def test_cycle_and_weather_combined(self, session):
        routine_id = _create_routine(session, AdaptationType.CYCLE)
        _set_profile(session, TODAY - datetime.timedelta(days=1))
        _enable_weather(session, _high_uv_reading())
        snapshot = _make_service(session).get_snapshot(routine_id, now=NOW)
        steps = _by_category(snapshot)
        assert snapshot.active_tokens == ["low_humidity", "menstrual", "uv_high"]
        assert steps["exfoliator"].emphasis == Emphasis.SKIP
        assert steps["exfoliator"].warnings
        # Morning-only UV rules leave the evening retinol to the cycle rule.
        assert steps["retinol"].emphasis == Emphasis.REDUCE
        assert steps["retinol"].should_show is True
        assert steps["sunscreen"].emphasis == Emphasis.EMPHASIZE
        assert snapshot.briefing.context_token == "menstrual"
        assert snapshot.weather_recommendation.spf_level == "SPF 50+"
        assert snapshot.weather_is_stale is False

    def test_evening_retinol_visible_under_high_uv(self, session):
        routine_id = _create_routine(session)
        _enable_weather(session, _high_uv_reading())
        retinol = _by_category(_make_service(session).get_snapshot(routine_id, now=NOW))["retinol"]
        assert retinol.should_show is True
        assert retinol.emphasis == Emphasis.NORMAL
        assert retinol.guidance_text == "Pea-sized amount"

    def test_stale_reading_reported(self, session):
        routine_id = _create_routine(session)
        _enable_weather(session, _high_uv_reading(NOW - datetime.timedelta(hours=3)))
        snapshot = _make_service(session).get_snapshot(routine_id, now=NOW)
        assert snapshot.weather_is_stale is True
        assert "uv_high" in snapshot.active_tokens

    def test_season_fallback_without_reading(self, session):
        routine_id = _create_routine(session)
        _enable_weather(session)
        snapshot = _make_service(session).get_snapshot(routine_id, now=NOW)
        assert snapshot.active_tokens == ["summer"]
        assert snapshot.briefing.title == "Summer"
        assert snapshot.weather_recommendation is None

    def test_user_override_wins(self, session):
        routine_id = _create_routine(session)
        _enable_weather(session, _high_uv_reading())
        RoutineService(session).update_attachment(routine_id, AdaptationType.WEATHER, AttachmentUpdate(
            custom_rules=[AdaptationRule(
                id="mine", product_category="exfoliator", context_token="uv_high",
                action=RuleAction(emphasis=Emphasis.REDUCE, guidance_template="Gentle enzyme peel only"),
            )],
        ))
        exfoliator = _by_category(_make_service(session).get_snapshot(routine_id, now=NOW))["exfoliator"]
        assert exfoliator.emphasis == Emphasis.REDUCE
        assert exfoliator.should_show is True
        assert exfoliator.origin == AdaptationOrigin.USER_CUSTOM
        assert exfoliator.guidance_text == "Gentle enzyme peel only"
        assert "Acids increase photosensitivity" in exfoliator.warnings


# ======================================================================
# Caching
# ======================================================================


class TestSnapshotCaching:
    def test_second_call_served_from_cache(self, session):
        cache = SnapshotCache()
        routine_id = _create_routine(session, AdaptationType.CYCLE)
        _set_profile(session, TODAY)
        service = _make_service(session, cache)
        first = service.get_snapshot(routine_id, now=NOW)
        second = service.get_snapshot(routine_id, now=NOW)
        assert first == second
        assert len(cache) == 1

    def test_new_phase_is_new_entry(self, session):
        cache = SnapshotCache()
        routine_id = _create_routine(session, AdaptationType.CYCLE)
        _set_profile(session, TODAY)
        service = _make_service(session, cache)
        service.get_snapshot(routine_id, now=NOW)
        _set_profile(session, TODAY - datetime.timedelta(days=20))
        assert service.get_snapshot(routine_id, now=NOW).active_tokens == ["luteal"]

    def test_staleness_not_cached(self, session):
        cache = SnapshotCache()
        routine_id = _create_routine(session)
        _enable_weather(session, _high_uv_reading())
        service = _make_service(session, cache)
        assert service.get_snapshot(routine_id, now=NOW).weather_is_stale is False
        later = NOW + datetime.timedelta(hours=2)
        assert service.get_snapshot(routine_id, TODAY, later).weather_is_stale is True
        assert len(cache) == 1

    def test_attachment_edit_invalidates(self, session):
        routine_id = _create_routine(session)
        _enable_weather(session, _high_uv_reading())
        service = RoutineAdapterService.from_session(session)
        assert _by_category(service.get_snapshot(routine_id, now=NOW))["exfoliator"].emphasis == Emphasis.SKIP
        assert len(snapshot_cache) == 1

        RoutineService(session).update_attachment(routine_id, AdaptationType.WEATHER, AttachmentUpdate(
            custom_rules=[AdaptationRule(
                id="mine", product_category="exfoliator", context_token="uv_high",
                action=RuleAction(emphasis=Emphasis.NORMAL),
            )],
        ))
        assert len(snapshot_cache) == 0
        assert _by_category(service.get_snapshot(routine_id, now=NOW))["exfoliator"].emphasis == Emphasis.NORMAL

    def test_past_days_pruned(self, session):
        cache = SnapshotCache()
        routine_id = _create_routine(session, AdaptationType.CYCLE)
        _set_profile(session, TODAY)
        service = _make_service(session, cache)
        yesterday = NOW - datetime.timedelta(days=1)
        service.get_snapshot(routine_id, now=yesterday)
        service.get_snapshot(routine_id, now=NOW)
        assert len(cache) == 1
