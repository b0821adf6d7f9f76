"""Tests for weather token derivation, recommendations and staleness."""

import datetime

import pytest

from app.adaptation.weather import (
    DEFAULT_WEATHER_CONFIG,
    WeatherConfig,
    build_recommendation,
    classify_uv,
    derive_context_tokens,
    derive_weather_context,
    is_stale,
    reading_age_seconds,
    season_token,
)
from app.schemas.weather import UVLevel, WeatherReading

NOW = datetime.datetime(2026, 7, 1, 12, 0, tzinfo=datetime.timezone.utc)


# ======================================================================
# Helpers
# ======================================================================


def _make_reading(**overrides) -> WeatherReading:
    """Mild, unremarkable weather by default: only ``uv_low`` is active."""
    defaults = {
        "uv_index": 1,
        "humidity": 50.0,
        "wind_speed_kmh": 5.0,
        "temperature_c": 20.0,
        "has_snow": False,
        "timestamp": NOW,
    }
    defaults.update(overrides)
    return WeatherReading(**defaults)


# ======================================================================
# UV classification
# ======================================================================


class TestClassifyUV:
    @pytest.mark.parametrize(
        "uv, expected",
        [
            (0, UVLevel.LOW),
            (2, UVLevel.LOW),
            (3, UVLevel.MODERATE),
            (7, UVLevel.MODERATE),
            (8, UVLevel.HIGH),
            (10, UVLevel.HIGH),
            (11, UVLevel.EXTREME),
            (15, UVLevel.EXTREME),
        ],
    )
    def test_tier_boundaries(self, uv, expected):
        assert classify_uv(uv) == expected

    def test_monotone(self):
        order = list(UVLevel)
        tiers = [order.index(classify_uv(uv)) for uv in range(0, 20)]
        assert tiers == sorted(tiers)

    def test_context_token(self):
        assert UVLevel.HIGH.context_token == "uv_high"


# ======================================================================
# Context tokens
# ======================================================================


class TestDeriveContextTokens:
    def test_mild_weather_only_uv(self):
        assert derive_context_tokens(_make_reading()) == {"uv_low"}

    def test_high_uv_dry_air(self):
        reading = _make_reading(uv_index=9, humidity=20, wind_speed_kmh=10, temperature_c=22)
        assert derive_context_tokens(reading) == {"uv_high", "low_humidity"}

    def test_tokens_are_not_exclusive(self):
        reading = _make_reading(
            uv_index=4, humidity=80, wind_speed_kmh=40, temperature_c=-3, has_snow=True,
        )
        assert derive_context_tokens(reading) == {
            "uv_moderate", "high_humidity", "windy", "cold", "snow",
        }

    @pytest.mark.parametrize(
        "field, value, token",
        [
            ("humidity", 35.0, None),
            ("humidity", 34.9, "low_humidity"),
            ("humidity", 70.0, None),
            ("humidity", 70.1, "high_humidity"),
            ("wind_speed_kmh", 25.0, None),
            ("wind_speed_kmh", 25.1, "windy"),
            ("temperature_c", 8.0, None),
            ("temperature_c", 7.9, "cold"),
            ("temperature_c", 30.0, None),
            ("temperature_c", 30.5, "hot"),
        ],
    )
    def test_thresholds_are_strict(self, field, value, token):
        tokens = derive_context_tokens(_make_reading(**{field: value}))
        extra = tokens - {"uv_low"}
        assert extra == ({token} if token else set())

    def test_custom_config(self):
        cfg = WeatherConfig(hot_above_c=25.0)
        assert "hot" in derive_context_tokens(_make_reading(temperature_c=26), cfg)
        assert "hot" not in derive_context_tokens(_make_reading(temperature_c=26))


# ======================================================================
# Recommendation
# ======================================================================


class TestBuildRecommendation:
    def test_high_uv(self):
        reading = _make_reading(uv_index=9, humidity=20, wind_speed_kmh=10, temperature_c=22)
        rec = build_recommendation(reading)
        assert rec.spf_level == "SPF 50+"
        assert "Avoid retinoids and acids in morning routine" in rec.warnings

    @pytest.mark.parametrize(
        "uv, spf",
        [(0, "SPF 30"), (5, "SPF 30-50"), (9, "SPF 50+"), (12, "SPF 50+")],
    )
    def test_spf_per_tier(self, uv, spf):
        assert build_recommendation(_make_reading(uv_index=uv)).spf_level == spf

    def test_no_texture_for_mild_weather(self):
        assert build_recommendation(_make_reading()).texture_adjustment is None

    def test_humidity_texture_wins_over_temperature(self):
        rec = build_recommendation(_make_reading(humidity=20, temperature_c=2))
        assert rec.texture_adjustment == "Use heavier moisturizers and occlusives"
        assert "Add ceramide or squalane for barrier support" in rec.tips

    def test_temperature_texture_when_humidity_normal(self):
        rec = build_recommendation(_make_reading(temperature_c=35))
        assert rec.texture_adjustment == "Use lighter, mattifying products"

    def test_wind_never_sets_texture(self):
        rec = build_recommendation(_make_reading(wind_speed_kmh=50))
        assert rec.texture_adjustment is None
        assert "Skip harsh peels and strong retinoids" in rec.warnings

    def test_snow_warning(self):
        rec = build_recommendation(_make_reading(has_snow=True, temperature_c=-2))
        assert "Snow reflects UV rays - treat as high UV day" in rec.warnings

    def test_warnings_accumulate_in_precedence_order(self):
        rec = build_recommendation(_make_reading(uv_index=9, humidity=20, wind_speed_kmh=40, has_snow=True))
        assert rec.warnings == [
            "Avoid retinoids and acids in morning routine",
            "Avoid over-exfoliating in dry conditions",
            "Skip harsh peels and strong retinoids",
            "Snow reflects UV rays - treat as high UV day",
        ]


# ======================================================================
# Staleness and season fallback
# ======================================================================


class TestStaleness:
    def test_fresh_reading(self):
        reading = _make_reading(timestamp=NOW - datetime.timedelta(minutes=30))
        assert not is_stale(reading, NOW)

    def test_exactly_at_window_is_fresh(self):
        reading = _make_reading(timestamp=NOW - datetime.timedelta(seconds=3600))
        assert not is_stale(reading, NOW)

    def test_old_reading_is_stale(self):
        reading = _make_reading(timestamp=NOW - datetime.timedelta(hours=2))
        assert is_stale(reading, NOW)

    def test_naive_timestamp_treated_as_utc(self):
        reading = _make_reading(timestamp=datetime.datetime(2026, 7, 1, 11, 0))
        assert reading_age_seconds(reading, NOW) == 3600.0

    def test_stale_reading_still_classified(self):
        reading = _make_reading(uv_index=9, timestamp=NOW - datetime.timedelta(days=2))
        context = derive_weather_context(reading, NOW)
        assert context.is_stale
        assert context.uv_level == UVLevel.HIGH
        assert "uv_high" in context.context_tokens

    def test_default_window(self):
        assert DEFAULT_WEATHER_CONFIG.stale_after_seconds == 3600


class TestSeasonToken:
    @pytest.mark.parametrize(
        "month, season",
        [
            (1, "winter"), (2, "winter"), (3, "spring"), (5, "spring"),
            (6, "summer"), (8, "summer"), (9, "fall"), (11, "fall"), (12, "winter"),
        ],
    )
    def test_northern_hemisphere(self, month, season):
        assert season_token(datetime.date(2026, month, 15)) == season


class TestDeriveWeatherContext:
    def test_tokens_sorted(self):
        reading = _make_reading(uv_index=9, humidity=20)
        context = derive_weather_context(reading, NOW)
        assert context.context_tokens == ["low_humidity", "uv_high"]
        assert context.recommendation.spf_level == "SPF 50+"
        assert context.age_seconds == 0.0
