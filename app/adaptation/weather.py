"""
Weather context — derives context tokens and advice from a weather reading.

Two outputs are computed from the same reading:

1. **Context tokens** — a non-exclusive set.  The UV tier token is always
   present; every other token is an independent threshold check, so any
   subset of ``{low_humidity | high_humidity, windy, cold | hot, snow}`` is
   valid.
2. **Recommendation** — SPF level, texture advice, warnings and tips,
   built in a fixed precedence:

       UV tier → humidity → wind → temperature → snow

   ``texture_adjustment`` is first-writer-wins (humidity before
   temperature); wind never sets it.  Warnings and tips accumulate.

Readings older than the staleness window are still classified; staleness
is only reported to the caller.
"""

from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.weather import (
    UVLevel,
    WeatherContext,
    WeatherReading,
    WeatherRecommendation,
)

# ======================================================================
# Configuration
# ======================================================================

# Inclusive lower bound of each UV tier, highest first.
_UV_TIERS: list[tuple[UVLevel, int]] = [
    (UVLevel.EXTREME, 11),
    (UVLevel.HIGH, 8),
    (UVLevel.MODERATE, 3),
    (UVLevel.LOW, 0),
]


class WeatherConfig(BaseModel):
    """Thresholds for weather token derivation.

    Comparisons are strict: a humidity of exactly 35 is not
    ``low_humidity``.
    """

    low_humidity_below: float = Field(35.0)
    high_humidity_above: float = Field(70.0)
    windy_above_kmh: float = Field(25.0)
    cold_below_c: float = Field(8.0)
    hot_above_c: float = Field(30.0)
    stale_after_seconds: float = Field(3600.0, gt=0)


DEFAULT_WEATHER_CONFIG = WeatherConfig()

# UV tier → (spf level, warnings, tips).
_UV_ADVICE: dict[UVLevel, tuple[str, list[str], list[str]]] = {
    UVLevel.LOW: (
        "SPF 30",
        [],
        ["Actives like retinoids are safe to use"],
    ),
    UVLevel.MODERATE: (
        "SPF 30-50",
        [],
        ["Antioxidant serum recommended"],
    ),
    UVLevel.HIGH: (
        "SPF 50+",
        ["Avoid retinoids and acids in morning routine"],
        ["Reapply sunscreen every 2 hours", "Add antioxidant serum (Vit C, EGCG)"],
    ),
    UVLevel.EXTREME: (
        "SPF 50+",
        ["Skip retinoids and strong acids today", "Reapply sunscreen every 1-2 hours"],
        ["Stay in shade during peak hours (10am-4pm)", "Wear protective clothing"],
    ),
}


# ======================================================================
# Classification
# ======================================================================


def classify_uv(uv_index: int) -> UVLevel:
    """Map a UV index to its tier.  Monotone step function."""
    for level, lower in _UV_TIERS:
        if uv_index >= lower:
            return level
    return UVLevel.LOW


def derive_context_tokens(
    reading: WeatherReading,
    config: Optional[WeatherConfig] = None,
) -> frozenset[str]:
    """Return the active weather tokens for *reading*."""
    cfg = config or DEFAULT_WEATHER_CONFIG
    checks = {
        "low_humidity": reading.humidity < cfg.low_humidity_below,
        "high_humidity": reading.humidity > cfg.high_humidity_above,
        "windy": reading.wind_speed_kmh > cfg.windy_above_kmh,
        "cold": reading.temperature_c < cfg.cold_below_c,
        "hot": reading.temperature_c > cfg.hot_above_c,
        "snow": reading.has_snow,
    }
    tokens = {token for token, active in checks.items() if active}
    tokens.add(classify_uv(reading.uv_index).context_token)
    return frozenset(tokens)


def build_recommendation(
    reading: WeatherReading,
    config: Optional[WeatherConfig] = None,
) -> WeatherRecommendation:
    """Build SPF/texture advice for *reading*."""
    cfg = config or DEFAULT_WEATHER_CONFIG

    # 1. UV tier
    spf_level, uv_warnings, uv_tips = _UV_ADVICE[classify_uv(reading.uv_index)]
    warnings = list(uv_warnings)
    tips = list(uv_tips)
    texture: Optional[str] = None

    # 2. Humidity
    if reading.humidity < cfg.low_humidity_below:
        texture = texture or "Use heavier moisturizers and occlusives"
        tips.append("Add hydrating toner or HA serum")
        warnings.append("Avoid over-exfoliating in dry conditions")
    elif reading.humidity > cfg.high_humidity_above:
        texture = texture or "Use lighter gel moisturizers"
        tips.append("Avoid thick occlusives or heavy oils")

    # 3. Wind
    if reading.wind_speed_kmh > cfg.windy_above_kmh:
        tips.append("Apply barrier cream or balm")
        warnings.append("Skip harsh peels and strong retinoids")

    # 4. Temperature
    if reading.temperature_c < cfg.cold_below_c:
        texture = texture or "Use richer, more protective moisturizers"
        tips.append("Add ceramide or squalane for barrier support")
    elif reading.temperature_c > cfg.hot_above_c:
        texture = texture or "Use lighter, mattifying products"
        tips.append("Choose oil-free formulations")

    # 5. Snow
    if reading.has_snow:
        warnings.append("Snow reflects UV rays - treat as high UV day")

    return WeatherRecommendation(
        spf_level=spf_level,
        texture_adjustment=texture,
        warnings=warnings,
        tips=tips,
    )


# ======================================================================
# Staleness and fallbacks
# ======================================================================


def reading_age_seconds(reading: WeatherReading, now: datetime.datetime) -> float:
    """Seconds elapsed between the reading and *now*."""
    timestamp = reading.timestamp
    # Mixed naive/aware datetimes: interpret the naive side as UTC.
    if (timestamp.tzinfo is None) != (now.tzinfo is None):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=datetime.timezone.utc)
        else:
            now = now.replace(tzinfo=datetime.timezone.utc)
    return (now - timestamp).total_seconds()


def is_stale(
    reading: WeatherReading,
    now: datetime.datetime,
    config: Optional[WeatherConfig] = None,
) -> bool:
    """True when the reading is older than the staleness window."""
    cfg = config or DEFAULT_WEATHER_CONFIG
    return reading_age_seconds(reading, now) > cfg.stale_after_seconds


def season_token(on_date: datetime.date) -> str:
    """Northern-hemisphere season token, used when no reading is available."""
    month = on_date.month
    if month in (12, 1, 2):
        return "winter"
    if month in (3, 4, 5):
        return "spring"
    if month in (6, 7, 8):
        return "summer"
    return "fall"


# ======================================================================
# Main entry point
# ======================================================================


def derive_weather_context(
    reading: WeatherReading,
    now: datetime.datetime,
    config: Optional[WeatherConfig] = None,
) -> WeatherContext:
    """Derive UV tier, tokens, recommendation and staleness for *reading*."""
    cfg = config or DEFAULT_WEATHER_CONFIG
    age = reading_age_seconds(reading, now)
    return WeatherContext(
        uv_level=classify_uv(reading.uv_index),
        context_tokens=sorted(derive_context_tokens(reading, cfg)),
        recommendation=build_recommendation(reading, cfg),
        is_stale=age > cfg.stale_after_seconds,
        age_seconds=round(age, 1),
    )
