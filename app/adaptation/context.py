"""
Active context — gathers the tokens of every active adaptation type.

Given which types are enabled and the raw inputs for each, produce the
``{type: tokens}`` mapping consumed by the rule engine:

- **cycle** — exactly one token, the phase of the day; the type is
  dropped when no profile exists.
- **weather** — the reading's token set; without a reading the
  northern-hemisphere season token stands in.
- **skin_state** — the ``normal`` token until a skin-state source exists.
"""

from __future__ import annotations

import datetime
import logging
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from app.adaptation.cycle import cycle_context_token
from app.adaptation.weather import (
    WeatherConfig,
    build_recommendation,
    derive_context_tokens,
    is_stale,
    season_token,
)
from app.schemas.adaptation import AdaptationType
from app.schemas.cycle import CycleProfile
from app.schemas.weather import WeatherReading, WeatherRecommendation

logger = logging.getLogger(__name__)

SKIN_STATE_DEFAULT_TOKEN = "normal"


class ActiveContext(BaseModel):
    """Tokens per active type plus the weather side-outputs."""

    tokens: dict[AdaptationType, list[str]] = Field(default_factory=dict)
    weather_recommendation: Optional[WeatherRecommendation] = None
    weather_is_stale: Optional[bool] = None

    def token_sets(self) -> dict[AdaptationType, frozenset[str]]:
        return {t: frozenset(tokens) for t, tokens in self.tokens.items()}

    def all_tokens(self) -> frozenset[str]:
        return frozenset(token for tokens in self.tokens.values() for token in tokens)


def build_active_context(
    types: Iterable[AdaptationType],
    on_date: datetime.date,
    now: datetime.datetime,
    profile: Optional[CycleProfile] = None,
    reading: Optional[WeatherReading] = None,
    weather_config: Optional[WeatherConfig] = None,
) -> ActiveContext:
    """Derive the active tokens for *types* on *on_date*."""
    context = ActiveContext()

    for adaptation_type in dict.fromkeys(types):
        if adaptation_type is AdaptationType.CYCLE:
            if profile is None:
                logger.info("Cycle adaptation requested without a cycle profile; skipped")
                continue
            context.tokens[adaptation_type] = [cycle_context_token(profile, on_date)]

        elif adaptation_type is AdaptationType.WEATHER:
            if reading is None:
                logger.info("No weather reading available; falling back to season")
                context.tokens[adaptation_type] = [season_token(on_date)]
                continue
            context.tokens[adaptation_type] = sorted(derive_context_tokens(reading, weather_config))
            context.weather_recommendation = build_recommendation(reading, weather_config)
            context.weather_is_stale = is_stale(reading, now, weather_config)
            if context.weather_is_stale:
                logger.info("Weather reading from %s is stale", reading.timestamp)

        elif adaptation_type is AdaptationType.SKIN_STATE:
            context.tokens[adaptation_type] = [SKIN_STATE_DEFAULT_TOKEN]

    return context
