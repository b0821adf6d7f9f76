"""
Weather service.

Keeps the per-user weather adaptation switch and the last reading pushed by
the weather integration.  Readings are stored as received; staleness is
evaluated whenever a snapshot is built.
"""

import datetime
import logging

from sqlmodel import Session

from app.adaptation.weather import WeatherConfig, derive_weather_context
from app.core.clock import utc_now
from app.core.config import settings
from app.db.repositories.weather_preferences import WeatherPreferencesRepository
from app.models.weather_preferences import WeatherPreferences
from app.schemas.weather import (
    WeatherContext,
    WeatherPreferencesResponse,
    WeatherPreferencesUpdate,
    WeatherReading,
)

logger = logging.getLogger(__name__)


def weather_config_from_settings() -> WeatherConfig:
    """Weather thresholds with the staleness window taken from settings."""
    return WeatherConfig(stale_after_seconds=settings.WEATHER_STALE_AFTER_SECONDS)


class WeatherService:
    """Service for weather preferences and readings."""

    def __init__(self, session: Session):
        self.repository = WeatherPreferencesRepository(session)

    def get_preferences(self, user_id: str) -> WeatherPreferencesResponse:
        return self._to_response(self.repository.get_or_create(user_id))

    def update_preferences(self, user_id: str, data: WeatherPreferencesUpdate, ) -> WeatherPreferencesResponse:
        prefs = self.repository.get_or_create(user_id)
        prefs.weather_adaptation_enabled = data.weather_adaptation_enabled
        prefs.updated_at = utc_now()
        logger.info("Weather adaptation %s for user %s",
                    "enabled" if data.weather_adaptation_enabled else "disabled", user_id)
        return self._to_response(self.repository.save(prefs))

    def record_reading(self, user_id: str, reading: WeatherReading) -> WeatherPreferencesResponse:
        """Store *reading* as the user's latest one."""
        prefs = self.repository.get_or_create(user_id)
        prefs.last_reading = reading.model_dump(mode="json")
        prefs.updated_at = utc_now()
        logger.debug("Stored weather reading for user %s (uv=%s)", user_id, reading.uv_index)
        return self._to_response(self.repository.save(prefs))

    @staticmethod
    def derive_context(reading: WeatherReading, now: datetime.datetime) -> WeatherContext:
        """Stateless derivation of tokens, advice and staleness."""
        return derive_weather_context(reading, now, weather_config_from_settings())

    @staticmethod
    def _to_response(prefs: WeatherPreferences) -> WeatherPreferencesResponse:
        return WeatherPreferencesResponse(user_id=prefs.user_id,
                                          weather_adaptation_enabled=prefs.weather_adaptation_enabled,
                                          last_reading=prefs.reading, updated_at=prefs.updated_at, )
