"""Weather preferences repository."""

from typing import Optional

from sqlmodel import Session, select

from app.adaptation.providers import WeatherReadingProvider
from app.models.weather_preferences import WeatherPreferences
from app.schemas.weather import WeatherReading


class WeatherPreferencesRepository(WeatherReadingProvider):
    """Repository for WeatherPreferences database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_user(self, user_id: str) -> Optional[WeatherPreferences]:
        statement = select(WeatherPreferences).where(WeatherPreferences.user_id == user_id)
        return self.session.exec(statement).first()

    def save(self, prefs: WeatherPreferences) -> WeatherPreferences:
        self.session.add(prefs)
        self.session.commit()
        self.session.refresh(prefs)
        return prefs

    def get_or_create(self, user_id: str) -> WeatherPreferences:
        """Get the user's preferences, or create disabled defaults."""
        existing = self.get_by_user(user_id)
        if existing:
            return existing
        return self.save(WeatherPreferences(user_id=user_id))

    # WeatherReadingProvider

    def is_weather_adaptation_enabled(self, user_id: str) -> bool:
        prefs = self.get_by_user(user_id)
        return bool(prefs and prefs.weather_adaptation_enabled)

    def get_latest_reading(self, user_id: str) -> Optional[WeatherReading]:
        prefs = self.get_by_user(user_id)
        return prefs.reading if prefs else None
