"""Database repositories."""

from app.db.repositories.cycle_profile import CycleProfileRepository
from app.db.repositories.routine import RoutineRepository
from app.db.repositories.weather_preferences import WeatherPreferencesRepository

__all__ = [
    "CycleProfileRepository",
    "RoutineRepository",
    "WeatherPreferencesRepository",
]
