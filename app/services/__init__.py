"""Business logic services."""

from app.services.cycle_profile_service import CycleProfileService
from app.services.routine_service import RoutineService
from app.services.weather_service import WeatherService
from app.services.routine_adapter_service import RoutineAdapterService

__all__ = [
    "CycleProfileService",
    "RoutineService",
    "WeatherService",
    "RoutineAdapterService",
]
