"""SQLModel database models."""

from app.models.cycle_profile import CycleProfileRecord
from app.models.routine import Routine, RoutineStepRecord
from app.models.adaptation_attachment import RoutineAdaptationAttachmentRecord
from app.models.weather_preferences import WeatherPreferences

__all__ = [
    "CycleProfileRecord",
    "Routine",
    "RoutineStepRecord",
    "RoutineAdaptationAttachmentRecord",
    "WeatherPreferences",
]
