"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from app.models.cycle_profile import CycleProfileRecord  # noqa: F401
from app.models.routine import Routine, RoutineStepRecord  # noqa: F401
from app.models.adaptation_attachment import RoutineAdaptationAttachmentRecord  # noqa: F401
from app.models.weather_preferences import WeatherPreferences  # noqa: F401
