"""
Read-only context providers.

The engine does not know where routines, cycle profiles or weather readings
are stored.  Outer layers implement these interfaces (the SQLModel
repositories do) and the orchestration service only reads through them.
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.adaptation import AdaptationType, RoutineAdaptationAttachment
from app.schemas.cycle import CycleProfile
from app.schemas.routine import BaseRoutine
from app.schemas.weather import WeatherReading


class CycleProfileProvider(ABC):
    """Supplies a user's cycle profile."""

    @abstractmethod
    def get_cycle_profile(self, user_id: str) -> Optional[CycleProfile]:
        """Return the profile of *user_id*, or ``None`` if not set up."""
        ...


class WeatherReadingProvider(ABC):
    """Supplies the most recent weather reading for a user."""

    @abstractmethod
    def is_weather_adaptation_enabled(self, user_id: str) -> bool:
        ...

    @abstractmethod
    def get_latest_reading(self, user_id: str) -> Optional[WeatherReading]:
        """Return the last known reading (possibly stale), or ``None``."""
        ...


class RoutineProvider(ABC):
    """Supplies base routines and their adaptation settings."""

    @abstractmethod
    def get_base_routine(self, routine_id: int) -> Optional[BaseRoutine]:
        ...

    @abstractmethod
    def get_owner(self, routine_id: int) -> Optional[str]:
        """User id owning *routine_id*."""
        ...

    @abstractmethod
    def get_adaptation_type(self, routine_id: int) -> Optional[AdaptationType]:
        """Configured adaptation type, ``None`` when adaptation is off."""
        ...

    @abstractmethod
    def get_attachments(self, routine_id: int) -> list[RoutineAdaptationAttachment]:
        ...
