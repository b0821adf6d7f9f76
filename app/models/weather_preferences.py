"""
Weather preferences model.

One row per user: whether weather adaptation is on, and the last reading
received from the weather service (kept even when stale).
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from app.core.clock import utc_now
from app.schemas.weather import WeatherReading


class WeatherPreferences(SQLModel, table=True):
    """User weather settings and cached reading."""

    __tablename__ = "weather_preferences"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False, unique=True, index=True, max_length=64)

    weather_adaptation_enabled: bool = Field(default=False)

    # Serialized WeatherReading
    last_reading: Optional[dict] = Field(default=None, sa_column=Column(JSON, nullable=True), )

    updated_at: datetime.datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    @property
    def reading(self) -> Optional[WeatherReading]:
        if self.last_reading is None:
            return None
        return WeatherReading.model_validate(self.last_reading)
