"""
Weather schemas.

A :class:`WeatherReading` is supplied by an external weather service.  The
engine turns it into a set of non-exclusive context tokens and a
:class:`WeatherRecommendation`; neither step refuses stale readings, the
staleness is only reported.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UVLevel(str, Enum):
    """UV index tier."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def context_token(self) -> str:
        return f"uv_{self.value}"


class WeatherReading(BaseModel):
    """Point-in-time weather observation."""

    uv_index: int = Field(..., ge=0)
    humidity: float = Field(..., ge=0.0, le=100.0, description="Relative humidity, %")
    wind_speed_kmh: float = Field(..., ge=0.0)
    temperature_c: float
    has_snow: bool = False
    timestamp: datetime.datetime
    condition: Optional[str] = None


class WeatherRecommendation(BaseModel):
    """Skincare advice derived from a reading."""

    spf_level: str
    texture_adjustment: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)


class WeatherContext(BaseModel):
    """Everything the engine derives from one reading."""

    uv_level: UVLevel
    context_tokens: list[str] = Field(..., description="Active weather tokens, sorted")
    recommendation: WeatherRecommendation
    is_stale: bool
    age_seconds: float


class WeatherPreferencesUpdate(BaseModel):
    """Schema for toggling weather adaptation."""

    weather_adaptation_enabled: bool


class WeatherPreferencesResponse(BaseModel):
    """Stored weather preferences."""

    user_id: str
    weather_adaptation_enabled: bool
    last_reading: Optional[WeatherReading] = None
    updated_at: datetime.datetime
