"""
Menstrual cycle schemas.

A :class:`CycleProfile` is owned by the user and only changes through an
explicit edit.  The engine derives a :class:`CycleState` from it for a given
calendar day; the phase value doubles as the cycle context token.
"""

import datetime
from enum import Enum

from pydantic import BaseModel, Field


class CyclePhase(str, Enum):
    """Discrete partition of the menstrual cycle."""

    MENSTRUAL = "menstrual"
    FOLLICULAR = "follicular"
    OVULATION = "ovulation"
    LUTEAL = "luteal"


class CycleProfile(BaseModel):
    """User cycle settings."""

    last_period_start_date: datetime.date
    average_cycle_length: int = Field(
        28,
        description="Average cycle length in days (clamped to >= 1 when used)",
    )
    period_length: int = Field(
        5,
        description="Menstruation length in days",
    )


class CycleProfileUpdate(BaseModel):
    """Schema for creating or replacing a stored cycle profile."""

    last_period_start_date: datetime.date
    average_cycle_length: int = Field(28, gt=0, le=60)
    period_length: int = Field(5, gt=0, le=14)


class CycleState(BaseModel):
    """Cycle position for one calendar day."""

    date: datetime.date
    day_in_cycle: int = Field(..., ge=1)
    phase: CyclePhase
    phase_progress: float = Field(
        ...,
        description="Linear progress through the phase; may leave [0, 1] "
                    "for cycles far from 28 days",
    )
    context_token: str


class CycleProfileResponse(BaseModel):
    """Schema for a stored cycle profile in API responses."""

    user_id: str
    last_period_start_date: datetime.date
    average_cycle_length: int
    period_length: int
    updated_at: datetime.datetime
