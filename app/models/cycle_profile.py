"""
Cycle profile model.

One row per user.  The profile only changes through an explicit edit; the
phase of any given day is derived from it, never stored.
"""

import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.core.clock import utc_now
from app.schemas.cycle import CycleProfile


class CycleProfileRecord(SQLModel, table=True):
    """Stored cycle settings of a user."""

    __tablename__ = "cycle_profiles"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False, unique=True, index=True, max_length=64)

    last_period_start_date: datetime.date = Field(nullable=False)
    average_cycle_length: int = Field(default=28)
    period_length: int = Field(default=5)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime.datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def to_profile(self) -> CycleProfile:
        return CycleProfile(
            last_period_start_date=self.last_period_start_date,
            average_cycle_length=self.average_cycle_length,
            period_length=self.period_length,
        )
