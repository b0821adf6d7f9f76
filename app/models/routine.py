"""
Routine models.

A :class:`Routine` owns an ordered list of :class:`RoutineStepRecord` rows
and the adaptation switch.  ``adaptation_type`` is meaningful only while
``adaptation_enabled`` is true.
"""

import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.core.clock import utc_now
from app.schemas.adaptation import AdaptationType
from app.schemas.routine import RoutineStep, TimeOfDay


class Routine(SQLModel, table=True):
    """A user's base skincare routine."""

    __tablename__ = "routines"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    title: str = Field(nullable=False, max_length=120)

    adaptation_enabled: bool = Field(default=False)
    adaptation_type: Optional[str] = Field(default=None, max_length=20)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime.datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    @property
    def active_adaptation_type(self) -> Optional[AdaptationType]:
        """Configured type, or ``None`` when adaptation is switched off."""
        if not self.adaptation_enabled or not self.adaptation_type:
            return None
        return AdaptationType(self.adaptation_type)


class RoutineStepRecord(SQLModel, table=True):
    """One step of a routine."""

    __tablename__ = "routine_steps"

    id: Optional[int] = Field(default=None, primary_key=True)
    routine_id: int = Field(foreign_key="routines.id", nullable=False, index=True)

    product_category: str = Field(nullable=False, max_length=50)
    time_of_day: str = Field(nullable=False, max_length=10)
    step_order: int = Field(default=0, ge=0)
    title: str = Field(default="", max_length=120)
    description: str = Field(default="")

    def to_step(self) -> RoutineStep:
        return RoutineStep(
            id=str(self.id),
            product_category=self.product_category,
            time_of_day=TimeOfDay(self.time_of_day),
            order=self.step_order,
            title=self.title,
            description=self.description,
        )
