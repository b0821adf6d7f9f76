"""
Routine snapshot schemas.

A :class:`RoutineSnapshot` is the fully resolved, ordered, per-day view of a
routine.  ``adapted_steps`` is ordered morning → evening → weekly and, within
each block, by display order; the ``*_steps`` properties expose the blocks.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.adaptation import (
    AdaptationOrigin,
    AdaptationType,
    Emphasis,
    PhaseBriefing,
    RoutineAdaptationAttachment,
    RuleSet,
)
from app.schemas.routine import BaseRoutine, TimeOfDay
from app.schemas.weather import WeatherRecommendation


class AdaptedStep(BaseModel):
    """One base step after adaptation."""

    step_id: str
    product_category: str
    time_of_day: TimeOfDay
    base_order: int
    display_order: int
    should_show: bool
    emphasis: Emphasis
    guidance_text: str
    warnings: list[str] = Field(default_factory=list)
    context_tokens: list[str] = Field(default_factory=list)
    origin: AdaptationOrigin = AdaptationOrigin.DEFAULT


class RoutineSnapshot(BaseModel):
    """Per-day adapted routine."""

    routine_id: int
    date: datetime.date
    active_tokens: list[str] = Field(..., description="Union of active tokens, sorted")
    adapted_steps: list[AdaptedStep]
    briefing: PhaseBriefing
    weather_recommendation: Optional[WeatherRecommendation] = None
    weather_is_stale: Optional[bool] = None

    def _block(self, time_of_day: TimeOfDay) -> list[AdaptedStep]:
        return [s for s in self.adapted_steps if s.time_of_day == time_of_day]

    @property
    def morning_steps(self) -> list[AdaptedStep]:
        return self._block(TimeOfDay.MORNING)

    @property
    def evening_steps(self) -> list[AdaptedStep]:
        return self._block(TimeOfDay.EVENING)

    @property
    def weekly_steps(self) -> list[AdaptedStep]:
        return self._block(TimeOfDay.WEEKLY)

    @property
    def visible_steps(self) -> list[AdaptedStep]:
        return [s for s in self.adapted_steps if s.should_show]


class SnapshotRequest(BaseModel):
    """Stateless snapshot request: every input supplied by the caller.

    ``rule_sets`` defaults to the registry's loaded rule sets for each type
    present in ``active_tokens``.
    """

    routine: BaseRoutine
    date: datetime.date
    active_tokens: dict[AdaptationType, list[str]] = Field(default_factory=dict)
    rule_sets: Optional[list[RuleSet]] = None
    attachments: list[RoutineAdaptationAttachment] = Field(default_factory=list)
