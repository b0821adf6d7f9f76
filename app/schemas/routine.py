"""
Base routine schemas.

The base routine is the user's fixed list of steps.  The adaptation engine
reads it and never changes it; edits happen through the routine endpoints.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.adaptation import AdaptationRule, AdaptationType


class TimeOfDay(str, Enum):
    """Routine block a step belongs to, in display order."""

    MORNING = "morning"
    EVENING = "evening"
    WEEKLY = "weekly"


class RoutineStep(BaseModel):
    """One step of a base routine."""

    id: str
    product_category: str = Field(..., description="Product category slug, e.g. 'retinol'")
    time_of_day: TimeOfDay
    order: int = Field(..., ge=0)
    title: str = ""
    description: str = Field("", description="Default guidance for the step")


class BaseRoutine(BaseModel):
    """A routine as consumed by the engine."""

    id: int
    title: str = ""
    steps: list[RoutineStep] = Field(default_factory=list)


# ----------------------------------------------------------------------
# API request / response schemas
# ----------------------------------------------------------------------


class RoutineStepCreate(BaseModel):
    """Schema for a step inside a routine creation request."""

    product_category: str = Field(..., min_length=1, max_length=50)
    time_of_day: TimeOfDay
    order: int = Field(..., ge=0)
    title: str = Field("", max_length=120)
    description: str = ""


class RoutineCreate(BaseModel):
    """Schema for creating a routine."""

    user_id: str = Field(..., min_length=1, max_length=64)
    title: str = Field(..., min_length=1, max_length=120)
    steps: list[RoutineStepCreate] = Field(default_factory=list)
    adaptation_enabled: bool = False
    adaptation_type: Optional[AdaptationType] = None


class RoutineAdaptationUpdate(BaseModel):
    """Schema for switching adaptation on/off for a routine."""

    adaptation_enabled: bool
    adaptation_type: Optional[AdaptationType] = None


class AttachmentUpdate(BaseModel):
    """Custom rules to merge into a routine's attachment."""

    custom_rules: list[AdaptationRule] = Field(default_factory=list)
    replace: bool = Field(
        False,
        description="Replace the stored rules instead of merging into them",
    )


class RoutineResponse(BaseModel):
    """Schema for a routine in API responses."""

    id: int
    user_id: str
    title: str
    adaptation_enabled: bool
    adaptation_type: Optional[AdaptationType]
    steps: list[RoutineStep]
    created_at: datetime.datetime
    updated_at: datetime.datetime
