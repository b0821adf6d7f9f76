"""Pydantic schemas for request/response validation."""

from app.schemas.adaptation import (
    AdaptationOrigin,
    AdaptationRule,
    AdaptationType,
    Emphasis,
    PhaseBriefing,
    RoutineAdaptationAttachment,
    RuleAction,
    RuleScope,
    RuleSet,
    RuleSetSummary,
    StepAdaptation,
)
from app.schemas.cycle import CyclePhase, CycleProfile, CycleProfileResponse, CycleProfileUpdate, CycleState
from app.schemas.routine import (
    AttachmentUpdate,
    BaseRoutine,
    RoutineAdaptationUpdate,
    RoutineCreate,
    RoutineResponse,
    RoutineStep,
    RoutineStepCreate,
    TimeOfDay,
)
from app.schemas.snapshot import AdaptedStep, RoutineSnapshot, SnapshotRequest
from app.schemas.weather import (
    UVLevel,
    WeatherContext,
    WeatherPreferencesResponse,
    WeatherPreferencesUpdate,
    WeatherReading,
    WeatherRecommendation,
)

__all__ = [
    "AdaptationOrigin",
    "AdaptationRule",
    "AdaptationType",
    "Emphasis",
    "PhaseBriefing",
    "RoutineAdaptationAttachment",
    "RuleAction",
    "RuleScope",
    "RuleSet",
    "RuleSetSummary",
    "StepAdaptation",
    "CyclePhase",
    "CycleProfile",
    "CycleProfileResponse",
    "CycleProfileUpdate",
    "CycleState",
    "AttachmentUpdate",
    "BaseRoutine",
    "RoutineAdaptationUpdate",
    "RoutineCreate",
    "RoutineResponse",
    "RoutineStep",
    "RoutineStepCreate",
    "TimeOfDay",
    "AdaptedStep",
    "RoutineSnapshot",
    "SnapshotRequest",
    "UVLevel",
    "WeatherContext",
    "WeatherPreferencesResponse",
    "WeatherPreferencesUpdate",
    "WeatherReading",
    "WeatherRecommendation",
]
