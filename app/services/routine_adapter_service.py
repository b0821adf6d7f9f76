"""
Routine adapter service — builds the adapted routine of a day.

Orchestration only; every decision is delegated to :mod:`app.adaptation`.

**Active types** for a routine::

    routine.adaptation_type   (if adaptation is enabled on the routine)
  + weather                   (if the owner enabled weather adaptation)

Cycle tokens come from the owner's profile (the type is dropped when no
profile exists); weather tokens come from the last stored reading, or the
season when none was ever received.

**Caching**: the assembled snapshot is a pure function of the routine, the
qualified active tokens and the day, so it is cached under that key.  The
weather recommendation and staleness flag are attached to every response
afresh, since they depend on the wall clock.
"""

from __future__ import annotations

import datetime
import logging
from typing import Mapping, Optional

from fastapi import HTTPException, status
from sqlmodel import Session

from app.adaptation.cache import CacheKey, SnapshotCache, snapshot_cache
from app.adaptation.context import ActiveContext, build_active_context
from app.adaptation.providers import CycleProfileProvider, RoutineProvider, WeatherReadingProvider
from app.adaptation.registry import RuleSetRegistry
from app.adaptation.snapshot import assemble
from app.adaptation.weather import WeatherConfig
from app.core.clock import utc_now
from app.core.config import settings
from app.db.repositories.cycle_profile import CycleProfileRepository
from app.db.repositories.routine import RoutineRepository
from app.db.repositories.weather_preferences import WeatherPreferencesRepository
from app.schemas.adaptation import AdaptationType, RuleSet
from app.schemas.snapshot import RoutineSnapshot
from app.services.weather_service import weather_config_from_settings

logger = logging.getLogger(__name__)


class RoutineAdapterService:
    """Builds :class:`RoutineSnapshot` objects from stored state."""

    def __init__(
        self,
        routines: RoutineProvider,
        cycle_profiles: CycleProfileProvider,
        weather: WeatherReadingProvider,
        rule_sets: Optional[Mapping[AdaptationType, RuleSet]] = None,
        cache: Optional[SnapshotCache] = None,
        weather_config: Optional[WeatherConfig] = None,
    ):
        """
        Args:
            routines: Source of base routines and their attachments.
            cycle_profiles: Source of cycle profiles.
            weather: Source of weather switches and readings.
            rule_sets: Rule sets to apply.  Defaults to the registry's
                current rule sets, read on every call.
            cache: Snapshot cache.  ``None`` disables caching.
            weather_config: Weather thresholds.
        """
        self.routines = routines
        self.cycle_profiles = cycle_profiles
        self.weather = weather
        self._rule_sets = rule_sets
        self.cache = cache
        self.weather_config = weather_config

    @classmethod
    def from_session(cls, session: Session) -> RoutineAdapterService:
        """Service backed by the database repositories and app settings."""
        RuleSetRegistry.ensure_loaded(settings.RULES_DIR)
        return cls(
            routines=RoutineRepository(session),
            cycle_profiles=CycleProfileRepository(session),
            weather=WeatherPreferencesRepository(session),
            cache=snapshot_cache if settings.SNAPSHOT_CACHE_ENABLED else None,
            weather_config=weather_config_from_settings(),
        )

    @property
    def rule_sets(self) -> Mapping[AdaptationType, RuleSet]:
        if self._rule_sets is not None:
            return self._rule_sets
        return RuleSetRegistry.all()

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def active_types(self, routine_id: int, user_id: str) -> list[AdaptationType]:
        """Adaptation types in force for *routine_id*, in declaration order."""
        types: set[AdaptationType] = set()
        configured = self.routines.get_adaptation_type(routine_id)
        if configured is not None:
            types.add(configured)
        if self.weather.is_weather_adaptation_enabled(user_id):
            types.add(AdaptationType.WEATHER)
        return [t for t in AdaptationType if t in types]

    def active_context(
        self,
        routine_id: int,
        user_id: str,
        on_date: datetime.date,
        now: datetime.datetime,
    ) -> ActiveContext:
        types = self.active_types(routine_id, user_id)
        profile = (
            self.cycle_profiles.get_cycle_profile(user_id)
            if AdaptationType.CYCLE in types else None
        )
        reading = (
            self.weather.get_latest_reading(user_id)
            if AdaptationType.WEATHER in types else None
        )
        return build_active_context(types, on_date, now, profile, reading, self.weather_config)

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def get_snapshot(
        self,
        routine_id: int,
        on_date: Optional[datetime.date] = None,
        now: Optional[datetime.datetime] = None,
    ) -> RoutineSnapshot:
        """
        Build the adapted routine of *routine_id* for *on_date*.

        Args:
            routine_id: Routine to adapt.
            on_date: Calendar day.  Defaults to the date of *now*.
            now: Reference instant for weather staleness.  Defaults to the
                current UTC time.

        Raises:
            HTTPException: If the routine does not exist
        """
        now = now or utc_now()
        on_date = on_date or now.date()

        routine = self.routines.get_base_routine(routine_id)
        user_id = self.routines.get_owner(routine_id)
        if routine is None or user_id is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Routine {routine_id} not found", )

        context = self.active_context(routine_id, user_id, on_date, now)
        key = CacheKey.build(
            routine_id,
            (f"{t.value}:{token}" for t, tokens in context.tokens.items() for token in tokens),
            on_date,
        )

        snapshot = self.cache.get(key) if self.cache is not None else None
        if snapshot is None:
            snapshot = assemble(
                routine,
                context.tokens,
                self.rule_sets,
                on_date,
                attachments=self.routines.get_attachments(routine_id),
            )
            if self.cache is not None:
                if on_date >= now.date():
                    self.cache.invalidate_before(now.date())
                self.cache.set(key, snapshot)

        return snapshot.model_copy(update={
            "weather_recommendation": context.weather_recommendation,
            "weather_is_stale": context.weather_is_stale,
        })
