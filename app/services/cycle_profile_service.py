"""
Cycle profile service.

Stores the user's cycle settings and derives the cycle state of a day.
Snapshots need no invalidation on profile edits: the derived phase token
is part of the snapshot cache key.
"""

import datetime
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from app.adaptation.cycle import derive_cycle_state
from app.core.clock import utc_now
from app.db.repositories.cycle_profile import CycleProfileRepository
from app.models.cycle_profile import CycleProfileRecord
from app.schemas.cycle import CycleProfileResponse, CycleProfileUpdate, CycleState

logger = logging.getLogger(__name__)


class CycleProfileService:
    """Service for cycle profile business logic."""

    def __init__(self, session: Session):
        """
        Initialize service with database session.

        Args:
            session: SQLModel database session
        """
        self.repository = CycleProfileRepository(session)

    def get_profile(self, user_id: str) -> CycleProfileResponse:
        """
        Get the stored profile of *user_id*.

        Raises:
            HTTPException: If the user has no cycle profile
        """
        return self._to_response(self._get_record_or_404(user_id))

    def set_profile(self, user_id: str, data: CycleProfileUpdate) -> CycleProfileResponse:
        """Create or replace the cycle profile of *user_id*."""
        record = self.repository.get_by_user(user_id)
        if record is None:
            record = CycleProfileRecord(user_id=user_id, last_period_start_date=data.last_period_start_date)
            logger.info("Creating cycle profile for user %s", user_id)

        record.last_period_start_date = data.last_period_start_date
        record.average_cycle_length = data.average_cycle_length
        record.period_length = data.period_length
        record.updated_at = utc_now()

        return self._to_response(self.repository.save(record))

    def get_state(self, user_id: str, on_date: datetime.date) -> CycleState:
        """
        Derive the cycle state of *user_id* on *on_date*.

        Raises:
            HTTPException: If the user has no cycle profile
        """
        record = self._get_record_or_404(user_id)
        return derive_cycle_state(record.to_profile(), on_date)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_record_or_404(self, user_id: str) -> CycleProfileRecord:
        record = self.repository.get_by_user(user_id)
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail=f"No cycle profile for user '{user_id}'", )
        return record

    @staticmethod
    def _to_response(record: CycleProfileRecord) -> CycleProfileResponse:
        return CycleProfileResponse(user_id=record.user_id, last_period_start_date=record.last_period_start_date,
                                    average_cycle_length=record.average_cycle_length,
                                    period_length=record.period_length, updated_at=record.updated_at, )
