"""
Routine service.

Creates routines, switches adaptation on and off, and edits the override
rules attached to a routine.

**Attachment edits** layer the submitted rules over the stored ones with
:func:`merge_rules` (same id → replace, same category/token → replace,
otherwise append) unless ``replace`` is requested.  Every edit that can
change a snapshot drops the routine's cached snapshots.
"""

import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from app.adaptation.cache import snapshot_cache
from app.adaptation.categories import is_known_category
from app.adaptation.rules import merge_rules
from app.core.clock import utc_now
from app.db.repositories.routine import RoutineRepository
from app.models.adaptation_attachment import RoutineAdaptationAttachmentRecord
from app.models.routine import Routine, RoutineStepRecord
from app.schemas.adaptation import AdaptationOrigin, AdaptationType, RoutineAdaptationAttachment
from app.schemas.routine import AttachmentUpdate, RoutineAdaptationUpdate, RoutineCreate, RoutineResponse

logger = logging.getLogger(__name__)


class RoutineService:
    """Service for routine business logic."""

    def __init__(self, session: Session):
        self.repository = RoutineRepository(session)

    # ------------------------------------------------------------------
    # Routines
    # ------------------------------------------------------------------

    def create_routine(self, data: RoutineCreate) -> RoutineResponse:
        """
        Create a routine with its steps.

        Raises:
            HTTPException: If adaptation is enabled without a type
        """
        self._check_adaptation(data.adaptation_enabled, data.adaptation_type)

        for step in data.steps:
            if not is_known_category(step.product_category):
                logger.warning("Routine for user %s uses unknown product category '%s'", data.user_id,
                               step.product_category)

        routine = Routine(user_id=data.user_id, title=data.title, adaptation_enabled=data.adaptation_enabled,
                          adaptation_type=data.adaptation_type.value if data.adaptation_type else None, )
        steps = [
            RoutineStepRecord(product_category=s.product_category, time_of_day=s.time_of_day.value,
                              step_order=s.order, title=s.title, description=s.description, )
            for s in data.steps
        ]
        routine = self.repository.create(routine, steps)
        logger.info("Created routine %s for user %s with %d steps", routine.id, routine.user_id, len(steps))
        return self._to_response(routine)

    def get_routine(self, routine_id: int) -> RoutineResponse:
        return self._to_response(self._get_routine_or_404(routine_id))

    def update_adaptation(self, routine_id: int, data: RoutineAdaptationUpdate) -> RoutineResponse:
        """Switch adaptation on/off and choose its type."""
        self._check_adaptation(data.adaptation_enabled, data.adaptation_type)
        routine = self._get_routine_or_404(routine_id)

        routine.adaptation_enabled = data.adaptation_enabled
        if data.adaptation_type is not None:
            routine.adaptation_type = data.adaptation_type.value
        routine.updated_at = utc_now()
        routine = self.repository.update(routine)

        snapshot_cache.invalidate_routine(routine_id)
        return self._to_response(routine)

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    def get_attachment(self, routine_id: int, adaptation_type: AdaptationType, ) -> RoutineAdaptationAttachment:
        self._get_routine_or_404(routine_id)
        record = self.repository.get_attachment_record(routine_id, adaptation_type)
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail=f"Routine {routine_id} has no '{adaptation_type.value}' attachment", )
        return record.to_attachment()

    def update_attachment(self, routine_id: int, adaptation_type: AdaptationType,
                          data: AttachmentUpdate, ) -> RoutineAdaptationAttachment:
        """Merge (or replace) the override rules of a routine for one type."""
        self._get_routine_or_404(routine_id)

        # Rules submitted without an author are the user's own.
        submitted = [
            rule if rule.origin is not None else rule.model_copy(update={"origin": AdaptationOrigin.USER_CUSTOM})
            for rule in data.custom_rules
        ]

        record = self.repository.get_attachment_record(routine_id, adaptation_type)
        if record is None:
            record = RoutineAdaptationAttachmentRecord(routine_id=routine_id, adaptation_type=adaptation_type.value)

        if data.replace or record.custom_rules is None:
            rules = submitted
        else:
            rules = merge_rules(record.to_attachment().custom_rules or [], submitted)

        record.custom_rules = [r.model_dump(mode="json") for r in rules]
        record.last_updated = utc_now()
        record = self.repository.save_attachment_record(record)

        snapshot_cache.invalidate_routine(routine_id)
        logger.info("Routine %s: %d override rules for '%s'", routine_id, len(rules), adaptation_type.value)
        return record.to_attachment()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_adaptation(enabled: bool, adaptation_type) -> None:
        if enabled and adaptation_type is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                detail="adaptation_type is required when adaptation is enabled", )

    def _get_routine_or_404(self, routine_id: int) -> Routine:
        routine = self.repository.get_by_id(routine_id)
        if routine is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Routine {routine_id} not found", )
        return routine

    def _to_response(self, routine: Routine) -> RoutineResponse:
        steps = [s.to_step() for s in self.repository.get_steps(routine.id)]
        adaptation_type = AdaptationType(routine.adaptation_type) if routine.adaptation_type else None
        return RoutineResponse(id=routine.id, user_id=routine.user_id, title=routine.title,
                               adaptation_enabled=routine.adaptation_enabled, adaptation_type=adaptation_type,
                               steps=steps, created_at=routine.created_at, updated_at=routine.updated_at, )
