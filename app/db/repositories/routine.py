"""
Routine repository.

Covers routines, their steps and their adaptation attachments, and serves
them to the adaptation service through :class:`RoutineProvider`.
"""

from typing import Optional

from sqlmodel import Session, select

from app.adaptation.providers import RoutineProvider
from app.models.adaptation_attachment import RoutineAdaptationAttachmentRecord
from app.models.routine import Routine, RoutineStepRecord
from app.schemas.adaptation import AdaptationType, RoutineAdaptationAttachment
from app.schemas.routine import BaseRoutine


class RoutineRepository(RoutineProvider):
    """Repository for Routine, RoutineStepRecord and attachment rows."""

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Routines
    # ------------------------------------------------------------------

    def create(self, routine: Routine, steps: list[RoutineStepRecord]) -> Routine:
        self.session.add(routine)
        self.session.flush()
        for step in steps:
            step.routine_id = routine.id
            self.session.add(step)
        self.session.commit()
        self.session.refresh(routine)
        return routine

    def get_by_id(self, routine_id: int) -> Optional[Routine]:
        return self.session.get(Routine, routine_id)

    def get_steps(self, routine_id: int) -> list[RoutineStepRecord]:
        statement = (
            select(RoutineStepRecord).where(RoutineStepRecord.routine_id == routine_id).order_by(
                RoutineStepRecord.step_order, RoutineStepRecord.id))
        return list(self.session.exec(statement).all())

    def update(self, routine: Routine) -> Routine:
        self.session.add(routine)
        self.session.commit()
        self.session.refresh(routine)
        return routine

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    def get_attachment_record(self, routine_id: int, adaptation_type: AdaptationType, ) -> Optional[
        RoutineAdaptationAttachmentRecord]:
        statement = select(RoutineAdaptationAttachmentRecord).where(
            RoutineAdaptationAttachmentRecord.routine_id == routine_id,
            RoutineAdaptationAttachmentRecord.adaptation_type == adaptation_type.value, )
        return self.session.exec(statement).first()

    def save_attachment_record(self, record: RoutineAdaptationAttachmentRecord) -> RoutineAdaptationAttachmentRecord:
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    # ------------------------------------------------------------------
    # RoutineProvider
    # ------------------------------------------------------------------

    def get_base_routine(self, routine_id: int) -> Optional[BaseRoutine]:
        routine = self.get_by_id(routine_id)
        if routine is None:
            return None
        steps = [s.to_step() for s in self.get_steps(routine_id)]
        return BaseRoutine(id=routine.id, title=routine.title, steps=steps)

    def get_owner(self, routine_id: int) -> Optional[str]:
        routine = self.get_by_id(routine_id)
        return routine.user_id if routine else None

    def get_adaptation_type(self, routine_id: int) -> Optional[AdaptationType]:
        routine = self.get_by_id(routine_id)
        return routine.active_adaptation_type if routine else None

    def get_attachments(self, routine_id: int) -> list[RoutineAdaptationAttachment]:
        statement = (select(RoutineAdaptationAttachmentRecord).where(
            RoutineAdaptationAttachmentRecord.routine_id == routine_id).order_by(RoutineAdaptationAttachmentRecord.id))
        return [r.to_attachment() for r in self.session.exec(statement).all()]
