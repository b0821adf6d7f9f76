"""
Routine adaptation attachment model.

Stores per-routine override rules for one adaptation type.  Rules are kept
as a JSON list of serialized :class:`AdaptationRule` objects.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.clock import utc_now
from app.schemas.adaptation import AdaptationRule, AdaptationType, RoutineAdaptationAttachment


class RoutineAdaptationAttachmentRecord(SQLModel, table=True):
    """Override rules of one routine for one adaptation type."""

    __tablename__ = "routine_adaptation_attachments"
    __table_args__ = (UniqueConstraint("routine_id", "adaptation_type", name="uq_routine_adaptation_type"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    routine_id: int = Field(foreign_key="routines.id", nullable=False, index=True)
    adaptation_type: str = Field(nullable=False, max_length=20)

    custom_rules: Optional[list] = Field(default=None, sa_column=Column(JSON, nullable=True), )

    last_updated: datetime.datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def to_attachment(self) -> RoutineAdaptationAttachment:
        rules = None
        if self.custom_rules is not None:
            rules = [AdaptationRule.model_validate(r) for r in self.custom_rules]
        return RoutineAdaptationAttachment(
            routine_id=self.routine_id,
            type=AdaptationType(self.adaptation_type),
            custom_rules=rules,
            last_updated=self.last_updated,
        )
