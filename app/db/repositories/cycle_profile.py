"""Cycle profile repository."""

from typing import Optional

from sqlmodel import Session, select

from app.adaptation.providers import CycleProfileProvider
from app.models.cycle_profile import CycleProfileRecord
from app.schemas.cycle import CycleProfile


class CycleProfileRepository(CycleProfileProvider):
    """Repository for CycleProfileRecord database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_user(self, user_id: str) -> Optional[CycleProfileRecord]:
        statement = select(CycleProfileRecord).where(CycleProfileRecord.user_id == user_id)
        return self.session.exec(statement).first()

    def save(self, record: CycleProfileRecord) -> CycleProfileRecord:
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    # CycleProfileProvider

    def get_cycle_profile(self, user_id: str) -> Optional[CycleProfile]:
        record = self.get_by_user(user_id)
        return record.to_profile() if record else None
