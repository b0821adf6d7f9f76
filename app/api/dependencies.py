"""
Shared API dependencies.

Reusable FastAPI dependencies for database-backed services and rule sets.
"""

from typing import Mapping

from fastapi import Depends
from sqlmodel import Session

from app.adaptation.registry import RuleSetRegistry
from app.core.config import settings
from app.db.session import get_db
from app.schemas.adaptation import AdaptationType, RuleSet
from app.services.routine_adapter_service import RoutineAdapterService


def get_rule_sets() -> Mapping[AdaptationType, RuleSet]:
    """Current rule sets, loading the bundled ones on first use."""
    RuleSetRegistry.ensure_loaded(settings.RULES_DIR)
    return RuleSetRegistry.all()


def get_adapter_service(db: Session = Depends(get_db)) -> RoutineAdapterService:
    return RoutineAdapterService.from_session(db)
