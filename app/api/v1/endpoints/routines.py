"""
Routine endpoints — base routines, adaptation settings, overrides, snapshots.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.api.dependencies import get_adapter_service
from app.db.session import get_db
from app.schemas.adaptation import AdaptationType, RoutineAdaptationAttachment
from app.schemas.routine import AttachmentUpdate, RoutineAdaptationUpdate, RoutineCreate, RoutineResponse
from app.schemas.snapshot import RoutineSnapshot
from app.services.routine_adapter_service import RoutineAdapterService
from app.services.routine_service import RoutineService

router = APIRouter()


@router.post(
    "",
    summary="Create a routine.",
    response_model=RoutineResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_routine(data: RoutineCreate, db: Session = Depends(get_db)):
    return RoutineService(db).create_routine(data)


@router.get(
    "/{routine_id}",
    summary="Get a routine with its steps.",
    response_model=RoutineResponse,
)
def get_routine(routine_id: int, db: Session = Depends(get_db)):
    return RoutineService(db).get_routine(routine_id)


@router.put(
    "/{routine_id}/adaptation",
    summary="Enable/disable adaptation and choose its type.",
    response_model=RoutineResponse,
)
def update_adaptation(routine_id: int, data: RoutineAdaptationUpdate, db: Session = Depends(get_db)):
    return RoutineService(db).update_adaptation(routine_id, data)


@router.get(
    "/{routine_id}/attachments/{adaptation_type}",
    summary="Get the routine's override rules for one adaptation type.",
    response_model=RoutineAdaptationAttachment,
)
def get_attachment(routine_id: int, adaptation_type: AdaptationType, db: Session = Depends(get_db)):
    return RoutineService(db).get_attachment(routine_id, adaptation_type)


@router.put(
    "/{routine_id}/attachments/{adaptation_type}",
    summary="Merge (or replace) the routine's override rules for one adaptation type.",
    response_model=RoutineAdaptationAttachment,
)
def update_attachment(
    routine_id: int,
    adaptation_type: AdaptationType,
    data: AttachmentUpdate,
    db: Session = Depends(get_db),
):
    return RoutineService(db).update_attachment(routine_id, adaptation_type, data)


@router.get(
    "/{routine_id}/snapshot",
    summary="Get the adapted routine for a day.",
    response_model=RoutineSnapshot,
)
def get_snapshot(
    routine_id: int,
    on: Optional[datetime.date] = Query(
        None, description="Calendar day (defaults to today, UTC)"
    ),
    service: RoutineAdapterService = Depends(get_adapter_service),
):
    return service.get_snapshot(routine_id, on_date=on)
