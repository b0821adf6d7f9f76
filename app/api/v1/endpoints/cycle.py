"""
Cycle profile and cycle state endpoints.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.db.session import get_db
from app.schemas.cycle import CycleProfileResponse, CycleProfileUpdate, CycleState
from app.services.cycle_profile_service import CycleProfileService

router = APIRouter()


@router.get(
    "/{user_id}/profile",
    summary="Get the user's cycle profile.",
    response_model=CycleProfileResponse,
)
def get_profile(user_id: str, db: Session = Depends(get_db)):
    return CycleProfileService(db).get_profile(user_id)


@router.put(
    "/{user_id}/profile",
    summary="Create or replace the user's cycle profile.",
    response_model=CycleProfileResponse,
)
def set_profile(user_id: str, data: CycleProfileUpdate, db: Session = Depends(get_db)):
    return CycleProfileService(db).set_profile(user_id, data)


@router.get(
    "/{user_id}/state",
    summary="Get cycle day, phase and phase progress for a date.",
    response_model=CycleState,
)
def get_state(
    user_id: str,
    on: Optional[datetime.date] = Query(
        None, description="Calendar day (defaults to today)"
    ),
    db: Session = Depends(get_db),
):
    return CycleProfileService(db).get_state(user_id, on or datetime.date.today())
