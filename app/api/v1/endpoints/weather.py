"""
Weather endpoints — stateless context derivation, preferences and readings.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.db.session import get_db
from app.schemas.weather import (
    WeatherContext,
    WeatherPreferencesResponse,
    WeatherPreferencesUpdate,
    WeatherReading,
)
from app.services.weather_service import WeatherService

router = APIRouter()


@router.post(
    "/context",
    summary="Derive context tokens, SPF advice and staleness from a reading.",
    response_model=WeatherContext,
)
def derive_context(
    reading: WeatherReading,
    now: Optional[datetime.datetime] = Query(
        None, description="Reference instant for staleness (defaults to now, UTC)"
    ),
):
    return WeatherService.derive_context(reading, now or datetime.datetime.now(datetime.timezone.utc))


@router.get(
    "/{user_id}/preferences",
    summary="Get weather adaptation preferences and the last reading.",
    response_model=WeatherPreferencesResponse,
)
def get_preferences(user_id: str, db: Session = Depends(get_db)):
    return WeatherService(db).get_preferences(user_id)


@router.put(
    "/{user_id}/preferences",
    summary="Enable or disable weather adaptation.",
    response_model=WeatherPreferencesResponse,
)
def update_preferences(user_id: str, data: WeatherPreferencesUpdate, db: Session = Depends(get_db)):
    return WeatherService(db).update_preferences(user_id, data)


@router.put(
    "/{user_id}/reading",
    summary="Store the latest weather reading for the user.",
    response_model=WeatherPreferencesResponse,
)
def record_reading(user_id: str, reading: WeatherReading, db: Session = Depends(get_db)):
    return WeatherService(db).record_reading(user_id, reading)
