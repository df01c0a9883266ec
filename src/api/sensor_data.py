"""Sensor data API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import SessionGate, get_settings, get_telemetry_store
from src.config import Settings
from src.errors import AuthPolicy, NotFoundError
from src.schemas.sensor_data import (
    PublicReadingResponse,
    SensorReadingCreate,
    SensorReadingCreatedResponse,
    SensorReadingResponse,
)
from src.services.auth import Identity
from src.services.telemetry import DEFAULT_LIST_LIMIT, TelemetryStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sensor-data"])


@router.post(
    "/sensor-data/{user_id}",
    response_model=SensorReadingCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_reading(
    user_id: str,
    reading: SensorReadingCreate,
    identity: Annotated[Identity, Depends(SessionGate(AuthPolicy.API))],
    store: Annotated[TelemetryStore, Depends(get_telemetry_store)],
):
    """Store a reading for the authenticated user.

    The ``user_id`` path segment is kept for device compatibility only; the
    owner is always the user named by the token.
    """
    if user_id != str(identity.user_id):
        logger.warning(
            f"Path user id {user_id!r} does not match token user {identity.user_id}; "
            "storing under the token user"
        )

    saved = store.record_reading(identity.user_id, reading.temperature, reading.humidity)
    return SensorReadingCreatedResponse(
        message="Sensor data saved successfully",
        data=SensorReadingResponse.model_validate(saved),
    )


@router.get("/sensor-data", response_model=list[SensorReadingResponse])
def list_readings(
    identity: Annotated[Identity, Depends(SessionGate(AuthPolicy.API))],
    store: Annotated[TelemetryStore, Depends(get_telemetry_store)],
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=1000, description="Maximum readings"),
):
    """Get the caller's readings, newest first."""
    return store.list_readings(identity.user_id, limit=limit)


@router.post(
    "/public/sensor-data",
    response_model=PublicReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
def ingest_public_reading(
    reading: SensorReadingCreate,
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Accept a reading without authentication.

    Only available when PUBLIC_INGEST_ENABLED is set. Nothing is stored, since
    every stored reading belongs to a user.
    """
    if not settings.public_ingest_enabled:
        raise NotFoundError("Public ingestion is disabled")

    logger.info(f"Received: temperature={reading.temperature}, humidity={reading.humidity}")
    return PublicReadingResponse(message="Data received successfully", data=reading)
