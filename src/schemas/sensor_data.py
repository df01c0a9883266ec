"""Sensor data schemas."""

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class SensorReadingCreate(BaseModel):
    """Reading submitted by a device."""

    temperature: float
    humidity: float

    @field_validator("temperature", "humidity", mode="before")
    @classmethod
    def require_number(cls, value: object) -> object:
        """Accept JSON numbers only: no booleans, no numeric strings."""
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValueError("must be a number")
        try:
            finite = math.isfinite(value)
        except OverflowError:
            finite = False
        if not finite:
            raise ValueError("must be a finite number")
        return value


class SensorReadingResponse(BaseModel):
    """Stored reading."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    temperature: float
    humidity: float
    created_at: datetime


class SensorReadingCreatedResponse(BaseModel):
    """Response for a stored reading."""

    message: str
    data: SensorReadingResponse


class PublicReadingResponse(BaseModel):
    """Echo of a reading accepted by the unauthenticated endpoint."""

    message: str
    data: SensorReadingCreate
