"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, UserLogin, UserResponse, UserSignup
from src.schemas.sensor_data import (
    PublicReadingResponse,
    SensorReadingCreate,
    SensorReadingCreatedResponse,
    SensorReadingResponse,
)

__all__ = [
    "UserSignup",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "SensorReadingCreate",
    "SensorReadingResponse",
    "SensorReadingCreatedResponse",
    "PublicReadingResponse",
]
