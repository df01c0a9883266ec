"""SQLAlchemy models."""

from src.models.sensor_reading import SensorReading
from src.models.user import User

__all__ = [
    "User",
    "SensorReading",
]
