"""Telemetry store: temperature/humidity readings per user."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.errors import NotFoundError, StoreError
from src.models.sensor_reading import SensorReading
from src.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


class TelemetryStore:
    """Service for recording and listing sensor readings."""

    def __init__(self, db: Session):
        self.db = db

    def record_reading(self, user_id: int, temperature: float, humidity: float) -> SensorReading:
        """Store a reading for an existing user.

        Raises NotFoundError (and writes nothing) when the user does not exist.
        """
        try:
            if self.db.get(User, user_id) is None:
                raise NotFoundError("User not found")

            reading = SensorReading(user_id=user_id, temperature=temperature, humidity=humidity)
            self.db.add(reading)
            self.db.commit()
            self.db.refresh(reading)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to save sensor data for user {user_id}")
            raise StoreError("Failed to save sensor data") from e

        logger.info(f"Stored reading {reading.id} for user {user_id}")
        return reading

    def list_readings(self, user_id: int, limit: int | None = None) -> list[SensorReading]:
        """Readings owned by ``user_id``, newest first."""
        query = (
            self.db.query(SensorReading)
            .filter(SensorReading.user_id == user_id)
            .order_by(SensorReading.created_at.desc(), SensorReading.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)

        try:
            return query.all()
        except SQLAlchemyError as e:
            logger.exception(f"Failed to retrieve sensor data for user {user_id}")
            raise StoreError("Failed to retrieve sensor data") from e
