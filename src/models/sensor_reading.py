"""Sensor reading model."""

from sqlalchemy import Column, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import CreatedAtMixin


class SensorReading(Base, CreatedAtMixin):
    """A single temperature/humidity sample submitted by a user's device."""

    __tablename__ = "sensor_readings"
    __table_args__ = (Index("ix_sensor_readings_user_id_created_at", "user_id", "created_at"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    temperature = Column(Float, nullable=False)
    humidity = Column(Float, nullable=False)

    # Relationships
    user = relationship("User", back_populates="readings")
