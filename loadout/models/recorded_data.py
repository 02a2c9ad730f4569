"""
RecordedData model - post-flight telemetry, one row per (aircraft, flight).

The missile status column holds the serialized fired/aboard string built
by loadout.services.post_flight; it is never parsed back.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, Numeric, Text, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from loadout.models.base import Base


class RecordedData(Base):
    """
    Post-flight data for one flight.

    Fields:
        gload_max / gload_min: G-load extremes
        avg_altitude: Average altitude (ft)
        max_speed: Maximum speed (kts)
        missile_status: 'POSITION:STATE' entries joined by '; '
        processed: Set once the flight's data has been entered
    """

    __tablename__ = 'recorded_data'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    aircraft_serial: Mapped[str] = mapped_column(
        String(50),
        ForeignKey('aircraft.serial_number', onupdate='CASCADE'),
        nullable=False,
    )

    flight_number: Mapped[int] = mapped_column(Integer, nullable=False)

    gload_max: Mapped[Optional[Decimal]] = mapped_column(Numeric(6, 2), nullable=True)

    gload_min: Mapped[Optional[Decimal]] = mapped_column(Numeric(6, 2), nullable=True)

    avg_altitude: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    max_speed: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    missile_status: Mapped[str] = mapped_column(Text, nullable=False, default='')

    processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint('aircraft_serial', 'flight_number', name='uq_recorded_data_flight'),
    )

    def __repr__(self) -> str:
        return f'<RecordedData {self.aircraft_serial}/{self.flight_number} processed={self.processed}>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'aircraft_serial': self.aircraft_serial,
            'flight_number': self.flight_number,
            'gload_max': float(self.gload_max) if self.gload_max is not None else None,
            'gload_min': float(self.gload_min) if self.gload_min is not None else None,
            'avg_altitude': self.avg_altitude,
            'max_speed': self.max_speed,
            'missile_status': self.missile_status,
            'processed': self.processed,
        }
