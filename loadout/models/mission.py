"""
Mission model - one sortie of one aircraft.

Missions are not unique per (aircraft, flight number); lookups by flight
number return the first match. Arrival-not-before-departure is checked
when a mission is entered, not by the schema.
"""

from datetime import date, time
from typing import Optional

from sqlalchemy import String, Integer, Date, Time, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from loadout.models.base import Base


class Mission(Base):
    """A flown (or planned) mission."""

    __tablename__ = 'mission'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    aircraft_serial: Mapped[str] = mapped_column(
        String(50),
        ForeignKey('aircraft.serial_number', onupdate='CASCADE'),
        nullable=False,
    )

    flight_number: Mapped[int] = mapped_column(Integer, nullable=False)

    mission_date: Mapped[date] = mapped_column(Date, nullable=False)

    departure_time: Mapped[time] = mapped_column(Time, nullable=False)

    arrival_time: Mapped[time] = mapped_column(Time, nullable=False)

    __table_args__ = (
        Index('ix_mission_aircraft_flight', 'aircraft_serial', 'flight_number'),
        Index('ix_mission_date', 'mission_date'),
    )

    def __repr__(self) -> str:
        return f'<Mission {self.id} {self.aircraft_serial}/{self.flight_number} {self.mission_date}>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'aircraft_serial': self.aircraft_serial,
            'flight_number': self.flight_number,
            'mission_date': self.mission_date.isoformat(),
            'departure_time': self.departure_time.strftime('%H:%M'),
            'arrival_time': self.arrival_time.strftime('%H:%M'),
        }


class MissionAutoPosition(Base):
    """Operator override of the automatic position for a mission."""

    __tablename__ = 'mission_auto_position'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    mission_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey('mission.id'),
        nullable=False,
        index=True,
    )

    position: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
