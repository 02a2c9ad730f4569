"""
Post-flight recording.

After a mission the operator marks which mounted weapons were fired and
enters the flight metrics. The fired/aboard state is serialized into a
single missile-status string stored with the metrics:

    TIP 1:SPARATO; O/B 3:A_BORDO

Only positions holding a weapon on a trackable hardpoint produce an
entry, in hardpoint display order. The string is write-only; nothing
parses it back except the fired-mission count in the life-status
aggregate.

State per weapon position:

    NotLoaded -> Loaded -> StillAboard <-> Fired

Toggling is allowed until the data is recorded; the sheet is then frozen.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import and_, delete, exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from loadout.assignment import ItemKind, PositionAssignment
from loadout.context import OperatorContext
from loadout.exceptions import (
    ConflictError, FiringStateError, NotFoundError, PersistenceError,
)
from loadout.models import Mission, RecordedData
from loadout.models.base import SessionLocal, get_session
from loadout.positions import is_trackable
from loadout.services.mission_weapons import MissionWeaponsStore
from loadout.validation import parse_decimal, parse_int

logger = logging.getLogger(__name__)

STATUS_SEPARATOR = '; '


class MissileState(str, Enum):
    """Post-mission state of a mounted weapon (stored tokens)."""
    FIRED = 'SPARATO'
    ABOARD = 'A_BORDO'


def serialize_missile_status(
    assignment: PositionAssignment,
    fired: Mapping[str, bool],
) -> str:
    """
    Build the missile-status string for a mission.

    Launchers, empty positions and untracked hardpoints are omitted. A
    weapon missing from `fired` counts as still aboard.
    """
    entries = []
    for position, item in assignment.items():
        if item.kind is not ItemKind.WEAPON or not is_trackable(position):
            continue
        state = MissileState.FIRED if fired.get(position) else MissileState.ABOARD
        entries.append(f'{position}:{state.value}')
    return STATUS_SEPARATOR.join(entries)


@dataclass(frozen=True)
class FlightMetrics:
    """Validated post-flight metrics."""
    gload_max: Decimal
    gload_min: Decimal
    avg_altitude: int
    max_speed: int

    @classmethod
    def parse(cls, gload_max: Any, gload_min: Any, avg_altitude: Any, max_speed: Any) -> 'FlightMetrics':
        """G-loads accept ',' or '.' as decimal separator; altitude and speed are integers."""
        return cls(
            gload_max=parse_decimal(gload_max, 'gload_max'),
            gload_min=parse_decimal(gload_min, 'gload_min'),
            avg_altitude=parse_int(avg_altitude, 'avg_altitude'),
            max_speed=parse_int(max_speed, 'max_speed'),
        )

    @classmethod
    def from_dict(cls, data: dict) -> 'FlightMetrics':
        return cls.parse(
            data.get('gload_max'),
            data.get('gload_min'),
            data.get('avg_altitude'),
            data.get('max_speed'),
        )

    def values(self) -> dict:
        return {
            'gload_max': self.gload_max,
            'gload_min': self.gload_min,
            'avg_altitude': self.avg_altitude,
            'max_speed': self.max_speed,
        }


class FiringSheet:
    """
    Fired/aboard state for one mission's mounted weapons.

    Every trackable weapon position starts StillAboard.
    """

    def __init__(
        self,
        mission: Mission,
        assignment: PositionAssignment,
        notice: Optional[str] = None,
    ):
        self.mission_id = mission.id
        self.aircraft_serial = mission.aircraft_serial
        self.flight_number = mission.flight_number
        self.assignment = assignment.copy()
        self.notice = notice
        self.frozen = False
        self._fired: Dict[str, bool] = {
            position: False
            for position, item in self.assignment.items()
            if item.kind is ItemKind.WEAPON and is_trackable(position)
        }

    def _check(self, position: str) -> None:
        if self.frozen:
            raise FiringStateError(
                f'Post-flight data for mission {self.mission_id} is already recorded',
                position=position,
            )
        item = self.assignment.get(position)
        if item is None:
            raise FiringStateError(f'No weapon loaded at {position}', position=position)
        if item.kind is ItemKind.LAUNCHER:
            raise FiringStateError(f'A launcher cannot be fired ({position})', position=position)
        if position not in self._fired:
            raise FiringStateError(f'{position} has no firing status slot', position=position)

    def state(self, position: str) -> Optional[MissileState]:
        """Current state, or None if the position holds no tracked weapon."""
        if position not in self._fired:
            return None
        return MissileState.FIRED if self._fired[position] else MissileState.ABOARD

    def set_fired(self, position: str, fired: bool) -> MissileState:
        self._check(position)
        self._fired[position] = bool(fired)
        return self.state(position)

    def toggle(self, position: str) -> MissileState:
        self._check(position)
        self._fired[position] = not self._fired[position]
        return self.state(position)

    def fired_positions(self) -> List[str]:
        return [pos for pos, fired in self._fired.items() if fired]

    def status_string(self) -> str:
        return serialize_missile_status(self.assignment, self._fired)

    def freeze(self) -> None:
        self.frozen = True

    def to_dict(self) -> dict:
        return {
            'mission_id': self.mission_id,
            'aircraft_serial': self.aircraft_serial,
            'flight_number': self.flight_number,
            'loadout': self.assignment.to_dict(),
            'states': {pos: self.state(pos).value for pos in self._fired},
            'missile_status': self.status_string(),
            'notice': self.notice,
            'frozen': self.frozen,
        }


def _not_recorded():
    """Correlated filter: the mission's flight has no recorded data yet."""
    return ~exists(
        select(RecordedData.id).where(
            and_(
                RecordedData.aircraft_serial == Mission.aircraft_serial,
                RecordedData.flight_number == Mission.flight_number,
            )
        )
    )


class PostFlightRecorder:
    """Opens firing sheets and records post-flight data."""

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        weapons_store: Optional[MissionWeaponsStore] = None,
    ):
        self.session_factory = session_factory or SessionLocal
        self.weapons_store = weapons_store or MissionWeaponsStore(self.session_factory)

    def pending_missions(self, aircraft_serial: str) -> List[Mission]:
        """Missions of an aircraft that still lack recorded data."""
        with self.session_factory() as session:
            stmt = (
                select(Mission)
                .where(Mission.aircraft_serial == aircraft_serial, _not_recorded())
                .order_by(Mission.mission_date.desc(), Mission.id.desc())
            )
            return list(session.execute(stmt).scalars().all())

    def open_sheet(self, mission_id: int) -> FiringSheet:
        with self.session_factory() as session:
            mission = session.get(Mission, mission_id)
        if mission is None:
            raise NotFoundError('Mission', mission_id)

        loaded = self.weapons_store.load(mission_id)
        return FiringSheet(mission, loaded.assignment, notice=loaded.notice)

    def record(
        self,
        sheet: FiringSheet,
        metrics: FlightMetrics,
        operator: Optional[OperatorContext] = None,
    ) -> RecordedData:
        """
        Store metrics and the missile status for the sheet's flight.

        Freezes the sheet on success. A flight can be recorded once.
        """
        operator = operator or OperatorContext.anonymous()
        if sheet.frozen:
            raise FiringStateError(f'Post-flight data for mission {sheet.mission_id} is already recorded')

        row = RecordedData(
            aircraft_serial=sheet.aircraft_serial,
            flight_number=sheet.flight_number,
            missile_status=sheet.status_string(),
            processed=True,
            **metrics.values(),
        )
        duplicate = ConflictError(
            f'Post-flight data already recorded for {sheet.aircraft_serial} flight {sheet.flight_number}',
            {'aircraft_serial': sheet.aircraft_serial, 'flight_number': sheet.flight_number},
        )

        try:
            with get_session(self.session_factory) as session:
                existing = session.execute(
                    select(RecordedData.id).where(
                        RecordedData.aircraft_serial == sheet.aircraft_serial,
                        RecordedData.flight_number == sheet.flight_number,
                    )
                ).first()
                if existing is not None:
                    raise duplicate
                session.add(row)
        except IntegrityError:
            raise duplicate
        except SQLAlchemyError as e:
            raise PersistenceError('Save post-flight data', e, details={'mission_id': sheet.mission_id})

        sheet.freeze()
        logger.info(
            f'Post-flight data for mission {sheet.mission_id} recorded by {operator}: '
            f'{row.missile_status or "no weapons"}'
        )
        return row


class RecordedDataRepository:
    """Read and maintain stored post-flight rows."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def get(self, record_id: int) -> Optional[RecordedData]:
        with self.session_factory() as session:
            return session.get(RecordedData, record_id)

    def get_by_flight_number(self, aircraft_serial: str, flight_number: int) -> Optional[RecordedData]:
        with self.session_factory() as session:
            stmt = select(RecordedData).where(
                RecordedData.aircraft_serial == aircraft_serial,
                RecordedData.flight_number == flight_number,
            )
            return session.execute(stmt).scalars().first()

    def get_all(self) -> List[RecordedData]:
        with self.session_factory() as session:
            stmt = select(RecordedData).order_by(RecordedData.id.desc())
            return list(session.execute(stmt).scalars().all())

    def update(self, record_id: int, metrics: FlightMetrics) -> Optional[RecordedData]:
        """Correct the metrics of a stored row. The missile status is kept."""
        try:
            with get_session(self.session_factory) as session:
                row = session.get(RecordedData, record_id)
                if row is None:
                    return None
                for key, value in metrics.values().items():
                    setattr(row, key, value)
        except SQLAlchemyError as e:
            raise PersistenceError('Update post-flight data', e)
        return row

    def delete(self, record_id: int) -> bool:
        try:
            with get_session(self.session_factory) as session:
                result = session.execute(delete(RecordedData).where(RecordedData.id == record_id))
                deleted = result.rowcount > 0
        except SQLAlchemyError as e:
            raise PersistenceError('Delete post-flight data', e)
        return deleted
