"""
Mission management.

Entry validation, lookups, the delete cascade, and the loadout entry
points that check the mission exists before touching historical rows.
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Any, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from loadout.assignment import PositionAssignment
from loadout.context import OperatorContext
from loadout.exceptions import NotFoundError, PersistenceError, ValidationError
from loadout.models import (
    Aircraft, HistoricalLauncher, HistoricalLoad, Mission, MissionAutoPosition,
)
from loadout.models.base import SessionLocal, get_session
from loadout.services.mission_weapons import LoadedAssignment, MissionWeaponsStore, SaveResult
from loadout.validation import parse_date, parse_int, parse_time, require_text

logger = logging.getLogger(__name__)

# Related rows removed before the mission itself, in this order
CASCADE_MODELS = (HistoricalLoad, HistoricalLauncher, MissionAutoPosition)


@dataclass(frozen=True)
class MissionDraft:
    """Validated mission fields, ready to be stored."""
    aircraft_serial: str
    flight_number: int
    mission_date: date
    departure_time: time
    arrival_time: time

    @classmethod
    def parse(
        cls,
        aircraft_serial: Any,
        flight_number: Any,
        mission_date: Any,
        departure_time: Any,
        arrival_time: Any,
    ) -> 'MissionDraft':
        """
        Validate raw field values.

        Times use HH:MM. Arrival equal to departure is accepted; arrival
        before departure is rejected.
        """
        aircraft_serial = require_text(aircraft_serial, 'aircraft_serial', 'Aircraft')
        flight_number = parse_int(flight_number, 'flight_number')
        mission_date = parse_date(mission_date, 'mission_date')
        departure = parse_time(departure_time, 'departure_time')
        arrival = parse_time(arrival_time, 'arrival_time')

        if arrival < departure:
            raise ValidationError(
                f'Arrival time {arrival:%H:%M} is before departure time {departure:%H:%M}',
                field='arrival_time',
            )

        return cls(aircraft_serial, flight_number, mission_date, departure, arrival)

    @classmethod
    def from_dict(cls, data: dict) -> 'MissionDraft':
        return cls.parse(
            data.get('aircraft_serial'),
            data.get('flight_number'),
            data.get('mission_date'),
            data.get('departure_time'),
            data.get('arrival_time'),
        )

    def values(self) -> dict:
        return {
            'aircraft_serial': self.aircraft_serial,
            'flight_number': self.flight_number,
            'mission_date': self.mission_date,
            'departure_time': self.departure_time,
            'arrival_time': self.arrival_time,
        }


class MissionService:
    """Mission CRUD, queries, and loadout access."""

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        weapons_store: Optional[MissionWeaponsStore] = None,
    ):
        self.session_factory = session_factory or SessionLocal
        self.weapons_store = weapons_store or MissionWeaponsStore(self.session_factory)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _require_aircraft(self, session, serial_number: str) -> None:
        if session.get(Aircraft, serial_number) is None:
            raise ValidationError(f'Unknown aircraft: {serial_number}', field='aircraft_serial')

    def create(self, draft: MissionDraft, operator: Optional[OperatorContext] = None) -> Mission:
        operator = operator or OperatorContext.anonymous()
        try:
            with get_session(self.session_factory) as session:
                self._require_aircraft(session, draft.aircraft_serial)
                mission = Mission(**draft.values())
                session.add(mission)
                session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError('Create mission', e)

        logger.info(f'Mission {mission.id} ({draft.aircraft_serial}/{draft.flight_number}) created by {operator}')
        return mission

    def update(
        self,
        mission_id: int,
        draft: MissionDraft,
        operator: Optional[OperatorContext] = None,
    ) -> Optional[Mission]:
        """Overwrite a mission's fields. Returns None if it does not exist."""
        operator = operator or OperatorContext.anonymous()
        try:
            with get_session(self.session_factory) as session:
                mission = session.get(Mission, mission_id)
                if mission is None:
                    return None
                self._require_aircraft(session, draft.aircraft_serial)
                for key, value in draft.values().items():
                    setattr(mission, key, value)
        except SQLAlchemyError as e:
            raise PersistenceError('Update mission', e)

        logger.info(f'Mission {mission_id} updated by {operator}')
        return mission

    def delete(self, mission_id: int, operator: Optional[OperatorContext] = None) -> bool:
        """
        Delete a mission and its loadout rows in one transaction.

        A related table that cannot be cleared (typically because it
        does not exist yet) is logged and skipped. Returns False if the
        mission does not exist.
        """
        operator = operator or OperatorContext.anonymous()
        try:
            with get_session(self.session_factory) as session:
                if session.get(Mission, mission_id) is None:
                    return False

                for model in CASCADE_MODELS:
                    try:
                        with session.begin_nested():
                            session.execute(delete(model).where(model.mission_id == mission_id))
                    except SQLAlchemyError as e:
                        logger.warning(f'Mission {mission_id}: could not clear {model.__tablename__}: {e}')

                session.execute(delete(Mission).where(Mission.id == mission_id))
        except SQLAlchemyError as e:
            logger.error(f'Mission {mission_id}: delete rolled back: {e}')
            raise PersistenceError('Delete mission', e, details={'mission_id': mission_id})

        logger.info(f'Mission {mission_id} deleted by {operator}')
        return True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _all(self, stmt) -> List[Mission]:
        with self.session_factory() as session:
            return list(session.execute(stmt).scalars().all())

    def get(self, mission_id: int) -> Optional[Mission]:
        with self.session_factory() as session:
            return session.get(Mission, mission_id)

    def get_all(self) -> List[Mission]:
        """All missions, most recent date first."""
        return self._all(
            select(Mission).order_by(Mission.mission_date.desc(), Mission.id.desc())
        )

    def get_by_aircraft(self, aircraft_serial: str) -> List[Mission]:
        return self._all(
            select(Mission)
            .where(Mission.aircraft_serial == aircraft_serial)
            .order_by(Mission.mission_date.desc(), Mission.id.desc())
        )

    def get_latest(self, limit: int = 10) -> List[Mission]:
        """Most recently entered missions (highest id first)."""
        if limit < 1:
            raise ValidationError('limit must be at least 1', field='limit')
        return self._all(select(Mission).order_by(Mission.id.desc()).limit(limit))

    def get_by_date_range(
        self,
        start: date,
        end: date,
        aircraft_serial: Optional[str] = None,
    ) -> List[Mission]:
        """Missions dated within [start, end], optionally for one aircraft."""
        if start > end:
            raise ValidationError('Start date is after end date', field='start')

        stmt = select(Mission).where(Mission.mission_date.between(start, end))
        if aircraft_serial:
            stmt = stmt.where(Mission.aircraft_serial == aircraft_serial)
        return self._all(stmt.order_by(Mission.mission_date.desc(), Mission.id.desc()))

    def get_by_flight_number(self, aircraft_serial: str, flight_number: int) -> Optional[Mission]:
        """First mission (lowest id) flown as this flight number."""
        with self.session_factory() as session:
            stmt = (
                select(Mission)
                .where(
                    Mission.aircraft_serial == aircraft_serial,
                    Mission.flight_number == flight_number,
                )
                .order_by(Mission.id)
                .limit(1)
            )
            return session.execute(stmt).scalars().first()

    # -------------------------------------------------------------------------
    # Loadout
    # -------------------------------------------------------------------------

    def require(self, mission_id: int) -> Mission:
        mission = self.get(mission_id)
        if mission is None:
            raise NotFoundError('Mission', mission_id)
        return mission

    def load_loadout(self, mission_id: int) -> LoadedAssignment:
        self.require(mission_id)
        return self.weapons_store.load(mission_id)

    def save_loadout(
        self,
        mission_id: int,
        assignment: PositionAssignment,
        operator: Optional[OperatorContext] = None,
    ) -> SaveResult:
        self.require(mission_id)
        return self.weapons_store.save(mission_id, assignment, operator)
