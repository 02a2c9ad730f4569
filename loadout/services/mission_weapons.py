"""
Mission weapons persistence.

Reconciles an in-memory PositionAssignment with the two historical
tables. Every save is a full replace for the mission: delete both
tables' rows, then insert one row per mounted item, routed by kind.

Failure policy:
- Provisioning (creating a missing historical table) runs before the
  save transaction, is idempotent, and only logs failures.
- Deleting from one table or inserting one row runs inside its own
  SAVEPOINT; a failure is logged, rolled back to the savepoint, and
  the save carries on with the remaining work.
- A failure of the transaction itself (commit) rolls everything back and
  surfaces as a single PersistenceError.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from sqlalchemy import delete, insert, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from loadout.assignment import (
    ItemKind, LauncherLoad, MountedItem, PositionAssignment, WeaponLoad,
)
from loadout.context import OperatorContext
from loadout.exceptions import AssignmentError, PersistenceError
from loadout.models import HistoricalLauncher, HistoricalLoad
from loadout.models.base import SessionLocal, get_session

logger = logging.getLogger(__name__)

HISTORY_MODELS = (HistoricalLoad, HistoricalLauncher)

NO_CONFIGURATION_NOTICE = (
    'No weapon configuration found for this mission. '
    'Please configure weapons in the Mission Management screen first.'
)


def ensure_history_tables(bind: Engine) -> List[str]:
    """
    Create whichever historical tables are missing.

    Safe to call repeatedly. Returns the names of the tables created.
    """
    created = []
    for model in HISTORY_MODELS:
        table = model.__table__
        try:
            if inspect(bind).has_table(table.name):
                continue
            table.create(bind, checkfirst=True)
            created.append(table.name)
            logger.info(f'Created missing table {table.name}')
        except SQLAlchemyError as e:
            logger.warning(f'Could not provision table {table.name}: {e}')
    return created


@dataclass
class LoadedAssignment:
    """Result of loading a mission's loadout."""
    assignment: PositionAssignment
    # Set when neither historical table exists yet (first use)
    notice: Optional[str] = None


@dataclass
class SaveResult:
    """Outcome of a committed loadout save."""
    mission_id: int
    saved: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped

    def to_dict(self) -> dict:
        return {
            'mission_id': self.mission_id,
            'saved': self.saved,
            'skipped': self.skipped,
            'complete': self.complete,
        }


def _history_row(mission_id: int, position: str, item: MountedItem):
    """Route an item to its table and build the row values."""
    if item.kind is ItemKind.WEAPON:
        return HistoricalLoad, {
            'mission_id': mission_id,
            'position': position,
            'weapon_part_number': item.part_number,
            'serial_number': item.serial_number,
        }
    return HistoricalLauncher, {
        'mission_id': mission_id,
        'position': position,
        'launcher_part_number': item.part_number,
        'serial_number': item.serial_number,
    }


class MissionWeaponsStore:
    """
    Loads and saves per-mission position assignments.

    Callers are expected to check that the mission exists; see
    MissionService.load_loadout / save_loadout.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        provision: Optional[Callable[[Engine], List[str]]] = None,
    ):
        """
        Args:
            session_factory: Session factory (module default if None)
            provision: Schema provisioning step run before each save
                       (ensure_history_tables if None)
        """
        self.session_factory = session_factory or SessionLocal
        self.provision = provision or ensure_history_tables

    def _bind(self) -> Engine:
        with self.session_factory() as session:
            return session.get_bind()

    def load(self, mission_id: int) -> LoadedAssignment:
        """
        Rebuild a mission's assignment from both historical tables.

        Launcher rows are read after weapon rows, so a launcher wins if
        stored data ever holds both kinds on one position.
        """
        assignment = PositionAssignment()

        with self.session_factory() as session:
            inspector = inspect(session.connection())
            present = [m for m in HISTORY_MODELS if inspector.has_table(m.__tablename__)]

            if not present:
                logger.info(f'No historical tables yet; mission {mission_id} has no loadout')
                return LoadedAssignment(assignment, notice=NO_CONFIGURATION_NOTICE)

            if HistoricalLoad in present:
                rows = session.execute(
                    select(HistoricalLoad)
                    .where(HistoricalLoad.mission_id == mission_id)
                    .order_by(HistoricalLoad.id)
                ).scalars().all()
                for row in rows:
                    self._restore(assignment, row.position, WeaponLoad, row.weapon_part_number, row.serial_number)

            if HistoricalLauncher in present:
                rows = session.execute(
                    select(HistoricalLauncher)
                    .where(HistoricalLauncher.mission_id == mission_id)
                    .order_by(HistoricalLauncher.id)
                ).scalars().all()
                for row in rows:
                    self._restore(assignment, row.position, LauncherLoad, row.launcher_part_number, row.serial_number)

        logger.debug(f'Loaded {len(assignment)} positions for mission {mission_id}')
        return LoadedAssignment(assignment)

    @staticmethod
    def _restore(assignment, position, item_type, part_number, serial_number) -> None:
        try:
            item = item_type(part_number, serial_number)
        except AssignmentError as e:
            logger.warning(f'Skipping stored row at {position}: {e.message}')
            return
        if position in assignment:
            logger.warning(f'Position {position} stored twice; keeping {item.kind.value} {item.serial_number}')
        assignment.restore(position, item)

    def save(
        self,
        mission_id: int,
        assignment: PositionAssignment,
        operator: Optional[OperatorContext] = None,
    ) -> SaveResult:
        """
        Replace the mission's stored loadout with the given assignment.

        Raises:
            PersistenceError: if the transaction could not be committed.
                Nothing from this save is persisted in that case.
        """
        operator = operator or OperatorContext.anonymous()
        result = SaveResult(mission_id)

        try:
            self.provision(self._bind())
            with get_session(self.session_factory) as session:
                for model in HISTORY_MODELS:
                    try:
                        with session.begin_nested():
                            session.execute(delete(model).where(model.mission_id == mission_id))
                    except SQLAlchemyError as e:
                        logger.warning(
                            f'Mission {mission_id}: could not clear {model.__tablename__}: {e}'
                        )

                for position, item in assignment.items():
                    model, values = _history_row(mission_id, position, item)
                    try:
                        with session.begin_nested():
                            session.execute(insert(model).values(**values))
                        result.saved.append(position)
                    except SQLAlchemyError as e:
                        logger.warning(
                            f'Mission {mission_id}: could not store {item.kind.value} at {position}: {e}'
                        )
                        result.skipped.append(position)
        except SQLAlchemyError as e:
            logger.error(f'Mission {mission_id}: loadout save rolled back: {e}')
            raise PersistenceError('Save mission loadout', e, details={'mission_id': mission_id})

        logger.info(
            f'Mission {mission_id}: loadout saved by {operator} '
            f'({len(result.saved)} stored, {len(result.skipped)} skipped)'
        )
        return result
