"""
Launcher life-status aggregate.

One row per (launcher serial, part number) over the distinct missions the
serial was mounted on:

    mission_count              missions flown with this launcher
    fired_mission_count        missions whose missile status records a shot
    not_fired_mission_count    the rest
    total_flight_hours         sum of (arrival - departure) in hours
    residual_life_percent      100 * (1 - total / rated life), floored at 0;
                               NULL when the rated life is unknown

The same SELECT backs the launcher_life_status view created by init_db,
and is run directly by the life-status repository.
"""

import logging
from typing import Optional

from sqlalchemy import (
    Float, and_, case, cast, func, literal, null, or_, select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.ddl import ExecutableDDLElement
from sqlalchemy.sql.expression import Select
from sqlalchemy.sql.functions import FunctionElement

from loadout.models.history import HistoricalLauncher
from loadout.models.mission import Mission
from loadout.models.recorded_data import RecordedData
from loadout.models.stores import Launcher

logger = logging.getLogger(__name__)

VIEW_NAME = 'launcher_life_status'

# Token written by the post-flight status serializer for an expended weapon
FIRED_PATTERN = '%:SPARATO%'


class hours_between(FunctionElement):
    """Hours elapsed from the first TIME argument to the second."""
    type = Float()
    name = 'hours_between'
    inherit_cache = True


@compiles(hours_between)
def _hours_between_default(element, compiler, **kw):
    start, end = list(element.clauses)
    return 'EXTRACT(EPOCH FROM (%s - %s)) / 3600.0' % (
        compiler.process(end, **kw),
        compiler.process(start, **kw),
    )


@compiles(hours_between, 'sqlite')
def _hours_between_sqlite(element, compiler, **kw):
    start, end = list(element.clauses)
    return '((julianday(%s) - julianday(%s)) * 24.0)' % (
        compiler.process(end, **kw),
        compiler.process(start, **kw),
    )


class CreateView(ExecutableDDLElement):
    """CREATE VIEW for a SELECT, rendered with literal values."""

    def __init__(self, name: str, selectable):
        self.name = name
        self.selectable = selectable


@compiles(CreateView)
def _create_view(element, compiler, **kw):
    return 'CREATE OR REPLACE VIEW %s AS %s' % (
        element.name,
        compiler.sql_compiler.process(element.selectable, literal_binds=True),
    )


@compiles(CreateView, 'sqlite')
def _create_view_sqlite(element, compiler, **kw):
    return 'CREATE VIEW IF NOT EXISTS %s AS %s' % (
        element.name,
        compiler.sql_compiler.process(element.selectable, literal_binds=True),
    )


def life_status_select(serial_number: Optional[str] = None) -> Select:
    """Build the aggregate query, optionally restricted to one serial."""
    mounted = (
        select(
            HistoricalLauncher.serial_number.label('serial_number'),
            HistoricalLauncher.launcher_part_number.label('part_number'),
            HistoricalLauncher.mission_id.label('mission_id'),
        )
        .distinct()
        .subquery('mounted')
    )

    fired = case((RecordedData.missile_status.like(FIRED_PATTERN), 1), else_=0)
    mission_count = func.count(mounted.c.mission_id)
    fired_count = func.coalesce(func.sum(fired), 0)
    total_hours = func.coalesce(
        func.sum(hours_between(Mission.departure_time, Mission.arrival_time)),
        0.0,
    )
    life = cast(Launcher.operational_life_hours, Float)
    residual = case(
        (or_(life.is_(None), life <= 0), null()),
        (total_hours >= life, literal(0.0)),
        else_=literal(100.0) * (literal(1.0) - total_hours / life),
    )

    stmt = (
        select(
            mounted.c.serial_number,
            mounted.c.part_number,
            Launcher.name.label('launcher_name'),
            life.label('operational_life_hours'),
            mission_count.label('mission_count'),
            fired_count.label('fired_mission_count'),
            (mission_count - fired_count).label('not_fired_mission_count'),
            total_hours.label('total_flight_hours'),
            residual.label('residual_life_percent'),
        )
        .select_from(mounted)
        .join(Mission, Mission.id == mounted.c.mission_id)
        .outerjoin(Launcher, Launcher.part_number == mounted.c.part_number)
        .outerjoin(
            RecordedData,
            and_(
                RecordedData.aircraft_serial == Mission.aircraft_serial,
                RecordedData.flight_number == Mission.flight_number,
            ),
        )
        .group_by(
            mounted.c.serial_number,
            mounted.c.part_number,
            Launcher.name,
            Launcher.operational_life_hours,
        )
    )

    if serial_number is not None:
        stmt = stmt.where(mounted.c.serial_number == serial_number)

    return stmt.order_by(mission_count.desc(), mounted.c.part_number)


def create_life_status_view(bind: Engine) -> bool:
    """
    Create the launcher_life_status view if the database lacks it.

    Failure is logged and reported as False; lookups do not depend on
    the view.
    """
    try:
        with bind.begin() as conn:
            conn.execute(CreateView(VIEW_NAME, life_status_select()))
    except SQLAlchemyError as e:
        logger.warning(f'Could not create view {VIEW_NAME}: {e}')
        return False
    return True
