"""
Pytest Configuration and Fixtures

Shared fixtures for loadout tests. Every test gets its own SQLite file
under tmp_path; the configured database is never touched.
"""

from datetime import date, time
from decimal import Decimal

import pytest

from loadout.analytics import compute_fatigue_index
from loadout.assignment import LauncherLoad, PositionAssignment, WeaponLoad
from loadout.context import OperatorContext
from loadout.models import (
    Aircraft, Launcher, Mission, Weapon, init_db, make_engine, make_session_factory,
)
from loadout.models.base import get_session
from loadout.services import MissionService, MissionWeaponsStore, PostFlightRecorder


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def engine(tmp_path):
    """Engine bound to a fresh SQLite database with the full schema."""
    db_engine = make_engine(f'sqlite:///{tmp_path / "loadout.db"}')
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def operator():
    return OperatorContext(username='armorer', user_id=1)


# =============================================================================
# Master Data Fixtures
# =============================================================================

@pytest.fixture
def seeded(session_factory):
    """Two aircraft, one launcher part (100 h life) and one weapon part."""
    with get_session(session_factory) as session:
        session.add_all([
            Aircraft(serial_number='MM7001'),
            Aircraft(serial_number='MM7002'),
            Launcher(
                part_number='LAU-7',
                name='Rail launcher',
                manufacturer_code='K0001',
                operational_life_hours=100,
            ),
            Weapon(
                part_number='AIM-9',
                name='Short range missile',
                manufacturer_code='K0002',
                mass=85,
            ),
        ])
    return session_factory


def _add_mission(session_factory, aircraft, flight_number, day, departure, arrival) -> Mission:
    mission = Mission(
        aircraft_serial=aircraft,
        flight_number=flight_number,
        mission_date=day,
        departure_time=departure,
        arrival_time=arrival,
    )
    with get_session(session_factory) as session:
        session.add(mission)
    return mission


@pytest.fixture
def add_mission(seeded):
    """Factory inserting a mission directly, bypassing entry validation."""
    def _factory(aircraft='MM7001', flight_number=1, day=date(2024, 3, 1),
                 departure=time(8, 0), arrival=time(10, 30)):
        return _add_mission(seeded, aircraft, flight_number, day, departure, arrival)
    return _factory


@pytest.fixture
def mission(add_mission):
    """MM7001 flight 1, 2.5 hours."""
    return add_mission()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def weapons_store(session_factory):
    return MissionWeaponsStore(session_factory)


@pytest.fixture
def mission_service(session_factory, weapons_store):
    return MissionService(session_factory, weapons_store)


@pytest.fixture
def recorder(session_factory, weapons_store):
    return PostFlightRecorder(session_factory, weapons_store)


# =============================================================================
# Assignment Fixtures
# =============================================================================

@pytest.fixture
def mixed_assignment():
    """Weapons on the wing tips, a launcher on the left center station."""
    return PositionAssignment({
        'TIP 1': WeaponLoad('AIM-9', 'W-100'),
        'TIP 2': WeaponLoad('AIM-9', 'W-101'),
        'CTR 5': LauncherLoad('LAU-7', 'L-001'),
    })


# =============================================================================
# Analytics Fixtures
# =============================================================================

class FixedFactorModel:
    """Fatigue model with a constant wear factor."""

    def __init__(self, factor: float):
        self.factor = factor

    def fatigue_index(self, flight_hours: float) -> Decimal:
        return compute_fatigue_index(flight_hours, self.factor)


@pytest.fixture
def unit_factor_model():
    """Fatigue model whose index is exactly hours / 10000."""
    return FixedFactorModel(1.0)


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def app(engine, unit_factor_model):
    """Flask app bound to the per-test database."""
    from loadout.app import create_app
    return create_app(engine=engine, fatigue_model=unit_factor_model)


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
