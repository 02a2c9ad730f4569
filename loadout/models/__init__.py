"""
Database models for Loadout.

Master data (aircraft, launchers, weapons, users), missions, the two
historical load tables, post-flight recorded data, and the launcher
life-status aggregate.
"""

from loadout.models.base import (
    Base, engine, SessionLocal, init_db, get_session, make_engine, make_session_factory,
)
from loadout.models.aircraft import Aircraft
from loadout.models.stores import Launcher, Weapon
from loadout.models.mission import Mission, MissionAutoPosition
from loadout.models.history import HistoricalLoad, HistoricalLauncher
from loadout.models.recorded_data import RecordedData
from loadout.models.user import User
from loadout.models.life_status import life_status_select, create_life_status_view, VIEW_NAME

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'init_db',
    'get_session',
    'make_engine',
    'make_session_factory',
    'Aircraft',
    'Launcher',
    'Weapon',
    'Mission',
    'MissionAutoPosition',
    'HistoricalLoad',
    'HistoricalLauncher',
    'RecordedData',
    'User',
    'life_status_select',
    'create_life_status_view',
    'VIEW_NAME',
]
