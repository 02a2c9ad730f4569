"""
Service layer for Loadout.

Each service takes a session factory so the same code runs against the
configured database or a test database.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import sessionmaker

from loadout.analytics import FatigueModel, FatigueMonitor, LauncherLifeStatusRepository
from loadout.models.base import SessionLocal
from loadout.services.catalog import AircraftCatalog, LauncherCatalog, UserDirectory, WeaponCatalog
from loadout.services.mission_weapons import (
    LoadedAssignment,
    MissionWeaponsStore,
    SaveResult,
    ensure_history_tables,
)
from loadout.services.missions import MissionDraft, MissionService
from loadout.services.post_flight import (
    FiringSheet,
    FlightMetrics,
    MissileState,
    PostFlightRecorder,
    RecordedDataRepository,
    serialize_missile_status,
)


@dataclass
class ServiceRegistry:
    """Services sharing one session factory."""
    aircraft: AircraftCatalog
    launchers: LauncherCatalog
    weapons: WeaponCatalog
    users: UserDirectory
    missions: MissionService
    post_flight: PostFlightRecorder
    recorded_data: RecordedDataRepository
    life_status: LauncherLifeStatusRepository
    fatigue: FatigueMonitor

    @classmethod
    def build(
        cls,
        session_factory: Optional[sessionmaker] = None,
        fatigue_model: Optional[FatigueModel] = None,
    ) -> 'ServiceRegistry':
        factory = session_factory or SessionLocal
        weapons_store = MissionWeaponsStore(factory)
        life_status = LauncherLifeStatusRepository(factory)
        return cls(
            aircraft=AircraftCatalog(factory),
            launchers=LauncherCatalog(factory),
            weapons=WeaponCatalog(factory),
            users=UserDirectory(factory),
            missions=MissionService(factory, weapons_store),
            post_flight=PostFlightRecorder(factory, weapons_store),
            recorded_data=RecordedDataRepository(factory),
            life_status=life_status,
            fatigue=FatigueMonitor(life_status, fatigue_model),
        )


__all__ = [
    'ServiceRegistry',
    'AircraftCatalog',
    'LauncherCatalog',
    'WeaponCatalog',
    'UserDirectory',
    'MissionDraft',
    'MissionService',
    'MissionWeaponsStore',
    'LoadedAssignment',
    'SaveResult',
    'ensure_history_tables',
    'FiringSheet',
    'FlightMetrics',
    'MissileState',
    'PostFlightRecorder',
    'RecordedDataRepository',
    'serialize_missile_status',
]
