"""
Launcher life-status lookups using NumPy for fleet aggregates.

Per-serial figures come from the life-status aggregate (see
loadout.models.life_status). A serial number with no recorded missions
yields None, never a zeroed record.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from sqlalchemy.orm import sessionmaker

from loadout.config import config
from loadout.models.base import SessionLocal
from loadout.models.life_status import life_status_select

logger = logging.getLogger(__name__)


def _round(value: Optional[float], digits: int = 2) -> Optional[float]:
    return round(float(value), digits) if value is not None else None


@dataclass
class LauncherLifeStatus:
    """Aggregated usage of one launcher serial number."""
    serial_number: str
    part_number: str
    launcher_name: Optional[str]
    operational_life_hours: Optional[float]
    mission_count: int
    fired_mission_count: int
    not_fired_mission_count: int
    total_flight_hours: float
    # None when the launcher's rated life is unknown
    residual_life_percent: Optional[float]

    @classmethod
    def from_row(cls, row) -> 'LauncherLifeStatus':
        return cls(
            serial_number=row.serial_number,
            part_number=row.part_number,
            launcher_name=row.launcher_name,
            operational_life_hours=_round(row.operational_life_hours),
            mission_count=int(row.mission_count),
            fired_mission_count=int(row.fired_mission_count),
            not_fired_mission_count=int(row.not_fired_mission_count),
            total_flight_hours=_round(row.total_flight_hours) or 0.0,
            residual_life_percent=_round(row.residual_life_percent),
        )

    def to_dict(self) -> dict:
        return {
            'serial_number': self.serial_number,
            'part_number': self.part_number,
            'launcher_name': self.launcher_name,
            'operational_life_hours': self.operational_life_hours,
            'mission_count': self.mission_count,
            'fired_mission_count': self.fired_mission_count,
            'not_fired_mission_count': self.not_fired_mission_count,
            'total_flight_hours': self.total_flight_hours,
            'residual_life_percent': self.residual_life_percent,
        }


class LauncherLifeStatusRepository:
    """Read-only access to launcher life status."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def get(self, serial_number: str) -> Optional[LauncherLifeStatus]:
        """
        Life status of one launcher serial.

        If the serial was recorded under more than one part number, the
        part number with the most missions wins.
        """
        with self.session_factory() as session:
            row = session.execute(life_status_select(serial_number)).first()
        if row is None:
            logger.debug(f'No missions recorded for launcher {serial_number}')
            return None
        return LauncherLifeStatus.from_row(row)

    def get_all(self) -> List[LauncherLifeStatus]:
        with self.session_factory() as session:
            rows = session.execute(life_status_select()).all()
        return [LauncherLifeStatus.from_row(row) for row in rows]

    def fleet_summary(self, low_life_threshold: Optional[float] = None) -> dict:
        """
        Aggregate life figures across every launcher with missions.

        Launchers whose rated life is unknown count toward hours and
        missions but not toward residual-life statistics.
        """
        threshold = low_life_threshold if low_life_threshold is not None else config.loadout.low_life_threshold_percent
        statuses = self.get_all()

        if not statuses:
            return {
                'count': 0,
                'total_flight_hours': 0.0,
                'total_missions': 0,
                'fired_ratio': None,
                'residual_life': None,
                'below_threshold': [],
            }

        hours = np.array([s.total_flight_hours for s in statuses], dtype=np.float64)
        missions = np.array([s.mission_count for s in statuses], dtype=np.int64)
        fired = np.array([s.fired_mission_count for s in statuses], dtype=np.int64)
        rated = [s for s in statuses if s.residual_life_percent is not None]
        residual = np.array([s.residual_life_percent for s in rated], dtype=np.float64)

        total_missions = int(np.sum(missions))
        below = [s.serial_number for s in rated if s.residual_life_percent < threshold]

        return {
            'count': len(statuses),
            'total_flight_hours': round(float(np.sum(hours)), 2),
            'total_missions': total_missions,
            'fired_ratio': round(float(np.sum(fired)) / total_missions, 3) if total_missions else None,
            'residual_life': {
                'mean': round(float(np.mean(residual)), 2),
                'min': round(float(np.min(residual)), 2),
                'max': round(float(np.max(residual)), 2),
                'std': round(float(np.std(residual)), 2),
            } if residual.size else None,
            'below_threshold': below,
        }
