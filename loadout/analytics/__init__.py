"""
Analytics module for Loadout.

Launcher life status and the fatigue index model.
"""

from loadout.analytics.life_status import LauncherLifeStatus, LauncherLifeStatusRepository
from loadout.analytics.fatigue import (
    FatigueModel,
    FatigueMonitor,
    FatigueReport,
    SimulatedFatigueModel,
    compute_fatigue_index,
)

__all__ = [
    'LauncherLifeStatus',
    'LauncherLifeStatusRepository',
    'FatigueModel',
    'FatigueMonitor',
    'FatigueReport',
    'SimulatedFatigueModel',
    'compute_fatigue_index',
]
