"""
API module for Loadout.

Provides REST endpoints for:
- Master data (aircraft, launchers, weapons)
- Missions and their loadouts
- Post-flight recording
- Launcher life status and fatigue reports
- Sign-in
"""

from loadout.api.catalog import catalog_bp
from loadout.api.missions import missions_bp
from loadout.api.post_flight import post_flight_bp
from loadout.api.launchers import launchers_bp
from loadout.api.session import session_bp

__all__ = ['catalog_bp', 'missions_bp', 'post_flight_bp', 'launchers_bp', 'session_bp']
