"""
Loadout Backend Package.

Mission weapon-loadout, post-flight recording and launcher life tracking
built with Flask, SQLAlchemy, and NumPy.

Modules:
    api/            REST endpoints for catalog, missions, post-flight and launchers
    models/         SQLAlchemy ORM models and the launcher life-status view
    services/       Transactional operations (catalog, missions, loadout, post-flight)
    analytics/      Launcher life-status lookups and the fatigue index model
    assignment.py   Position assignment model (weapon | launcher per hardpoint)
    positions.py    Hardpoint vocabulary and trackable-position table
    context.py      Operator context passed explicitly to mutating services
    exceptions.py   Error taxonomy shared by services and the HTTP layer
    config.py       Centralized configuration from environment variables
"""

__version__ = '1.0.0'
