"""
Loadout Flask Application.

Main entry point for the web application. Initializes:
- Database schema (tables and the launcher life-status view)
- Service registry
- API routes
- Error handlers mapping service errors to HTTP status codes

Usage:
    python -m loadout.app

Or with gunicorn:
    gunicorn 'loadout.app:create_app()'
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS
from sqlalchemy.engine import Engine

from loadout.analytics import FatigueModel
from loadout.api import catalog_bp, launchers_bp, missions_bp, post_flight_bp, session_bp
from loadout.config import config
from loadout.exceptions import (
    ConflictError, FiringStateError, LoadoutError, NotFoundError, PersistenceError, ValidationError,
)
from loadout.models import init_db
from loadout.models.base import SessionLocal, engine as default_engine, make_session_factory
from loadout.services import ServiceRegistry

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)

ERROR_STATUS = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 400),
    (FiringStateError, 400),
    (PersistenceError, 500),
)


def status_for(error: LoadoutError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 500


def create_app(
    engine: Optional[Engine] = None,
    fatigue_model: Optional[FatigueModel] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        engine: Database engine (configured DATABASE_URL if None).
                Tests pass an engine bound to a temporary database.
        fatigue_model: Fatigue index model (simulated model if None)

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    # Initialize database
    bind = engine or default_engine
    session_factory = make_session_factory(engine) if engine is not None else SessionLocal
    logger.info('Initializing database...')
    init_db(bind)

    app.extensions['loadout'] = ServiceRegistry.build(session_factory, fatigue_model)

    # Register API blueprints
    app.register_blueprint(catalog_bp)
    app.register_blueprint(missions_bp)
    app.register_blueprint(post_flight_bp)
    app.register_blueprint(launchers_bp)
    app.register_blueprint(session_bp)

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(LoadoutError)
    def loadout_error(e: LoadoutError):
        status = status_for(e)
        if status >= 500:
            logger.error(f'{e.code}: {e.message}')
        else:
            logger.info(f'{e.code}: {e.message}')
        return jsonify(e.to_dict()), status

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    port = int(os.environ.get('PORT', 5000))
    logger.info(f'Starting Loadout on http://localhost:{port}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
        use_reloader=False,
    )


if __name__ == '__main__':
    run_development_server()
