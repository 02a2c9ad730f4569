"""
Launcher life API endpoints.

Provides endpoints for:
- GET /api/launchers/fleet - Fleet-wide residual life summary
- GET /api/launchers/<serial>/life - Life status for one launcher serial
- GET /api/launchers/<serial>/fatigue - Fatigue report (optional ?hours=)
"""

import logging

from flask import Blueprint, jsonify, request

from loadout.api.common import services
from loadout.exceptions import NotFoundError
from loadout.validation import parse_decimal

logger = logging.getLogger(__name__)

launchers_bp = Blueprint('launchers', __name__, url_prefix='/api/launchers')


@launchers_bp.route('/fleet', methods=['GET'])
def fleet_summary():
    threshold = request.args.get('threshold')
    summary = services().life_status.fleet_summary(
        float(parse_decimal(threshold, 'threshold')) if threshold else None
    )
    return jsonify(summary)


@launchers_bp.route('/<serial_number>/life', methods=['GET'])
def life_status(serial_number: str):
    status = services().life_status.get(serial_number)
    if status is None:
        raise NotFoundError('Launcher life status', serial_number)
    return jsonify(status.to_dict())


@launchers_bp.route('/<serial_number>/fatigue', methods=['GET'])
def fatigue_report(serial_number: str):
    hours = request.args.get('hours')
    flight_hours = float(parse_decimal(hours, 'hours')) if hours else None
    report = services().fatigue.report(serial_number, flight_hours)
    return jsonify(report.to_dict())
