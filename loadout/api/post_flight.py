"""
Post-flight API endpoints.

Provides endpoints for:
- GET /api/post-flight/pending/<aircraft> - Missions still lacking recorded data
- GET /api/post-flight/<mission_id> - Firing sheet for a mission
- POST /api/post-flight/<mission_id> - Record metrics and fired positions
- GET /api/post-flight/records - Stored post-flight rows
"""

import logging

from flask import Blueprint, jsonify

from loadout.api.common import json_body, operator, services
from loadout.exceptions import ValidationError
from loadout.services import FlightMetrics

logger = logging.getLogger(__name__)

post_flight_bp = Blueprint('post_flight', __name__, url_prefix='/api/post-flight')


@post_flight_bp.route('/pending/<aircraft_serial>', methods=['GET'])
def pending_missions(aircraft_serial: str):
    missions = services().post_flight.pending_missions(aircraft_serial)
    return jsonify({
        'missions': [m.to_dict() for m in missions],
        'count': len(missions),
    })


@post_flight_bp.route('/<int:mission_id>', methods=['GET'])
def get_sheet(mission_id: int):
    sheet = services().post_flight.open_sheet(mission_id)
    return jsonify(sheet.to_dict())


@post_flight_bp.route('/<int:mission_id>', methods=['POST'])
def record(mission_id: int):
    """
    Record post-flight data.

    Body: {"gload_max": "7,5", "gload_min": "-2.1", "avg_altitude": 15000,
           "max_speed": 540, "fired": ["TIP 1"]}
    """
    data = json_body()
    metrics = FlightMetrics.from_dict(data)
    fired = data.get('fired') or []
    if not isinstance(fired, list):
        raise ValidationError('fired must be a list of positions', field='fired')

    recorder = services().post_flight
    sheet = recorder.open_sheet(mission_id)
    for position in fired:
        sheet.set_fired(position, True)

    row = recorder.record(sheet, metrics, operator())
    return jsonify(row.to_dict()), 201


@post_flight_bp.route('/records', methods=['GET'])
def list_records():
    rows = services().recorded_data.get_all()
    return jsonify({
        'records': [r.to_dict() for r in rows],
        'count': len(rows),
    })
