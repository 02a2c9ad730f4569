"""
Mission API endpoints.

Provides endpoints for:
- GET /api/missions - List missions (filters: aircraft, from, to, latest)
- POST /api/missions - Create a mission
- GET/PUT/DELETE /api/missions/<id> - Single mission
- GET/PUT /api/missions/<id>/loadout - Position assignment for a mission
"""

import logging

from flask import Blueprint, jsonify, request

from loadout.api.common import json_body, operator, services
from loadout.assignment import PositionAssignment
from loadout.exceptions import NotFoundError, ValidationError
from loadout.positions import HARDPOINTS
from loadout.services import MissionDraft
from loadout.validation import parse_date, parse_int

logger = logging.getLogger(__name__)

missions_bp = Blueprint('missions', __name__, url_prefix='/api/missions')


@missions_bp.route('', methods=['GET'])
def list_missions():
    """
    List missions.

    Query parameters:
    - aircraft: string, restrict to one aircraft serial
    - from / to: YYYY-MM-DD, inclusive date range (both required together)
    - latest: int, return the N most recently entered missions
    """
    mission_service = services().missions
    aircraft = request.args.get('aircraft') or None
    start = request.args.get('from')
    end = request.args.get('to')
    latest = request.args.get('latest')

    if latest:
        missions = mission_service.get_latest(parse_int(latest, 'latest'))
    elif start or end:
        if not (start and end):
            raise ValidationError('Both from and to are required for a date range', field='from')
        missions = mission_service.get_by_date_range(
            parse_date(start, 'from'),
            parse_date(end, 'to'),
            aircraft,
        )
    elif aircraft:
        missions = mission_service.get_by_aircraft(aircraft)
    else:
        missions = mission_service.get_all()

    return jsonify({
        'missions': [m.to_dict() for m in missions],
        'count': len(missions),
    })


@missions_bp.route('', methods=['POST'])
def create_mission():
    draft = MissionDraft.from_dict(json_body())
    mission = services().missions.create(draft, operator())
    return jsonify(mission.to_dict()), 201


@missions_bp.route('/<int:mission_id>', methods=['GET'])
def get_mission(mission_id: int):
    mission = services().missions.require(mission_id)
    return jsonify(mission.to_dict())


@missions_bp.route('/<int:mission_id>', methods=['PUT'])
def update_mission(mission_id: int):
    draft = MissionDraft.from_dict(json_body())
    mission = services().missions.update(mission_id, draft, operator())
    if mission is None:
        raise NotFoundError('Mission', mission_id)
    return jsonify(mission.to_dict())


@missions_bp.route('/<int:mission_id>', methods=['DELETE'])
def delete_mission(mission_id: int):
    if not services().missions.delete(mission_id, operator()):
        raise NotFoundError('Mission', mission_id)
    return jsonify({'deleted': mission_id})


@missions_bp.route('/<int:mission_id>/loadout', methods=['GET'])
def get_loadout(mission_id: int):
    loaded = services().missions.load_loadout(mission_id)
    return jsonify({
        'mission_id': mission_id,
        'loadout': loaded.assignment.to_dict(),
        'notice': loaded.notice,
        'positions': [{'code': h.code, 'trackable': h.trackable} for h in HARDPOINTS],
    })


@missions_bp.route('/<int:mission_id>/loadout', methods=['PUT'])
def save_loadout(mission_id: int):
    """
    Replace a mission's loadout.

    Body: {"loadout": {"TIP 1": {"kind": "weapon", "part_number": ..., "serial_number": ...}}}

    The loadout key is required; an explicit {} clears every position.
    """
    data = json_body()
    loadout = data.get('loadout')
    if not isinstance(loadout, dict):
        raise ValidationError('loadout must be an object keyed by position', field='loadout')
    assignment = PositionAssignment.from_dict(loadout)
    result = services().missions.save_loadout(mission_id, assignment, operator())
    return jsonify(result.to_dict())
