"""
Master data API endpoints.

Provides endpoints for:
- /api/catalog/aircraft[/<serial>] - Aircraft list, add, rename, delete
- /api/catalog/launchers[/<part_number>] - Launcher parts
- /api/catalog/weapons[/<part_number>] - Weapon parts
"""

import logging

from flask import Blueprint, jsonify

from loadout.api.common import json_body, operator, services
from loadout.exceptions import NotFoundError

logger = logging.getLogger(__name__)

catalog_bp = Blueprint('catalog', __name__, url_prefix='/api/catalog')


# -------------------------------------------------------------------------
# Aircraft
# -------------------------------------------------------------------------

@catalog_bp.route('/aircraft', methods=['GET'])
def list_aircraft():
    aircraft = services().aircraft.get_all()
    return jsonify({
        'aircraft': [a.to_dict() for a in aircraft],
        'count': len(aircraft),
    })


@catalog_bp.route('/aircraft', methods=['POST'])
def add_aircraft():
    data = json_body()
    aircraft = services().aircraft.insert(data.get('serial_number'), operator())
    return jsonify(aircraft.to_dict()), 201


@catalog_bp.route('/aircraft/<serial_number>', methods=['PUT'])
def rename_aircraft(serial_number: str):
    """Rename an aircraft; body: {"serial_number": "<new>"}."""
    data = json_body()
    new_serial = data.get('serial_number')
    if not services().aircraft.update(serial_number, new_serial, operator()):
        raise NotFoundError('Aircraft', serial_number)
    return jsonify({'serial_number': new_serial.strip()})


@catalog_bp.route('/aircraft/<serial_number>', methods=['DELETE'])
def delete_aircraft(serial_number: str):
    if not services().aircraft.delete(serial_number, operator()):
        raise NotFoundError('Aircraft', serial_number)
    return jsonify({'deleted': serial_number})


# -------------------------------------------------------------------------
# Launchers and weapons
# -------------------------------------------------------------------------

def _store_routes(kind: str, value_field: str):
    """Register list/add/update/delete routes for one store catalog."""

    def catalog():
        return getattr(services(), kind)

    def list_items():
        items = catalog().get_all()
        return jsonify({kind: [i.to_dict() for i in items], 'count': len(items)})

    def add_item():
        data = json_body()
        item = catalog().insert(
            data.get('part_number'),
            data.get('name'),
            data.get('manufacturer_code'),
            data.get(value_field),
            operator(),
        )
        return jsonify(item.to_dict()), 201

    def get_item(part_number: str):
        item = catalog().get(part_number)
        if item is None:
            raise NotFoundError(kind[:-1].capitalize(), part_number)
        return jsonify(item.to_dict())

    def update_item(part_number: str):
        data = json_body()
        updated = catalog().update(
            part_number,
            data.get('name'),
            data.get('manufacturer_code'),
            data.get(value_field),
            operator(),
        )
        if not updated:
            raise NotFoundError(kind[:-1].capitalize(), part_number)
        return jsonify(catalog().get(part_number).to_dict())

    def delete_item(part_number: str):
        if not catalog().delete(part_number, operator()):
            raise NotFoundError(kind[:-1].capitalize(), part_number)
        return jsonify({'deleted': part_number})

    catalog_bp.add_url_rule(f'/{kind}', f'list_{kind}', list_items, methods=['GET'])
    catalog_bp.add_url_rule(f'/{kind}', f'add_{kind}', add_item, methods=['POST'])
    catalog_bp.add_url_rule(f'/{kind}/<part_number>', f'get_{kind}', get_item, methods=['GET'])
    catalog_bp.add_url_rule(f'/{kind}/<part_number>', f'update_{kind}', update_item, methods=['PUT'])
    catalog_bp.add_url_rule(f'/{kind}/<part_number>', f'delete_{kind}', delete_item, methods=['DELETE'])


_store_routes('launchers', 'operational_life_hours')
_store_routes('weapons', 'mass')
