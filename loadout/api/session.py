"""
Sign-in endpoint.

POST /api/session checks credentials and returns the operator identity.
Clients send it back as the X-Operator header on mutating requests.
"""

import logging

from flask import Blueprint, jsonify

from loadout.api.common import json_body, services

logger = logging.getLogger(__name__)

session_bp = Blueprint('session', __name__, url_prefix='/api/session')


@session_bp.route('', methods=['POST'])
def sign_in():
    data = json_body()
    context = services().users.authenticate(data.get('username'), data.get('password'))
    if context is None:
        return jsonify({'error': 'INVALID_CREDENTIALS', 'message': 'Invalid username or password'}), 401
    return jsonify({'username': context.username, 'user_id': context.user_id})
