"""
Helpers shared by the API blueprints.
"""

from flask import current_app, request

from loadout.context import OperatorContext
from loadout.exceptions import ValidationError
from loadout.services import ServiceRegistry


def services() -> ServiceRegistry:
    """Service registry installed on the app by create_app()."""
    return current_app.extensions['loadout']


def operator() -> OperatorContext:
    """Operator named by the X-Operator header, or anonymous."""
    username = (request.headers.get('X-Operator') or '').strip()
    if not username:
        return OperatorContext.anonymous()
    return OperatorContext(username=username)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('JSON object body required')
    return data
