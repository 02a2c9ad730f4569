"""
Input parsing for form and JSON fields.

Every helper accepts either text (as typed by an operator) or an already
typed value, and raises ValidationError naming the offending field.
"""

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from loadout.exceptions import ValidationError

TIME_FORMAT = '%H:%M'
DATE_FORMAT = '%Y-%m-%d'


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_text(value: Any, field: str, label: str = None) -> str:
    """Return the stripped text, rejecting empty input."""
    if _is_blank(value):
        raise ValidationError(f'{label or field} is required', field=field)
    return str(value).strip()


def parse_decimal(value: Any, field: str, required: bool = True) -> Optional[Decimal]:
    """
    Parse a decimal number.

    Accepts ',' as the decimal separator, as typed on the original forms.
    """
    if _is_blank(value):
        if required:
            raise ValidationError(f'{field} is required', field=field)
        return None
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number', field=field)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(str(value).strip().replace(',', '.'))
        except InvalidOperation:
            raise ValidationError(f'{field} must be a number, got {value!r}', field=field)
    if not result.is_finite():
        raise ValidationError(f'{field} must be a finite number', field=field)
    return result


def parse_int(value: Any, field: str) -> int:
    if _is_blank(value):
        raise ValidationError(f'{field} is required', field=field)
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer', field=field)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f'{field} must be an integer, got {value!r}', field=field)


def parse_time(value: Any, field: str) -> time:
    """Parse an HH:MM time."""
    if isinstance(value, time):
        return value
    text = require_text(value, field)
    try:
        return datetime.strptime(text, TIME_FORMAT).time()
    except ValueError:
        raise ValidationError(f'{field} must use HH:MM format, got {text!r}', field=field)


def parse_date(value: Any, field: str) -> date:
    """Parse a YYYY-MM-DD date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = require_text(value, field)
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f'{field} must use YYYY-MM-DD format, got {text!r}', field=field)
