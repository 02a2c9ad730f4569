"""
Master data catalog - aircraft, launchers, weapons, and users.

Plain insert / update / delete / get_all / exists operations per entity.
Aircraft serial numbers are primary keys referenced by missions and
recorded data; renaming one cascades to those references in the same
transaction.
"""

import logging
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from loadout.context import OperatorContext
from loadout.exceptions import ConflictError, PersistenceError, ValidationError
from loadout.models import Aircraft, Launcher, User, Weapon
from loadout.models.base import SessionLocal, get_session
from loadout.validation import parse_decimal, require_text

logger = logging.getLogger(__name__)


class AircraftCatalog:
    """Aircraft master data."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def get_all(self) -> List[Aircraft]:
        with self.session_factory() as session:
            stmt = select(Aircraft).order_by(Aircraft.serial_number)
            return list(session.execute(stmt).scalars().all())

    def get(self, serial_number: str) -> Optional[Aircraft]:
        with self.session_factory() as session:
            return session.get(Aircraft, serial_number)

    def exists(self, serial_number: str) -> bool:
        return self.get(serial_number) is not None

    def insert(self, serial_number: str, operator: Optional[OperatorContext] = None) -> Aircraft:
        serial_number = require_text(serial_number, 'serial_number', 'Aircraft serial number')
        if self.exists(serial_number):
            raise ConflictError(f'Aircraft {serial_number} already exists', {'serial_number': serial_number})

        aircraft = Aircraft(serial_number=serial_number)
        try:
            with get_session(self.session_factory) as session:
                session.add(aircraft)
        except IntegrityError as e:
            raise ConflictError(f'Aircraft {serial_number} already exists', {'cause': str(e.orig)})
        except SQLAlchemyError as e:
            raise PersistenceError('Insert aircraft', e)

        logger.info(f'Aircraft {serial_number} added by {operator or OperatorContext.anonymous()}')
        return aircraft

    def update(
        self,
        serial_number: str,
        new_serial_number: str,
        operator: Optional[OperatorContext] = None,
    ) -> bool:
        """
        Rename an aircraft.

        Missions and recorded data follow through ON UPDATE CASCADE.
        Returns False if the aircraft does not exist.
        """
        new_serial_number = require_text(new_serial_number, 'serial_number', 'Aircraft serial number')
        if new_serial_number == serial_number:
            return self.exists(serial_number)
        if self.exists(new_serial_number):
            raise ConflictError(
                f'Aircraft {new_serial_number} already exists',
                {'serial_number': new_serial_number},
            )

        try:
            with get_session(self.session_factory) as session:
                result = session.execute(
                    update(Aircraft)
                    .where(Aircraft.serial_number == serial_number)
                    .values(serial_number=new_serial_number)
                )
                renamed = result.rowcount > 0
        except IntegrityError as e:
            raise ConflictError(f'Cannot rename aircraft {serial_number}', {'cause': str(e.orig)})
        except SQLAlchemyError as e:
            raise PersistenceError('Update aircraft', e)

        if renamed:
            logger.info(f'Aircraft {serial_number} renamed to {new_serial_number} by {operator or OperatorContext.anonymous()}')
        return renamed

    def delete(self, serial_number: str, operator: Optional[OperatorContext] = None) -> bool:
        """Delete an aircraft. Refused while missions or recorded data reference it."""
        try:
            with get_session(self.session_factory) as session:
                result = session.execute(delete(Aircraft).where(Aircraft.serial_number == serial_number))
                deleted = result.rowcount > 0
        except IntegrityError as e:
            raise ConflictError(
                f'Aircraft {serial_number} is referenced by missions or recorded data',
                {'serial_number': serial_number, 'cause': str(e.orig)},
            )
        except SQLAlchemyError as e:
            raise PersistenceError('Delete aircraft', e)

        if deleted:
            logger.info(f'Aircraft {serial_number} deleted by {operator or OperatorContext.anonymous()}')
        return deleted


class _StoreCatalog:
    """Shared CRUD for part-number keyed store items."""

    model = None
    label = ''
    # Name of the numeric attribute and whether it is mandatory
    value_field = ''
    value_required = True

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def _values(self, name: Any, manufacturer_code: Any, value: Any) -> dict:
        return {
            'name': require_text(name, 'name', f'{self.label} name'),
            'manufacturer_code': require_text(manufacturer_code, 'manufacturer_code', 'Manufacturer code'),
            self.value_field: self._parse_value(value),
        }

    def _parse_value(self, value: Any) -> Optional[Decimal]:
        parsed = parse_decimal(value, self.value_field, required=self.value_required)
        if parsed is not None and parsed < 0:
            raise ValidationError(f'{self.value_field} cannot be negative', field=self.value_field)
        return parsed

    def get_all(self) -> list:
        with self.session_factory() as session:
            stmt = select(self.model).order_by(self.model.part_number)
            return list(session.execute(stmt).scalars().all())

    def get(self, part_number: str):
        with self.session_factory() as session:
            return session.get(self.model, part_number)

    def exists(self, part_number: str) -> bool:
        return self.get(part_number) is not None

    def insert(
        self,
        part_number: Any,
        name: Any,
        manufacturer_code: Any,
        value: Any = None,
        operator: Optional[OperatorContext] = None,
    ):
        part_number = require_text(part_number, 'part_number', 'Part number')
        values = self._values(name, manufacturer_code, value)
        if self.exists(part_number):
            raise ConflictError(f'{self.label} {part_number} already exists', {'part_number': part_number})

        item = self.model(part_number=part_number, **values)
        try:
            with get_session(self.session_factory) as session:
                session.add(item)
        except IntegrityError as e:
            raise ConflictError(f'{self.label} {part_number} already exists', {'cause': str(e.orig)})
        except SQLAlchemyError as e:
            raise PersistenceError(f'Insert {self.label.lower()}', e)

        logger.info(f'{self.label} {part_number} added by {operator or OperatorContext.anonymous()}')
        return item

    def update(
        self,
        part_number: str,
        name: Any,
        manufacturer_code: Any,
        value: Any = None,
        operator: Optional[OperatorContext] = None,
    ) -> bool:
        """Update attributes of an existing part. Returns False if absent."""
        values = self._values(name, manufacturer_code, value)
        try:
            with get_session(self.session_factory) as session:
                result = session.execute(
                    update(self.model)
                    .where(self.model.part_number == part_number)
                    .values(**values)
                )
                updated = result.rowcount > 0
        except SQLAlchemyError as e:
            raise PersistenceError(f'Update {self.label.lower()}', e)

        if updated:
            logger.info(f'{self.label} {part_number} updated by {operator or OperatorContext.anonymous()}')
        return updated

    def delete(self, part_number: str, operator: Optional[OperatorContext] = None) -> bool:
        try:
            with get_session(self.session_factory) as session:
                result = session.execute(delete(self.model).where(self.model.part_number == part_number))
                deleted = result.rowcount > 0
        except SQLAlchemyError as e:
            raise PersistenceError(f'Delete {self.label.lower()}', e)

        if deleted:
            logger.info(f'{self.label} {part_number} deleted by {operator or OperatorContext.anonymous()}')
        return deleted


class LauncherCatalog(_StoreCatalog):
    """Launcher parts; operational life hours are mandatory."""
    model = Launcher
    label = 'Launcher'
    value_field = 'operational_life_hours'
    value_required = True


class WeaponCatalog(_StoreCatalog):
    """Weapon parts; mass is optional."""
    model = Weapon
    label = 'Weapon'
    value_field = 'mass'
    value_required = False


class UserDirectory:
    """Operator accounts and sign-in."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def get_by_username(self, username: str) -> Optional[User]:
        with self.session_factory() as session:
            stmt = select(User).where(User.username == username)
            return session.execute(stmt).scalars().first()

    def get(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            return session.get(User, user_id)

    def register(self, username: Any, password: Any) -> User:
        username = require_text(username, 'username', 'Username')
        if password is None or not str(password):
            raise ValidationError('Password is required', field='password')
        if self.get_by_username(username) is not None:
            raise ConflictError(f'User {username} already exists', {'username': username})

        user = User(username=username)
        user.set_password(str(password))
        try:
            with get_session(self.session_factory) as session:
                session.add(user)
        except IntegrityError as e:
            raise ConflictError(f'User {username} already exists', {'cause': str(e.orig)})
        except SQLAlchemyError as e:
            raise PersistenceError('Register user', e)

        logger.info(f'User {username} registered')
        return user

    def authenticate(self, username: str, password: str) -> Optional[OperatorContext]:
        """Return the operator context for valid credentials, else None."""
        if not username or not password:
            return None
        user = self.get_by_username(username.strip())
        if user is None or not user.check_password(password):
            logger.warning(f'Failed sign-in for {username!r}')
            return None
        logger.info(f'User {user.username} signed in')
        return OperatorContext(username=user.username, user_id=user.id)
