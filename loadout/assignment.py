"""
Position assignment model.

A mission's loadout maps hardpoint codes to at most one mounted item. An
item is either a WeaponLoad or a LauncherLoad, each carrying a part
number and a free-text serial number. Serial numbers are not checked
against any registry, only for non-emptiness.

The same physical item (part number + serial number) cannot be mounted
on two positions at once. Rows already stored with such duplicates are
still loaded so that old missions stay readable.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Iterator, List, Optional, Tuple, Union

from loadout.exceptions import AssignmentError
from loadout.positions import is_valid_position, position_order

logger = logging.getLogger(__name__)


class ItemKind(str, Enum):
    """Kind of item mounted on a hardpoint."""
    WEAPON = 'weapon'
    LAUNCHER = 'launcher'


@dataclass(frozen=True)
class _MountedItem:
    part_number: str
    serial_number: str

    kind: ClassVar[ItemKind]

    def __post_init__(self):
        for field in ('part_number', 'serial_number'):
            value = getattr(self, field)
            if value is None or not str(value).strip():
                raise AssignmentError(f'{self.kind.value} {field.replace("_", " ")} is required')
            object.__setattr__(self, field, str(value).strip())

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'part_number': self.part_number,
            'serial_number': self.serial_number,
        }


@dataclass(frozen=True)
class WeaponLoad(_MountedItem):
    """A weapon mounted on a hardpoint. Only weapons can be fired."""
    kind: ClassVar[ItemKind] = ItemKind.WEAPON


@dataclass(frozen=True)
class LauncherLoad(_MountedItem):
    """A launcher mounted on a hardpoint."""
    kind: ClassVar[ItemKind] = ItemKind.LAUNCHER


MountedItem = Union[WeaponLoad, LauncherLoad]

_ITEM_TYPES = {
    ItemKind.WEAPON: WeaponLoad,
    ItemKind.LAUNCHER: LauncherLoad,
}


def make_item(kind, part_number: str, serial_number: str) -> MountedItem:
    """Build a mounted item from a kind value ('weapon' or 'launcher')."""
    try:
        item_type = _ITEM_TYPES[ItemKind(kind)]
    except ValueError:
        raise AssignmentError(f'Unknown item kind: {kind!r}')
    return item_type(part_number, serial_number)


class PositionAssignment:
    """
    Hardpoint → mounted item mapping for one mission.

    Iteration and all listing methods follow the display order of the
    hardpoint vocabulary, regardless of assignment order.
    """

    def __init__(self, items: Optional[Dict[str, MountedItem]] = None):
        self._slots: Dict[str, MountedItem] = {}
        for position, item in (items or {}).items():
            self.assign(position, item)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def assign(self, position: str, item: MountedItem) -> Optional[MountedItem]:
        """
        Mount an item on a position, replacing whatever was there.

        Returns the previously mounted item, if any.
        """
        self._check_position(position)
        if not isinstance(item, (WeaponLoad, LauncherLoad)):
            raise AssignmentError(f'Cannot mount {item!r}', position=position)

        holder = self.find_serial(item.part_number, item.serial_number)
        if holder is not None and holder != position:
            raise AssignmentError(
                f'{item.part_number} s/n {item.serial_number} is already mounted on {holder}',
                position=position,
                details={'mounted_on': holder},
            )

        previous = self._slots.get(position)
        self._slots[position] = item
        return previous

    def clear(self, position: str) -> Optional[MountedItem]:
        """Remove the item on a position. Returns it, or None if empty."""
        self._check_position(position)
        return self._slots.pop(position, None)

    def restore(self, position: str, item: MountedItem) -> None:
        """
        Place a stored item without the duplicate-serial check.

        Used when rebuilding an assignment from historical rows.
        """
        if not is_valid_position(position):
            logger.warning(f'Stored loadout uses unknown position {position!r}')
        holder = self.find_serial(item.part_number, item.serial_number)
        if holder is not None and holder != position:
            logger.warning(
                f'Stored loadout mounts {item.part_number} s/n {item.serial_number} '
                f'on both {holder} and {position}'
            )
        self._slots[position] = item

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, position: str) -> Optional[MountedItem]:
        return self._slots.get(position)

    def all_assignments(self) -> Dict[str, MountedItem]:
        """Snapshot of every assigned position in display order."""
        return dict(self.items())

    def items(self) -> List[Tuple[str, MountedItem]]:
        return sorted(self._slots.items(), key=lambda pair: position_order(pair[0]))

    def weapons(self) -> Dict[str, WeaponLoad]:
        return {pos: item for pos, item in self.items() if item.kind is ItemKind.WEAPON}

    def launchers(self) -> Dict[str, LauncherLoad]:
        return {pos: item for pos, item in self.items() if item.kind is ItemKind.LAUNCHER}

    def find_serial(self, part_number: str, serial_number: str) -> Optional[str]:
        """Return the position holding this physical item, if any."""
        for position, item in self._slots.items():
            if item.part_number == part_number and item.serial_number == serial_number:
                return position
        return None

    def copy(self) -> 'PositionAssignment':
        clone = PositionAssignment()
        clone._slots = dict(self._slots)
        return clone

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, position: str) -> bool:
        return position in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(pos for pos, _ in self.items())

    def __eq__(self, other) -> bool:
        if not isinstance(other, PositionAssignment):
            return NotImplemented
        return self._slots == other._slots

    def __repr__(self) -> str:
        entries = ', '.join(f'{pos}={item.kind.value}:{item.serial_number}' for pos, item in self.items())
        return f'<PositionAssignment {entries}>'

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, dict]:
        return {pos: item.to_dict() for pos, item in self.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, dict]) -> 'PositionAssignment':
        """Build an assignment from {position: {kind, part_number, serial_number}}."""
        if not isinstance(data, dict):
            raise AssignmentError('Loadout must be an object keyed by position')
        assignment = cls()
        for position, entry in data.items():
            if not isinstance(entry, dict):
                raise AssignmentError(f'Invalid item for {position}', position=position)
            item = make_item(entry.get('kind'), entry.get('part_number'), entry.get('serial_number'))
            assignment.assign(position, item)
        return assignment

    @staticmethod
    def _check_position(position: str) -> None:
        if not is_valid_position(position):
            raise AssignmentError(f'Unknown position: {position!r}', position=position)
