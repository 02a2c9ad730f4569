"""
Hardpoint vocabulary.

Thirteen display codes in the order the loadout screen lists them. Each
code carries a trackable flag: untracked positions can hold an item but
never appear in the fired/aboard missile status. Which codes are
untracked comes from configuration (REA 11 by default).
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from loadout.config import config

POSITION_CODES: Tuple[str, ...] = (
    'TIP 1',
    'O/B 3',
    'CTR 5',
    'I/B 7',
    'REA 11',
    'FWD 9',
    'CL 13',
    'FWD 10',
    'REA 12',
    'I/B 8',
    'CTR 6',
    'O/B 4',
    'TIP 2',
)


@dataclass(frozen=True)
class Hardpoint:
    """A named mounting point and whether its firing state is tracked."""
    code: str
    trackable: bool = True


def build_hardpoints(untracked: Iterable[str] = ()) -> Tuple[Hardpoint, ...]:
    """Build the hardpoint table, marking the given codes as untracked."""
    untracked = set(untracked)
    return tuple(Hardpoint(code, code not in untracked) for code in POSITION_CODES)


HARDPOINTS = build_hardpoints(config.loadout.untracked_positions)

_ORDER = {code: index for index, code in enumerate(POSITION_CODES)}


def get_hardpoint(code: str, hardpoints: Tuple[Hardpoint, ...] = None) -> Optional[Hardpoint]:
    for hardpoint in hardpoints or HARDPOINTS:
        if hardpoint.code == code:
            return hardpoint
    return None


def is_valid_position(code: str) -> bool:
    return code in _ORDER


def is_trackable(code: str, hardpoints: Tuple[Hardpoint, ...] = None) -> bool:
    hardpoint = get_hardpoint(code, hardpoints)
    return hardpoint is not None and hardpoint.trackable


def tracked_positions(hardpoints: Tuple[Hardpoint, ...] = None) -> Tuple[str, ...]:
    """Codes that have a fired/aboard status slot, in display order."""
    return tuple(h.code for h in hardpoints or HARDPOINTS if h.trackable)


def position_order(code: str) -> int:
    """Sort key placing codes in display order (unknown codes last)."""
    return _ORDER.get(code, len(_ORDER))
