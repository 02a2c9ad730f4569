"""
Position Assignment Tests

Tests for the hardpoint vocabulary and the in-memory assignment model.
"""

import pytest

from loadout.assignment import (
    ItemKind, LauncherLoad, PositionAssignment, WeaponLoad, make_item,
)
from loadout.exceptions import AssignmentError, ValidationError
from loadout.positions import (
    POSITION_CODES, build_hardpoints, is_trackable, is_valid_position, tracked_positions,
)


# =============================================================================
# Hardpoint Vocabulary Tests
# =============================================================================

class TestHardpoints:
    """Tests for the position vocabulary."""

    def test_thirteen_codes_in_display_order(self):
        """Test the vocabulary lists thirteen codes starting and ending at the tips."""
        assert len(POSITION_CODES) == 13
        assert POSITION_CODES[0] == 'TIP 1'
        assert POSITION_CODES[4] == 'REA 11'
        assert POSITION_CODES[-1] == 'TIP 2'

    def test_rea_11_untracked_by_default(self):
        """Test REA 11 is assignable but has no firing status slot."""
        assert is_valid_position('REA 11')
        assert not is_trackable('REA 11')
        assert len(tracked_positions()) == 12

    def test_untracked_positions_are_configurable(self):
        """Test the trackable table is built from configuration data."""
        hardpoints = build_hardpoints(untracked=['CL 13'])

        assert not is_trackable('CL 13', hardpoints)
        assert is_trackable('REA 11', hardpoints)

    def test_unknown_code(self):
        """Test codes outside the vocabulary are rejected."""
        assert not is_valid_position('TIP 3')
        assert not is_trackable('TIP 3')


# =============================================================================
# Mounted Item Tests
# =============================================================================

class TestMountedItems:
    """Tests for weapon and launcher descriptors."""

    def test_kind(self):
        """Test each item type carries its kind."""
        assert WeaponLoad('AIM-9', 'W-1').kind is ItemKind.WEAPON
        assert LauncherLoad('LAU-7', 'L-1').kind is ItemKind.LAUNCHER

    def test_strips_text(self):
        """Test part and serial numbers are stripped."""
        item = WeaponLoad('  AIM-9 ', ' W-1 ')
        assert item.part_number == 'AIM-9'
        assert item.serial_number == 'W-1'

    @pytest.mark.parametrize('serial', ['', '   ', None])
    def test_empty_serial_rejected(self, serial):
        """Test the serial number must not be empty."""
        with pytest.raises(AssignmentError):
            WeaponLoad('AIM-9', serial)

    def test_weapon_and_launcher_not_equal(self):
        """Test the same numbers under different kinds are different items."""
        assert WeaponLoad('X', '1') != LauncherLoad('X', '1')

    def test_make_item(self):
        """Test building items from kind values."""
        assert make_item('launcher', 'LAU-7', 'L-1') == LauncherLoad('LAU-7', 'L-1')
        with pytest.raises(AssignmentError):
            make_item('pod', 'X', '1')

    def test_assignment_error_is_validation_error(self):
        """Test assignment errors are reported as validation errors."""
        assert issubclass(AssignmentError, ValidationError)


# =============================================================================
# PositionAssignment Tests
# =============================================================================

class TestPositionAssignment:
    """Tests for PositionAssignment."""

    def test_assign_and_get(self):
        """Test assigning an item to a position."""
        assignment = PositionAssignment()
        item = WeaponLoad('AIM-9', 'W-1')

        previous = assignment.assign('TIP 1', item)

        assert previous is None
        assert assignment.get('TIP 1') == item
        assert 'TIP 1' in assignment
        assert len(assignment) == 1

    def test_reassign_overwrites(self):
        """Test a position can be reassigned by overwriting."""
        assignment = PositionAssignment({'TIP 1': WeaponLoad('AIM-9', 'W-1')})

        previous = assignment.assign('TIP 1', LauncherLoad('LAU-7', 'L-1'))

        assert previous == WeaponLoad('AIM-9', 'W-1')
        assert assignment.get('TIP 1') == LauncherLoad('LAU-7', 'L-1')
        assert len(assignment) == 1

    def test_clear(self):
        """Test clearing a position."""
        assignment = PositionAssignment({'TIP 1': WeaponLoad('AIM-9', 'W-1')})

        removed = assignment.clear('TIP 1')

        assert removed == WeaponLoad('AIM-9', 'W-1')
        assert assignment.get('TIP 1') is None
        assert assignment.clear('TIP 1') is None

    def test_unknown_position_rejected(self):
        """Test positions outside the vocabulary are rejected."""
        with pytest.raises(AssignmentError):
            PositionAssignment().assign('TIP 9', WeaponLoad('AIM-9', 'W-1'))

    def test_non_item_rejected(self):
        """Test only weapon or launcher descriptors can be mounted."""
        with pytest.raises(AssignmentError):
            PositionAssignment().assign('TIP 1', {'kind': 'weapon'})

    def test_duplicate_serial_rejected(self):
        """Test the same physical item cannot sit on two positions."""
        assignment = PositionAssignment({'TIP 1': WeaponLoad('AIM-9', 'W-1')})

        with pytest.raises(AssignmentError) as exc_info:
            assignment.assign('TIP 2', WeaponLoad('AIM-9', 'W-1'))

        assert exc_info.value.details['mounted_on'] == 'TIP 1'
        assert 'TIP 2' not in assignment

    def test_same_serial_different_part_allowed(self):
        """Test serial numbers only clash within one part number."""
        assignment = PositionAssignment({'TIP 1': WeaponLoad('AIM-9', '001')})
        assignment.assign('TIP 2', WeaponLoad('AIM-120', '001'))

        assert len(assignment) == 2

    def test_reassign_same_item_same_position(self):
        """Test re-mounting an item on its own position is not a duplicate."""
        assignment = PositionAssignment({'TIP 1': WeaponLoad('AIM-9', 'W-1')})
        assignment.assign('TIP 1', WeaponLoad('AIM-9', 'W-1'))

        assert len(assignment) == 1

    def test_restore_tolerates_duplicates(self):
        """Test stored duplicates are still loaded."""
        assignment = PositionAssignment()
        assignment.restore('TIP 1', WeaponLoad('AIM-9', 'W-1'))
        assignment.restore('TIP 2', WeaponLoad('AIM-9', 'W-1'))

        assert len(assignment) == 2

    def test_all_assignments_in_display_order(self):
        """Test listings follow the vocabulary order, not assignment order."""
        assignment = PositionAssignment()
        assignment.assign('TIP 2', WeaponLoad('AIM-9', 'W-2'))
        assignment.assign('CTR 5', LauncherLoad('LAU-7', 'L-1'))
        assignment.assign('TIP 1', WeaponLoad('AIM-9', 'W-1'))

        assert list(assignment.all_assignments()) == ['TIP 1', 'CTR 5', 'TIP 2']
        assert list(assignment) == ['TIP 1', 'CTR 5', 'TIP 2']

    def test_weapons_and_launchers(self, mixed_assignment):
        """Test splitting an assignment by kind."""
        assert list(mixed_assignment.weapons()) == ['TIP 1', 'TIP 2']
        assert list(mixed_assignment.launchers()) == ['CTR 5']

    def test_copy_is_independent(self, mixed_assignment):
        """Test copies do not share state."""
        clone = mixed_assignment.copy()
        clone.clear('TIP 1')

        assert clone != mixed_assignment
        assert mixed_assignment.get('TIP 1') is not None

    def test_dict_round_trip(self, mixed_assignment):
        """Test the JSON form rebuilds an equal assignment."""
        data = mixed_assignment.to_dict()

        assert data['CTR 5'] == {'kind': 'launcher', 'part_number': 'LAU-7', 'serial_number': 'L-001'}
        assert PositionAssignment.from_dict(data) == mixed_assignment

    def test_from_dict_rejects_bad_entry(self):
        """Test malformed JSON entries are rejected."""
        with pytest.raises(AssignmentError):
            PositionAssignment.from_dict({'TIP 1': 'AIM-9'})
        with pytest.raises(AssignmentError):
            PositionAssignment.from_dict({'TIP 1': {'kind': 'weapon', 'part_number': 'AIM-9'}})
