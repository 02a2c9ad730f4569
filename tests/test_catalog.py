"""
Catalog Tests

Tests for aircraft, launcher and weapon master data and user sign-in.
"""

from decimal import Decimal

import pytest

from loadout.exceptions import ConflictError, ValidationError
from loadout.services import (
    AircraftCatalog, LauncherCatalog, UserDirectory, WeaponCatalog,
)
from loadout.services.post_flight import FlightMetrics


# =============================================================================
# AircraftCatalog Tests
# =============================================================================

class TestAircraftCatalog:
    """Tests for AircraftCatalog."""

    @pytest.fixture
    def catalog(self, session_factory):
        return AircraftCatalog(session_factory)

    def test_insert_and_exists(self, catalog, operator):
        """Test adding an aircraft."""
        catalog.insert(' MM7100 ', operator)

        assert catalog.exists('MM7100')
        assert [a.serial_number for a in catalog.get_all()] == ['MM7100']

    def test_insert_duplicate(self, catalog):
        """Test serial numbers are unique."""
        catalog.insert('MM7100')

        with pytest.raises(ConflictError):
            catalog.insert('MM7100')

    def test_insert_empty(self, catalog):
        """Test the serial number is required."""
        with pytest.raises(ValidationError):
            catalog.insert('  ')

    def test_rename_cascades(self, catalog, mission_service, recorder, mission):
        """Test renaming an aircraft carries over to missions and recorded data."""
        recorder.record(recorder.open_sheet(mission.id), FlightMetrics.parse('5', '-1', '1000', '300'))

        assert catalog.update('MM7001', 'MM7999') is True

        assert not catalog.exists('MM7001')
        assert mission_service.get(mission.id).aircraft_serial == 'MM7999'
        assert recorder.pending_missions('MM7999') == []

    def test_rename_onto_existing(self, catalog, seeded):
        """Test renaming onto a serial that already exists."""
        with pytest.raises(ConflictError):
            catalog.update('MM7001', 'MM7002')

    def test_rename_missing(self, catalog, seeded):
        """Test renaming an unknown aircraft reports False."""
        assert catalog.update('XX0000', 'XX0001') is False

    def test_delete(self, catalog, seeded):
        """Test deleting an unreferenced aircraft."""
        assert catalog.delete('MM7002') is True
        assert catalog.delete('MM7002') is False

    def test_delete_referenced(self, catalog, mission):
        """Test an aircraft with missions cannot be deleted."""
        with pytest.raises(ConflictError):
            catalog.delete('MM7001')

        assert catalog.exists('MM7001')


# =============================================================================
# Store Catalog Tests
# =============================================================================

class TestStoreCatalogs:
    """Tests for LauncherCatalog and WeaponCatalog."""

    def test_launcher_insert(self, session_factory):
        """Test operational life accepts a comma decimal."""
        catalog = LauncherCatalog(session_factory)

        catalog.insert('LAU-9', 'Launcher', 'K1', '1500,5')

        assert catalog.get('LAU-9').operational_life_hours == Decimal('1500.5')

    def test_launcher_life_required(self, session_factory):
        """Test launchers need operational life hours."""
        with pytest.raises(ValidationError) as exc_info:
            LauncherCatalog(session_factory).insert('LAU-9', 'Launcher', 'K1', '')

        assert exc_info.value.field == 'operational_life_hours'

    def test_weapon_mass_optional(self, session_factory):
        """Test weapons may omit mass."""
        catalog = WeaponCatalog(session_factory)

        catalog.insert('AIM-120', 'Medium range missile', 'K2')

        assert catalog.get('AIM-120').mass is None

    def test_non_numeric_rejected(self, session_factory):
        """Test non-numeric values are rejected."""
        with pytest.raises(ValidationError):
            WeaponCatalog(session_factory).insert('AIM-120', 'Missile', 'K2', 'heavy')

    def test_negative_rejected(self, session_factory):
        """Test negative values are rejected."""
        with pytest.raises(ValidationError):
            LauncherCatalog(session_factory).insert('LAU-9', 'Launcher', 'K1', '-1')

    def test_duplicate_part_number(self, seeded):
        """Test part numbers are unique."""
        with pytest.raises(ConflictError):
            LauncherCatalog(seeded).insert('LAU-7', 'Again', 'K1', '10')

    def test_update_and_delete(self, seeded):
        """Test updating and deleting a part."""
        catalog = WeaponCatalog(seeded)

        assert catalog.update('AIM-9', 'Sidewinder', 'K2', '86.2') is True
        assert catalog.get('AIM-9').name == 'Sidewinder'
        assert catalog.update('AIM-404', 'Nothing', 'K2') is False
        assert catalog.delete('AIM-9') is True
        assert not catalog.exists('AIM-9')


# =============================================================================
# UserDirectory Tests
# =============================================================================

class TestUserDirectory:
    """Tests for UserDirectory."""

    def test_authenticate(self, session_factory):
        """Test valid credentials give an operator context."""
        users = UserDirectory(session_factory)
        user = users.register('armorer', 's3cret')

        context = users.authenticate('armorer', 's3cret')

        assert context.username == 'armorer'
        assert context.user_id == user.id
        assert context.is_authenticated

    def test_wrong_password(self, session_factory):
        """Test a wrong password gives None."""
        users = UserDirectory(session_factory)
        users.register('armorer', 's3cret')

        assert users.authenticate('armorer', 'guess') is None
        assert users.authenticate('nobody', 's3cret') is None

    def test_password_hashed(self, session_factory):
        """Test the password is not stored in clear."""
        user = UserDirectory(session_factory).register('armorer', 's3cret')

        assert user.password_hash != 's3cret'

    def test_duplicate_username(self, session_factory):
        """Test usernames are unique."""
        users = UserDirectory(session_factory)
        users.register('armorer', 'a')

        with pytest.raises(ConflictError):
            users.register('armorer', 'b')
