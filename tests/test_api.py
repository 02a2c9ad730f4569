"""
API Tests

Tests for the HTTP surface and its error mapping.
"""

import pytest

from loadout.app import status_for
from loadout.exceptions import (
    AssignmentError, ConflictError, NotFoundError, PersistenceError, ValidationError,
)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
def headers():
    return {'X-Operator': 'armorer'}


@pytest.fixture
def catalog(client, headers):
    """Aircraft MM7001, launcher LAU-7 and weapon AIM-9 via the API."""
    client.post('/api/catalog/aircraft', json={'serial_number': 'MM7001'}, headers=headers)
    client.post('/api/catalog/launchers', json={
        'part_number': 'LAU-7', 'name': 'Rail launcher',
        'manufacturer_code': 'K1', 'operational_life_hours': '100',
    }, headers=headers)
    client.post('/api/catalog/weapons', json={
        'part_number': 'AIM-9', 'name': 'Missile', 'manufacturer_code': 'K2',
    }, headers=headers)


@pytest.fixture
def mission_id(client, catalog, headers):
    response = client.post('/api/missions', json={
        'aircraft_serial': 'MM7001',
        'flight_number': '1',
        'mission_date': '2024-03-01',
        'departure_time': '08:00',
        'arrival_time': '10:30',
    }, headers=headers)
    return response.get_json()['id']


LOADOUT = {
    'TIP 1': {'kind': 'weapon', 'part_number': 'AIM-9', 'serial_number': 'W-1'},
    'CTR 5': {'kind': 'launcher', 'part_number': 'LAU-7', 'serial_number': 'L-001'},
}


# =============================================================================
# Error Mapping Tests
# =============================================================================

class TestErrorMapping:
    """Tests for status_for."""

    @pytest.mark.parametrize('error,status', [
        (ValidationError('bad'), 400),
        (AssignmentError('bad'), 400),
        (NotFoundError('Mission', 1), 404),
        (ConflictError('dup'), 409),
        (PersistenceError('Save', Exception('disk full')), 500),
    ])
    def test_status(self, error, status):
        """Test each error type maps to its HTTP status."""
        assert status_for(error) == status


# =============================================================================
# Endpoint Tests
# =============================================================================

class TestCatalogApi:
    """Tests for /api/catalog."""

    def test_list_aircraft(self, client, catalog):
        """Test listing aircraft."""
        data = client.get('/api/catalog/aircraft').get_json()

        assert data['count'] == 1
        assert data['aircraft'][0]['serial_number'] == 'MM7001'

    def test_duplicate_aircraft(self, client, catalog):
        """Test adding an existing aircraft gives 409."""
        response = client.post('/api/catalog/aircraft', json={'serial_number': 'MM7001'})

        assert response.status_code == 409
        assert response.get_json()['error'] == 'CONFLICT'

    def test_get_launcher(self, client, catalog):
        """Test fetching a launcher part."""
        data = client.get('/api/catalog/launchers/LAU-7').get_json()

        assert data['operational_life_hours'] == 100.0

    def test_missing_body(self, client):
        """Test a request without a JSON body gives 400."""
        response = client.post('/api/catalog/aircraft', data='nope')

        assert response.status_code == 400


class TestMissionsApi:
    """Tests for /api/missions."""

    def test_create_rejects_arrival_before_departure(self, client, catalog):
        """Test entry validation surfaces as 400 with the field name."""
        response = client.post('/api/missions', json={
            'aircraft_serial': 'MM7001',
            'flight_number': '1',
            'mission_date': '2024-03-01',
            'departure_time': '09:00',
            'arrival_time': '08:00',
        })

        assert response.status_code == 400
        assert response.get_json()['details']['field'] == 'arrival_time'

    def test_list_latest(self, client, mission_id):
        """Test the latest filter."""
        data = client.get('/api/missions?latest=1').get_json()

        assert [m['id'] for m in data['missions']] == [mission_id]

    def test_date_range_needs_both_ends(self, client, mission_id):
        """Test a half-open date range is rejected."""
        assert client.get('/api/missions?from=2024-01-01').status_code == 400

    def test_loadout_round_trip(self, client, mission_id, headers):
        """Test saving and loading a loadout."""
        saved = client.put(f'/api/missions/{mission_id}/loadout', json={'loadout': LOADOUT}, headers=headers)
        loaded = client.get(f'/api/missions/{mission_id}/loadout').get_json()

        assert saved.status_code == 200
        assert saved.get_json()['complete'] is True
        assert loaded['loadout'] == LOADOUT
        assert loaded['notice'] is None
        assert len(loaded['positions']) == 13

    def test_loadout_duplicate_serial(self, client, mission_id):
        """Test one serial on two positions gives 400."""
        loadout = {
            'TIP 1': {'kind': 'weapon', 'part_number': 'AIM-9', 'serial_number': 'W-1'},
            'TIP 2': {'kind': 'weapon', 'part_number': 'AIM-9', 'serial_number': 'W-1'},
        }

        response = client.put(f'/api/missions/{mission_id}/loadout', json={'loadout': loadout})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'ASSIGNMENT_ERROR'

    @pytest.mark.parametrize('body', [
        {},
        {'loadout': None},
        {'loadout': []},
        {'lodout': LOADOUT},
    ])
    def test_loadout_key_required(self, client, mission_id, body):
        """Test a missing or non-object loadout is rejected and keeps the stored one."""
        client.put(f'/api/missions/{mission_id}/loadout', json={'loadout': LOADOUT})

        response = client.put(f'/api/missions/{mission_id}/loadout', json=body)
        loaded = client.get(f'/api/missions/{mission_id}/loadout').get_json()

        assert response.status_code == 400
        assert response.get_json()['details']['field'] == 'loadout'
        assert loaded['loadout'] == LOADOUT

    def test_empty_loadout_clears(self, client, mission_id):
        """Test an explicit empty object clears every position."""
        client.put(f'/api/missions/{mission_id}/loadout', json={'loadout': LOADOUT})

        response = client.put(f'/api/missions/{mission_id}/loadout', json={'loadout': {}})
        loaded = client.get(f'/api/missions/{mission_id}/loadout').get_json()

        assert response.status_code == 200
        assert loaded['loadout'] == {}

    def test_loadout_unknown_mission(self, client, catalog):
        """Test saving a loadout for a missing mission gives 404."""
        response = client.put('/api/missions/999/loadout', json={'loadout': LOADOUT})

        assert response.status_code == 404

    def test_delete(self, client, mission_id):
        """Test deleting a mission."""
        assert client.delete(f'/api/missions/{mission_id}').status_code == 200
        assert client.get(f'/api/missions/{mission_id}').status_code == 404


class TestPostFlightApi:
    """Tests for /api/post-flight."""

    def test_record(self, client, mission_id, headers):
        """Test recording post-flight data with a fired weapon."""
        client.put(f'/api/missions/{mission_id}/loadout', json={'loadout': LOADOUT})

        response = client.post(f'/api/post-flight/{mission_id}', json={
            'gload_max': '7,5', 'gload_min': '-2', 'avg_altitude': 15000,
            'max_speed': 540, 'fired': ['TIP 1'],
        }, headers=headers)

        assert response.status_code == 201
        assert response.get_json()['missile_status'] == 'TIP 1:SPARATO'
        assert client.get('/api/post-flight/pending/MM7001').get_json()['count'] == 0

    def test_fire_launcher(self, client, mission_id):
        """Test marking a launcher as fired gives 400."""
        client.put(f'/api/missions/{mission_id}/loadout', json={'loadout': LOADOUT})

        response = client.post(f'/api/post-flight/{mission_id}', json={
            'gload_max': '7', 'gload_min': '-2', 'avg_altitude': 1,
            'max_speed': 1, 'fired': ['CTR 5'],
        })

        assert response.status_code == 400
        assert response.get_json()['error'] == 'FIRING_STATE_ERROR'

    @pytest.mark.parametrize('literal', ['NaN', 'Infinity', '-Infinity'])
    def test_non_finite_metric(self, client, mission_id, literal):
        """Test a non-finite JSON number is rejected and the flight stays pending."""
        client.put(f'/api/missions/{mission_id}/loadout', json={'loadout': LOADOUT})
        body = (
            f'{{"gload_max": {literal}, "gload_min": -2, "avg_altitude": 1, '
            f'"max_speed": 1, "fired": []}}'
        )

        response = client.post(
            f'/api/post-flight/{mission_id}', data=body, content_type='application/json',
        )

        assert response.status_code == 400
        assert response.get_json()['details']['field'] == 'gload_max'
        assert client.get('/api/post-flight/pending/MM7001').get_json()['count'] == 1


class TestLaunchersApi:
    """Tests for /api/launchers."""

    def test_life_status_not_found(self, client, catalog):
        """Test an unflown serial gives 404."""
        assert client.get('/api/launchers/L-404/life').status_code == 404

    def test_life_and_fatigue(self, client, mission_id):
        """Test life status and fatigue report for a flown launcher."""
        client.put(f'/api/missions/{mission_id}/loadout', json={'loadout': LOADOUT})

        life = client.get('/api/launchers/L-001/life').get_json()
        fatigue = client.get('/api/launchers/L-001/fatigue?hours=5000').get_json()

        assert life['mission_count'] == 1
        assert life['residual_life_percent'] == pytest.approx(97.5, abs=0.01)
        assert fatigue['fatigue_index'] == 0.5

    def test_fleet(self, client, catalog):
        """Test the fleet summary endpoint."""
        assert client.get('/api/launchers/fleet').get_json()['count'] == 0


class TestSessionApi:
    """Tests for /api/session."""

    def test_sign_in(self, app, client):
        """Test signing in with valid and invalid credentials."""
        app.extensions['loadout'].users.register('armorer', 's3cret')

        ok = client.post('/api/session', json={'username': 'armorer', 'password': 's3cret'})
        bad = client.post('/api/session', json={'username': 'armorer', 'password': 'nope'})

        assert ok.status_code == 200
        assert ok.get_json()['username'] == 'armorer'
        assert bad.status_code == 401

    def test_health(self, client):
        """Test the health endpoint."""
        assert client.get('/health').get_json() == {'status': 'ok'}
