"""
Tests for machine services and endpoints.
"""

import pytest
from faker import Faker

from app import db
from app.models import Machine
from app.services import machines as machine_service
from app.services.errors import NotFoundError, ValidationError

fake = Faker()


def make_payload(**overrides):
    """Machine create payload with sensible defaults."""
    data = {
        'name': fake.sentence(nb_words=3),
        'description': fake.paragraph(),
        'category': 'earth-moving',
        'subcategory': 'Escavadeiras',
        'pricing': {'hourly': 100, 'daily': 800, 'weekly': 4000, 'monthly': 15000},
    }
    data.update(overrides)
    return data


class TestMachineService:
    """Tests for the machine persistence functions."""

    def test_create_machine_normalizes(self, db_session):
        machine_id = machine_service.create_machine(
            make_payload(category='earth-moving', subcategory='Escavadeiras'),
            owner_id='owner-1'
        )

        machine = machine_service.get_machine(machine_id)
        assert machine['categories'] == ['construction', 'earth-moving']
        assert machine['category'] == 'construction'
        assert machine['subcategories'] == ['Escavadeiras']
        assert machine['owner_id'] == 'owner-1'
        assert machine['category_details']['construction']['primary_category'] is True
        assert machine['created_at'] is not None

    def test_create_machine_without_name(self, db_session):
        with pytest.raises(ValidationError):
            machine_service.create_machine({'category': 'earth-moving'})

        assert Machine.query.count() == 0

    def test_update_machine_replaces_categories(self, test_machine):
        machine_service.update_machine(test_machine['id'], {'categories': ['forestry']})

        machine = machine_service.get_machine(test_machine['id'])
        assert machine['categories'] == ['construction', 'forestry']
        assert 'earth-moving' not in machine['categories']

    def test_update_machine_singular_phase(self, test_machine):
        machine = machine_service.update_machine(test_machine['id'], {'work_phase': 'Acabamento'})

        assert machine['work_phases'] == ['Acabamento']
        assert machine['work_phase'] == 'Acabamento'

    def test_update_machine_keeps_owner(self, test_machine):
        machine = machine_service.update_machine(test_machine['id'], {'owner_id': 'someone-else', 'name': 'Novo'})

        assert machine['owner_id'] == 'owner-1'
        assert machine['name'] == 'Novo'

    def test_update_refreshes_timestamp(self, test_machine):
        machine = machine_service.update_machine(test_machine['id'], {'name': 'Novo'})

        assert machine['updated_at'] >= test_machine['updated_at']
        assert machine['created_at'] == test_machine['created_at']

    def test_update_legacy_machine(self, legacy_machine):
        machine = machine_service.update_machine(legacy_machine, {'name': 'Retro 2'})

        assert machine['name'] == 'Retro 2'
        assert machine['categories'][:2] == ['construction', 'earth-moving']
        assert machine['category'] == 'construction'
        assert machine['subcategories'] == ['Retroescavadeiras']
        assert machine['work_phases'] == ['Fundação']
        assert machine['category_details']['construction']['primary_category'] is True

    def test_create_machine_unknown_availability(self, db_session):
        with pytest.raises(ValidationError):
            machine_service.create_machine(make_payload(availability={'status': 'sold'}))

        assert Machine.query.count() == 0

    def test_update_machine_availability_status(self, test_machine):
        machine = machine_service.update_machine(
            test_machine['id'], {'availability': {'status': ' Rented ', 'location': {'city': 'Campinas'}}}
        )

        assert machine['availability'] == {'status': 'rented', 'location': {'city': 'Campinas'}}

        with pytest.raises(ValidationError):
            machine_service.update_machine(test_machine['id'], {'availability': {'status': 'lost'}})

        with pytest.raises(ValidationError):
            machine_service.update_machine(test_machine['id'], {'availability': 'rented'})

    def test_update_missing_machine(self, db_session):
        with pytest.raises(NotFoundError):
            machine_service.update_machine('missing', {'name': 'x'})

    def test_machines_by_category(self, test_machine):
        machine_service.create_machine(make_payload(category='concrete'))

        earth_moving = machine_service.get_machines_by_category('earth-moving')
        construction = machine_service.get_machines_by_category('construction')

        assert [m['id'] for m in earth_moving] == [test_machine['id']]
        assert len(construction) == 2

    def test_machines_by_work_phase(self, test_machine):
        assert [m['id'] for m in machine_service.get_machines_by_work_phase('Cobertura')] == [test_machine['id']]
        assert machine_service.get_machines_by_work_phase('Limpeza') == []

    def test_inactive_machines_hidden(self, test_machine):
        machine_service.update_machine(test_machine['id'], {'active': False})

        assert machine_service.get_machines() == []
        assert machine_service.get_machines_by_category('construction') == []
        assert len(machine_service.get_machines_by_owner('owner-1')) == 1

    def test_delete_machine(self, test_machine):
        machine_service.delete_machine(test_machine['id'])

        assert db.session.get(Machine, test_machine['id']) is None


class TestListMachines:
    """Tests for GET /api/machines"""

    def test_list_machines_empty(self, client, db_session):
        response = client.get('/api/machines')

        assert response.status_code == 200
        assert response.json['machines'] == []

    def test_list_machines_filter_category(self, client, test_machine):
        response = client.get('/api/machines?category=earth-moving')

        assert response.status_code == 200
        assert response.json['total'] == 1

    def test_list_machines_filter_work_phase(self, client, test_machine):
        response = client.get('/api/machines', query_string={'work_phase': 'Fundação'})

        assert response.status_code == 200
        assert response.json['total'] == 1

    def test_list_my_machines(self, client, auth_headers, second_auth_headers, test_machine):
        mine = client.get('/api/machines?mine=1', headers=auth_headers)
        theirs = client.get('/api/machines?mine=1', headers=second_auth_headers)

        assert mine.json['total'] == 1
        assert theirs.json['total'] == 0


class TestGetMachine:
    """Tests for GET /api/machines/:id"""

    def test_get_machine_success(self, client, test_machine):
        response = client.get(f'/api/machines/{test_machine["id"]}')

        assert response.status_code == 200
        assert response.json['name'] == test_machine['name']

    def test_get_machine_not_found(self, client, db_session):
        response = client.get('/api/machines/does-not-exist')

        assert response.status_code == 404
        assert 'error' in response.json


class TestCreateMachine:
    """Tests for POST /api/machines"""

    def test_create_machine_success(self, client, auth_headers, db_session):
        response = client.post('/api/machines', json=make_payload(), headers=auth_headers)

        assert response.status_code == 201
        assert 'id' in response.json
        assert response.json['machine']['owner_id'] == 'owner-1'
        assert response.json['machine']['categories'][0] == 'construction'

    def test_create_machine_missing_name(self, client, auth_headers, db_session):
        data = make_payload()
        del data['name']

        response = client.post('/api/machines', json=data, headers=auth_headers)

        assert response.status_code == 400
        assert 'name' in response.json['error']

    def test_create_machine_non_object_body(self, client, auth_headers, db_session):
        response = client.post('/api/machines', json=['Escavadeira'], headers=auth_headers)

        assert response.status_code == 400
        assert 'error' in response.json

    def test_create_machine_invalid_token(self, client, db_session):
        response = client.post(
            '/api/machines',
            json=make_payload(),
            headers={'Authorization': 'Bearer not-a-token'}
        )

        assert response.status_code == 401


class TestUpdateMachine:
    """Tests for PUT /api/machines/:id"""

    def test_update_own_machine(self, client, auth_headers, test_machine):
        response = client.put(
            f'/api/machines/{test_machine["id"]}',
            json={'categories': ['mining'], 'subcategory': 'Perfuratrizes'},
            headers=auth_headers
        )

        assert response.status_code == 200
        machine = response.json['machine']
        assert machine['categories'] == ['construction', 'mining']
        assert 'Perfuratrizes' in machine['subcategories']

    def test_update_other_user_machine(self, client, second_auth_headers, test_machine):
        response = client.put(
            f'/api/machines/{test_machine["id"]}',
            json={'name': 'Hacked'},
            headers=second_auth_headers
        )

        assert response.status_code == 403

    def test_update_invalid_taxonomy(self, client, auth_headers, test_machine):
        response = client.put(
            f'/api/machines/{test_machine["id"]}',
            json={'categories': 'mining'},
            headers=auth_headers
        )

        assert response.status_code == 400

    def test_update_non_object_body(self, client, auth_headers, test_machine):
        response = client.put(f'/api/machines/{test_machine["id"]}', json='Hacked', headers=auth_headers)

        assert response.status_code == 400

    def test_rename_unmigrated_machine(self, client, auth_headers, legacy_machine):
        response = client.put(f'/api/machines/{legacy_machine}', json={'name': 'Retro 2'}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json['machine']['name'] == 'Retro 2'
        assert response.json['machine']['categories'][0] == 'construction'

    def test_update_nonexistent_machine(self, client, auth_headers, db_session):
        response = client.put('/api/machines/missing', json={'name': 'x'}, headers=auth_headers)

        assert response.status_code == 404


class TestDeleteMachine:
    """Tests for DELETE /api/machines/:id"""

    def test_delete_own_machine(self, client, auth_headers, test_machine):
        response = client.delete(f'/api/machines/{test_machine["id"]}', headers=auth_headers)

        assert response.status_code == 200
        assert client.get(f'/api/machines/{test_machine["id"]}').status_code == 404

    def test_delete_other_user_machine(self, client, second_auth_headers, test_machine):
        response = client.delete(f'/api/machines/{test_machine["id"]}', headers=second_auth_headers)

        assert response.status_code == 403


class TestPhaseAndCategoryMachines:
    """Tests for the category / phase browsing endpoints."""

    def test_category_machines(self, client, test_machine):
        response = client.get('/api/categories/earth-moving/machines')

        assert response.status_code == 200
        assert response.json['total'] == 1

    def test_phase_machines(self, client, test_machine):
        response = client.get('/api/phases/Cobertura/machines')

        assert response.status_code == 200
        assert response.json['machines'][0]['id'] == test_machine['id']

    def test_list_phases(self, client):
        response = client.get('/api/phases')

        assert response.status_code == 200
        assert any(p['name'] == 'Fundação' for p in response.json['phases'])
