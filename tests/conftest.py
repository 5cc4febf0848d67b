"""
Pytest configuration and fixtures for testing the Equipment Rental API.
"""

import os
import sys
import jwt
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app, db
from app.models import Machine, SiteContent, CategoryIcon
from app.services.machines import create_machine

fake = Faker()


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    os.environ['FLASK_ENV'] = 'testing'
    os.environ.pop('SUPABASE_URL', None)
    os.environ.pop('SUPABASE_SERVICE_KEY', None)

    app = create_app('testing')
    app.config['JWT_SECRET_KEY'] = 'test-secret-key-for-testing'

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


def make_token(app, user_id):
    return jwt.encode({'user_id': user_id}, app.config['JWT_SECRET_KEY'], algorithm='HS256')


@pytest.fixture
def auth_headers(app):
    """Authentication headers for the machine owner."""
    return {'Authorization': f'Bearer {make_token(app, "owner-1")}'}


@pytest.fixture
def second_auth_headers(app):
    """Authentication headers for a different user."""
    return {'Authorization': f'Bearer {make_token(app, "owner-2")}'}


def machine_payload(**overrides):
    """Machine create payload with sensible defaults."""
    data = {
        'name': fake.sentence(nb_words=3),
        'description': fake.paragraph(),
        'category': 'earth-moving',
        'subcategory': 'Escavadeiras',
        'specifications': {
            'brand': fake.company(),
            'model': fake.bothify('X-####'),
            'year': 2023,
            'power': '250 HP',
            'weight': '15000 kg',
        },
        'pricing': {'hourly': 100, 'daily': 800, 'weekly': 4000, 'monthly': 15000},
        'availability': {
            'status': 'available',
            'location': {'address': fake.street_address(), 'city': fake.city(), 'state': 'SP'},
        },
    }
    data.update(overrides)
    return data


@pytest.fixture
def test_machine(app, db_session):
    """Create a machine owned by owner-1."""
    machine_id = create_machine(machine_payload(work_phases=['Fundação', 'Cobertura']), owner_id='owner-1')
    return db.session.get(Machine, machine_id).to_dict()


@pytest.fixture
def legacy_machine(app, db_session):
    """Insert a machine stored before the plural taxonomy fields existed."""
    machine = Machine(
        name='Retroescavadeira Legada',
        category='earth-moving',
        subcategory='Retroescavadeiras',
        work_phase='Fundação',
        owner_id='owner-1',
    )
    db.session.add(machine)
    db.session.commit()
    return machine.id


@pytest.fixture
def test_category(app, db_session):
    """Create an active category content record."""
    category = SiteContent(
        type='category',
        title='Movimentação de Terra',
        description=fake.sentence(),
        order=1,
        active=True,
        machines=['Escavadeiras', 'Retroescavadeiras'],
    )
    db.session.add(category)
    db.session.commit()
    return category.id


@pytest.fixture
def test_icon(app, db_session):
    icon = CategoryIcon(name='Construção Civil', icon='construction', order=0)
    db.session.add(icon)
    db.session.commit()
    return icon.id
