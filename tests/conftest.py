"""
Gedeelde fixtures: een app met in-memory SQLite en in-memory sessies.
"""
from types import SimpleNamespace

import pytest

from app import create_app, db
from config import TestConfig

PASSWORD = 'secreto123'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    app.config['SESSION_CACHELIB'].clear()
    # Geen context openhouden: elk testverzoek moet een eigen g (en dus eigen login) krijgen.
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, username, password=PASSWORD):
    r = client.post('/api/auth/register', json={'username': username, 'password': password})
    assert r.status_code == 201, r.get_json()
    return r.get_json()['data']


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(client):
    return bearer(register(client, 'admin')['token'])


@pytest.fixture
def user_headers(client):
    return bearer(register(client, 'lucia')['token'])


@pytest.fixture
def other_headers(client):
    return bearer(register(client, 'marcos')['token'])


def create_exercise(client, headers, name, aliases=None, **fields):
    payload = {'name': name, 'aliases': aliases or []}
    payload.update(fields)
    r = client.post('/api/exercises', json=payload, headers=headers)
    assert r.status_code == 201, r.get_json()
    return r.get_json()['data']


def create_routine(client, headers, name, exercises):
    r = client.post('/api/routines', json={'name': name, 'exercises': exercises}, headers=headers)
    assert r.status_code == 201, r.get_json()
    return r.get_json()['data']


@pytest.fixture
def exercises(client, admin_headers):
    return {
        'squat': create_exercise(client, admin_headers, 'Sentadilla', ['Squat', 'Back squat']),
        'bench': create_exercise(client, admin_headers, 'Press banca', ['Bench press']),
    }


@pytest.fixture
def routine(client, user_headers, exercises):
    return create_routine(client, user_headers, 'Pierna y pecho', [
        {'exercise_id': exercises['squat']['id'], 'sets': 3, 'rep_range_min': 8, 'rep_range_max': 12,
         'rest_time': 90},
        {'exercise_id': exercises['bench']['id'], 'sets': 2, 'technique': 'dropset'},
    ])


def routine_exercise(exercise_id=1, exercise_name='Sentadilla', sets=3, rep_range_min=None,
                     rep_range_max=None, technique='normal', rest_time=None):
    return SimpleNamespace(exercise_id=exercise_id, exercise_name=exercise_name, sets=sets,
                           rep_range_min=rep_range_min, rep_range_max=rep_range_max,
                           technique=technique, rest_time=rest_time)


def routine_stub(exercises, routine_id=7, name='Fuerza A'):
    return SimpleNamespace(id=routine_id, name=name, exercises=list(exercises))
