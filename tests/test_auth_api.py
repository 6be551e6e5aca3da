"""
Tests voor registreren, inloggen en bearer-tokens.
"""
from tests.conftest import PASSWORD, bearer, register


def test_register_returns_token_and_user(client):
    data = register(client, 'lucia')
    assert data['token']
    assert data['user']['username'] == 'lucia'
    assert data['user']['role'] == 'user'
    assert 'password_hash' not in data['user']


def test_configured_admin_registers_as_admin(client):
    assert register(client, 'admin')['user']['role'] == 'admin'


def test_duplicate_username_is_rejected(client):
    register(client, 'lucia')
    r = client.post('/api/auth/register', json={'username': 'lucia', 'password': PASSWORD})
    assert r.status_code == 400
    assert r.get_json()['success'] is False
    assert 'ya está en uso' in r.get_json()['message']


def test_register_validates_password_length(client):
    r = client.post('/api/auth/register', json={'username': 'lucia', 'password': '123'})
    assert r.status_code == 400


def test_login(client):
    register(client, 'lucia')
    r = client.post('/api/auth/login', json={'username': 'lucia', 'password': PASSWORD})
    assert r.status_code == 200
    token = r.get_json()['data']['token']

    profile = client.get('/api/auth/profile', headers=bearer(token))
    assert profile.status_code == 200
    assert profile.get_json()['data']['username'] == 'lucia'


def test_login_with_wrong_password(client):
    register(client, 'lucia')
    r = client.post('/api/auth/login', json={'username': 'lucia', 'password': 'incorrecta'})
    assert r.status_code == 401
    assert r.get_json()['message'] == 'Usuario o contraseña incorrectos.'


def test_profile_requires_valid_token(client):
    assert client.get('/api/auth/profile').status_code == 401
    r = client.get('/api/auth/profile', headers=bearer('not-a-token'))
    assert r.status_code == 401
    assert r.get_json() == {'success': False, 'message': 'Se requiere iniciar sesión.'}


def test_expired_token_is_rejected(app, client):
    app.config['JWT_EXPIRES_SECONDS'] = -10
    token = register(client, 'lucia')['token']
    assert client.get('/api/auth/profile', headers=bearer(token)).status_code == 401


def test_each_request_resolves_its_own_token(client):
    lucia = bearer(register(client, 'lucia')['token'])
    marcos = bearer(register(client, 'marcos')['token'])

    assert client.get('/api/auth/profile', headers=lucia).get_json()['data']['username'] == 'lucia'
    assert client.get('/api/auth/profile', headers=marcos).get_json()['data']['username'] == 'marcos'
    assert client.get('/api/auth/profile').status_code == 401
