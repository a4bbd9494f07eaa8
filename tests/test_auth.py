# tests/test_auth.py

from sistema_ct.seed import seed_demo_data
from sistema_ct.services.auth_service import password_matches


def login(client, identifier, password):
    return client.post('/api/auth/login', json={'login': identifier, 'password': password})


def test_login_by_username_and_logout(test_client):
    """
    GIVEN os usuários de demonstração do modo local
    WHEN o admin entra com login e senha corretos
    THEN a sessão traz o usuário sem a senha e as páginas liberadas, e o logout encerra a sessão
    """
    response = login(test_client, 'admin', 'admin123')
    assert response.status_code == 200
    assert response.json['user']['name'] == 'Admin Principal'
    assert 'password' not in response.json['user']
    assert 'employees' in response.json['pages']

    me = test_client.get('/api/auth/me')
    assert me.status_code == 200
    assert me.json['user']['id'] == '1'

    assert test_client.post('/api/auth/logout').status_code == 200
    assert test_client.get('/api/auth/me').status_code == 401


def test_login_by_email(test_client):
    response = login(test_client, 'maria@sistemact.com', 'maria123')
    assert response.status_code == 200
    assert response.json['pages'] == ['dashboard', 'clients', 'cash', 'chat', 'settings']


def test_login_records_last_login(test_client, services):
    assert services.employees.get_employee('2').last_login is None
    login(test_client, 'joao', 'joao123')
    assert services.employees.get_employee('2').last_login is not None


def test_login_with_wrong_password(test_client):
    response = login(test_client, 'admin', 'errada')
    assert response.status_code == 401
    assert response.json['code'] == 'credenciais_invalidas'


def test_login_requires_fields(test_client):
    assert login(test_client, '', '').status_code == 400


def test_inactive_employee_cannot_login(test_client, services, admin):
    services.employees.delete_employee('3', admin)
    assert login(test_client, 'maria', 'maria123').status_code == 401


def test_password_matches_hash_and_legacy_plaintext():
    from werkzeug.security import generate_password_hash
    assert password_matches(generate_password_hash('abc123'), 'abc123')
    assert not password_matches(generate_password_hash('abc123'), 'abc124')
    assert password_matches('texto-puro', 'texto-puro')
    assert not password_matches(None, 'x')


def test_login_in_remote_mode(remote_app):
    services = remote_app.extensions['sistema_ct']
    assert services.backend.using_local_mode is False
    assert seed_demo_data(services.repositories)
    services.load_all()

    client = remote_app.test_client()
    assert login(client, 'joao', 'joao123').status_code == 200
    assert login(client, 'joao', 'admin123').status_code == 401
