# tests/conftest.py

import sys
import os
import pytest

# Adiciona o diretório raiz do projeto ao path do Python
# Isto permite que o pytest encontre o pacote 'sistema_ct'
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from sistema_ct import create_app
from sistema_ct.config import TestingConfig, RemoteTestingConfig


@pytest.fixture(scope='function')
def test_app():
    """
    Cria uma instância da aplicação em modo local (armazenamento só em memória)
    para cada teste, garantindo isolamento total.
    """
    app = create_app(TestingConfig)
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def remote_app():
    """Aplicação em modo remoto, contra um SQLite em memória com as tabelas criadas."""
    app = create_app(RemoteTestingConfig)
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def test_client(test_app):
    """
    Cria um cliente de teste para simular requisições HTTP para cada teste.
    """
    return test_app.test_client()


@pytest.fixture
def services(test_app):
    return test_app.extensions['sistema_ct']


@pytest.fixture
def admin(services):
    return services.employees.get_employee('1')


def login(client, identifier, password):
    return client.post('/api/auth/login', json={'login': identifier, 'password': password})


@pytest.fixture
def login_as(test_client):
    """Faz login com um dos usuários de demonstração: login_as('admin'|'joao'|'maria')."""
    passwords = {'admin': 'admin123', 'joao': 'joao123', 'maria': 'maria123'}

    def _login(user):
        response = login(test_client, user, passwords[user])
        assert response.status_code == 200
        return test_client
    return _login
