# tests/test_employees.py

import pytest
from werkzeug.security import check_password_hash


def test_add_employee_with_default_password(services, admin):
    result = services.employees.add_employee({
        'name': 'Paula Reis', 'email': 'paula@sistemact.com', 'login': 'paula', 'setor': 'vendas',
    }, admin)

    assert result.ok
    employee = result.value
    assert employee.role == 'funcionario'
    assert employee.is_active is True
    assert employee.password != 'temp123'
    assert check_password_hash(employee.password, 'temp123')


def test_login_must_be_unique_among_active(services, admin):
    result = services.employees.add_employee({
        'name': 'Outro Admin', 'email': 'outro@sistemact.com', 'login': 'ADMIN',
    }, admin)
    assert not result.ok
    assert result.error.errors == {'login': 'Login já está em uso'}


def test_soft_delete_employee(services, admin):
    """
    GIVEN um funcionário ativo
    WHEN ele é excluído
    THEN continua no armazenamento com is_active falso e some da listagem
    """
    result = services.employees.delete_employee('3', admin)
    assert result.ok

    assert '3' not in [e.id for e in services.employees.employees]
    stored = services.repositories.users.find_by_id('3')
    assert stored is not None and stored.is_active is False
    raw = [r for r in services.repositories.users.raw_records() if r['id'] == '3']
    assert raw[0]['isActive'] is False


def test_cannot_deactivate_self(services, admin):
    result = services.employees.delete_employee(admin.id, admin)
    assert not result.ok
    assert result.error.code == 'permissao_negada'
    assert admin.id in [e.id for e in services.employees.employees]


def test_only_top_admin_may_deactivate(services):
    joao = services.employees.get_employee('2')
    result = services.employees.update_employee('3', {'is_active': False}, joao)
    assert result.error.code == 'permissao_negada'


def test_update_employee_and_password(services, admin):
    result = services.employees.update_employee('3', {'setor': 'vendas', 'password': 'nova123'}, admin)
    assert result.ok
    assert result.value.setor == 'vendas'
    assert check_password_hash(result.value.password, 'nova123')


def test_search_employees(services):
    assert [e.login for e in services.employees.search_employees('SANTOS')] == ['maria']
    assert [e.login for e in services.employees.search_employees('joao@')] == ['joao']
    assert len(services.employees.search_employees('  ')) == 3


def test_find_by_login_or_email(services):
    assert services.employees.find_by_login_or_email('JOAO').id == '2'
    assert services.employees.find_by_login_or_email('maria@sistemact.com').id == '3'
    assert services.employees.find_by_login_or_email('ninguem') is None


def test_employee_api_hides_password(login_as):
    client = login_as('joao')
    response = client.get('/api/employees')
    assert response.status_code == 200
    assert all('password' not in e for e in response.json['data'])


@pytest.mark.parametrize('falsy', [0, '', 'false', '0'])
def test_falsy_is_active_still_goes_through_deactivation_guard(services, falsy):
    joao = services.employees.get_employee('2')

    other = services.employees.update_employee('3', {'is_active': falsy}, joao)
    assert other.error.code == 'permissao_negada'
    own = services.employees.update_employee('2', {'is_active': falsy}, joao)
    assert own.error.code == 'permissao_negada'

    stored = {u.id: u.is_active for u in services.repositories.users.find_all(include_inactive=True)}
    assert stored['2'] is True and stored['3'] is True


def test_top_admin_deactivates_with_form_value(services, admin):
    result = services.employees.update_employee('3', {'is_active': 'false'}, admin)
    assert result.ok
    assert result.value.is_active is False


def test_invalid_is_active_value(services, admin):
    result = services.employees.update_employee('3', {'is_active': 'talvez'}, admin)
    assert result.error.errors == {'is_active': 'Situação inválida'}


def test_reactivation_checks_login_uniqueness(services, admin):
    """
    GIVEN a Maria desativada e um novo funcionário usando o login 'maria'
    WHEN a conta antiga é reativada
    THEN a reativação é recusada e só existe um login 'maria' ativo
    """
    assert services.employees.delete_employee('3', admin).ok
    assert services.employees.add_employee({'name': 'Maria Nova', 'email': 'nova@sistemact.com',
                                            'login': 'maria'}, admin).ok

    result = services.employees.update_employee('3', {'is_active': True}, admin)
    assert result.error.errors == {'login': 'Login já está em uso'}
    assert [u.login for u in services.employees.employees].count('maria') == 1


def test_reactivation_without_conflict(services, admin):
    services.employees.delete_employee('3', admin)
    assert services.employees.update_employee('3', {'is_active': 'true'}, admin).value.is_active is True
