# tests/test_storage_remote.py

from datetime import date
from decimal import Decimal

from sistema_ct import db
from sistema_ct.backend import build_remote_repositories


def test_remote_app_is_connected(remote_app):
    backend = remote_app.extensions['sistema_ct'].backend
    assert backend.connected is True
    assert backend.using_local_mode is False
    assert backend.error is None


def test_remote_crud_reflects_net_effect(remote_app):
    repos = build_remote_repositories(db.session)
    a = repos.clients.create({'nome': 'Ana', 'cpf': '111.111.111-11', 'telefone': '(11) 1111-1111',
                              'telefones_adicionais': ['(11) 2222-2222']})
    b = repos.clients.create({'nome': 'Bruno', 'cpf': '222.222.222-22', 'telefone': '(11) 2222-2222'})

    updated = repos.clients.update(a.id, {'nome': 'Ana Paula'})
    assert updated.nome == 'Ana Paula'
    assert updated.telefones_adicionais == ['(11) 2222-2222']
    assert repos.clients.delete(b.id) is True

    assert [c.id for c in repos.clients.find_all()] == [a.id]
    assert repos.clients.update('nao-existe', {'nome': 'X'}) is None
    assert repos.clients.delete('nao-existe') is False


def test_remote_search_uses_pattern_match(remote_app):
    repos = build_remote_repositories(db.session)
    repos.clients.create({'nome': 'Maria Oliveira', 'cpf': '987.654.321-00', 'telefone': '(11) 88888-8888'})
    repos.clients.create({'nome': 'Pedro Santos', 'cpf': '456.789.123-00', 'telefone': '(11) 77777-7777'})

    assert [c.nome for c in repos.clients.search('OLIVEIRA')] == ['Maria Oliveira']
    assert [c.nome for c in repos.clients.search('77777')] == ['Pedro Santos']


def test_remote_soft_delete_user(remote_app):
    repos = build_remote_repositories(db.session)
    user = repos.users.create({'name': 'Teste', 'email': 't@t.com', 'login': 'teste',
                               'role': 'funcionario', 'setor': 'geral', 'is_active': True})
    assert repos.users.delete(user.id) is True

    assert repos.users.find_all() == []
    raw = repos.users.find_by_id(user.id)
    assert raw is not None and raw.is_active is False


def test_remote_cash_flow_types(remote_app):
    repos = build_remote_repositories(db.session)
    flow = repos.cash_flows.create({'user_id': '1', 'user_name': 'Admin', 'type': 'saida',
                                    'amount': Decimal('99.90'), 'description': 'Aluguel',
                                    'date': date(2024, 1, 31)})
    loaded = repos.cash_flows.find_by_id(flow.id)
    assert loaded.amount == Decimal('99.90')
    assert loaded.date == date(2024, 1, 31)


def test_remote_search_treats_wildcards_literally(remote_app):
    repos = build_remote_repositories(db.session)
    repos.clients.create({'nome': 'Desconto 100% Ltda', 'cpf': '111.111.111-11', 'telefone': '(11) 1111-1111'})
    repos.clients.create({'nome': 'Ana_Paula', 'cpf': '222.222.222-22', 'telefone': '(11) 2222-2222'})
    repos.clients.create({'nome': 'Ana Souza', 'cpf': '333.333.333-33', 'telefone': '(11) 3333-3333'})

    assert [c.nome for c in repos.clients.search('100%')] == ['Desconto 100% Ltda']
    assert [c.nome for c in repos.clients.search('%')] == ['Desconto 100% Ltda']
    assert [c.nome for c in repos.clients.search('ana_')] == ['Ana_Paula']
