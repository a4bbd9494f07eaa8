# tests/test_storage_local.py

import json
from datetime import date, datetime
from decimal import Decimal

import pytest

from sistema_ct.results import StorageError
from sistema_ct.storage import LocalStorage, LocalRepository, new_id
from sistema_ct.storage import schemas
from sistema_ct.storage.base import Field, parse_bool


@pytest.fixture
def storage():
    return LocalStorage()


def test_local_storage_only_accepts_strings(storage):
    storage.set_item('ct-teste', '[]')
    assert storage.get_item('ct-teste') == '[]'
    with pytest.raises(TypeError):
        storage.set_item('ct-teste', [])
    storage.remove_item('ct-teste')
    assert storage.get_item('ct-teste') is None


def test_local_storage_persists_to_disk(tmp_path):
    path = tmp_path / 'dados' / 'local_storage.json'
    first = LocalStorage(str(path))
    first.set_item('ct-clients', '[{"id": "1"}]')

    reopened = LocalStorage(str(path))
    assert reopened.get_item('ct-clients') == '[{"id": "1"}]'
    assert reopened.keys() == ['ct-clients']


def test_new_ids_are_unique_and_increasing():
    ids = [new_id() for _ in range(500)]
    assert len(set(ids)) == 500
    assert [int(i) for i in ids] == sorted(int(i) for i in ids)


def test_sequence_of_mutations_reflects_net_effect(storage):
    """
    GIVEN um repositório local de clientes vazio
    WHEN uma sequência de criações, alterações e exclusões é aplicada
    THEN find_all reflete exatamente o efeito líquido da sequência
    """
    repo = LocalRepository(schemas.CLIENTS, storage)
    a = repo.create({'nome': 'Ana', 'cpf': '111.111.111-11', 'telefone': '(11) 1111-1111'})
    b = repo.create({'nome': 'Bruno', 'cpf': '222.222.222-22', 'telefone': '(11) 2222-2222'})
    c = repo.create({'nome': 'Carla', 'cpf': '333.333.333-33', 'telefone': '(11) 3333-3333'})

    repo.update(a.id, {'nome': 'Ana Maria'})
    repo.update(a.id, {'observacoes': 'VIP'})
    assert repo.delete(b.id) is True
    repo.update(c.id, {'telefones_adicionais': ['(11) 90000-0000']})

    found = {client.id: client for client in repo.find_all()}
    assert set(found) == {a.id, c.id}
    assert found[a.id].nome == 'Ana Maria'
    assert found[a.id].observacoes == 'VIP'
    assert found[c.id].telefones_adicionais == ['(11) 90000-0000']
    assert len(repo.find_all()) == len({client.id for client in repo.find_all()})


def test_update_and_delete_missing_id_return_absent(storage):
    repo = LocalRepository(schemas.CLIENTS, storage)
    assert repo.update('nao-existe', {'nome': 'X'}) is None
    assert repo.delete('nao-existe') is False
    assert repo.find_by_id('nao-existe') is None


def test_dates_and_decimals_are_rebuilt_on_read(storage):
    repo = LocalRepository(schemas.CASH_FLOWS, storage)
    created = repo.create({
        'user_id': '1', 'user_name': 'Admin', 'type': 'entrada',
        'amount': Decimal('10.50'), 'description': 'Venda', 'date': date(2024, 5, 2),
    })

    raw = json.loads(storage.get_item('ct-cash-flows'))
    assert isinstance(raw[0]['createdAt'], str)
    assert raw[0]['amount'] == '10.50'

    reloaded = repo.find_by_id(created.id)
    assert isinstance(reloaded.created_at, datetime)
    assert reloaded.date == date(2024, 5, 2)
    assert reloaded.amount == Decimal('10.50')


def test_blob_uses_camel_case_keys(storage):
    repo = LocalRepository(schemas.CLIENTS, storage)
    repo.create({'nome': 'Ana', 'cpf': '111.111.111-11', 'telefone': '(11) 1111-1111',
                 'telefones_adicionais': ['(11) 2222-2222'], 'created_by': '1'})
    record = json.loads(storage.get_item('ct-clients'))[0]
    assert record['telefonesAdicionais'] == ['(11) 2222-2222']
    assert record['createdBy'] == '1'
    assert 'telefones_adicionais' not in record


def test_soft_delete_keeps_user_in_store(storage):
    """
    GIVEN um funcionário ativo no armazenamento local
    WHEN ele é excluído
    THEN o registro continua no blob com isActive falso, mas some de find_all
    """
    repo = LocalRepository(schemas.USERS, storage)
    user = repo.create({'name': 'Teste', 'email': 't@t.com', 'login': 'teste', 'is_active': True})

    assert repo.delete(user.id) is True

    assert user.id not in [u.id for u in repo.find_all()]
    raw = [r for r in repo.raw_records() if r['id'] == user.id]
    assert raw and raw[0]['isActive'] is False
    assert user.id in [u.id for u in repo.find_all(include_inactive=True)]


def test_search_is_case_insensitive_substring(storage):
    repo = LocalRepository(schemas.CLIENTS, storage)
    repo.create({'nome': 'Maria Oliveira', 'cpf': '987.654.321-00', 'telefone': '(11) 88888-8888',
                 'matricula': 'MAT002'})
    repo.create({'nome': 'Pedro', 'cpf': '456.789.123-00', 'telefone': '(11) 77777-7777'})

    assert [c.nome for c in repo.search('olive')] == ['Maria Oliveira']
    assert [c.nome for c in repo.search('mat002')] == ['Maria Oliveira']
    assert [c.nome for c in repo.search('456.789')] == ['Pedro']
    assert repo.search('inexistente') == []


def test_search_treats_wildcards_literally(storage):
    repo = LocalRepository(schemas.CLIENTS, storage)
    repo.create({'nome': 'Desconto 100% Ltda', 'cpf': '111.111.111-11', 'telefone': '(11) 1111-1111'})
    repo.create({'nome': 'Ana_Paula', 'cpf': '222.222.222-22', 'telefone': '(11) 2222-2222'})
    repo.create({'nome': 'Ana Souza', 'cpf': '333.333.333-33', 'telefone': '(11) 3333-3333'})

    assert [c.nome for c in repo.search('%')] == ['Desconto 100% Ltda']
    assert [c.nome for c in repo.search('ana_')] == ['Ana_Paula']


def test_corrupted_blob_raises_storage_error(storage):
    storage.set_item('ct-clients', '{nao e json')
    repo = LocalRepository(schemas.CLIENTS, storage)
    with pytest.raises(StorageError):
        repo.find_all()


@pytest.mark.parametrize('value, expected', [
    (True, True), (False, False), (1, True), (0, False),
    ('true', True), ('Sim', True), ('false', False), ('0', False), ('', False),
])
def test_bool_fields_parse_form_values(value, expected):
    assert Field('ativo', 'bool').coerce(value) is expected


def test_bool_field_rejects_garbage():
    with pytest.raises(ValueError):
        parse_bool('talvez')
