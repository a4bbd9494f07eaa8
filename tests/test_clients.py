# tests/test_clients.py

def test_demo_clients_loaded_newest_first(services):
    assert [c.nome for c in services.clients.clients] == ['Pedro Santos', 'Maria Oliveira', 'João da Silva']


def test_add_client_canonicalizes_cpf_and_phones(services, admin):
    result = services.clients.add_client({
        'nome': 'Carlos Lima',
        'cpf': '11122233344',
        'telefone': '11912345678',
        'telefones_adicionais': ['1130304040'],
    }, admin)

    assert result.ok
    client = result.value
    assert client.cpf == '111.222.333-44'
    assert client.telefone == '(11) 91234-5678'
    assert client.telefones_adicionais == ['(11) 3030-4040']
    assert client.created_by == admin.id
    # A coleção é recarregada inteira depois da mutação
    assert services.clients.clients[0].id == client.id
    assert len(services.clients.clients) == 4


def test_invalid_client_returns_validation_errors(services, admin):
    result = services.clients.add_client({'nome': '', 'cpf': '123', 'telefone': ''}, admin)
    assert not result.ok
    assert result.error.code == 'validacao'
    assert set(result.error.errors) == {'nome', 'cpf', 'telefone'}
    assert len(services.clients.clients) == 3


def test_update_client_validates_merged_record(services, admin):
    result = services.clients.update_client('1', {'cpf': '999'}, admin)
    assert not result.ok
    assert result.error.errors == {'cpf': 'CPF deve estar no formato 000.000.000-00'}

    result = services.clients.update_client('1', {'observacoes': 'Atualizado'}, admin)
    assert result.ok
    assert services.clients.get_client('1').observacoes == 'Atualizado'
    assert services.clients.get_client('1').updated_by == admin.id


def test_update_missing_client(services, admin):
    result = services.clients.update_client('nao-existe', {'nome': 'X'}, admin)
    assert result.error.code == 'nao_encontrado'


def test_search_clients(services):
    assert services.clients.search_clients('') == services.clients.clients
    assert [c.id for c in services.clients.search_clients('MAT002')] == ['2']
    assert [c.id for c in services.clients.search_clients('pedro.santos')] == ['3']
    assert services.clients.search_clients('zzz') == []


def test_change_hook_fires_after_mutation(services, admin):
    events = []
    services.clients.on_change = lambda name, value: events.append((name, value.id))
    result = services.clients.add_client({'nome': 'Novo', 'cpf': '12345678900',
                                          'telefone': '1133334444'}, admin)
    assert events == [('clients', result.value.id)]


def test_clients_endpoints(login_as):
    client = login_as('maria')

    response = client.get('/api/clients?q=oliveira')
    assert response.status_code == 200
    assert [c['nome'] for c in response.json['data']] == ['Maria Oliveira']

    response = client.post('/api/clients', json={'nome': 'Nova', 'cpf': '12345678900',
                                                 'telefone': '11988887777'})
    assert response.status_code == 201
    assert response.json['data']['cpf'] == '123.456.789-00'

    response = client.post('/api/clients', json={'nome': 'Nova', 'cpf': '1', 'telefone': ''})
    assert response.status_code == 400
    assert response.json['errors']['telefone'] == 'Telefone é obrigatório'

    assert client.get('/api/clients/nao-existe').status_code == 404


def test_single_additional_phone_string(services, admin):
    result = services.clients.add_client({'nome': 'Lia', 'cpf': '12345678900', 'telefone': '11912345678',
                                          'telefones_adicionais': '1130304040'}, admin)
    assert result.value.telefones_adicionais == ['(11) 3030-4040']
