# tests/test_app.py

def test_index_reports_active_mode(test_client):
    """Verifica se a página inicial ('/') responde com o nome do sistema e o modo de dados."""
    response = test_client.get('/')
    assert response.status_code == 200
    assert response.json == {"sistema": "Sistema CT", "modo": "local"}


def test_protected_page_requires_login(test_client):
    """Verifica se uma rota protegida como '/api/dashboard' recusa acesso sem login."""
    response = test_client.get('/api/dashboard')
    assert response.status_code == 401


def test_dashboard_stats(login_as):
    client = login_as('maria')
    response = client.get('/api/dashboard')
    assert response.status_code == 200
    stats = response.json['stats']
    assert stats['total_clients'] == 3
    assert stats['active_employees'] == 3
    assert stats['unread_notifications'] == 2
    assert [c['nome'] for c in response.json['recent_clients']][0] == 'Pedro Santos'
    assert response.json['using_local_mode'] is True


def test_unknown_route_returns_404(test_client):
    assert test_client.get('/nao-existe').status_code == 404
