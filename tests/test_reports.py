# tests/test_reports.py

from datetime import datetime
from decimal import Decimal

import pytest

from sistema_ct.results import ValidationError
from sistema_ct.services.reports import period_start
from sistema_ct.storage.base import utcnow

NOW = datetime(2024, 5, 15, 10, 30)


@pytest.mark.parametrize('period, expected', [
    ('week', datetime(2024, 5, 8, 10, 30)),
    ('month', datetime(2024, 5, 1)),
    ('quarter', datetime(2024, 4, 1)),
    ('year', datetime(2024, 1, 1)),
])
def test_period_start(period, expected):
    assert period_start(period, NOW) == expected


def test_invalid_period():
    with pytest.raises(ValidationError):
        period_start('decada', NOW)


def test_overview_counts(services, admin):
    services.cash.add_cash_flow({'type': 'entrada', 'amount': '1.500,00', 'description': 'Venda',
                                 'date': '2024-05-10'}, admin)
    services.cash.add_cash_flow({'type': 'saida', 'amount': '200', 'description': 'Material',
                                 'date': '2024-05-11'}, admin)

    stats = services.reports.overview('week', utcnow())

    assert stats['total_clients'] == 3
    # O cliente de sete dias atrás fica fora da janela
    assert stats['new_clients'] == 2
    assert Decimal(stats['total_revenue']) == Decimal('1500')
    assert Decimal(stats['balance']) == Decimal('1300')
    assert stats['active_employees'] == 3
    assert stats['admin_employees'] == 2
    assert stats['total_conversations'] == 0


def test_generate_and_delete_report(services, admin):
    result = services.reports.generate_report('clients', admin, period='year')
    assert result.ok
    report = result.value
    assert report.title == 'Relatório clients (year)'
    assert report.generated_by == admin.id
    expected = services.clients.clients_between(period_start('year', report.generated_at))
    assert len(report.data['clients']) == len(expected)
    assert 'cash_flows' not in report.data
    assert [r.id for r in services.reports.reports_by_type('clients')] == [report.id]

    assert services.reports.delete_report(report.id).ok
    assert services.reports.reports == []
    assert services.reports.delete_report(report.id).error.code == 'nao_encontrado'


def test_generate_report_rejects_unknown_type(services, admin):
    result = services.reports.generate_report('vendas', admin)
    assert result.error.errors == {'type': 'Tipo de relatório inválido'}
    result = services.reports.generate_report('general', admin, period='decada')
    assert result.error.errors == {'period': 'Período inválido'}


def test_overview_endpoint(login_as):
    client = login_as('joao')
    response = client.get('/api/reports/overview?period=month')
    assert response.status_code == 200
    assert response.json['stats']['total_clients'] == 3
    assert client.get('/api/reports/overview?period=decada').status_code == 400
