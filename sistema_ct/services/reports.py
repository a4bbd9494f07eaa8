# sistema_ct/services/reports.py

from datetime import datetime, timedelta

from ..entities import REPORT_TYPES, to_dict
from ..results import ValidationError, NotFoundError
from ..storage.base import utcnow
from .base import EntityService

PERIODS = ('week', 'month', 'quarter', 'year')


def period_start(period, now):
    """Início do período: últimos 7 dias, mês, trimestre ou ano corrente."""
    if period == 'week':
        return now - timedelta(days=7)
    if period == 'month':
        return datetime(now.year, now.month, 1)
    if period == 'quarter':
        return datetime(now.year, ((now.month - 1) // 3) * 3 + 1, 1)
    if period == 'year':
        return datetime(now.year, 1, 1)
    raise ValidationError({'period': 'Período inválido'})


class ReportService(EntityService):
    """Indicadores agregados e relatórios gravados."""
    name = 'reports'

    def __init__(self, repository, clients, cash, employees, ztalk, on_change=None):
        super().__init__(repository, on_change)
        self.clients = clients
        self.cash = cash
        self.employees = employees
        self.ztalk = ztalk

    @property
    def reports(self):
        return self.items

    def overview(self, period='month', now=None):
        now = now or utcnow()
        start = period_start(period, now)

        def since(items, attr):
            return [i for i in items if getattr(i, attr) and getattr(i, attr) >= start]

        flows = self.cash.cash_flows
        period_flows = since(flows, 'created_at')
        conversations = self.ztalk.conversations
        messages = self.ztalk.messages
        return {
            'period': period,
            'period_start': start.isoformat(),
            'total_clients': len(self.clients.clients),
            'new_clients': len(since(self.clients.clients, 'created_at')),
            'total_revenue': str(self.cash.total_inflow(flows)),
            'period_revenue': str(self.cash.total_inflow(period_flows)),
            'total_expenses': str(self.cash.total_outflow(flows)),
            'period_expenses': str(self.cash.total_outflow(period_flows)),
            'balance': str(self.cash.total_balance(flows)),
            'active_employees': sum(1 for e in self.employees.employees if e.is_active),
            'admin_employees': sum(1 for e in self.employees.employees if e.is_admin),
            'total_conversations': len(conversations),
            'open_conversations': sum(1 for c in conversations if c.status == 'open'),
            'period_conversations': len(since(conversations, 'created_at')),
            'total_messages': len(messages),
            'period_messages': len(since(messages, 'timestamp')),
        }

    def _report_data(self, report_type, period, now):
        start = period_start(period, now)
        data = {'overview': self.overview(period, now)}
        if report_type in ('clients', 'general'):
            data['clients'] = [to_dict(c) for c in self.clients.clients_between(start)]
        if report_type in ('cash', 'general'):
            data['cash_flows'] = [to_dict(f) for f in self.cash.cash_flows
                                  if f.created_at and f.created_at >= start]
        if report_type == 'employees':
            data['employees'] = [to_dict(e) for e in self.employees.employees]
        if report_type in ('ztalk', 'general'):
            data['conversations'] = [to_dict(c) for c in self.ztalk.conversations
                                     if c.created_at and c.created_at >= start]
        return start, data

    def generate_report(self, report_type, actor, period='month', title=None, now=None):
        def generate():
            if report_type not in REPORT_TYPES:
                raise ValidationError({'type': 'Tipo de relatório inválido'})
            moment = now or utcnow()
            start, data = self._report_data(report_type, period, moment)
            return self.repository.create({
                'title': title or f"Relatório {report_type} ({period})",
                'type': report_type,
                'data': data,
                'generated_by': actor.id,
                'generated_at': moment,
                'period_start': start,
                'period_end': moment,
                'filters': {'period': period},
            })
        return self._mutate('generate_report', generate)

    def delete_report(self, report_id):
        def delete():
            if not self.repository.delete(report_id):
                raise NotFoundError("Relatório não encontrado.", id=report_id)
            return report_id
        return self._mutate('delete_report', delete)

    def reports_by_type(self, report_type):
        return [r for r in self.items if r.type == report_type]
