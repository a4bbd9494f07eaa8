# sistema_ct/services/cash.py

from decimal import Decimal

from ..results import ValidationError, NotFoundError
from ..validators import validate_cash_flow
from .base import EntityService

# Sugestões de categoria por tipo de movimentação
CATEGORIES = {
    'entrada': ['Vendas', 'Serviços', 'Comissões', 'Outros Recebimentos'],
    'saida': ['Salários', 'Fornecedores', 'Aluguel', 'Utilities', 'Marketing', 'Outros Gastos'],
}

EDITABLE_FIELDS = ('type', 'amount', 'description', 'category', 'date')


class CashService(EntityService):
    """Livro-caixa. Os totais são sempre recalculados a partir da coleção carregada."""
    name = 'cash_flows'

    @property
    def cash_flows(self):
        return self.items

    def add_cash_flow(self, data, actor):
        def create():
            fields = {k: data[k] for k in EDITABLE_FIELDS if k in data}
            if isinstance(fields.get('description'), str):
                fields['description'] = fields['description'].strip()
            errors = validate_cash_flow(fields)
            if errors:
                raise ValidationError(errors)
            fields['category'] = fields.get('category') or None
            fields['user_id'] = actor.id
            fields['user_name'] = actor.name
            return self.repository.create(fields)
        return self._mutate('add_cash_flow', create)

    def update_cash_flow(self, flow_id, changes):
        def update():
            current = self._require(self.repository, flow_id, "Movimentação não encontrada.")
            merged = {name: getattr(current, name) for name in EDITABLE_FIELDS}
            merged.update({k: changes[k] for k in EDITABLE_FIELDS if k in changes})
            errors = validate_cash_flow(merged)
            if errors:
                raise ValidationError(errors)
            cleaned = {k: merged[k] for k in EDITABLE_FIELDS if k in changes}
            return self.repository.update(flow_id, cleaned)
        return self._mutate('update_cash_flow', update)

    def delete_cash_flow(self, flow_id):
        def delete():
            if not self.repository.delete(flow_id):
                raise NotFoundError("Movimentação não encontrada.", id=flow_id)
            return flow_id
        return self._mutate('delete_cash_flow', delete)

    def total_inflow(self, flows=None):
        flows = self.items if flows is None else flows
        return sum((f.amount for f in flows if f.type == 'entrada'), Decimal('0'))

    def total_outflow(self, flows=None):
        flows = self.items if flows is None else flows
        return sum((f.amount for f in flows if f.type == 'saida'), Decimal('0'))

    def total_balance(self, flows=None):
        return self.total_inflow(flows) - self.total_outflow(flows)

    def flows_between(self, start, end=None):
        return [
            f for f in self.items
            if f.date and f.date >= start and (end is None or f.date <= end)
        ]

    def flows_by_user(self, user_id):
        return [f for f in self.items if f.user_id == user_id]

    def categories(self, flow_type):
        """Sugestões fixas seguidas das categorias já usadas nesse tipo."""
        suggestions = list(CATEGORIES.get(flow_type, []))
        for flow in self.items:
            if flow.type == flow_type and flow.category and flow.category not in suggestions:
                suggestions.append(flow.category)
        return suggestions
