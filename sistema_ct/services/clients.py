# sistema_ct/services/clients.py

import logging

from ..results import StorageError, ValidationError, NotFoundError
from ..validators import normalize_client, validate_client
from .base import EntityService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('nome', 'cpf', 'telefone', 'email', 'endereco', 'matricula',
                   'telefones_adicionais', 'observacoes')


def _pick(data):
    return {k: data[k] for k in EDITABLE_FIELDS if k in data}


class ClientService(EntityService):
    name = 'clients'

    @property
    def clients(self):
        return self.items

    def add_client(self, data, actor):
        def create():
            fields = normalize_client(_pick(data))
            fields.setdefault('telefones_adicionais', [])
            errors = validate_client(fields)
            if errors:
                raise ValidationError(errors)
            fields['created_by'] = actor.id
            fields['updated_by'] = actor.id
            return self.repository.create(fields)
        return self._mutate('add_client', create)

    def update_client(self, client_id, changes, actor):
        def update():
            current = self._require(self.repository, client_id, "Cliente não encontrado.")
            cleaned = normalize_client(_pick(changes))
            merged = {name: getattr(current, name) for name in EDITABLE_FIELDS}
            merged.update(cleaned)
            errors = validate_client(merged)
            if errors:
                raise ValidationError(errors)
            cleaned['updated_by'] = actor.id
            updated = self.repository.update(client_id, cleaned)
            if updated is None:
                raise NotFoundError("Cliente não encontrado.", id=client_id)
            return updated
        return self._mutate('update_client', update)

    def delete_client(self, client_id):
        def delete():
            if not self.repository.delete(client_id):
                raise NotFoundError("Cliente não encontrado.", id=client_id)
            return client_id
        return self._mutate('delete_client', delete)

    def get_client(self, client_id):
        return self.get(client_id)

    def search_clients(self, query):
        """Busca por nome, CPF, telefone, matrícula ou e-mail (sem diferenciar maiúsculas)."""
        if not query or not query.strip():
            return self.items
        try:
            return self.repository.search(query.strip())
        except StorageError as e:
            logger.error(f"clients.search_clients falhou: {e}")
            return []

    def clients_between(self, start, end=None):
        return [
            c for c in self.items
            if c.created_at and c.created_at >= start and (end is None or c.created_at <= end)
        ]
