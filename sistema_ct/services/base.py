# sistema_ct/services/base.py

import logging

from ..results import Result, ServiceError, StorageError, NotFoundError

logger = logging.getLogger(__name__)


class EntityService:
    """Contêiner de uma coleção: carrega tudo, muta pelo repositório e recarrega.

    Toda mutação devolve um `Result`; erros dos serviços nunca sobem como
    exceção para quem chamou.
    """
    name = 'entidade'

    def __init__(self, repository, on_change=None):
        self.repository = repository
        self.on_change = on_change
        self.items = []

    def load(self):
        try:
            self.items = self.repository.find_all()
        except StorageError as e:
            logger.error(f"{self.name}.load falhou: {e}")
        return self.items

    def _mutate(self, operation, func, notify=True):
        try:
            value = func()
        except StorageError as e:
            logger.error(f"{self.name}.{operation} falhou: {e}")
            return Result.failure(e)
        except ServiceError as e:
            logger.warning(f"{self.name}.{operation} recusado: {e.message}")
            return Result.failure(e)
        self.load()
        if notify:
            self._changed(value)
        return Result.success(value)

    def _changed(self, value):
        if self.on_change is None:
            return
        try:
            self.on_change(self.name, value)
        except Exception as e:
            logger.error(f"Erro ao notificar alteração de {self.name}: {e}")

    def _require(self, repository, entity_id, message):
        entity = repository.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(message, id=entity_id)
        return entity

    def get(self, entity_id):
        for item in self.items:
            if item.id == entity_id:
                return item
        try:
            return self.repository.find_by_id(entity_id)
        except StorageError as e:
            logger.error(f"{self.name}.get falhou: {e}")
            return None
