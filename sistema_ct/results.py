# sistema_ct/results.py

"""Resultado explícito das mutações e a hierarquia de erros dos serviços."""

from dataclasses import dataclass
from typing import Any, Optional


class ServiceError(Exception):
    """Erro base dos serviços. `code` identifica o tipo na resposta da API."""
    code = 'erro'

    def __init__(self, message='', **details):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ServiceError):
    code = 'validacao'

    def __init__(self, errors, message='Dados inválidos.'):
        super().__init__(message)
        self.errors = errors


class NotFoundError(ServiceError):
    code = 'nao_encontrado'


class PermissionDenied(ServiceError):
    code = 'permissao_negada'


class InvalidTransition(ServiceError):
    code = 'transicao_invalida'


class StorageError(ServiceError):
    """Falha inesperada no backend de dados (remoto ou local)."""
    code = 'armazenamento'


class DeliveryError(ServiceError):
    """O gateway de entrega não conseguiu enviar o disparo."""
    code = 'entrega'


@dataclass
class Result:
    value: Any = None
    error: Optional[ServiceError] = None

    @property
    def ok(self):
        return self.error is None

    @classmethod
    def success(cls, value=None):
        return cls(value=value)

    @classmethod
    def failure(cls, error):
        return cls(error=error)

    def unwrap(self):
        if self.error is not None:
            raise self.error
        return self.value
