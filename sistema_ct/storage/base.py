# sistema_ct/storage/base.py

"""Contrato único de repositório, parametrizado por um EntitySchema.

Cada entidade declara apenas seus campos, ordenação padrão, campos de busca e
política de timestamps; as duas variantes (local e remota) implementam o
contrato uma única vez para todas as entidades.
"""

import abc
import threading
import time
from dataclasses import dataclass, field as dc_field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional


def utcnow():
    """Agora em UTC, sem tzinfo (mesma convenção das colunas do banco)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


_id_lock = threading.Lock()
_last_id = 0


def new_id():
    """Gera um id baseado no relógio (ms), estritamente crescente no processo."""
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


def _camel(name):
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def parse_datetime(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc).replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def parse_decimal(value):
    if value is None or value == '':
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Valor decimal inválido: {value!r}")


TRUE_STRINGS = ('true', '1', 'yes', 'sim', 'on')
FALSE_STRINGS = ('false', '0', 'no', 'nao', 'não', 'off', '')


def parse_bool(value):
    """Booleano vindo de JSON ou formulário: "false", "0" e "" são falsos."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise ValueError(f"Valor booleano inválido: {value!r}")


@dataclass
class Field:
    """Um campo da entidade.

    `local_key` é a chave usada no blob do armazenamento local (camelCase) e
    `column` o nome da coluna no banco remoto.
    """
    name: str
    kind: str = 'str'
    local_key: Optional[str] = None
    column: Optional[str] = None

    def __post_init__(self):
        if self.local_key is None:
            self.local_key = _camel(self.name)
        if self.column is None:
            self.column = self.name

    def coerce(self, value):
        """Converte um valor vindo de JSON/formulário para o tipo em memória."""
        if value is None:
            return None
        if self.kind == 'datetime':
            return parse_datetime(value)
        if self.kind == 'date':
            return parse_date(value)
        if self.kind == 'decimal':
            return parse_decimal(value)
        if self.kind == 'bool':
            return parse_bool(value)
        if self.kind == 'int':
            return int(value)
        if self.kind == 'list':
            return list(value)
        if self.kind == 'dict':
            return dict(value)
        return value

    def dump(self, value):
        """Valor em memória -> valor serializável em JSON (blob local)."""
        if value is None:
            return None
        if self.kind in ('datetime', 'date'):
            return value.isoformat()
        if self.kind == 'decimal':
            return str(value)
        return value


@dataclass
class EntitySchema:
    name: str
    entity: type
    table: str
    storage_key: str
    fields: list
    created_field: Optional[str] = 'created_at'
    updated_field: Optional[str] = 'updated_at'
    order_by: str = 'created_at'
    descending: bool = True
    search_fields: tuple = ()
    active_field: Optional[str] = None
    defaults: dict = dc_field(default_factory=dict)

    def field(self, name):
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def field_names(self):
        return [f.name for f in self.fields]

    def build(self, values):
        """Monta a entidade a partir de valores já tipados (campos desconhecidos são ignorados)."""
        known = {}
        for f in self.fields:
            if f.name not in values:
                continue
            if values[f.name] is None and f.kind in ('list', 'dict', 'bool'):
                continue
            known[f.name] = values[f.name]
        return self.entity(**known)

    def clean(self, values):
        """Filtra e converte os campos conhecidos de um dicionário de entrada."""
        cleaned = {}
        for f in self.fields:
            if f.name in values:
                cleaned[f.name] = f.coerce(values[f.name])
        return cleaned

    def to_record(self, entity):
        return {f.local_key: f.dump(getattr(entity, f.name)) for f in self.fields}

    def from_record(self, record):
        values = {}
        for f in self.fields:
            if f.local_key in record:
                values[f.name] = f.coerce(record[f.local_key])
        return self.build(values)

    def sort(self, entities):
        def key(entity):
            value = getattr(entity, self.order_by, None)
            if isinstance(value, str):
                value = value.lower()
            return (value is not None, value)
        return sorted(entities, key=key, reverse=self.descending)

    def matches(self, entity, query):
        needle = query.lower()
        for name in self.search_fields:
            value = getattr(entity, name, None)
            if value and needle in str(value).lower():
                return True
        return False


class Repository(abc.ABC):
    """Capacidades comuns de acesso a dados de uma entidade."""

    def __init__(self, schema):
        self.schema = schema

    @abc.abstractmethod
    def find_all(self, include_inactive=False):
        ...

    @abc.abstractmethod
    def find_by_id(self, entity_id):
        ...

    @abc.abstractmethod
    def create(self, fields):
        ...

    @abc.abstractmethod
    def update(self, entity_id, changes):
        ...

    @abc.abstractmethod
    def delete(self, entity_id):
        ...

    @abc.abstractmethod
    def search(self, query):
        ...

    def _new_values(self, fields):
        """Valores de criação: defaults do schema, campos informados, id e timestamps."""
        now = utcnow()
        values = dict(self.schema.defaults)
        values.update(self.schema.clean(fields))
        if not values.get('id'):
            values['id'] = new_id()
        for name in (self.schema.created_field, self.schema.updated_field):
            if name and not values.get(name):
                values[name] = now
        return values

    def _changes(self, changes):
        cleaned = self.schema.clean(changes)
        cleaned.pop('id', None)
        if self.schema.updated_field and self.schema.updated_field not in changes:
            cleaned[self.schema.updated_field] = utcnow()
        return cleaned
