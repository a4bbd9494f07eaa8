# sistema_ct/storage/local.py

"""Armazenamento local (modo demonstração).

`LocalStorage` imita o armazenamento chave/valor do navegador: só aceita
strings e persiste tudo num único documento JSON em disco. Cada entidade
guarda a coleção inteira como um blob JSON sob uma chave fixa (ct-clients,
ct-users, ...), e `LocalRepository` reconstrói datas e decimais a cada leitura.
"""

import json
import logging
import os
import threading

from ..results import StorageError
from .base import Repository, utcnow

logger = logging.getLogger(__name__)


class LocalStorage:
    def __init__(self, path=None):
        self.path = path
        self._lock = threading.RLock()
        self._items = {}
        if path and os.path.exists(path):
            try:
                with open(path, encoding='utf-8') as fh:
                    data = json.load(fh)
            except (OSError, ValueError) as e:
                raise StorageError(f"Não foi possível ler o armazenamento local '{path}': {e}") from e
            self._items = {str(k): str(v) for k, v in data.items()}

    def get_item(self, key):
        with self._lock:
            return self._items.get(key)

    def set_item(self, key, value):
        if not isinstance(value, str):
            raise TypeError("O armazenamento local aceita apenas strings.")
        with self._lock:
            self._items[key] = value
            self._persist()

    def remove_item(self, key):
        with self._lock:
            if self._items.pop(key, None) is not None:
                self._persist()

    def clear(self):
        with self._lock:
            self._items.clear()
            self._persist()

    def keys(self):
        with self._lock:
            return list(self._items)

    def _persist(self):
        if not self.path:
            return
        try:
            directory = os.path.dirname(self.path)
            if directory and not os.path.exists(directory):
                os.makedirs(directory)
            tmp_path = f"{self.path}.tmp"
            with open(tmp_path, 'w', encoding='utf-8') as fh:
                json.dump(self._items, fh, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Não foi possível gravar o armazenamento local '{self.path}': {e}") from e


class LocalRepository(Repository):
    """Repositório sobre um blob JSON por entidade.

    Toda mutação é um ler-modificar-gravar da coleção inteira.
    """

    def __init__(self, schema, storage):
        super().__init__(schema)
        self.storage = storage

    # --- blob ---

    def _read(self):
        raw = self.storage.get_item(self.schema.storage_key)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except ValueError as e:
            logger.error(f"Blob '{self.schema.storage_key}' corrompido: {e}")
            raise StorageError(f"Dados locais corrompidos em '{self.schema.storage_key}'.") from e
        try:
            return [self.schema.from_record(record) for record in records]
        except (TypeError, ValueError) as e:
            logger.error(f"Registro inválido em '{self.schema.storage_key}': {e}")
            raise StorageError(f"Registro inválido em '{self.schema.storage_key}'.") from e

    def _write(self, entities):
        payload = json.dumps([self.schema.to_record(e) for e in entities], ensure_ascii=False)
        self.storage.set_item(self.schema.storage_key, payload)

    def is_empty(self):
        return not self._read()

    def save_all(self, entities):
        """Sobrescreve a coleção inteira (usado pela carga de dados de demonstração)."""
        self._write(list(entities))

    def raw_records(self):
        """Registros exatamente como estão no blob, inclusive os inativos."""
        raw = self.storage.get_item(self.schema.storage_key)
        return json.loads(raw) if raw else []

    # --- contrato ---

    def _visible(self, entities, include_inactive):
        active = self.schema.active_field
        if active and not include_inactive:
            entities = [e for e in entities if getattr(e, active)]
        return self.schema.sort(entities)

    def find_all(self, include_inactive=False):
        return self._visible(self._read(), include_inactive)

    def find_by_id(self, entity_id):
        for entity in self._read():
            if entity.id == entity_id:
                return entity
        return None

    def create(self, fields):
        entity = self.schema.build(self._new_values(fields))
        entities = [e for e in self._read() if e.id != entity.id]
        entities.append(entity)
        self._write(entities)
        return entity

    def update(self, entity_id, changes):
        entities = self._read()
        for entity in entities:
            if entity.id == entity_id:
                for name, value in self._changes(changes).items():
                    setattr(entity, name, value)
                self._write(entities)
                return entity
        return None

    def delete(self, entity_id):
        entities = self._read()
        target = next((e for e in entities if e.id == entity_id), None)
        if target is None:
            return False
        if self.schema.active_field:
            setattr(target, self.schema.active_field, False)
            if self.schema.updated_field:
                setattr(target, self.schema.updated_field, utcnow())
        else:
            entities.remove(target)
        self._write(entities)
        return True

    def search(self, query):
        matched = [e for e in self._read() if self.schema.matches(e, query)]
        return self._visible(matched, include_inactive=False)
