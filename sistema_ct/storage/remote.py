# sistema_ct/storage/remote.py

"""Variante remota do repositório, sobre Flask-SQLAlchemy.

Uma ida ao banco (commit) por operação. Erros inesperados do SQLAlchemy são
desfeitos (rollback) e relançados como StorageError.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from ..results import StorageError
from .base import Repository, utcnow

logger = logging.getLogger(__name__)


class SqlRepository(Repository):
    def __init__(self, schema, model, session):
        super().__init__(schema)
        self.model = model
        self.session = session

    @contextmanager
    def _guard(self, operation):
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Erro no banco remoto ({self.schema.table}.{operation}): {e}")
            raise StorageError(f"Falha ao acessar '{self.schema.table}' ({operation}).") from e

    def _column(self, name):
        return getattr(self.model, self.schema.field(name).column)

    def _to_entity(self, row):
        values = {f.name: f.coerce(getattr(row, f.column)) for f in self.schema.fields}
        return self.schema.build(values)

    def _ordered(self, query):
        column = self._column(self.schema.order_by)
        return query.order_by(column.desc() if self.schema.descending else column.asc())

    def _base_query(self, include_inactive=False):
        query = self.session.query(self.model)
        if self.schema.active_field and not include_inactive:
            query = query.filter(self._column(self.schema.active_field).is_(True))
        return query

    def find_all(self, include_inactive=False):
        with self._guard('find_all'):
            rows = self._ordered(self._base_query(include_inactive)).all()
            return [self._to_entity(row) for row in rows]

    def find_by_id(self, entity_id):
        with self._guard('find_by_id'):
            row = self.session.get(self.model, entity_id)
            return self._to_entity(row) if row is not None else None

    def create(self, fields):
        values = self._new_values(fields)
        with self._guard('create'):
            row = self.model(**{
                self.schema.field(name).column: value
                for name, value in values.items()
                if self.schema.field(name) is not None
            })
            self.session.add(row)
            self.session.commit()
            return self._to_entity(row)

    def update(self, entity_id, changes):
        with self._guard('update'):
            row = self.session.get(self.model, entity_id)
            if row is None:
                return None
            for name, value in self._changes(changes).items():
                setattr(row, self.schema.field(name).column, value)
            self.session.commit()
            return self._to_entity(row)

    def delete(self, entity_id):
        with self._guard('delete'):
            row = self.session.get(self.model, entity_id)
            if row is None:
                return False
            if self.schema.active_field:
                setattr(row, self.schema.field(self.schema.active_field).column, False)
                if self.schema.updated_field:
                    setattr(row, self.schema.field(self.schema.updated_field).column, utcnow())
            else:
                self.session.delete(row)
            self.session.commit()
            return True

    def search(self, query):
        # % e _ são literais, como na busca do modo local
        escaped = query.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
        pattern = f"%{escaped}%"
        with self._guard('search'):
            conditions = [self._column(name).ilike(pattern, escape='\\')
                          for name in self.schema.search_fields]
            rows = self._ordered(self._base_query().filter(or_(*conditions))).all()
            return [self._to_entity(row) for row in rows]

    def count(self):
        with self._guard('count'):
            return self.session.query(self.model).count()
