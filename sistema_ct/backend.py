# sistema_ct/backend.py

"""Seleção do backend de dados (remoto ou modo local) na inicialização."""

import logging
from dataclasses import dataclass, fields as dataclass_fields

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError

from .results import StorageError
from .seed import seed_demo_data
from .storage import schemas
from .storage.local import LocalRepository, LocalStorage
from .storage.remote import SqlRepository

logger = logging.getLogger(__name__)

PLACEHOLDERS = ('your-project', 'your-anon-key')
PROBE_QUERY = 'SELECT id FROM users LIMIT 1'
MISSING_TABLE_MARKERS = ('no such table', 'does not exist', 'undefinedtable')


def is_configured(url, key):
    """Endereço e chave presentes e sem os valores de exemplo."""
    if not url or not key:
        return False
    return not any(p in url or p in key for p in PLACEHOLDERS)


def database_uri(url, key):
    """URI do SQLAlchemy: a chave de acesso vira a senha de um banco em rede."""
    try:
        parsed = make_url(url)
    except ArgumentError:
        return url
    if parsed.host and key:
        parsed = parsed.set(password=key)
    return parsed.render_as_string(hide_password=False)


def remote_database_uri(url, key):
    """URI do banco remoto, ou None quando ele não está configurado ou não é utilizável.

    Um endereço sem dialeto SQLAlchemy conhecido (por exemplo a URL https do
    projeto) não pode derrubar a aplicação: ela segue em modo local.
    """
    if not is_configured(url, key):
        return None
    try:
        uri = database_uri(url, key)
        make_url(uri).get_dialect()
    except (ArgumentError, NoSuchModuleError) as e:
        logger.error(f"Endereço do banco remoto inválido ({url}): {e}")
        return None
    return uri


def is_missing_table(error):
    message = str(error).lower()
    return any(marker in message for marker in MISSING_TABLE_MARKERS)


@dataclass
class Repositories:
    users: object
    clients: object
    cash_flows: object
    notifications: object
    chat_channels: object
    chat_messages: object
    ztalk_contacts: object
    ztalk_conversations: object
    ztalk_messages: object
    ztalk_queues: object
    ztalk_broadcasts: object
    reports: object

    def all(self):
        return [getattr(self, f.name) for f in dataclass_fields(self)]


_SCHEMA_BY_SLOT = {
    'users': schemas.USERS,
    'clients': schemas.CLIENTS,
    'cash_flows': schemas.CASH_FLOWS,
    'notifications': schemas.NOTIFICATIONS,
    'chat_channels': schemas.CHAT_CHANNELS,
    'chat_messages': schemas.CHAT_MESSAGES,
    'ztalk_contacts': schemas.ZTALK_CONTACTS,
    'ztalk_conversations': schemas.ZTALK_CONVERSATIONS,
    'ztalk_messages': schemas.ZTALK_MESSAGES,
    'ztalk_queues': schemas.ZTALK_QUEUES,
    'ztalk_broadcasts': schemas.ZTALK_BROADCASTS,
    'reports': schemas.REPORTS,
}


def build_local_repositories(storage):
    return Repositories(**{
        slot: LocalRepository(schema, storage) for slot, schema in _SCHEMA_BY_SLOT.items()
    })


def build_remote_repositories(session):
    from .models import MODELS
    return Repositories(**{
        slot: SqlRepository(schema, MODELS[schema.table], session)
        for slot, schema in _SCHEMA_BY_SLOT.items()
    })


class BackendSelector:
    """Decide uma única vez, na inicialização, qual backend a aplicação usa.

    O modo local nunca é tratado como erro: `error` só é preenchido quando nem
    o fallback consegue ser preparado.
    """

    def __init__(self, config, db, storage=None):
        self.config = config
        self.db = db
        self.storage = storage
        self.connected = False
        self.connecting = False
        self.using_local_mode = False
        self.error = None

    def initialize(self):
        self.connecting = True
        try:
            if remote_database_uri(self.config.get('DATABASE_URL'), self.config.get('DATABASE_KEY')) is None:
                logger.info("Banco remoto não configurado ou inválido. Usando modo local.")
                self._fallback()
                return self
            try:
                if self.config.get('DATABASE_CREATE_TABLES'):
                    self.db.create_all()
                self.db.session.execute(text(PROBE_QUERY))
            except SQLAlchemyError as e:
                self.db.session.rollback()
                if is_missing_table(e):
                    logger.warning(f"Banco remoto: tabelas não encontradas ({e}). Usando modo local.")
                else:
                    logger.error(f"Falha ao conectar ao banco remoto: {e}. Usando modo local.")
                self._fallback()
                return self
            self.connected = True
            logger.info("Conectado ao banco remoto.")
        finally:
            self.connecting = False
        return self

    def local_storage(self):
        if self.storage is None:
            self.storage = LocalStorage(self.config.get('LOCAL_STORAGE_PATH'))
        return self.storage

    def _fallback(self):
        self.using_local_mode = True
        try:
            repositories = build_local_repositories(self.local_storage())
            seed_demo_data(repositories)
        except StorageError as e:
            logger.error(f"Não foi possível preparar o modo local: {e}")
            self.error = str(e)
            self.connected = False
            return
        self.error = None
        self.connected = True

    def build_repositories(self):
        if self.using_local_mode:
            return build_local_repositories(self.local_storage())
        return build_remote_repositories(self.db.session)

    def status(self):
        return {
            'connected': self.connected,
            'connecting': self.connecting,
            'using_local_mode': self.using_local_mode,
            'error': self.error,
        }
