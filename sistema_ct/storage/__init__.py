from .base import EntitySchema, Field, Repository, new_id, utcnow
from .local import LocalRepository, LocalStorage
from .remote import SqlRepository
