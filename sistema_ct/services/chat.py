# sistema_ct/services/chat.py

"""Chat interno: canais da equipe e mensagens (de canal, privadas ou gerais)."""

import logging

from ..results import StorageError, ValidationError, NotFoundError
from .base import EntityService

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL = {
    'id': 'general',
    'name': 'Geral',
    'description': 'Canal geral para toda a equipe',
    'type': 'public',
    'members': [],
    'created_by': '1',
}


class ChatService(EntityService):
    name = 'chat'

    def __init__(self, channels_repository, messages_repository, on_change=None):
        super().__init__(channels_repository, on_change)
        self.messages_repository = messages_repository
        self.messages = []

    @property
    def channels(self):
        return self.items

    def load(self):
        super().load()
        try:
            self.messages = self.messages_repository.find_all()
        except StorageError as e:
            logger.error(f"chat.load (mensagens) falhou: {e}")
        return self.items

    def ensure_default_channel(self):
        def ensure():
            channel = self.repository.find_by_id(DEFAULT_CHANNEL['id'])
            if channel is None:
                channel = self.repository.create(dict(DEFAULT_CHANNEL))
            return channel
        return self._mutate('ensure_default_channel', ensure, notify=False)

    def create_channel(self, data, actor):
        def create():
            name = (data.get('name') or '').strip()
            channel_type = data.get('type') or 'public'
            errors = {}
            if not name:
                errors['name'] = 'Nome do canal é obrigatório'
            if channel_type not in ('public', 'private'):
                errors['type'] = 'Tipo de canal inválido'
            if errors:
                raise ValidationError(errors)
            members = list(data.get('members') or [])
            if actor.id not in members:
                members.append(actor.id)
            return self.repository.create({
                'name': name,
                'description': data.get('description'),
                'type': channel_type,
                'members': members,
                'created_by': actor.id,
            })
        return self._mutate('create_channel', create)

    def join_channel(self, channel_id, user_id):
        def join():
            channel = self._require(self.repository, channel_id, "Canal não encontrado.")
            if user_id in channel.members:
                return channel
            return self.repository.update(channel_id, {'members': channel.members + [user_id]})
        return self._mutate('join_channel', join)

    def leave_channel(self, channel_id, user_id):
        def leave():
            channel = self._require(self.repository, channel_id, "Canal não encontrado.")
            members = [m for m in channel.members if m != user_id]
            return self.repository.update(channel_id, {'members': members})
        return self._mutate('leave_channel', leave)

    def send_message(self, sender, message, receiver_id=None, receiver_name=None, channel_id=None):
        def send():
            text = (message or '').strip()
            if not text:
                raise ValidationError({'message': 'Mensagem não pode ser vazia'})
            if channel_id:
                self._require(self.repository, channel_id, "Canal não encontrado.")
                message_type = 'group'
            elif receiver_id:
                message_type = 'private'
            else:
                message_type = 'broadcast'
            return self.messages_repository.create({
                'sender_id': sender.id,
                'sender_name': sender.name,
                'receiver_id': receiver_id,
                'receiver_name': receiver_name,
                'message': text,
                'type': message_type,
                'channel_id': channel_id,
                'is_read': False,
            })
        return self._mutate('send_message', send)

    def mark_as_read(self, message_id):
        def mark():
            updated = self.messages_repository.update(message_id, {'is_read': True})
            if updated is None:
                raise NotFoundError("Mensagem não encontrada.", id=message_id)
            return updated
        return self._mutate('mark_as_read', mark)

    def channel_messages(self, channel_id):
        return [m for m in self.messages if m.channel_id == channel_id]

    def private_messages(self, user_id, other_id):
        return [
            m for m in self.messages
            if m.type == 'private' and {m.sender_id, m.receiver_id} == {user_id, other_id}
        ]

    def unread_count(self, user_id):
        return sum(1 for m in self.messages if not m.is_read and m.sender_id != user_id)
