# sistema_ct/services/ztalk.py

"""ZTalk: contatos, conversas, mensagens, filas e disparos estilo WhatsApp."""

import logging

from ..entities import CONVERSATION_STATUSES, ZTALK_MESSAGE_TYPES, empty_stats
from ..results import (StorageError, ValidationError, NotFoundError, InvalidTransition,
                       DeliveryError)
from ..storage.base import utcnow
from ..validators import (format_phone, only_digits, validate_contact, validate_priority,
                          validate_queue, validate_broadcast)
from .base import EntityService

logger = logging.getLogger(__name__)

# Transições permitidas de status da conversa. 'closed' é terminal.
CONVERSATION_TRANSITIONS = {
    'open': ('in_progress', 'pending', 'closed'),
    'in_progress': ('pending', 'closed'),
    'pending': ('in_progress', 'closed'),
    'closed': (),
}
SENDABLE_BROADCAST_STATUSES = ('draft', 'scheduled')

CONTACT_FIELDS = ('name', 'phone', 'email', 'tags', 'status')
QUEUE_FIELDS = ('name', 'description', 'members', 'auto_assign', 'max_conversations',
                'working_hours', 'is_active')


def run_inline(func, *args):
    func(*args)


class ZTalkService(EntityService):
    """Contêiner do ZTalk. A coleção principal (`items`) são as conversas."""
    name = 'ztalk'

    def __init__(self, repositories, gateway, spawn=run_inline, on_change=None):
        super().__init__(repositories.ztalk_conversations, on_change)
        self.contacts_repository = repositories.ztalk_contacts
        self.messages_repository = repositories.ztalk_messages
        self.queues_repository = repositories.ztalk_queues
        self.broadcasts_repository = repositories.ztalk_broadcasts
        self.gateway = gateway
        self.spawn = spawn
        self.contacts = []
        self.messages = []
        self.queues = []
        self.broadcasts = []

    @property
    def conversations(self):
        return self.items

    def load(self):
        super().load()
        for attr, repository in (('contacts', self.contacts_repository),
                                 ('messages', self.messages_repository),
                                 ('queues', self.queues_repository),
                                 ('broadcasts', self.broadcasts_repository)):
            try:
                setattr(self, attr, repository.find_all())
            except StorageError as e:
                logger.error(f"ztalk.load ({attr}) falhou: {e}")
        return self.items

    # --- Contatos ---

    def add_contact(self, data):
        def create():
            fields = {k: data[k] for k in CONTACT_FIELDS if k in data}
            if fields.get('phone'):
                fields['phone'] = format_phone(str(fields['phone']))
            fields.setdefault('status', 'active')
            fields.setdefault('tags', [])
            errors = validate_contact(fields)
            if errors:
                raise ValidationError(errors)
            return self.contacts_repository.create(fields)
        return self._mutate('add_contact', create)

    def update_contact(self, contact_id, changes):
        def update():
            current = self._require(self.contacts_repository, contact_id, "Contato não encontrado.")
            cleaned = {k: changes[k] for k in CONTACT_FIELDS if k in changes}
            if cleaned.get('phone'):
                cleaned['phone'] = format_phone(str(cleaned['phone']))
            merged = {name: getattr(current, name) for name in CONTACT_FIELDS}
            merged.update(cleaned)
            errors = validate_contact(merged)
            if errors:
                raise ValidationError(errors)
            return self.contacts_repository.update(contact_id, cleaned)
        return self._mutate('update_contact', update)

    def delete_contact(self, contact_id):
        def delete():
            if not self.contacts_repository.delete(contact_id):
                raise NotFoundError("Contato não encontrado.", id=contact_id)
            return contact_id
        return self._mutate('delete_contact', delete)

    def find_contact_by_phone(self, phone):
        # O WhatsApp envia o número com DDI (5511...); o cadastro costuma não ter.
        wanted = only_digits(phone)
        if len(wanted) < 8:
            return None
        for contact in self.contacts_repository.find_all():
            digits = only_digits(contact.phone)
            if len(digits) >= 8 and (wanted.endswith(digits) or digits.endswith(wanted)):
                return contact
        return None

    # --- Conversas ---

    def create_conversation(self, contact_id, priority='medium', tags=None):
        def create():
            contact = self._require(self.contacts_repository, contact_id, "Contato não encontrado.")
            errors = validate_priority(priority)
            if errors:
                raise ValidationError(errors)
            return self.repository.create({
                'contact_id': contact.id,
                'contact_name': contact.name,
                'contact_phone': contact.phone,
                'status': 'open',
                'priority': priority,
                'tags': list(tags or []),
            })
        return self._mutate('create_conversation', create)

    def assign_conversation(self, conversation_id, user):
        """Atribui a conversa a um atendente; uma conversa aberta passa a 'in_progress'."""
        def assign():
            conversation = self._require(self.repository, conversation_id, "Conversa não encontrada.")
            if conversation.status == 'closed':
                raise InvalidTransition("Conversa encerrada não pode ser atribuída.",
                                        current=conversation.status)
            changes = {'assigned_to': user.id, 'assigned_to_name': user.name}
            if conversation.status == 'open':
                changes['status'] = 'in_progress'
            return self.repository.update(conversation_id, changes)
        return self._mutate('assign_conversation', assign)

    def update_conversation_status(self, conversation_id, status):
        def change():
            if status not in CONVERSATION_STATUSES:
                raise ValidationError({'status': 'Status inválido'})
            conversation = self._require(self.repository, conversation_id, "Conversa não encontrada.")
            if conversation.status == status:
                return conversation
            if status not in CONVERSATION_TRANSITIONS[conversation.status]:
                raise InvalidTransition(
                    f"Transição de '{conversation.status}' para '{status}' não permitida.",
                    current=conversation.status, target=status)
            return self.repository.update(conversation_id, {'status': status})
        return self._mutate('update_conversation_status', change)

    def close_conversation(self, conversation_id):
        return self.update_conversation_status(conversation_id, 'closed')

    # --- Mensagens ---

    def _touch_conversation(self, conversation, text, now):
        self.repository.update(conversation.id, {
            'last_message': text,
            'last_message_at': now,
        })
        self.contacts_repository.update(conversation.contact_id, {'last_interaction': now})

    def send_message(self, conversation_id, sender, message, message_type='text'):
        def send():
            text = (message or '').strip()
            errors = {}
            if not text:
                errors['message'] = 'Mensagem não pode ser vazia'
            if message_type not in ZTALK_MESSAGE_TYPES:
                errors['type'] = 'Tipo de mensagem inválido'
            if errors:
                raise ValidationError(errors)
            conversation = self._require(self.repository, conversation_id, "Conversa não encontrada.")
            if conversation.status == 'closed':
                raise InvalidTransition("Conversa encerrada não aceita novas mensagens.",
                                        current=conversation.status)
            now = utcnow()
            created = self.messages_repository.create({
                'conversation_id': conversation.id,
                'sender_id': sender.id,
                'sender_name': sender.name,
                'message': text,
                'type': message_type,
                'direction': 'outbound',
                'timestamp': now,
                'status': 'sent',
            })
            self._touch_conversation(conversation, text, now)
            return created
        return self._mutate('send_message', send)

    def receive_message(self, phone, message, contact_name=None, message_type='text', timestamp=None):
        """Mensagem recebida pelo webhook: acha (ou cria) o contato e a conversa ativa."""
        def receive():
            text = (message or '').strip()
            if not text:
                raise ValidationError({'message': 'Mensagem não pode ser vazia'})
            now = timestamp or utcnow()
            contact = self.find_contact_by_phone(phone)
            if contact is None:
                digits = only_digits(phone)
                contact = self.contacts_repository.create({
                    'name': contact_name or f"Cliente {digits[-4:]}",
                    'phone': format_phone(digits) or phone,
                    'status': 'active',
                    'tags': [],
                })
            conversation = next(
                (c for c in self.repository.find_all()
                 if c.contact_id == contact.id and c.status != 'closed'),
                None
            )
            if conversation is None:
                conversation = self.repository.create({
                    'contact_id': contact.id,
                    'contact_name': contact.name,
                    'contact_phone': contact.phone,
                    'status': 'open',
                    'priority': 'medium',
                    'tags': [],
                })
            created = self.messages_repository.create({
                'conversation_id': conversation.id,
                'sender_id': contact.id,
                'sender_name': contact.name,
                'message': text,
                'type': message_type if message_type in ZTALK_MESSAGE_TYPES else 'text',
                'direction': 'inbound',
                'timestamp': now,
                'status': 'delivered',
            })
            self._touch_conversation(conversation, text, now)
            return created
        return self._mutate('receive_message', receive)

    def conversation_messages(self, conversation_id):
        return [m for m in self.messages if m.conversation_id == conversation_id]

    # --- Filas ---

    def create_queue(self, data):
        def create():
            fields = {k: data[k] for k in QUEUE_FIELDS if k in data}
            fields.setdefault('is_active', True)
            errors = validate_queue(fields)
            if errors:
                raise ValidationError(errors)
            return self.queues_repository.create(fields)
        return self._mutate('create_queue', create)

    def update_queue(self, queue_id, changes):
        def update():
            current = self._require(self.queues_repository, queue_id, "Fila não encontrada.")
            cleaned = {k: changes[k] for k in QUEUE_FIELDS if k in changes}
            merged = {name: getattr(current, name) for name in QUEUE_FIELDS}
            merged.update(cleaned)
            errors = validate_queue(merged)
            if errors:
                raise ValidationError(errors)
            cleaned = {k: merged[k] for k in cleaned}
            return self.queues_repository.update(queue_id, cleaned)
        return self._mutate('update_queue', update)

    def delete_queue(self, queue_id):
        def delete():
            if not self.queues_repository.delete(queue_id):
                raise NotFoundError("Fila não encontrada.", id=queue_id)
            return queue_id
        return self._mutate('delete_queue', delete)

    # --- Disparos ---

    def create_broadcast(self, data, actor):
        def create():
            fields = {k: data.get(k) for k in ('title', 'message', 'recipients', 'scheduled_for')}
            fields['recipients'] = [r for r in (fields['recipients'] or []) if str(r).strip()]
            errors = validate_broadcast(fields)
            if errors:
                raise ValidationError(errors)
            scheduled_for = fields.get('scheduled_for')
            fields['status'] = 'scheduled' if scheduled_for and scheduled_for > utcnow() else 'draft'
            fields['created_by'] = actor.id
            fields['stats'] = empty_stats()
            return self.broadcasts_repository.create(fields)
        return self._mutate('create_broadcast', create)

    def send_broadcast(self, broadcast_id):
        """Marca o disparo como 'sending' e entrega em segundo plano pelo gateway."""
        def send():
            broadcast = self._require(self.broadcasts_repository, broadcast_id, "Disparo não encontrado.")
            if broadcast.status not in SENDABLE_BROADCAST_STATUSES:
                raise InvalidTransition(f"Disparo com status '{broadcast.status}' não pode ser enviado.",
                                        current=broadcast.status)
            return self.broadcasts_repository.update(broadcast_id, {
                'status': 'sending',
                'sent_at': utcnow(),
            })
        result = self._mutate('send_broadcast', send)
        if result.ok:
            self.spawn(self._deliver, broadcast_id)
        return result

    def _deliver(self, broadcast_id):
        def deliver():
            broadcast = self._require(self.broadcasts_repository, broadcast_id, "Disparo não encontrado.")
            try:
                report = self.gateway.deliver(broadcast)
            except DeliveryError as e:
                logger.error(f"Disparo {broadcast_id} falhou: {e.message}")
                stats = e.details.get('report') or dict(broadcast.stats, failed=len(broadcast.recipients))
                return self.broadcasts_repository.update(broadcast_id, {'status': 'failed', 'stats': stats})
            logger.info(f"Disparo {broadcast_id} enviado para {report.sent} destinatário(s).")
            return self.broadcasts_repository.update(broadcast_id, {'status': 'sent', 'stats': report.as_dict()})
        return self._mutate('deliver_broadcast', deliver)

    def broadcast_stats(self):
        totals = empty_stats()
        by_status = {}
        for broadcast in self.broadcasts:
            by_status[broadcast.status] = by_status.get(broadcast.status, 0) + 1
            for key in totals:
                totals[key] += int((broadcast.stats or {}).get(key, 0))
        return {'total': len(self.broadcasts), 'by_status': by_status, 'totals': totals}
