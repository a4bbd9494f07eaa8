# sistema_ct/storage/schemas.py

"""Mapeamento de cada entidade para o repositório genérico."""

from .. import entities
from .base import EntitySchema, Field

USERS = EntitySchema(
    name='user',
    entity=entities.User,
    table='users',
    storage_key='ct-users',
    fields=[
        Field('id'),
        Field('name'),
        Field('email'),
        Field('role'),
        Field('setor'),
        Field('login'),
        Field('is_active', 'bool'),
        Field('created_at', 'datetime'),
        Field('updated_at', 'datetime'),
        Field('created_by'),
        Field('updated_by'),
        Field('last_login', 'datetime'),
        Field('password'),
    ],
    search_fields=('name', 'email', 'login'),
    active_field='is_active',
)

CLIENTS = EntitySchema(
    name='client',
    entity=entities.Client,
    table='clients',
    storage_key='ct-clients',
    fields=[
        Field('id'),
        Field('nome'),
        Field('cpf'),
        Field('telefone'),
        Field('email'),
        Field('endereco'),
        Field('matricula'),
        Field('telefones_adicionais', 'list'),
        Field('observacoes'),
        Field('created_at', 'datetime'),
        Field('updated_at', 'datetime'),
        Field('created_by'),
        Field('updated_by'),
    ],
    search_fields=('nome', 'cpf', 'telefone', 'matricula', 'email'),
)

CASH_FLOWS = EntitySchema(
    name='cash_flow',
    entity=entities.CashFlow,
    table='cash_flows',
    storage_key='ct-cash-flows',
    fields=[
        Field('id'),
        Field('user_id'),
        Field('user_name'),
        Field('type'),
        Field('amount', 'decimal'),
        Field('description'),
        Field('category'),
        Field('date', 'date'),
        Field('created_at', 'datetime'),
    ],
    updated_field=None,
    search_fields=('description', 'category', 'user_name'),
)

NOTIFICATIONS = EntitySchema(
    name='notification',
    entity=entities.Notification,
    table='notifications',
    storage_key='ct-notifications',
    fields=[
        Field('id'),
        Field('title'),
        Field('message'),
        Field('type'),
        Field('user_id'),
        Field('is_read', 'bool'),
        Field('created_at', 'datetime'),
        Field('expires_at', 'datetime'),
    ],
    updated_field=None,
    search_fields=('title', 'message'),
)

CHAT_CHANNELS = EntitySchema(
    name='chat_channel',
    entity=entities.ChatChannel,
    table='chat_channels',
    storage_key='ct-chat-channels',
    fields=[
        Field('id'),
        Field('name'),
        Field('description'),
        Field('type'),
        Field('members', 'list'),
        Field('created_by'),
        Field('created_at', 'datetime'),
    ],
    updated_field=None,
    order_by='name',
    descending=False,
    search_fields=('name', 'description'),
)

CHAT_MESSAGES = EntitySchema(
    name='chat_message',
    entity=entities.ChatMessage,
    table='chat_messages',
    storage_key='ct-chat-messages',
    fields=[
        Field('id'),
        Field('sender_id'),
        Field('sender_name'),
        Field('receiver_id'),
        Field('receiver_name'),
        Field('message'),
        Field('type'),
        Field('channel_id'),
        Field('timestamp', 'datetime'),
        Field('is_read', 'bool'),
    ],
    created_field='timestamp',
    updated_field=None,
    order_by='timestamp',
    descending=False,
    search_fields=('message', 'sender_name'),
)

ZTALK_CONTACTS = EntitySchema(
    name='ztalk_contact',
    entity=entities.ZTalkContact,
    table='ztalk_contacts',
    storage_key='ct-ztalk-contacts',
    fields=[
        Field('id'),
        Field('name'),
        Field('phone'),
        Field('email'),
        Field('tags', 'list'),
        Field('status'),
        Field('last_interaction', 'datetime'),
        Field('created_at', 'datetime'),
    ],
    updated_field=None,
    search_fields=('name', 'phone', 'email'),
)

ZTALK_CONVERSATIONS = EntitySchema(
    name='ztalk_conversation',
    entity=entities.ZTalkConversation,
    table='ztalk_conversations',
    storage_key='ct-ztalk-conversations',
    fields=[
        Field('id'),
        Field('contact_id'),
        Field('contact_name'),
        Field('contact_phone'),
        Field('assigned_to'),
        Field('assigned_to_name'),
        Field('status'),
        Field('priority'),
        Field('tags', 'list'),
        Field('created_at', 'datetime'),
        Field('updated_at', 'datetime'),
        Field('last_message'),
        Field('last_message_at', 'datetime'),
    ],
    order_by='updated_at',
    search_fields=('contact_name', 'contact_phone', 'last_message'),
)

ZTALK_MESSAGES = EntitySchema(
    name='ztalk_message',
    entity=entities.ZTalkMessage,
    table='ztalk_messages',
    storage_key='ct-ztalk-messages',
    fields=[
        Field('id'),
        Field('conversation_id'),
        Field('sender_id'),
        Field('sender_name'),
        Field('message'),
        Field('type'),
        Field('direction'),
        Field('timestamp', 'datetime'),
        Field('status'),
    ],
    created_field='timestamp',
    updated_field=None,
    order_by='timestamp',
    descending=False,
    search_fields=('message', 'sender_name'),
)

ZTALK_QUEUES = EntitySchema(
    name='ztalk_queue',
    entity=entities.ZTalkQueue,
    table='ztalk_queues',
    storage_key='ct-ztalk-queues',
    fields=[
        Field('id'),
        Field('name'),
        Field('description'),
        Field('members', 'list'),
        Field('auto_assign', 'bool'),
        Field('max_conversations', 'int'),
        Field('working_hours', 'dict'),
        Field('is_active', 'bool'),
    ],
    created_field=None,
    updated_field=None,
    order_by='name',
    descending=False,
    search_fields=('name', 'description'),
)

ZTALK_BROADCASTS = EntitySchema(
    name='ztalk_broadcast',
    entity=entities.ZTalkBroadcast,
    table='ztalk_broadcasts',
    storage_key='ct-ztalk-broadcasts',
    fields=[
        Field('id'),
        Field('title'),
        Field('message'),
        Field('recipients', 'list'),
        Field('scheduled_for', 'datetime'),
        Field('status'),
        Field('created_by'),
        Field('created_at', 'datetime'),
        Field('sent_at', 'datetime'),
        Field('stats', 'dict'),
    ],
    updated_field=None,
    search_fields=('title', 'message'),
)

REPORTS = EntitySchema(
    name='report',
    entity=entities.Report,
    table='reports',
    storage_key='ct-reports',
    fields=[
        Field('id'),
        Field('title'),
        Field('type'),
        Field('data', 'dict'),
        Field('generated_by'),
        Field('generated_at', 'datetime'),
        Field('period_start', 'datetime'),
        Field('period_end', 'datetime'),
        Field('filters', 'dict'),
    ],
    created_field='generated_at',
    updated_field=None,
    order_by='generated_at',
    search_fields=('title',),
)

ALL_SCHEMAS = (
    USERS, CLIENTS, CASH_FLOWS, NOTIFICATIONS, CHAT_CHANNELS, CHAT_MESSAGES,
    ZTALK_CONTACTS, ZTALK_CONVERSATIONS, ZTALK_MESSAGES, ZTALK_QUEUES,
    ZTALK_BROADCASTS, REPORTS,
)
