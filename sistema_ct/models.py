# sistema_ct/models.py

"""Tabelas do banco remoto (uma por entidade)."""

from . import db


class BaseModel(db.Model):
    __abstract__ = True
    id = db.Column(db.String(36), primary_key=True)


class User(BaseModel):
    __tablename__ = 'users'
    name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    role = db.Column(db.String(30), nullable=False, default='funcionario')
    setor = db.Column(db.String(30), nullable=False, default='geral')
    login = db.Column(db.String(80), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    password = db.Column(db.String(256), nullable=True)
    created_at = db.Column(db.DateTime)
    updated_at = db.Column(db.DateTime)
    created_by = db.Column(db.String(36))
    updated_by = db.Column(db.String(36))
    last_login = db.Column(db.DateTime, nullable=True)


class Client(BaseModel):
    __tablename__ = 'clients'
    nome = db.Column(db.String(150), nullable=False)
    cpf = db.Column(db.String(14), nullable=False)
    telefone = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(120))
    endereco = db.Column(db.String(255))
    matricula = db.Column(db.String(50))
    telefones_adicionais = db.Column(db.JSON, default=list)
    observacoes = db.Column(db.Text)
    created_at = db.Column(db.DateTime)
    updated_at = db.Column(db.DateTime)
    created_by = db.Column(db.String(36))
    updated_by = db.Column(db.String(36))


class CashFlow(BaseModel):
    __tablename__ = 'cash_flows'
    user_id = db.Column(db.String(36), nullable=False)
    user_name = db.Column(db.String(150))
    type = db.Column(db.String(10), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(80))
    date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime)


class Notification(BaseModel):
    __tablename__ = 'notifications'
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(10), default='info')
    user_id = db.Column(db.String(36), nullable=True)
    is_read = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime)
    expires_at = db.Column(db.DateTime, nullable=True)


class ChatChannel(BaseModel):
    __tablename__ = 'chat_channels'
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))
    type = db.Column(db.String(10), default='public')
    members = db.Column(db.JSON, default=list)
    created_by = db.Column(db.String(36))
    created_at = db.Column(db.DateTime)


class ChatMessage(BaseModel):
    __tablename__ = 'chat_messages'
    sender_id = db.Column(db.String(36), nullable=False)
    sender_name = db.Column(db.String(150))
    receiver_id = db.Column(db.String(36))
    receiver_name = db.Column(db.String(150))
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(10), default='broadcast')
    channel_id = db.Column(db.String(36))
    timestamp = db.Column(db.DateTime)
    is_read = db.Column(db.Boolean, default=False)


class ZTalkContact(BaseModel):
    __tablename__ = 'ztalk_contacts'
    name = db.Column(db.String(150), nullable=False)
    phone = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(120))
    tags = db.Column(db.JSON, default=list)
    status = db.Column(db.String(10), default='active')
    last_interaction = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime)


class ZTalkConversation(BaseModel):
    __tablename__ = 'ztalk_conversations'
    contact_id = db.Column(db.String(36), nullable=False)
    contact_name = db.Column(db.String(150))
    contact_phone = db.Column(db.String(20))
    assigned_to = db.Column(db.String(36))
    assigned_to_name = db.Column(db.String(150))
    status = db.Column(db.String(15), default='open')
    priority = db.Column(db.String(10), default='medium')
    tags = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime)
    updated_at = db.Column(db.DateTime)
    last_message = db.Column(db.Text)
    last_message_at = db.Column(db.DateTime)


class ZTalkMessage(BaseModel):
    __tablename__ = 'ztalk_messages'
    conversation_id = db.Column(db.String(36), nullable=False)
    sender_id = db.Column(db.String(36))
    sender_name = db.Column(db.String(150))
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(10), default='text')
    direction = db.Column(db.String(10), default='outbound')
    timestamp = db.Column(db.DateTime)
    status = db.Column(db.String(10), default='sent')


class ZTalkQueue(BaseModel):
    __tablename__ = 'ztalk_queues'
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))
    members = db.Column(db.JSON, default=list)
    auto_assign = db.Column(db.Boolean, default=False)
    max_conversations = db.Column(db.Integer, default=5)
    working_hours = db.Column(db.JSON)
    is_active = db.Column(db.Boolean, default=True)


class ZTalkBroadcast(BaseModel):
    __tablename__ = 'ztalk_broadcasts'
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    recipients = db.Column(db.JSON, default=list)
    scheduled_for = db.Column(db.DateTime)
    status = db.Column(db.String(10), default='draft')
    created_by = db.Column(db.String(36))
    created_at = db.Column(db.DateTime)
    sent_at = db.Column(db.DateTime)
    stats = db.Column(db.JSON)


class Report(BaseModel):
    __tablename__ = 'reports'
    title = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(15), default='general')
    data = db.Column(db.JSON)
    generated_by = db.Column(db.String(36))
    generated_at = db.Column(db.DateTime)
    period_start = db.Column(db.DateTime)
    period_end = db.Column(db.DateTime)
    filters = db.Column(db.JSON)


MODELS = {
    model.__tablename__: model
    for model in (User, Client, CashFlow, Notification, ChatChannel, ChatMessage,
                  ZTalkContact, ZTalkConversation, ZTalkMessage, ZTalkQueue,
                  ZTalkBroadcast, Report)
}
