# sistema_ct/entities.py

"""Entidades em memória do Sistema CT.

Dataclasses simples, independentes do backend ativo: os repositórios
convertem estes objetos para linhas do banco remoto ou para os blobs JSON do
armazenamento local.
"""

from dataclasses import dataclass, field, fields as dataclass_fields
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

ROLES = ('administrador-all', 'administrador', 'funcionario')
ADMIN_ROLES = ('administrador-all', 'administrador')
SETORES = ('adimplencia', 'homologacao', 'vendas', 'recepcao', 'geral')

CASH_TYPES = ('entrada', 'saida')
NOTIFICATION_TYPES = ('info', 'success', 'warning', 'error')
CHANNEL_TYPES = ('public', 'private')
CHAT_MESSAGE_TYPES = ('private', 'group', 'broadcast')

CONTACT_STATUSES = ('active', 'blocked', 'inactive')
CONVERSATION_STATUSES = ('open', 'pending', 'in_progress', 'closed')
CONVERSATION_PRIORITIES = ('low', 'medium', 'high')
ZTALK_MESSAGE_TYPES = ('text', 'image', 'document', 'audio')
ZTALK_DIRECTIONS = ('inbound', 'outbound')
ZTALK_MESSAGE_STATUSES = ('sent', 'delivered', 'read', 'failed')
BROADCAST_STATUSES = ('draft', 'scheduled', 'sending', 'sent', 'failed')
REPORT_TYPES = ('clients', 'cash', 'employees', 'ztalk', 'general')


def empty_stats():
    return {'sent': 0, 'delivered': 0, 'read': 0, 'failed': 0}


def default_working_hours():
    return {'start': '08:00', 'end': '18:00', 'days': [0, 1, 2, 3, 4]}


@dataclass
class User:
    """Usuário do sistema (a tela de funcionários trabalha sobre ele)."""
    id: str
    name: str = ''
    email: str = ''
    role: str = 'funcionario'
    setor: str = 'geral'
    login: str = ''
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: str = ''
    updated_by: str = ''
    last_login: Optional[datetime] = None
    password: Optional[str] = None

    @property
    def is_admin(self):
        return self.role in ADMIN_ROLES


@dataclass
class Client:
    id: str
    nome: str = ''
    cpf: str = ''
    telefone: str = ''
    email: Optional[str] = None
    endereco: Optional[str] = None
    matricula: Optional[str] = None
    telefones_adicionais: list = field(default_factory=list)
    observacoes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: str = ''
    updated_by: str = ''


@dataclass
class CashFlow:
    """Movimentação do caixa: 'entrada' soma ao saldo, 'saida' subtrai."""
    id: str
    user_id: str = ''
    user_name: str = ''
    type: str = 'entrada'
    amount: Decimal = Decimal('0')
    description: str = ''
    category: Optional[str] = None
    date: Optional[date] = None
    created_at: Optional[datetime] = None

    @property
    def signed_amount(self):
        return self.amount if self.type == 'entrada' else -self.amount


@dataclass
class Notification:
    id: str
    title: str = ''
    message: str = ''
    type: str = 'info'
    user_id: Optional[str] = None
    is_read: bool = False
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    def is_expired(self, now):
        return self.expires_at is not None and self.expires_at <= now

    def visible_to(self, user_id):
        return not self.user_id or self.user_id == user_id


@dataclass
class ChatChannel:
    id: str
    name: str = ''
    description: Optional[str] = None
    type: str = 'public'
    members: list = field(default_factory=list)
    created_by: str = ''
    created_at: Optional[datetime] = None


@dataclass
class ChatMessage:
    id: str
    sender_id: str = ''
    sender_name: str = ''
    receiver_id: Optional[str] = None
    receiver_name: Optional[str] = None
    message: str = ''
    type: str = 'broadcast'
    channel_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    is_read: bool = False


@dataclass
class ZTalkContact:
    id: str
    name: str = ''
    phone: str = ''
    email: Optional[str] = None
    tags: list = field(default_factory=list)
    status: str = 'active'
    last_interaction: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass
class ZTalkConversation:
    id: str
    contact_id: str = ''
    contact_name: str = ''
    contact_phone: str = ''
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None
    status: str = 'open'
    priority: str = 'medium'
    tags: list = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None


@dataclass
class ZTalkMessage:
    id: str
    conversation_id: str = ''
    sender_id: str = ''
    sender_name: str = ''
    message: str = ''
    type: str = 'text'
    direction: str = 'outbound'
    timestamp: Optional[datetime] = None
    status: str = 'sent'


@dataclass
class ZTalkQueue:
    id: str
    name: str = ''
    description: Optional[str] = None
    members: list = field(default_factory=list)
    auto_assign: bool = False
    max_conversations: int = 5
    working_hours: dict = field(default_factory=default_working_hours)
    is_active: bool = True


@dataclass
class ZTalkBroadcast:
    id: str
    title: str = ''
    message: str = ''
    recipients: list = field(default_factory=list)
    scheduled_for: Optional[datetime] = None
    status: str = 'draft'
    created_by: str = ''
    created_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    stats: dict = field(default_factory=empty_stats)


@dataclass
class Report:
    id: str
    title: str = ''
    type: str = 'general'
    data: dict = field(default_factory=dict)
    generated_by: str = ''
    generated_at: Optional[datetime] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    filters: dict = field(default_factory=dict)


def _json_value(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, list):
        return [_json_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _json_value(v) for k, v in value.items()}
    return value


def to_dict(entity, exclude=('password',)):
    """Converte uma entidade em dicionário pronto para jsonify."""
    return {
        f.name: _json_value(getattr(entity, f.name))
        for f in dataclass_fields(entity)
        if f.name not in exclude
    }
