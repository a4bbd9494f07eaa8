# sistema_ct/seed.py

"""Dados de demonstração (usuários, clientes e notificações iniciais)."""

import logging
from datetime import timedelta

from werkzeug.security import generate_password_hash

from .storage.base import utcnow

logger = logging.getLogger(__name__)

# Credenciais fixas aceitas no modo local: login -> senha
DEMO_CREDENTIALS = {
    'admin': 'admin123',
    'joao': 'joao123',
    'maria': 'maria123',
}


def demo_users(now):
    base = [
        ('1', 'Admin Principal', 'admin@sistemact.com', 'administrador-all', 'geral', 'admin'),
        ('2', 'João Silva', 'joao@sistemact.com', 'administrador', 'vendas', 'joao'),
        ('3', 'Maria Santos', 'maria@sistemact.com', 'funcionario', 'recepcao', 'maria'),
    ]
    return [
        {
            'id': user_id,
            'name': name,
            'email': email,
            'role': role,
            'setor': setor,
            'login': login,
            'is_active': True,
            'password': generate_password_hash(DEMO_CREDENTIALS[login]),
            'created_at': now,
            'updated_at': now,
            'created_by': '1',
            'updated_by': '1',
        }
        for user_id, name, email, role, setor, login in base
    ]


def demo_clients(now):
    return [
        {
            'id': '1',
            'nome': 'João da Silva',
            'cpf': '123.456.789-00',
            'telefone': '(11) 99999-9999',
            'email': 'joao.silva@email.com',
            'endereco': 'Rua das Flores, 123 - São Paulo, SP',
            'matricula': 'MAT001',
            'telefones_adicionais': ['(11) 3333-3333'],
            'observacoes': 'Cliente preferencial',
            'created_at': now - timedelta(days=7),
            'updated_at': now - timedelta(days=7),
            'created_by': '1',
            'updated_by': '1',
        },
        {
            'id': '2',
            'nome': 'Maria Oliveira',
            'cpf': '987.654.321-00',
            'telefone': '(11) 88888-8888',
            'email': 'maria.oliveira@email.com',
            'endereco': 'Av. Paulista, 456 - São Paulo, SP',
            'matricula': 'MAT002',
            'telefones_adicionais': [],
            'created_at': now - timedelta(days=3),
            'updated_at': now - timedelta(days=3),
            'created_by': '2',
            'updated_by': '2',
        },
        {
            'id': '3',
            'nome': 'Pedro Santos',
            'cpf': '456.789.123-00',
            'telefone': '(11) 77777-7777',
            'email': 'pedro.santos@email.com',
            'endereco': 'Rua Augusta, 789 - São Paulo, SP',
            'matricula': 'MAT003',
            'telefones_adicionais': ['(11) 2222-2222', '(11) 4444-4444'],
            'observacoes': 'Contato preferencial por WhatsApp',
            'created_at': now - timedelta(days=1),
            'updated_at': now - timedelta(days=1),
            'created_by': '3',
            'updated_by': '3',
        },
    ]


def demo_notifications(now):
    return [
        {
            'id': '1',
            'title': 'Bem-vindo ao Sistema CT!',
            'message': 'Sistema inicializado com sucesso. Explore todas as funcionalidades disponíveis.',
            'type': 'success',
            'is_read': False,
            'created_at': now,
        },
        {
            'id': '2',
            'title': 'Modo Demonstração',
            'message': 'Você está usando o modo local. Configure o Supabase para usar o banco de dados completo.',
            'type': 'info',
            'is_read': False,
            'created_at': now - timedelta(minutes=5),
        },
    ]


def seed_demo_data(repositories, include_notifications=True):
    """Popula os repositórios com os dados de demonstração.

    Não faz nada se já existir qualquer usuário (ativo ou não). Devolve True
    quando os dados foram gravados.
    """
    if repositories.users.find_all(include_inactive=True):
        return False

    now = utcnow()
    for fields in demo_users(now):
        repositories.users.create(fields)
    for fields in demo_clients(now):
        repositories.clients.create(fields)
    if include_notifications:
        for fields in demo_notifications(now):
            repositories.notifications.create(fields)

    logger.info("Dados de demonstração carregados.")
    return True
