# sistema_ct/validators.py

"""Formatação e validação dos formulários (clientes, funcionários, caixa...).

Cada `validate_*` devolve um dicionário campo -> mensagem; vazio significa
que os dados podem seguir para o repositório.
"""

import re
from decimal import Decimal, InvalidOperation

from .entities import (ROLES, SETORES, CASH_TYPES, NOTIFICATION_TYPES,
                       CONVERSATION_PRIORITIES, CONTACT_STATUSES)
from .storage.base import parse_bool, parse_date, parse_datetime

CPF_PATTERN = re.compile(r'^\d{3}\.\d{3}\.\d{3}-\d{2}$')
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


def only_digits(value):
    return re.sub(r'\D', '', value or '')


def format_cpf(value):
    """'12345678900' -> '123.456.789-00'. Outros tamanhos ficam só com os dígitos."""
    numbers = only_digits(value)
    if len(numbers) != 11:
        return numbers
    return f"{numbers[:3]}.{numbers[3:6]}.{numbers[6:9]}-{numbers[9:]}"


def format_phone(value):
    numbers = only_digits(value)
    if len(numbers) == 10:
        return f"({numbers[:2]}) {numbers[2:6]}-{numbers[6:]}"
    if len(numbers) == 11:
        return f"({numbers[:2]}) {numbers[2:7]}-{numbers[7:]}"
    return value.strip() if value else ''


def is_valid_email(value):
    return bool(EMAIL_PATTERN.match(value or ''))


def parse_amount(value):
    """Converte o valor informado em Decimal.

    Aceita números, '1234.56' e o formato brasileiro 'R$ 1.234,56'.
    Lança ValueError quando não é um número.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError("Valor ausente")
    if isinstance(value, (int, float, Decimal)):
        return Decimal(str(value))
    text = str(value).replace('R$', '').strip()
    if ',' in text:
        # Remove o separador de milhar e troca a vírgula decimal por ponto
        text = text.replace('.', '').replace(',', '.')
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Valor inválido: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Valor inválido: {value!r}")
    return amount


def _blank(value):
    return value is None or not str(value).strip()


def normalize_client(data):
    """Aplica as máscaras de CPF e telefones antes da validação."""
    cleaned = dict(data)
    if 'cpf' in cleaned and cleaned['cpf'] is not None:
        raw = str(cleaned['cpf'])
        cleaned['cpf'] = raw if CPF_PATTERN.match(raw) else format_cpf(raw)
    if cleaned.get('telefone'):
        cleaned['telefone'] = format_phone(str(cleaned['telefone']))
    if 'telefones_adicionais' in cleaned:
        phones = cleaned['telefones_adicionais'] or []
        if isinstance(phones, str):
            phones = [phones]
        cleaned['telefones_adicionais'] = [format_phone(str(p)) for p in phones if not _blank(p)]
    for key in ('nome', 'email', 'endereco', 'matricula', 'observacoes'):
        if isinstance(cleaned.get(key), str):
            cleaned[key] = cleaned[key].strip()
    return cleaned


def validate_client(data):
    errors = {}
    if _blank(data.get('nome')):
        errors['nome'] = 'Nome é obrigatório'
    if _blank(data.get('cpf')):
        errors['cpf'] = 'CPF é obrigatório'
    elif not CPF_PATTERN.match(data['cpf']):
        errors['cpf'] = 'CPF deve estar no formato 000.000.000-00'
    if _blank(data.get('telefone')):
        errors['telefone'] = 'Telefone é obrigatório'
    if data.get('email') and not is_valid_email(data['email']):
        errors['email'] = 'E-mail inválido'
    return errors


def validate_employee(data):
    errors = {}
    if _blank(data.get('name')):
        errors['name'] = 'Nome é obrigatório'
    if _blank(data.get('email')):
        errors['email'] = 'E-mail é obrigatório'
    elif not is_valid_email(data['email']):
        errors['email'] = 'E-mail inválido'
    if _blank(data.get('login')):
        errors['login'] = 'Login é obrigatório'
    elif len(data['login'].strip()) < 3:
        errors['login'] = 'Login deve ter pelo menos 3 caracteres'
    if data.get('role') not in ROLES:
        errors['role'] = 'Perfil inválido'
    if data.get('setor') not in SETORES:
        errors['setor'] = 'Setor inválido'
    return errors


def validate_cash_flow(data):
    """Valida e normaliza (in place) valor e data de uma movimentação."""
    errors = {}
    if data.get('type') not in CASH_TYPES:
        errors['type'] = 'Tipo deve ser entrada ou saida'
    if _blank(data.get('description')):
        errors['description'] = 'Descrição é obrigatória'
    if _blank(data.get('amount')):
        errors['amount'] = 'Valor é obrigatório'
    else:
        try:
            amount = parse_amount(data['amount'])
        except ValueError:
            amount = None
        if amount is None or amount <= 0:
            errors['amount'] = 'Valor deve ser um número positivo'
        else:
            data['amount'] = amount
    if _blank(data.get('date')):
        errors['date'] = 'Data é obrigatória'
    else:
        try:
            data['date'] = parse_date(data['date'])
        except ValueError:
            errors['date'] = 'Data inválida'
    return errors


def validate_notification(data):
    errors = {}
    if _blank(data.get('title')):
        errors['title'] = 'Título é obrigatório'
    if _blank(data.get('message')):
        errors['message'] = 'Mensagem é obrigatória'
    if data.get('type', 'info') not in NOTIFICATION_TYPES:
        errors['type'] = 'Tipo de notificação inválido'
    if data.get('expires_at'):
        try:
            data['expires_at'] = parse_datetime(data['expires_at'])
        except ValueError:
            errors['expires_at'] = 'Data de expiração inválida'
    return errors


def validate_contact(data):
    errors = {}
    if _blank(data.get('name')):
        errors['name'] = 'Nome é obrigatório'
    if _blank(data.get('phone')):
        errors['phone'] = 'Telefone é obrigatório'
    if data.get('email') and not is_valid_email(data['email']):
        errors['email'] = 'E-mail inválido'
    if data.get('status', 'active') not in CONTACT_STATUSES:
        errors['status'] = 'Status inválido'
    return errors


def validate_priority(priority):
    return {} if priority in CONVERSATION_PRIORITIES else {'priority': 'Prioridade inválida'}


def validate_queue(data):
    errors = {}
    if _blank(data.get('name')):
        errors['name'] = 'Nome é obrigatório'
    max_conversations = data.get('max_conversations', 5)
    try:
        if int(max_conversations) < 1:
            raise ValueError
    except (TypeError, ValueError):
        errors['max_conversations'] = 'Limite de conversas deve ser um inteiro positivo'
    hours = data.get('working_hours')
    if hours is not None:
        if not isinstance(hours, dict) \
                or not TIME_PATTERN.match(str(hours.get('start', ''))) \
                or not TIME_PATTERN.match(str(hours.get('end', ''))) \
                or any(d not in range(7) for d in hours.get('days', [])):
            errors['working_hours'] = 'Horário de atendimento inválido'
    for key in ('auto_assign', 'is_active'):
        if data.get(key) is not None:
            try:
                data[key] = parse_bool(data[key])
            except ValueError:
                errors[key] = 'Valor inválido'
    return errors


def validate_broadcast(data):
    errors = {}
    if _blank(data.get('title')):
        errors['title'] = 'Título é obrigatório'
    if _blank(data.get('message')):
        errors['message'] = 'Mensagem é obrigatória'
    if not data.get('recipients'):
        errors['recipients'] = 'Informe ao menos um destinatário'
    if data.get('scheduled_for'):
        try:
            data['scheduled_for'] = parse_datetime(data['scheduled_for'])
        except ValueError:
            errors['scheduled_for'] = 'Data de agendamento inválida'
    return errors
