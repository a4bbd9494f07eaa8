# sistema_ct/decorators.py

from functools import wraps
from flask import request, jsonify
from flask_login import current_user

from .entities import ROLES, ADMIN_ROLES

# Páginas do sistema e os perfis que podem vê-las
PAGE_ROLES = {
    'dashboard': ROLES,
    'clients': ROLES,
    'cash': ROLES,
    'chat': ROLES,
    'settings': ROLES,
    'employees': ADMIN_ROLES,
    'reports': ADMIN_ROLES,
    'ztalk': ADMIN_ROLES,
    'integration': ADMIN_ROLES,
}

# Ações restritas dentro das páginas
ACTION_ROLES = {
    'edit_client': ADMIN_ROLES,
    'delete_client': ('administrador-all',),
    'create_cash_flow': ADMIN_ROLES,
    'edit_cash_flow': ADMIN_ROLES,
    'delete_cash_flow': ('administrador-all',),
    'manage_employees': ADMIN_ROLES,
    'delete_employee': ('administrador-all',),
}


def can_access(role, page):
    return role in PAGE_ROLES.get(page, ())


def can_perform(role, action):
    return role in ACTION_ROLES.get(action, ())


def visible_pages(role):
    return [page for page, roles in PAGE_ROLES.items() if role in roles]


def _forbidden(message):
    return jsonify({"status": "error", "code": "permissao_negada", "message": message}), 403


def _unauthenticated():
    return jsonify({"status": "error", "code": "nao_autenticado",
                    "message": "Por favor, faça login para acessar esta página."}), 401


def role_required(*roles):
    """Restringe a rota aos perfis informados."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return _unauthenticated()
            if current_user.role not in roles:
                return _forbidden("Você não tem permissão para esta operação.")
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def page_required(page):
    """Bloqueia as rotas de uma página para quem não pode vê-la."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return _unauthenticated()
            if not can_access(current_user.role, page):
                return _forbidden("Você não tem permissão para acessar esta página.")
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def permission_required(action):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return _unauthenticated()
            if not can_perform(current_user.role, action):
                return _forbidden("Você não tem permissão para esta operação.")
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def confirmation_required(f):
    """Operações destrutivas precisam de confirm=true (query string ou corpo JSON)."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        confirm = request.args.get('confirm')
        if confirm is None:
            body = request.get_json(silent=True) or {}
            confirm = body.get('confirm')
        if str(confirm).lower() not in ('true', '1', 'yes'):
            return jsonify({
                "status": "error",
                "code": "confirmacao_necessaria",
                "message": "Confirme a exclusão enviando confirm=true."
            }), 400
        return f(*args, **kwargs)
    return decorated_function
