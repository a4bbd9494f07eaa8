# sistema_ct/routes.py

from datetime import timedelta

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from .decorators import page_required, visible_pages
from .entities import to_dict
from .storage.base import utcnow
from .utils import get_services

bp = Blueprint('routes', __name__)


@bp.route('/')
def index():
    """Ponto de entrada: informa o nome do sistema e o modo de dados ativo."""
    backend = get_services().backend
    return jsonify({
        "sistema": "Sistema CT",
        "modo": "local" if backend.using_local_mode else "remoto",
    })


@bp.route('/api/status')
def status():
    return jsonify(get_services().backend.status())


@bp.route('/api/dashboard')
@login_required
@page_required('dashboard')
def dashboard():
    services = get_services()
    week_ago = utcnow() - timedelta(days=7)
    clients = services.clients.clients
    recent = sorted(clients, key=lambda c: c.created_at or week_ago, reverse=True)[:5]
    return jsonify({
        "status": "ok",
        "stats": {
            "total_clients": len(clients),
            "new_clients_week": len(services.clients.clients_between(week_ago)),
            "active_employees": sum(1 for e in services.employees.employees if e.is_active),
            "unread_notifications": services.notifications.unread_count(current_user.id),
        },
        "recent_clients": [to_dict(c) for c in recent],
        "pages": visible_pages(current_user.role),
        "using_local_mode": services.backend.using_local_mode,
    })
