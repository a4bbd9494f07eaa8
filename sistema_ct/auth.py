# sistema_ct/auth.py

from flask import Blueprint, jsonify, current_app
from flask_login import UserMixin, login_user, logout_user, login_required, current_user

from .decorators import visible_pages
from .entities import to_dict
from .results import PermissionDenied
from .utils import get_services, request_data, error_response

bp = Blueprint('auth', __name__, url_prefix='/api/auth')


class SessionUser(UserMixin):
    """Usuário da sessão do Flask-Login, envolvendo a entidade User."""

    def __init__(self, user):
        self.user = user

    def get_id(self):
        return self.user.id

    @property
    def is_active(self):
        return self.user.is_active

    def __getattr__(self, name):
        # Repassa id, name, role, setor... para a entidade
        return getattr(self.__dict__['user'], name)


def _session_payload(user):
    return {
        "user": to_dict(user),
        "pages": visible_pages(user.role),
    }


@bp.route('/login', methods=['POST'])
def login():
    data = request_data()
    identifier = (data.get('login') or data.get('email') or '').strip()
    password = data.get('password') or ''

    if not identifier or not password:
        return jsonify({"status": "error", "code": "validacao", "message": "Dados inválidos.",
                        "errors": {"login": "Informe login e senha."}}), 400

    result = get_services().auth.authenticate(identifier, password)
    if not result.ok:
        if isinstance(result.error, PermissionDenied):
            return jsonify({"status": "error", "code": "credenciais_invalidas",
                            "message": "Credenciais inválidas. Por favor, tente novamente."}), 401
        return error_response(result.error)

    login_user(SessionUser(result.value), remember=True)
    current_app.logger.info(f"Usuário {result.value.login} entrou no sistema.")
    return jsonify({"status": "ok", **_session_payload(result.value)})


@bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({"status": "ok", "message": "Você saiu da sua conta."})


@bp.route('/me')
@login_required
def me():
    return jsonify({"status": "ok", **_session_payload(current_user.user)})
