# sistema_ct/services/auth_service.py

import logging

from werkzeug.security import check_password_hash

from ..results import Result, PermissionDenied
from ..seed import DEMO_CREDENTIALS

logger = logging.getLogger(__name__)

HASH_PREFIXES = ('pbkdf2:', 'scrypt:')


def password_matches(stored, password):
    """Confere a senha contra o hash do werkzeug ou, em registros antigos, texto puro."""
    if not stored or not password:
        return False
    if stored.startswith(HASH_PREFIXES):
        return check_password_hash(stored, password)
    logger.warning("Senha armazenada sem hash; considere redefini-la.")
    return stored == password


class AuthService:
    def __init__(self, employees, using_local_mode):
        self.employees = employees
        self.using_local_mode = using_local_mode

    def authenticate(self, identifier, password):
        """Login por nome de usuário ou e-mail. Devolve Result com o usuário."""
        user = self.employees.find_by_login_or_email(identifier)
        if user is None or not user.is_active:
            return Result.failure(PermissionDenied("Credenciais inválidas."))

        valid = False
        if self.using_local_mode and DEMO_CREDENTIALS.get(user.login) == password:
            valid = True
        elif password_matches(user.password, password):
            valid = True

        if not valid:
            logger.info(f"Tentativa de login inválida para '{identifier}'.")
            return Result.failure(PermissionDenied("Credenciais inválidas."))

        touched = self.employees.update_last_login(user.id)
        return Result.success(touched.value if touched.ok else user)
