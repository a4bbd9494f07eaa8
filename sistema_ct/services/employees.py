# sistema_ct/services/employees.py

import logging

from werkzeug.security import generate_password_hash

from ..results import StorageError, ValidationError, NotFoundError, PermissionDenied
from ..storage.base import parse_bool, utcnow
from ..validators import validate_employee
from .base import EntityService

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = 'temp123'
EDITABLE_FIELDS = ('name', 'email', 'role', 'setor', 'login', 'is_active')


class EmployeeService(EntityService):
    """Funcionários (usuários do sistema). A exclusão é sempre lógica."""
    name = 'employees'

    @property
    def employees(self):
        return self.items

    def _check_login(self, login, ignore_id=None):
        wanted = login.strip().lower()
        for user in self.repository.find_all():
            if user.id != ignore_id and user.login.lower() == wanted:
                raise ValidationError({'login': 'Login já está em uso'})

    def add_employee(self, data, actor):
        def create():
            fields = {k: data[k] for k in EDITABLE_FIELDS if k in data}
            fields.setdefault('role', 'funcionario')
            fields.setdefault('setor', 'geral')
            fields['is_active'] = True
            for key in ('name', 'email', 'login'):
                if isinstance(fields.get(key), str):
                    fields[key] = fields[key].strip()
            errors = validate_employee(fields)
            if errors:
                raise ValidationError(errors)
            self._check_login(fields['login'])
            fields['password'] = generate_password_hash(data.get('password') or DEFAULT_PASSWORD)
            fields['created_by'] = actor.id
            fields['updated_by'] = actor.id
            return self.repository.create(fields)
        return self._mutate('add_employee', create)

    def update_employee(self, employee_id, changes, actor):
        def update():
            current = self._require(self.repository, employee_id, "Funcionário não encontrado.")
            cleaned = {k: changes[k] for k in EDITABLE_FIELDS if k in changes}
            if 'is_active' in cleaned:
                try:
                    cleaned['is_active'] = parse_bool(cleaned['is_active'])
                except ValueError:
                    raise ValidationError({'is_active': 'Situação inválida'})
                if not cleaned['is_active'] and current.is_active:
                    self._check_deactivation(employee_id, actor)
            merged = {name: getattr(current, name) for name in EDITABLE_FIELDS}
            merged.update(cleaned)
            errors = validate_employee(merged)
            if errors:
                raise ValidationError(errors)
            # Login único entre os ativos, inclusive ao reativar uma conta
            reactivating = merged['is_active'] and not current.is_active
            if merged['is_active'] and ('login' in cleaned or reactivating):
                self._check_login(merged['login'], ignore_id=employee_id)
            if changes.get('password'):
                cleaned['password'] = generate_password_hash(changes['password'])
            cleaned['updated_by'] = actor.id
            return self.repository.update(employee_id, cleaned)
        return self._mutate('update_employee', update)

    def _check_deactivation(self, employee_id, actor):
        if actor.id == employee_id:
            raise PermissionDenied("Você não pode desativar a própria conta.")
        if actor.role != 'administrador-all':
            raise PermissionDenied("Apenas o administrador geral pode desativar contas.")

    def delete_employee(self, employee_id, actor):
        """Desativa o funcionário (is_active = False); o registro continua no armazenamento."""
        def delete():
            self._check_deactivation(employee_id, actor)
            if not self.repository.delete(employee_id):
                raise NotFoundError("Funcionário não encontrado.", id=employee_id)
            return employee_id
        return self._mutate('delete_employee', delete)

    def get_employee(self, employee_id):
        return self.get(employee_id)

    def search_employees(self, query):
        if not query or not query.strip():
            return self.items
        needle = query.strip().lower()
        matched = [
            u for u in self.items
            if needle in (u.name or '').lower()
            or needle in (u.email or '').lower()
            or needle in (u.login or '').lower()
        ]
        return self.repository.schema.sort(matched)

    def find_by_login_or_email(self, identifier):
        wanted = (identifier or '').strip().lower()
        if not wanted:
            return None
        try:
            users = self.repository.find_all()
        except StorageError as e:
            logger.error(f"employees.find_by_login_or_email falhou: {e}")
            return None
        for user in users:
            if user.login.lower() == wanted or (user.email or '').lower() == wanted:
                return user
        return None

    def update_last_login(self, employee_id):
        def touch():
            updated = self.repository.update(employee_id, {'last_login': utcnow()})
            if updated is None:
                raise NotFoundError("Funcionário não encontrado.", id=employee_id)
            return updated
        return self._mutate('update_last_login', touch, notify=False)
