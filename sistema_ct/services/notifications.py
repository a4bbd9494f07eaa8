# sistema_ct/services/notifications.py

from ..results import ValidationError, NotFoundError
from ..storage.base import utcnow
from ..validators import validate_notification
from .base import EntityService


class NotificationService(EntityService):
    name = 'notifications'

    @property
    def notifications(self):
        return self.items

    def for_user(self, user_id):
        """Notificações gerais (sem destinatário) mais as do próprio usuário."""
        return [n for n in self.items if n.visible_to(user_id)]

    def unread_count(self, user_id):
        return sum(1 for n in self.for_user(user_id) if not n.is_read)

    def add_notification(self, data):
        def create():
            fields = {k: data.get(k) for k in ('title', 'message', 'type', 'user_id', 'expires_at')}
            fields['type'] = fields['type'] or 'info'
            errors = validate_notification(fields)
            if errors:
                raise ValidationError(errors)
            fields['is_read'] = False
            return self.repository.create(fields)
        return self._mutate('add_notification', create)

    def mark_as_read(self, notification_id):
        def mark():
            updated = self.repository.update(notification_id, {'is_read': True})
            if updated is None:
                raise NotFoundError("Notificação não encontrada.", id=notification_id)
            return updated
        return self._mutate('mark_as_read', mark)

    def mark_all_as_read(self, user_id):
        def mark():
            marked = 0
            for notification in self.repository.find_all():
                if notification.visible_to(user_id) and not notification.is_read:
                    self.repository.update(notification.id, {'is_read': True})
                    marked += 1
            return marked
        return self._mutate('mark_all_as_read', mark)

    def delete_notification(self, notification_id):
        def delete():
            if not self.repository.delete(notification_id):
                raise NotFoundError("Notificação não encontrada.", id=notification_id)
            return notification_id
        return self._mutate('delete_notification', delete)

    def clear_expired(self, now=None):
        """Remove as notificações com `expires_at` já vencido. Devolve quantas saíram."""
        now = now or utcnow()

        def purge():
            removed = 0
            for notification in self.repository.find_all():
                if notification.is_expired(now):
                    self.repository.delete(notification.id)
                    removed += 1
            return removed
        return self._mutate('clear_expired', purge, notify=False)
