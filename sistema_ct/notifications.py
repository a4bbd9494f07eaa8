# sistema_ct/notifications.py

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from .decorators import role_required, confirmation_required
from .entities import ADMIN_ROLES
from .utils import get_services, request_data, result_response, list_response

bp = Blueprint('notifications', __name__, url_prefix='/api/notifications')


@bp.route('', methods=['GET'])
@login_required
def list_notifications():
    service = get_services().notifications
    notifications = service.for_user(current_user.id)
    return list_response(notifications, unread=service.unread_count(current_user.id))


@bp.route('', methods=['POST'])
@login_required
@role_required(*ADMIN_ROLES)
def create_notification():
    result = get_services().notifications.add_notification(request_data())
    return result_response(result, status=201)


@bp.route('/<notification_id>/read', methods=['POST'])
@login_required
def mark_as_read(notification_id):
    return result_response(get_services().notifications.mark_as_read(notification_id))


@bp.route('/read-all', methods=['POST'])
@login_required
def mark_all_as_read():
    result = get_services().notifications.mark_all_as_read(current_user.id)
    return result_response(result, key='marked')


@bp.route('/<notification_id>', methods=['DELETE'])
@login_required
@confirmation_required
def delete_notification(notification_id):
    result = get_services().notifications.delete_notification(notification_id)
    return result_response(result, key='id')


@bp.route('/clear-expired', methods=['POST'])
@login_required
@role_required(*ADMIN_ROLES)
def clear_expired():
    result = get_services().notifications.clear_expired()
    if result.ok:
        return jsonify({"status": "ok", "removed": result.value})
    return result_response(result)
