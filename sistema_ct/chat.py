# sistema_ct/chat.py

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from .decorators import page_required
from .utils import get_services, request_data, result_response, list_response

bp = Blueprint('chat', __name__, url_prefix='/api/chat')


@bp.route('/channels', methods=['GET'])
@login_required
@page_required('chat')
def list_channels():
    return list_response(get_services().chat.channels)


@bp.route('/channels', methods=['POST'])
@login_required
@page_required('chat')
def create_channel():
    result = get_services().chat.create_channel(request_data(), current_user.user)
    return result_response(result, status=201)


@bp.route('/channels/<channel_id>/join', methods=['POST'])
@login_required
@page_required('chat')
def join_channel(channel_id):
    return result_response(get_services().chat.join_channel(channel_id, current_user.id))


@bp.route('/channels/<channel_id>/leave', methods=['POST'])
@login_required
@page_required('chat')
def leave_channel(channel_id):
    return result_response(get_services().chat.leave_channel(channel_id, current_user.id))


@bp.route('/channels/<channel_id>/messages', methods=['GET'])
@login_required
@page_required('chat')
def channel_messages(channel_id):
    return list_response(get_services().chat.channel_messages(channel_id))


@bp.route('/private/<other_id>', methods=['GET'])
@login_required
@page_required('chat')
def private_messages(other_id):
    return list_response(get_services().chat.private_messages(current_user.id, other_id))


@bp.route('/messages', methods=['POST'])
@login_required
@page_required('chat')
def send_message():
    data = request_data()
    chat = get_services().chat
    receiver_id = data.get('receiver_id')
    receiver_name = data.get('receiver_name')
    if receiver_id and not receiver_name:
        receiver = get_services().employees.get_employee(receiver_id)
        receiver_name = receiver.name if receiver else None
    result = chat.send_message(
        current_user.user,
        data.get('message'),
        receiver_id=receiver_id,
        receiver_name=receiver_name,
        channel_id=data.get('channel_id'),
    )
    return result_response(result, status=201)


@bp.route('/messages/<message_id>/read', methods=['POST'])
@login_required
@page_required('chat')
def mark_as_read(message_id):
    return result_response(get_services().chat.mark_as_read(message_id))


@bp.route('/unread', methods=['GET'])
@login_required
@page_required('chat')
def unread_count():
    return jsonify({"status": "ok", "unread": get_services().chat.unread_count(current_user.id)})
