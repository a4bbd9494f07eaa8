# sistema_ct/socket_events.py

from flask import request, current_app
from flask_login import current_user
from flask_socketio import join_room, leave_room

from . import socketio
from .decorators import can_access

# {user_id: set(sid1, sid2), ...} apenas para desenvolvimento (um único worker)
online_users_sids = {}


@socketio.on('connect')
def handle_connect():
    if not current_user.is_authenticated:
        current_app.logger.info(f'Cliente não autenticado (SID: {request.sid}) tentou conectar.')
        return False  # Rejeita a conexão

    online_users_sids.setdefault(current_user.id, set()).add(request.sid)
    join_room(str(current_user.id))  # Sala pessoal (mensagens privadas)
    current_app.logger.info(f'Cliente {current_user.name} (ID: {current_user.id}) conectado.')


@socketio.on('disconnect')
def handle_disconnect(*args):
    if current_user.is_authenticated:
        sids = online_users_sids.get(current_user.id, set())
        sids.discard(request.sid)
        if not sids:
            online_users_sids.pop(current_user.id, None)


@socketio.on('join_channel')
def handle_join_channel(data):
    if not current_user.is_authenticated:
        return
    join_room(f"canal_{data.get('channel_id')}")


@socketio.on('leave_channel')
def handle_leave_channel(data):
    leave_room(f"canal_{data.get('channel_id')}")


@socketio.on('join_conversation')
def handle_join_conversation(data):
    # Conversas do ZTalk seguem a mesma regra de acesso da página
    if not current_user.is_authenticated or not can_access(current_user.role, 'ztalk'):
        return
    join_room(f"conversa_{data.get('conversation_id')}")


@socketio.on('leave_conversation')
def handle_leave_conversation(data):
    leave_room(f"conversa_{data.get('conversation_id')}")
