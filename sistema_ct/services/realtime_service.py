# sistema_ct/services/realtime_service.py

"""Avisos em tempo real (Socket.IO) e tarefas em segundo plano."""

import logging

from .. import socketio
from ..entities import ChatMessage, ZTalkMessage, to_dict

logger = logging.getLogger(__name__)


def notify_data_changed(entity_name, value):
    """Avisa os clientes conectados que uma coleção mudou e deve ser recarregada."""
    socketio.emit('atualizar_dados', {'entidade': entity_name})

    if isinstance(value, ChatMessage):
        if value.channel_id:
            room = f'canal_{value.channel_id}'
        elif value.receiver_id:
            room = str(value.receiver_id)
        else:
            room = None
        socketio.emit('nova_mensagem', to_dict(value), room=room)
    elif isinstance(value, ZTalkMessage):
        socketio.emit('nova_mensagem', to_dict(value), room=f'conversa_{value.conversation_id}')


def make_spawner(app):
    """Executa funções em segundo plano com o contexto da aplicação.

    Com SYNC_BACKGROUND_TASKS ligado (testes) a função roda na hora.
    """
    def spawn(func, *args):
        if app.config.get('SYNC_BACKGROUND_TASKS'):
            func(*args)
            return None

        def run():
            with app.app_context():
                try:
                    func(*args)
                except Exception as e:
                    logger.error(f"Erro na tarefa em segundo plano {getattr(func, '__name__', func)}: {e}")
        return socketio.start_background_task(run)
    return spawn


def purge_expired_notifications(app):
    """Roda em loop removendo notificações vencidas."""
    interval = app.config.get('NOTIFICATION_PURGE_INTERVAL', 60)
    with app.app_context():
        logger.info("Iniciando tarefa de limpeza de notificações expiradas...")
        services = app.extensions['sistema_ct']
        while True:
            result = services.notifications.clear_expired()
            if result.ok and result.value:
                logger.info(f"{result.value} notificação(ões) expirada(s) removida(s).")
                socketio.emit('atualizar_dados', {'entidade': 'notifications'})
            socketio.sleep(interval)


def start_purge_task(app):
    """Inicia a limpeza periódica de notificações em segundo plano."""
    return socketio.start_background_task(purge_expired_notifications, app)
