# run.py

from sistema_ct import create_app, socketio
from sistema_ct.services.realtime_service import start_purge_task

app = create_app()

if __name__ == '__main__':
    # Limpeza periódica das notificações expiradas
    start_purge_task(app)

    # Use o socketio.run() para rodar sua aplicação
    socketio.run(app, debug=True, allow_unsafe_werkzeug=True)
