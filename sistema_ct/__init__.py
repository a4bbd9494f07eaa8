# sistema_ct/__init__.py

from flask import Flask, current_app, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_socketio import SocketIO
from .config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(cors_allowed_origins="*")


def get_services(app):
    """Registro de serviços montado por create_app."""
    return app.extensions['sistema_ct']


def create_app(config_class=Config, local_storage=None):
    from .backend import BackendSelector, remote_database_uri

    app = Flask(__name__)
    app.config.from_object(config_class)

    # A chave de acesso entra como senha do banco remoto. Sem configuração
    # utilizável, o SQLAlchemy fica apontado para um SQLite em memória que não é usado.
    remote_uri = remote_database_uri(app.config.get('DATABASE_URL'), app.config.get('DATABASE_KEY'))
    app.config['SQLALCHEMY_DATABASE_URI'] = remote_uri or 'sqlite://'

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    # Inicializa o SocketIO com o app
    socketio.init_app(app, async_mode=app.config.get('SOCKETIO_ASYNC_MODE'))

    @login_manager.user_loader
    def load_user(user_id):
        # Importa aqui para evitar importação circular
        from .auth import SessionUser
        user = get_services(current_app).employees.get_employee(user_id)
        if user is None or not user.is_active:
            return None
        return SessionUser(user)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"status": "error", "code": "nao_autenticado",
                        "message": "Por favor, faça login para acessar esta página."}), 401

    # --- Backend de dados e serviços ---
    from . import models  # noqa: F401  (registra as tabelas no metadata)
    from .services import build_services
    from .services.realtime_service import notify_data_changed

    with app.app_context():
        backend = BackendSelector(app.config, db, storage=local_storage).initialize()
        app.extensions['sistema_ct'] = build_services(app, backend, on_change=notify_data_changed)

    # --- Registrar Blueprints ---
    from . import auth, routes, clients, management, cash, notifications, chat, ztalk, reports
    app.register_blueprint(auth.bp)
    app.register_blueprint(routes.bp)
    app.register_blueprint(clients.bp)
    app.register_blueprint(management.bp)
    app.register_blueprint(cash.bp)
    app.register_blueprint(notifications.bp)
    app.register_blueprint(chat.bp)
    app.register_blueprint(ztalk.bp)
    app.register_blueprint(reports.bp)

    # Eventos de Socket.IO
    from . import socket_events  # noqa: F401

    return app
