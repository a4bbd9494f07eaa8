# sistema_ct/config.py

import os

class Config:
    """Configurações base da aplicação."""
    SECRET_KEY = os.environ.get('SECRET_KEY', 'chave_secreta_padrao_para_desenvolvimento')

    # --- Banco remoto ---
    # Endpoint e chave de acesso. Valores com "your-project" / "your-anon-key"
    # são tratados como "não configurado" e ativam o modo local.
    DATABASE_URL = os.environ.get(
        'DATABASE_URL',
        'postgresql://postgres@db.your-project.supabase.co:5432/postgres'
    )
    DATABASE_KEY = os.environ.get('DATABASE_KEY', 'your-anon-key')
    # Cria as tabelas remotas na inicialização (db.create_all) antes do teste de conexão.
    DATABASE_CREATE_TABLES = os.environ.get('DATABASE_CREATE_TABLES', '').lower() in ('1', 'true', 'yes')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    TESTING = False

    # --- Modo local (fallback) ---
    # Arquivo JSON que faz o papel do armazenamento chave/valor do navegador.
    # None mantém tudo só em memória.
    LOCAL_STORAGE_PATH = os.environ.get(
        'LOCAL_STORAGE_PATH',
        os.path.join(os.path.abspath(os.path.dirname(os.path.dirname(__file__))), 'instance', 'local_storage.json')
    )

    # --- Tarefas em segundo plano ---
    BROADCAST_SEND_DELAY = float(os.environ.get('BROADCAST_SEND_DELAY', 3))
    NOTIFICATION_PURGE_INTERVAL = int(os.environ.get('NOTIFICATION_PURGE_INTERVAL', 60))
    SYNC_BACKGROUND_TASKS = False
    SOCKETIO_ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE')

    # --- Configurações do WhatsApp Business API (disparos do ZTalk) ---
    WHATSAPP_TOKEN = os.environ.get('WHATSAPP_TOKEN', "SEU_TOKEN_WHATSAPP_BUSINESS_API")
    WHATSAPP_URL = os.environ.get('WHATSAPP_URL', "https://graph.facebook.com/v17.0/SEU_NUMERO_ID/messages")
    WEBHOOK_VERIFY_TOKEN = os.environ.get('WEBHOOK_VERIFY_TOKEN', "SEU_TOKEN_WEBHOOK")


class TestingConfig(Config):
    """Configuração usada pela suíte de testes: modo local, tudo em memória."""
    TESTING = True
    SECRET_KEY = 'test-secret-key-for-sessions'
    DATABASE_URL = ''
    DATABASE_KEY = ''
    LOCAL_STORAGE_PATH = None
    BROADCAST_SEND_DELAY = 0
    SYNC_BACKGROUND_TASKS = True
    SOCKETIO_ASYNC_MODE = 'threading'
    WHATSAPP_TOKEN = ''
    WHATSAPP_URL = ''
    WEBHOOK_VERIFY_TOKEN = 'token-de-teste'


class RemoteTestingConfig(TestingConfig):
    """Modo remoto contra um SQLite em memória."""
    DATABASE_URL = 'sqlite://'
    DATABASE_KEY = 'chave-de-teste'
    DATABASE_CREATE_TABLES = True
