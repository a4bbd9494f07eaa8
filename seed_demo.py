# seed_demo.py

"""Carrega os dados de demonstração no banco remoto configurado.

Uso: DATABASE_URL=... DATABASE_KEY=... python seed_demo.py
"""

from sistema_ct import create_app, db
from sistema_ct.backend import build_remote_repositories
from sistema_ct.seed import seed_demo_data, DEMO_CREDENTIALS

app = create_app()

with app.app_context():
    backend = app.extensions['sistema_ct'].backend
    if backend.using_local_mode:
        print("Banco remoto não configurado ou sem tabelas (rode 'flask db upgrade').")
        print("Nada foi gravado.")
    else:
        print("Iniciando a carga dos dados de demonstração...")
        if seed_demo_data(build_remote_repositories(db.session), include_notifications=False):
            print("\n=====================================================")
            print("  Dados de demonstração criados com sucesso!  ")
            for login, senha in DEMO_CREDENTIALS.items():
                print(f"  Login: {login:<6} Senha: {senha}")
            print("=====================================================")
        else:
            print("\nJá existem usuários no banco de dados. Nada foi alterado.")
