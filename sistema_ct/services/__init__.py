# sistema_ct/services/__init__.py

"""Registro de serviços: montado uma vez por aplicação e repassado aos blueprints."""

from .auth_service import AuthService
from .cash import CashService
from .chat import ChatService
from .clients import ClientService
from .delivery import build_gateway
from .employees import EmployeeService
from .notifications import NotificationService
from .reports import ReportService
from .ztalk import ZTalkService


class Services:
    def __init__(self, backend, repositories, gateway, spawn, on_change=None):
        self.backend = backend
        self.repositories = repositories
        self.clients = ClientService(repositories.clients, on_change)
        self.employees = EmployeeService(repositories.users, on_change)
        self.cash = CashService(repositories.cash_flows, on_change)
        self.notifications = NotificationService(repositories.notifications, on_change)
        self.chat = ChatService(repositories.chat_channels, repositories.chat_messages, on_change)
        self.ztalk = ZTalkService(repositories, gateway, spawn=spawn, on_change=on_change)
        self.reports = ReportService(repositories.reports, self.clients, self.cash,
                                     self.employees, self.ztalk, on_change)
        self.auth = AuthService(self.employees, backend.using_local_mode)

    def containers(self):
        return [self.clients, self.employees, self.cash, self.notifications,
                self.chat, self.ztalk, self.reports]

    def load_all(self):
        for container in self.containers():
            container.load()
        self.chat.ensure_default_channel()


def build_services(app, backend, on_change=None):
    from .. import socketio
    from .realtime_service import make_spawner

    gateway = build_gateway(app.config, sleep=socketio.sleep)
    services = Services(
        backend,
        backend.build_repositories(),
        gateway,
        make_spawner(app),
        on_change,
    )
    services.load_all()
    return services
