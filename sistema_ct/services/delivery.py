# sistema_ct/services/delivery.py

"""Gateways de entrega dos disparos (broadcasts) do ZTalk."""

import abc
import logging
import re
import time
from dataclasses import dataclass, asdict

import requests

from ..results import DeliveryError

logger = logging.getLogger(__name__)

_PLACEHOLDER_MARKERS = ('SEU_TOKEN', 'SEU_NUMERO_ID')


@dataclass
class DeliveryReport:
    sent: int = 0
    delivered: int = 0
    read: int = 0
    failed: int = 0

    def as_dict(self):
        return asdict(self)


class DeliveryGateway(abc.ABC):
    @abc.abstractmethod
    def deliver(self, broadcast):
        """Entrega o disparo a todos os destinatários e devolve um DeliveryReport."""


class SimulatedDeliveryGateway(DeliveryGateway):
    """Entrega de mentira: espera `delay` segundos e inventa as estatísticas.

    95% entregues, 70% lidas e 5% com falha, sempre arredondando para baixo.
    """

    def __init__(self, delay=3, sleep=time.sleep):
        self.delay = delay
        self.sleep = sleep

    def deliver(self, broadcast):
        if self.delay:
            self.sleep(self.delay)
        total = len(broadcast.recipients)
        return DeliveryReport(
            sent=total,
            delivered=total * 95 // 100,
            read=total * 70 // 100,
            failed=total * 5 // 100,
        )


class WhatsAppCloudGateway(DeliveryGateway):
    """Envia uma mensagem de texto por destinatário pela WhatsApp Business API."""

    def __init__(self, token, url, timeout=10):
        self.token = token
        self.url = url
        self.timeout = timeout

    def _send(self, phone, text):
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json"
        }
        payload = {
            "messaging_product": "whatsapp",
            "to": re.sub(r'\D', '', phone),
            "type": "text",
            "text": {"body": text}
        }
        response = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        response.raise_for_status()  # Lança um erro para respostas 4xx ou 5xx

    def deliver(self, broadcast):
        report = DeliveryReport()
        for phone in broadcast.recipients:
            try:
                self._send(phone, broadcast.message)
            except requests.exceptions.RequestException as e:
                logger.error(f"Falha ao enviar disparo {broadcast.id} para {phone}: {e}")
                report.failed += 1
                continue
            report.sent += 1
            report.delivered += 1

        if broadcast.recipients and report.sent == 0:
            raise DeliveryError(f"Nenhum destinatário recebeu o disparo {broadcast.id}.", report=report.as_dict())
        return report


def whatsapp_configured(config):
    token = config.get('WHATSAPP_TOKEN') or ''
    url = config.get('WHATSAPP_URL') or ''
    if not token or not url:
        return False
    return not any(marker in token or marker in url for marker in _PLACEHOLDER_MARKERS)


def build_gateway(config, sleep=time.sleep):
    if whatsapp_configured(config):
        logger.info("Disparos do ZTalk via WhatsApp Business API.")
        return WhatsAppCloudGateway(config['WHATSAPP_TOKEN'], config['WHATSAPP_URL'])
    return SimulatedDeliveryGateway(delay=config.get('BROADCAST_SEND_DELAY', 3), sleep=sleep)
