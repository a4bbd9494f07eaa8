# tests/test_ztalk.py

from datetime import timedelta

import pytest
import requests

from sistema_ct.results import DeliveryError
from sistema_ct.services.delivery import (DeliveryGateway, SimulatedDeliveryGateway,
                                          WhatsAppCloudGateway, build_gateway)
from sistema_ct.storage.base import utcnow


@pytest.fixture
def ztalk(services):
    return services.ztalk


@pytest.fixture
def deferred(ztalk):
    """Guarda as tarefas em segundo plano para o teste executá-las quando quiser."""
    pending = []
    ztalk.spawn = lambda func, *args: pending.append((func, args))
    return pending


def _broadcast(ztalk, admin, recipients=100, scheduled_for=None):
    phones = [f"1199999{i:04d}" for i in range(recipients)]
    return ztalk.create_broadcast({
        'title': 'Promoção', 'message': 'Olá!', 'recipients': phones, 'scheduled_for': scheduled_for,
    }, admin).value


def test_broadcast_without_schedule_is_draft(ztalk, admin):
    assert _broadcast(ztalk, admin).status == 'draft'


def test_broadcast_with_future_schedule_is_scheduled(ztalk, admin):
    future = (utcnow() + timedelta(days=1)).isoformat()
    assert _broadcast(ztalk, admin, scheduled_for=future).status == 'scheduled'


def test_broadcast_send_lifecycle(ztalk, admin, deferred):
    """
    GIVEN um disparo em rascunho para 100 destinatários
    WHEN ele é enviado
    THEN passa a 'sending' na hora e a 'sent' com 95/70/5 depois da entrega
    """
    broadcast = _broadcast(ztalk, admin)

    result = ztalk.send_broadcast(broadcast.id)
    assert result.ok
    assert result.value.status == 'sending'
    assert result.value.sent_at is not None
    assert ztalk.broadcasts_repository.find_by_id(broadcast.id).status == 'sending'
    assert len(deferred) == 1

    func, args = deferred.pop()
    func(*args)

    sent = ztalk.broadcasts_repository.find_by_id(broadcast.id)
    assert sent.status == 'sent'
    assert sent.stats == {'sent': 100, 'delivered': 95, 'read': 70, 'failed': 5}


def test_stats_use_floor(ztalk, admin):
    broadcast = _broadcast(ztalk, admin, recipients=7)
    ztalk.send_broadcast(broadcast.id)
    sent = ztalk.broadcasts_repository.find_by_id(broadcast.id)
    assert sent.stats == {'sent': 7, 'delivered': 6, 'read': 4, 'failed': 0}


def test_sent_broadcast_cannot_be_sent_again(ztalk, admin):
    broadcast = _broadcast(ztalk, admin)
    assert ztalk.send_broadcast(broadcast.id).ok
    again = ztalk.send_broadcast(broadcast.id)
    assert not again.ok
    assert again.error.code == 'transicao_invalida'


def test_gateway_failure_marks_broadcast_failed(ztalk, admin):
    class FailingGateway(DeliveryGateway):
        def deliver(self, broadcast):
            raise DeliveryError("Falha no provedor")

    ztalk.gateway = FailingGateway()
    broadcast = _broadcast(ztalk, admin, recipients=3)
    ztalk.send_broadcast(broadcast.id)

    failed = ztalk.broadcasts_repository.find_by_id(broadcast.id)
    assert failed.status == 'failed'
    assert failed.stats['failed'] == 3


def test_simulated_gateway_waits_for_delay(ztalk, admin):
    waits = []
    gateway = SimulatedDeliveryGateway(delay=3, sleep=waits.append)
    report = gateway.deliver(_broadcast(ztalk, admin, recipients=20))
    assert waits == [3]
    assert report.as_dict() == {'sent': 20, 'delivered': 19, 'read': 14, 'failed': 1}


def test_build_gateway_uses_simulation_with_placeholders():
    gateway = build_gateway({'WHATSAPP_TOKEN': 'SEU_TOKEN_WHATSAPP_BUSINESS_API',
                             'WHATSAPP_URL': 'https://graph.facebook.com/v17.0/SEU_NUMERO_ID/messages',
                             'BROADCAST_SEND_DELAY': 0})
    assert isinstance(gateway, SimulatedDeliveryGateway)


def test_broadcast_stats(ztalk, admin):
    first = _broadcast(ztalk, admin, recipients=10)
    _broadcast(ztalk, admin, recipients=5)
    ztalk.send_broadcast(first.id)

    stats = ztalk.broadcast_stats()
    assert stats['total'] == 2
    assert stats['by_status'] == {'sent': 1, 'draft': 1}
    assert stats['totals']['sent'] == 10


# --- Conversas ---

@pytest.fixture
def conversation(ztalk):
    contact = ztalk.add_contact({'name': 'Cliente WhatsApp', 'phone': '11987654321'}).value
    return ztalk.create_conversation(contact.id).value


def test_assigning_open_conversation_starts_it(ztalk, admin, conversation):
    result = ztalk.assign_conversation(conversation.id, admin)
    assert result.ok
    assert result.value.status == 'in_progress'
    assert result.value.assigned_to == admin.id
    assert result.value.assigned_to_name == admin.name


@pytest.mark.parametrize('path, allowed', [
    (['pending', 'in_progress', 'closed'], True),
    (['in_progress', 'pending', 'closed'], True),
    (['closed'], True),
    (['in_progress', 'open'], False),
    (['closed', 'in_progress'], False),
    (['pending', 'open'], False),
])
def test_conversation_transitions(ztalk, conversation, path, allowed):
    results = [ztalk.update_conversation_status(conversation.id, status) for status in path]
    assert all(r.ok for r in results[:-1])
    assert results[-1].ok is allowed
    if not allowed:
        assert results[-1].error.code == 'transicao_invalida'


def test_closed_conversation_is_terminal(ztalk, admin, conversation):
    assert ztalk.close_conversation(conversation.id).ok
    assert ztalk.assign_conversation(conversation.id, admin).error.code == 'transicao_invalida'
    assert ztalk.send_message(conversation.id, admin, 'Oi').error.code == 'transicao_invalida'
    assert ztalk.conversations[0].status == 'closed'


def test_send_message_updates_conversation(ztalk, admin, conversation):
    result = ztalk.send_message(conversation.id, admin, 'Bom dia!')
    assert result.ok
    assert result.value.direction == 'outbound'

    updated = ztalk.repository.find_by_id(conversation.id)
    assert updated.last_message == 'Bom dia!'
    assert updated.last_message_at == result.value.timestamp
    assert [m.message for m in ztalk.conversation_messages(conversation.id)] == ['Bom dia!']


def test_receive_message_reuses_open_conversation(ztalk, conversation):
    result = ztalk.receive_message('5511987654321', 'Preciso de ajuda')
    assert result.ok
    assert result.value.conversation_id == conversation.id
    assert result.value.direction == 'inbound'


def test_receive_message_from_unknown_number_creates_contact(ztalk):
    result = ztalk.receive_message('5521912340000', 'Olá', contact_name='Fulano')
    assert result.ok
    contact = ztalk.find_contact_by_phone('21912340000')
    assert contact.name == 'Fulano'
    assert [c.contact_id for c in ztalk.conversations] == [contact.id]


def test_queue_crud(ztalk):
    queue = ztalk.create_queue({'name': 'Suporte', 'members': ['1']}).value
    assert queue.working_hours == {'start': '08:00', 'end': '18:00', 'days': [0, 1, 2, 3, 4]}
    assert ztalk.update_queue(queue.id, {'max_conversations': 10}).value.max_conversations == 10
    assert ztalk.delete_queue(queue.id).ok
    assert ztalk.queues == []


def test_webhook_verification(test_client):
    ok = test_client.get('/api/ztalk/webhook?hub.verify_token=token-de-teste&hub.challenge=123')
    assert ok.status_code == 200
    assert ok.data == b'123'
    assert test_client.get('/api/ztalk/webhook?hub.verify_token=errado').status_code == 403


def test_webhook_registers_inbound_message(test_client, services):
    payload = {
        "object": "whatsapp_business_account",
        "entry": [{"changes": [{"value": {
            "contacts": [{"wa_id": "5511955554444", "profile": {"name": "Beatriz"}}],
            "messages": [{"from": "5511955554444", "timestamp": "1700000000",
                          "text": {"body": "Quero um orçamento"}}],
        }}]}],
    }
    response = test_client.post('/api/ztalk/webhook', json=payload)
    assert response.status_code == 200
    assert response.json['received'] == 1
    assert services.ztalk.messages[0].message == 'Quero um orçamento'
    assert services.ztalk.contacts[0].name == 'Beatriz'


# --- Gateway do WhatsApp ---

class FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


@pytest.fixture
def whatsapp_posts(monkeypatch):
    """Substitui requests.post; telefones em `failing` recebem erro 500."""
    calls = []
    failing = set()

    def fake_post(url, headers=None, json=None, timeout=None):
        calls.append({'url': url, 'headers': headers, 'json': json})
        return FakeResponse(500 if json['to'] in failing else 200)

    monkeypatch.setattr('sistema_ct.services.delivery.requests.post', fake_post)
    return calls, failing


def test_build_gateway_uses_whatsapp_when_configured():
    gateway = build_gateway({'WHATSAPP_TOKEN': 'token-real',
                             'WHATSAPP_URL': 'https://graph.facebook.com/v17.0/123/messages'})
    assert isinstance(gateway, WhatsAppCloudGateway)
    assert gateway.token == 'token-real'


def test_whatsapp_gateway_counts_failures_per_recipient(ztalk, admin, whatsapp_posts):
    calls, failing = whatsapp_posts
    failing.add('11999990001')
    gateway = WhatsAppCloudGateway('token-real', 'https://graph.facebook.com/v17.0/123/messages')

    report = gateway.deliver(_broadcast(ztalk, admin, recipients=3))

    assert report.as_dict() == {'sent': 2, 'delivered': 2, 'read': 0, 'failed': 1}
    assert [c['json']['to'] for c in calls] == ['11999990000', '11999990001', '11999990002']
    assert calls[0]['headers']['Authorization'] == 'Bearer token-real'
    assert calls[0]['json']['text'] == {'body': 'Olá!'}


def test_whatsapp_gateway_raises_when_every_recipient_fails(ztalk, admin, whatsapp_posts):
    _, failing = whatsapp_posts
    failing.update({'11999990000', '11999990001'})
    gateway = WhatsAppCloudGateway('token-real', 'https://graph.facebook.com/v17.0/123/messages')

    with pytest.raises(DeliveryError) as excinfo:
        gateway.deliver(_broadcast(ztalk, admin, recipients=2))
    assert excinfo.value.details['report'] == {'sent': 0, 'delivered': 0, 'read': 0, 'failed': 2}


def test_broadcast_failed_through_whatsapp_keeps_gateway_report(ztalk, admin, whatsapp_posts):
    _, failing = whatsapp_posts
    failing.update({'11999990000', '11999990001'})
    ztalk.gateway = WhatsAppCloudGateway('token-real', 'https://graph.facebook.com/v17.0/123/messages')

    broadcast = _broadcast(ztalk, admin, recipients=2)
    ztalk.send_broadcast(broadcast.id)

    failed = ztalk.broadcasts_repository.find_by_id(broadcast.id)
    assert failed.status == 'failed'
    assert failed.stats == {'sent': 0, 'delivered': 0, 'read': 0, 'failed': 2}


@pytest.mark.parametrize('value, expected', [('false', False), ('0', False), ('', False), ('true', True)])
def test_queue_auto_assign_accepts_form_values(ztalk, value, expected):
    queue = ztalk.create_queue({'name': 'Vendas', 'auto_assign': value}).value
    assert queue.auto_assign is expected
    assert ztalk.update_queue(queue.id, {'auto_assign': 'true'}).value.auto_assign is True


def test_queue_rejects_invalid_flag(ztalk):
    result = ztalk.create_queue({'name': 'Vendas', 'auto_assign': 'talvez'})
    assert result.error.errors == {'auto_assign': 'Valor inválido'}
