# sistema_ct/ztalk.py

from datetime import datetime, timezone

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user

from .decorators import page_required, confirmation_required
from .results import NotFoundError
from .utils import get_services, request_data, result_response, list_response, error_response

bp = Blueprint('ztalk', __name__, url_prefix='/api/ztalk')


# --- Contatos ---

@bp.route('/contacts', methods=['GET'])
@login_required
@page_required('ztalk')
def list_contacts():
    return list_response(get_services().ztalk.contacts)


@bp.route('/contacts', methods=['POST'])
@login_required
@page_required('ztalk')
def create_contact():
    return result_response(get_services().ztalk.add_contact(request_data()), status=201)


@bp.route('/contacts/<contact_id>', methods=['PUT', 'PATCH'])
@login_required
@page_required('ztalk')
def update_contact(contact_id):
    return result_response(get_services().ztalk.update_contact(contact_id, request_data()))


@bp.route('/contacts/<contact_id>', methods=['DELETE'])
@login_required
@page_required('ztalk')
@confirmation_required
def delete_contact(contact_id):
    return result_response(get_services().ztalk.delete_contact(contact_id), key='id')


# --- Conversas ---

@bp.route('/conversations', methods=['GET'])
@login_required
@page_required('ztalk')
def list_conversations():
    conversations = get_services().ztalk.conversations
    status = request.args.get('status')
    if status:
        conversations = [c for c in conversations if c.status == status]
    return list_response(conversations)


@bp.route('/conversations', methods=['POST'])
@login_required
@page_required('ztalk')
def create_conversation():
    data = request_data()
    result = get_services().ztalk.create_conversation(
        data.get('contact_id'),
        priority=data.get('priority') or 'medium',
        tags=data.get('tags'),
    )
    return result_response(result, status=201)


@bp.route('/conversations/<conversation_id>/assign', methods=['POST'])
@login_required
@page_required('ztalk')
def assign_conversation(conversation_id):
    services = get_services()
    user_id = request_data().get('user_id')
    user = services.employees.get_employee(user_id) if user_id else current_user.user
    if user is None:
        return error_response(NotFoundError("Funcionário não encontrado."))
    return result_response(services.ztalk.assign_conversation(conversation_id, user))


@bp.route('/conversations/<conversation_id>/status', methods=['POST'])
@login_required
@page_required('ztalk')
def update_conversation_status(conversation_id):
    status = request_data().get('status')
    return result_response(get_services().ztalk.update_conversation_status(conversation_id, status))


@bp.route('/conversations/<conversation_id>/close', methods=['POST'])
@login_required
@page_required('ztalk')
def close_conversation(conversation_id):
    return result_response(get_services().ztalk.close_conversation(conversation_id))


@bp.route('/conversations/<conversation_id>/messages', methods=['GET'])
@login_required
@page_required('ztalk')
def conversation_messages(conversation_id):
    return list_response(get_services().ztalk.conversation_messages(conversation_id))


@bp.route('/conversations/<conversation_id>/messages', methods=['POST'])
@login_required
@page_required('ztalk')
def send_message(conversation_id):
    data = request_data()
    result = get_services().ztalk.send_message(
        conversation_id, current_user.user, data.get('message'), data.get('type') or 'text'
    )
    return result_response(result, status=201)


# --- Filas ---

@bp.route('/queues', methods=['GET'])
@login_required
@page_required('ztalk')
def list_queues():
    return list_response(get_services().ztalk.queues)


@bp.route('/queues', methods=['POST'])
@login_required
@page_required('ztalk')
def create_queue():
    return result_response(get_services().ztalk.create_queue(request_data()), status=201)


@bp.route('/queues/<queue_id>', methods=['PUT', 'PATCH'])
@login_required
@page_required('ztalk')
def update_queue(queue_id):
    return result_response(get_services().ztalk.update_queue(queue_id, request_data()))


@bp.route('/queues/<queue_id>', methods=['DELETE'])
@login_required
@page_required('ztalk')
@confirmation_required
def delete_queue(queue_id):
    return result_response(get_services().ztalk.delete_queue(queue_id), key='id')


# --- Disparos ---

@bp.route('/broadcasts', methods=['GET'])
@login_required
@page_required('ztalk')
def list_broadcasts():
    ztalk = get_services().ztalk
    return list_response(ztalk.broadcasts, stats=ztalk.broadcast_stats())


@bp.route('/broadcasts', methods=['POST'])
@login_required
@page_required('ztalk')
def create_broadcast():
    result = get_services().ztalk.create_broadcast(request_data(), current_user.user)
    return result_response(result, status=201)


@bp.route('/broadcasts/<broadcast_id>/send', methods=['POST'])
@login_required
@page_required('ztalk')
def send_broadcast(broadcast_id):
    return result_response(get_services().ztalk.send_broadcast(broadcast_id), status=202)


# --- Webhook do WhatsApp ---

@bp.route('/webhook', methods=['GET', 'POST'])
def webhook_whatsapp():
    if request.method == "GET":
        verify_token = request.args.get("hub.verify_token")
        if verify_token and verify_token == current_app.config.get('WEBHOOK_VERIFY_TOKEN'):
            return request.args.get("hub.challenge", "")
        return "Token de verificação inválido", 403

    data = request.get_json(silent=True) or {}
    received = 0
    if data.get("object") == "whatsapp_business_account":
        try:
            for entry in data.get("entry", []):
                for change in entry.get("changes", []):
                    value = change.get("value", {})
                    names = {
                        c.get("wa_id"): c.get("profile", {}).get("name")
                        for c in value.get("contacts", [])
                    }
                    for message in value.get("messages", []):
                        if processar_mensagem_recebida(message, names.get(message.get("from"))):
                            received += 1
        except (KeyError, IndexError, TypeError, ValueError) as e:
            current_app.logger.error(f"Erro ao processar payload do webhook: {e}")

    return jsonify({"status": "ok", "received": received}), 200


def processar_mensagem_recebida(message, contact_name=None):
    wa_id = message["from"]
    if "text" in message:
        conteudo, tipo = message["text"]["body"], 'text'
    else:
        conteudo = "Mídia recebida"
        tipo = message.get("type") if message.get("type") in ('image', 'document', 'audio') else 'text'
    timestamp = None
    if message.get('timestamp'):
        timestamp = datetime.fromtimestamp(int(message['timestamp']), timezone.utc).replace(tzinfo=None)

    result = get_services().ztalk.receive_message(
        wa_id, conteudo, contact_name=contact_name, message_type=tipo, timestamp=timestamp
    )
    if not result.ok:
        current_app.logger.error(f"Mensagem de {wa_id} não registrada: {result.error.message}")
    return result.ok
