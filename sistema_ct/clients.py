# sistema_ct/clients.py

from flask import Blueprint, request
from flask_login import login_required, current_user

from .decorators import page_required, permission_required, confirmation_required
from .results import NotFoundError
from .utils import get_services, request_data, result_response, list_response, error_response

bp = Blueprint('clients', __name__, url_prefix='/api/clients')


@bp.route('', methods=['GET'])
@login_required
@page_required('clients')
def list_clients():
    query = request.args.get('q', '')
    clients = get_services().clients.search_clients(query)
    return list_response(clients, total=len(clients))


@bp.route('/<client_id>', methods=['GET'])
@login_required
@page_required('clients')
def get_client(client_id):
    client = get_services().clients.get_client(client_id)
    if client is None:
        return error_response(NotFoundError("Cliente não encontrado."))
    return list_response(client)


@bp.route('', methods=['POST'])
@login_required
@page_required('clients')
def create_client():
    result = get_services().clients.add_client(request_data(), current_user.user)
    return result_response(result, status=201)


@bp.route('/<client_id>', methods=['PUT', 'PATCH'])
@login_required
@permission_required('edit_client')
def update_client(client_id):
    result = get_services().clients.update_client(client_id, request_data(), current_user.user)
    return result_response(result)


@bp.route('/<client_id>', methods=['DELETE'])
@login_required
@permission_required('delete_client')
@confirmation_required
def delete_client(client_id):
    result = get_services().clients.delete_client(client_id)
    return result_response(result, key='id')
