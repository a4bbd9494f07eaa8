# sistema_ct/cash.py

from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user

from .decorators import page_required, permission_required, confirmation_required
from .storage.base import parse_date
from .utils import get_services, request_data, result_response, list_response

bp = Blueprint('cash', __name__, url_prefix='/api/cash')


def _date_arg(name):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError:
        return None


@bp.route('', methods=['GET'])
@login_required
@page_required('cash')
def list_cash_flows():
    cash = get_services().cash
    flows = cash.cash_flows
    start = _date_arg('inicio')
    if start:
        flows = cash.flows_between(start, _date_arg('fim'))
    if request.args.get('user_id'):
        flows = [f for f in flows if f.user_id == request.args['user_id']]
    return list_response(flows, total=len(flows))


@bp.route('/summary', methods=['GET'])
@login_required
@page_required('cash')
def summary():
    cash = get_services().cash
    return jsonify({
        "status": "ok",
        "total_balance": str(cash.total_balance()),
        "total_inflow": str(cash.total_inflow()),
        "total_outflow": str(cash.total_outflow()),
    })


@bp.route('/categories/<flow_type>', methods=['GET'])
@login_required
@page_required('cash')
def categories(flow_type):
    return jsonify({"status": "ok", "data": get_services().cash.categories(flow_type)})


@bp.route('', methods=['POST'])
@login_required
@permission_required('create_cash_flow')
def create_cash_flow():
    result = get_services().cash.add_cash_flow(request_data(), current_user.user)
    return result_response(result, status=201)


@bp.route('/<flow_id>', methods=['PUT', 'PATCH'])
@login_required
@permission_required('edit_cash_flow')
def update_cash_flow(flow_id):
    result = get_services().cash.update_cash_flow(flow_id, request_data())
    return result_response(result)


@bp.route('/<flow_id>', methods=['DELETE'])
@login_required
@permission_required('delete_cash_flow')
@confirmation_required
def delete_cash_flow(flow_id):
    result = get_services().cash.delete_cash_flow(flow_id)
    return result_response(result, key='id')
