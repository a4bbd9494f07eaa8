# sistema_ct/reports.py

from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user

from .decorators import page_required, confirmation_required
from .results import ServiceError
from .utils import get_services, request_data, result_response, list_response, error_response

bp = Blueprint('reports', __name__, url_prefix='/api/reports')


@bp.route('/overview', methods=['GET'])
@login_required
@page_required('reports')
def overview():
    try:
        stats = get_services().reports.overview(request.args.get('period', 'month'))
    except ServiceError as e:
        return error_response(e)
    return jsonify({"status": "ok", "stats": stats})


@bp.route('', methods=['GET'])
@login_required
@page_required('reports')
def list_reports():
    reports = get_services().reports
    report_type = request.args.get('type')
    return list_response(reports.reports_by_type(report_type) if report_type else reports.reports)


@bp.route('', methods=['POST'])
@login_required
@page_required('reports')
def generate_report():
    data = request_data()
    result = get_services().reports.generate_report(
        data.get('type') or 'general',
        current_user.user,
        period=data.get('period') or 'month',
        title=data.get('title'),
    )
    return result_response(result, status=201)


@bp.route('/<report_id>', methods=['DELETE'])
@login_required
@page_required('reports')
@confirmation_required
def delete_report(report_id):
    return result_response(get_services().reports.delete_report(report_id), key='id')
