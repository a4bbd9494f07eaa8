# sistema_ct/management.py

"""Gestão de funcionários (usuários do sistema)."""

from flask import Blueprint, request
from flask_login import login_required, current_user

from .decorators import page_required, permission_required, confirmation_required
from .results import NotFoundError
from .utils import get_services, request_data, result_response, list_response, error_response

bp = Blueprint('management', __name__, url_prefix='/api/employees')


@bp.route('', methods=['GET'])
@login_required
@page_required('employees')
def list_employees():
    employees = get_services().employees.search_employees(request.args.get('q', ''))
    return list_response(employees, total=len(employees))


@bp.route('/<employee_id>', methods=['GET'])
@login_required
@page_required('employees')
def get_employee(employee_id):
    employee = get_services().employees.get_employee(employee_id)
    if employee is None:
        return error_response(NotFoundError("Funcionário não encontrado."))
    return list_response(employee)


@bp.route('', methods=['POST'])
@login_required
@permission_required('manage_employees')
def create_employee():
    result = get_services().employees.add_employee(request_data(), current_user.user)
    return result_response(result, status=201)


@bp.route('/<employee_id>', methods=['PUT', 'PATCH'])
@login_required
@permission_required('manage_employees')
def update_employee(employee_id):
    result = get_services().employees.update_employee(employee_id, request_data(), current_user.user)
    return result_response(result)


@bp.route('/<employee_id>', methods=['DELETE'])
@login_required
@permission_required('delete_employee')
@confirmation_required
def delete_employee(employee_id):
    result = get_services().employees.delete_employee(employee_id, current_user.user)
    return result_response(result, key='id')
