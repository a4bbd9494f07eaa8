# sistema_ct/utils.py

from flask import current_app, jsonify, request

from .entities import to_dict
from .results import (ValidationError, NotFoundError, PermissionDenied, InvalidTransition,
                      StorageError, DeliveryError)
from .storage.base import parse_datetime

STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (PermissionDenied, 403),
    (InvalidTransition, 409),
    (DeliveryError, 502),
    (StorageError, 500),
)


def get_services():
    """Registro de serviços da aplicação atual."""
    return current_app.extensions['sistema_ct']


def request_data():
    """Corpo JSON da requisição (ou o formulário, se não vier JSON)."""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    return data


def serialize(value):
    if isinstance(value, list):
        return [serialize(v) for v in value]
    if hasattr(value, '__dataclass_fields__'):
        return to_dict(value)
    return value


def error_response(error):
    status = 500
    for error_class, code in STATUS_BY_ERROR:
        if isinstance(error, error_class):
            status = code
            break
    payload = {"status": "error", "code": error.code, "message": error.message}
    if isinstance(error, ValidationError):
        payload["errors"] = error.errors
    if status >= 500:
        current_app.logger.error(f"Falha ao processar {request.path}: {error.message}")
    return jsonify(payload), status


def result_response(result, status=200, key='data'):
    """Converte um Result em resposta JSON: valor serializado ou erro com o código HTTP."""
    if not result.ok:
        return error_response(result.error)
    return jsonify({"status": "ok", key: serialize(result.value)}), status


def list_response(items, key='data', **extra):
    payload = {"status": "ok", key: serialize(items)}
    payload.update(extra)
    return jsonify(payload)


def parse_optional_datetime(value):
    """Datas vindas da query string; valores inválidos viram None."""
    if not value:
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        return None
