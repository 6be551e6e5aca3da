import logging
from flask import jsonify
from app import db
from app.errors import bp
from app.exceptions import ServiceError, PayloadValidationError

logger = logging.getLogger(__name__)


def error_response(status_code, message, **extra):
    body = {'success': False, 'message': message}
    body.update(extra)
    return jsonify(body), status_code


@bp.app_errorhandler(ServiceError)
def service_error(error):
    logger.debug(f"ServiceError ({error.status_code}): {error.message}")
    if isinstance(error, PayloadValidationError) and error.errors:
        return error_response(error.status_code, error.message, errors=error.errors)
    return error_response(error.status_code, error.message)


@bp.app_errorhandler(400)
def bad_request_error(error):
    return error_response(400, 'Solicitud no válida.')


@bp.app_errorhandler(404)
def not_found_error(error):
    return error_response(404, 'Recurso no encontrado.')


@bp.app_errorhandler(405)
def method_not_allowed_error(error):
    return error_response(405, 'Método no permitido.')


@bp.app_errorhandler(500)
def internal_error(error):
    db.session.rollback()
    logger.error(f"Interne fout: {str(error)}")
    return error_response(500, 'Error interno del servidor.')
