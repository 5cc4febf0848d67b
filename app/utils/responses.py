"""JSON error responses for service-layer exceptions."""

import logging

from flask import jsonify

from app.services.errors import NotFoundError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ValidationError: 400,
    NotFoundError: 404,
    PersistenceError: 500,
}


def error_response(error):
    """Build the (response, status) pair for a service error."""
    for error_type, status in STATUS_CODES.items():
        if isinstance(error, error_type):
            if status >= 500:
                logger.error(f'{type(error).__name__}: {error}')
            return jsonify({'error': str(error)}), status
    raise error
