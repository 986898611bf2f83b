"""JSON error types and the handlers that render them."""

import logging

from flask import jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from ambika import db

logger = logging.getLogger(__name__)


class APIError(Exception):
    status_code = 500

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        body = {'error': self.message}
        if self.details:
            body['details'] = self.details
        return body


class NotFound(APIError):
    status_code = 404

    def __init__(self, entity: str):
        super().__init__(f'{entity} not found')


class DuplicateKey(APIError):
    status_code = 400


class ValidationFailed(APIError):
    status_code = 400

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> 'ValidationFailed':
        errors = exc.errors()
        details = [
            {'field': '.'.join(str(p) for p in e['loc']), 'message': e['msg']}
            for e in errors
        ]
        first = details[0] if details else {'field': '', 'message': 'Invalid request'}
        message = f"{first['field']}: {first['message']}" if first['field'] else first['message']
        return cls(message, details)


class Unauthorized(APIError):
    status_code = 401


class Forbidden(APIError):
    status_code = 403


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def api_error(err):
        db.session.rollback()
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def http_error(err):
        return jsonify(error=err.description), err.code

    @app.errorhandler(Exception)
    def server_error(err):  # pragma: no cover - last resort
        logger.exception('unhandled error: %s', err)
        db.session.rollback()
        return jsonify(error='Internal server error'), 500
