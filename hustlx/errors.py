"""
API error taxonomy and the Flask handlers that turn errors into JSON.

Every failure leaves a handler as ``{"message": ...}`` with the matching
status code; validation failures add an ``errors`` list with one entry per
offending field.
"""
import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base class for errors reported to the client"""
    status_code = 500
    message = 'Server error'

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'message': self.message}


class ValidationError(APIError):
    status_code = 400
    message = 'Invalid input data'

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self):
        data = super().to_dict()
        if self.errors:
            data['errors'] = self.errors
        return data

    @classmethod
    def from_pydantic(cls, exc):
        """Build from a pydantic ValidationError, one entry per field"""
        errors = [
            {
                'field': '.'.join(str(part) for part in error['loc']),
                'message': error['msg'],
            }
            for error in exc.errors()
        ]
        return cls(errors=errors)


class DuplicateIdentity(APIError):
    status_code = 400
    message = 'User with this email or username already exists'


class InvalidCredentials(APIError):
    status_code = 401
    message = 'Invalid credentials'


class Unauthorized(APIError):
    status_code = 401
    message = 'Authentication required'


class Forbidden(APIError):
    status_code = 403
    message = 'Insufficient permissions'


class NotFound(APIError):
    status_code = 404
    message = 'Not found'


class InvalidTransition(APIError):
    status_code = 409
    message = 'Invalid status transition'


class ServerError(APIError):
    status_code = 500
    message = 'Server error'


def register_error_handlers(app):
    """Map the taxonomy, HTTP errors and unexpected failures to JSON"""
    from hustlx import db

    @app.errorhandler(APIError)
    def handle_api_error(error):
        db.session.rollback()
        if error.status_code >= 500:
            logger.error('%s %s failed: %s', request.method, request.path, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        message = error.description
        if error.code == 413:
            message = 'File too large'
        elif error.code == 429:
            message = 'Too many requests. Please try again later.'
        return jsonify({'message': message}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.exception(
            'Unhandled error on %s %s (request %s)',
            request.method,
            request.path,
            request.environ.get('request_id'),
        )
        return jsonify({'message': ServerError.message}), 500
