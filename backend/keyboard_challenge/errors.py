"""Error types and the JSON error handlers registered on the app.

Two kinds of failure reach clients: client errors (bad submissions, 400)
and server errors (store failures or anything unexpected, 500). Both are
turned into JSON bodies here so no exception escapes a request.
"""

import traceback

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

from keyboard_challenge.clock import timestamp

AVAILABLE_ENDPOINTS = [
    'GET /',
    'GET /game',
    'GET /health',
    'GET /api/status',
    'GET /api/leaderboard',
    'POST /api/score',
    'DELETE /api/leaderboard',
]


class ClientError(Exception):
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class MissingFieldsError(ClientError):
    def __init__(self, required, received):
        super().__init__('Missing required fields')
        self.required = list(required)
        self.received = received

    def to_dict(self):
        return {'error': self.message, 'required': self.required, 'received': self.received}


class InvalidFieldError(ClientError):
    def __init__(self, field, value):
        super().__init__(f'Field "{field}" must be a number')
        self.field = field
        self.value = value

    def to_dict(self):
        return {'error': self.message, 'field': self.field, 'received': self.value}


class StoreError(Exception):
    """A document-store operation failed; `action` names what was attempted."""

    def __init__(self, action, cause):
        super().__init__(str(cause))
        self.action = action
        self.cause = cause


def not_found_body():
    return {
        'error': 'Page not found',
        'path': request.full_path.rstrip('?'),
        'method': request.method,
        'timestamp': timestamp(),
        'availableEndpoints': AVAILABLE_ENDPOINTS,
    }


def _server_error(error, message, exc):
    body = {'error': error, 'message': message, 'timestamp': timestamp()}
    if not current_app.config.get('PRODUCTION'):
        body['stack'] = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return jsonify(body), 500


def register_error_handlers(flask_app):
    @flask_app.errorhandler(ClientError)
    def handle_client_error(exc):
        current_app.logger.info(f"[client-error] {request.method} {request.path}: {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    # Unsupported methods on a known path are reported like unknown paths
    @flask_app.errorhandler(NotFound)
    @flask_app.errorhandler(MethodNotAllowed)
    def handle_not_found(exc):
        current_app.logger.info(f"[404] {request.method} {request.path}")
        return jsonify(not_found_body()), 404

    @flask_app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return jsonify({'error': exc.name, 'message': exc.description, 'timestamp': timestamp()}), exc.code

    @flask_app.errorhandler(StoreError)
    def handle_store_error(exc):
        current_app.logger.error(f"[store-error] {exc.action}: {exc.cause}")
        return _server_error(exc.action, str(exc.cause), exc)

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        current_app.logger.exception(f"[server-error] {request.method} {request.path}: {exc}")
        return _server_error('Server error', str(exc), exc)
