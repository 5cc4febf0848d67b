"""Shared authentication utilities.

Tokens are issued by the hosted auth provider; this backend only verifies
them. The `user_id` claim identifies the machine owner.
"""

from functools import wraps
from flask import request, jsonify, current_app
import jwt

# Default user when tests call protected routes without a token
TEST_USER_ID = 'test-user'


def _decode_user_id(auth_header):
    # Support both "Bearer <token>" and raw token formats
    token = auth_header.split(' ')[1] if ' ' in auth_header else auth_header
    payload = jwt.decode(
        token,
        current_app.config['JWT_SECRET_KEY'],
        algorithms=['HS256']
    )
    return str(payload['user_id'])


def token_required(f):
    """
    Decorator to require valid JWT token.

    Extracts user_id from JWT token and passes it as the first argument
    to the decorated function.

    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route(current_user_id):
            return jsonify({'user_id': current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        # Skip authentication in testing mode unless a token is sent
        if current_app.config.get('TESTING') and not auth_header:
            return f(TEST_USER_ID, *args, **kwargs)

        if not auth_header:
            return jsonify({'error': 'Token is missing'}), 401

        try:
            current_user_id = _decode_user_id(auth_header)
        except jwt.ExpiredSignatureError:
            return jsonify({'error': 'Token has expired'}), 401
        except (jwt.InvalidTokenError, KeyError, IndexError):
            return jsonify({'error': 'Token is invalid'}), 401

        return f(current_user_id, *args, **kwargs)
    return decorated


def token_optional(f):
    """
    Decorator that optionally validates JWT token.

    If a valid token is provided, extracts user_id. Otherwise, passes None.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        current_user_id = None

        if auth_header:
            try:
                current_user_id = _decode_user_id(auth_header)
            except (jwt.InvalidTokenError, KeyError, IndexError):
                current_user_id = None

        return f(current_user_id, *args, **kwargs)
    return decorated
