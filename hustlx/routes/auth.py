"""
Authentication routes: register, login, logout and current user.

In token mode the credential comes back in the body as ``token``; in session
mode it is set as an HttpOnly cookie and the body carries only the user.
"""
import logging

from flask import Blueprint, current_app, jsonify, request

from hustlx.auth import current_identity, get_auth_service, require_auth
from hustlx.extensions import limiter
from hustlx.models import User
from hustlx.schemas import LoginRequest, RegistrationAdapter, parse_body

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def _credential_response(user, credential, status_code):
    """Build the response for a freshly issued token or session"""
    auth = get_auth_service()
    body = {'user': user.to_dict()}

    if not auth.uses_sessions:
        body['token'] = credential
        return jsonify(body), status_code

    response = jsonify(body)
    response.status_code = status_code
    response.set_cookie(
        auth.cookie_name,
        credential.id,
        max_age=int(auth.session_lifetime.total_seconds()),
        httponly=True,
        secure=current_app.config['SESSION_COOKIE_SECURE'],
        samesite=current_app.config['SESSION_COOKIE_SAMESITE'],
    )
    return response


# ---------------------------------------------------------------------------
# POST /api/auth/register
# ---------------------------------------------------------------------------
@auth_bp.route('/register', methods=['POST'])
@limiter.limit('10 per minute')
def register():
    """
    Register a new user
    Body: {
        "email": "user@example.com",
        "username": "jane",
        "password": "password123",
        "role": "homemaker" | "customer" | "mentor",
        "first_name": "Jane", ...
    }
    """
    registration = parse_body(RegistrationAdapter)
    user, credential = get_auth_service().register(registration)
    return _credential_response(user, credential, 201)


# ---------------------------------------------------------------------------
# POST /api/auth/login
# ---------------------------------------------------------------------------
@auth_bp.route('/login', methods=['POST'])
@limiter.limit('5 per minute')
def login():
    """
    Login with email or username
    Body: {"identifier": "jane", "password": "password123"}
    """
    data = parse_body(LoginRequest)
    user, credential = get_auth_service().login(data.login_identifier, data.password)
    logger.info('User %s logged in', user.id)
    return _credential_response(user, credential, 200)


# ---------------------------------------------------------------------------
# POST /api/auth/logout
# ---------------------------------------------------------------------------
@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Tokens are stateless; in session mode the session row is removed"""
    auth = get_auth_service()
    response = jsonify({'message': 'Logged out successfully'})

    if auth.uses_sessions:
        session_id = request.cookies.get(auth.cookie_name)
        if session_id:
            auth.end_session(session_id)
        response.delete_cookie(auth.cookie_name)

    return response, 200


# ---------------------------------------------------------------------------
# GET /api/auth/user
# ---------------------------------------------------------------------------
@auth_bp.route('/user', methods=['GET'])
@require_auth
def get_current_user():
    user = User.get_or_404(current_identity().user_id, 'User not found')
    return jsonify({'user': user.to_dict()}), 200
