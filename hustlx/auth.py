"""
Authentication and authorization.

``AuthService`` owns password hashing, credential checks and the issuing of
bearer credentials: a signed JWT in ``token`` mode or a server-side session
row plus cookie in ``session`` mode. One instance is built per app by the
factory and lives on ``app.extensions['auth']``.

``resolve_identity`` runs before every request and never rejects it: a bad,
expired or unknown credential just leaves the request anonymous so public
reads keep working. Protected views opt in with ``require_auth`` and
``require_role``.
"""
import logging
from collections import namedtuple
from datetime import datetime, timezone
from functools import wraps

import bcrypt
import jwt
from flask import current_app, g, request
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from hustlx import db
from hustlx.errors import DuplicateIdentity, Forbidden, InvalidCredentials, Unauthorized
from hustlx.models import AuthSession, User
from hustlx.validators import normalize_email

logger = logging.getLogger(__name__)

MIN_LOG_ROUNDS = 10
AUTH_MODES = ('token', 'session')

Identity = namedtuple('Identity', ['user_id', 'role'])


def _password_bytes(password):
    # bcrypt only looks at the first 72 bytes
    return password.encode('utf-8')[:72]


class AuthService:
    """Credential store access plus token/session issuing"""

    def __init__(self, secret_key, algorithm='HS256', token_expires=None,
                 session_lifetime=None, log_rounds=12, mode='token', cookie_name='hustlx_auth'):
        if mode not in AUTH_MODES:
            raise ValueError(f'Unknown auth mode {mode!r}. Must be one of: {", ".join(AUTH_MODES)}')
        if not secret_key:
            raise ValueError('A signing secret is required')

        self.secret_key = secret_key
        self.algorithm = algorithm
        self.token_expires = token_expires
        self.session_lifetime = session_lifetime
        self.log_rounds = max(MIN_LOG_ROUNDS, int(log_rounds))
        self.mode = mode
        self.cookie_name = cookie_name
        self._dummy_hash = None

    @property
    def uses_sessions(self):
        return self.mode == 'session'

    # -- passwords ---------------------------------------------------------

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt"""
        salt = bcrypt.gensalt(rounds=self.log_rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode('utf-8')

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against its hash"""
        try:
            return bcrypt.checkpw(_password_bytes(password), password_hash.encode('utf-8'))
        except ValueError:
            logger.warning('Stored password hash is malformed')
            return False

    def _burn_password_check(self, password):
        # Unknown identifiers still pay for one bcrypt check
        if self._dummy_hash is None:
            self._dummy_hash = self.hash_password('not-a-real-password')
        self.verify_password(password, self._dummy_hash)

    # -- tokens ------------------------------------------------------------

    def generate_token(self, user_id: int, role: str) -> str:
        """Generate JWT token with user id and role"""
        now = datetime.now(timezone.utc)
        payload = {
            'user_id': user_id,
            'role': role,
            'iat': now,
            'exp': now + self.token_expires,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict:
        """Decode and verify JWT token"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise ValueError('Token has expired')
        except jwt.InvalidTokenError:
            raise ValueError('Invalid token')

        if 'user_id' not in payload or 'role' not in payload:
            raise ValueError('Invalid token payload')
        return payload

    # -- sessions ----------------------------------------------------------

    def start_session(self, user):
        auth_session = AuthSession(
            user_id=user.id,
            expires_at=datetime.now(timezone.utc) + self.session_lifetime,
        )
        db.session.add(auth_session)
        db.session.commit()
        return auth_session

    def end_session(self, session_id):
        deleted = AuthSession.query.filter_by(id=session_id).delete()
        db.session.commit()
        return deleted > 0

    # -- registration & login ---------------------------------------------

    def issue_credential(self, user):
        """Token string in token mode, AuthSession in session mode"""
        if self.uses_sessions:
            return self.start_session(user)
        return self.generate_token(user.id, user.role)

    def register(self, registration):
        """
        Create a user from a validated registration payload.

        Raises:
            DuplicateIdentity: email or username already taken (nothing is inserted)
        """
        existing = User.query.filter(
            or_(
                func.lower(User.email) == registration.email,
                User.username == registration.username,
            )
        ).first()
        if existing:
            field = 'email' if existing.email.lower() == registration.email else 'username'
            raise DuplicateIdentity(f'User with this {field} already exists')

        fields = registration.model_dump(exclude={'password'})
        user = User(password_hash=self.hash_password(registration.password), **fields)

        try:
            db.session.add(user)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise DuplicateIdentity()

        logger.info('Registered user %s (%s)', user.id, user.role)
        return user, self.issue_credential(user)

    def authenticate(self, identifier, password):
        """
        Check credentials, looking the identifier up as email or username.

        Raises:
            InvalidCredentials: for an unknown identifier or a wrong password alike
        """
        user = User.query.filter(
            or_(
                func.lower(User.email) == normalize_email(identifier),
                User.username == identifier.strip(),
            )
        ).first()

        if user is None:
            self._burn_password_check(password)
            raise InvalidCredentials()

        if not self.verify_password(password, user.password_hash):
            raise InvalidCredentials()

        return user

    def login(self, identifier, password):
        user = self.authenticate(identifier, password)
        return user, self.issue_credential(user)

    # -- identity ----------------------------------------------------------

    def identity_from_request(self, req):
        """Resolve the caller's identity, or None when anonymous"""
        if self.uses_sessions:
            session_id = req.cookies.get(self.cookie_name)
            if not session_id:
                return None
            auth_session = AuthSession.find_valid(session_id)
            if auth_session is None:
                return None
            return Identity(auth_session.user_id, auth_session.user.role)

        auth_header = req.headers.get('Authorization', '')
        scheme, _, token = auth_header.partition(' ')
        if scheme.lower() != 'bearer' or not token:
            return None

        try:
            payload = self.decode_token(token.strip())
        except ValueError as e:
            logger.debug('Ignoring bearer token: %s', e)
            return None

        if db.session.get(User, payload['user_id']) is None:
            return None
        return Identity(payload['user_id'], payload['role'])


def get_auth_service():
    return current_app.extensions['auth']


def resolve_identity():
    """before_request hook: attach the caller's identity (or None) to g"""
    g.identity = get_auth_service().identity_from_request(request)


def current_identity():
    return g.get('identity')


def require_auth(f):
    """Decorator to require authentication for routes"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_identity() is None:
            raise Unauthorized()
        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles):
    """Decorator to require specific role(s) for routes"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            identity = current_identity()
            if identity is None:
                raise Unauthorized()

            if identity.role not in roles:
                raise Forbidden(f'This action requires {" or ".join(roles)} role')

            return f(*args, **kwargs)

        return decorated_function
    return decorator
