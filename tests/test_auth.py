"""
Authentication tests for Hustlx
Tests registration, login, logout and credential resolution in both auth modes
"""
import json
from datetime import datetime, timedelta, timezone

import jwt

from hustlx import db
from hustlx.auth import AuthService
from hustlx.models import AuthSession, User


def _registration(**overrides):
    payload = {
        'email': 'jane@example.com',
        'username': 'jane',
        'password': 'SecurePass123!',
        'role': 'homemaker',
        'first_name': 'Jane',
        'last_name': 'Doe',
    }
    payload.update(overrides)
    return payload


class TestRegistration:
    """Test user registration flows"""

    def test_register_homemaker_success(self, client):
        response = client.post('/api/auth/register', json=_registration())

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data['user']['email'] == 'jane@example.com'
        assert data['user']['role'] == 'homemaker'
        assert 'password_hash' not in data['user']
        assert 'token' in data

    def test_register_mentor_requires_specialty(self, client):
        response = client.post('/api/auth/register', json=_registration(role='mentor'))
        assert response.status_code == 400

        response = client.post('/api/auth/register', json=_registration(role='mentor', specialty='Catering'))
        assert response.status_code == 201
        assert json.loads(response.data)['user']['specialty'] == 'Catering'

    def test_register_unknown_role(self, client):
        response = client.post('/api/auth/register', json=_registration(role='admin'))
        assert response.status_code == 400

    def test_register_duplicate_email_case_insensitive(self, client):
        client.post('/api/auth/register', json=_registration())
        response = client.post('/api/auth/register', json=_registration(
            email='JANE@example.com', username='jane2',
        ))

        assert response.status_code == 400
        data = json.loads(response.data)
        assert 'already exists' in data['message'].lower()
        assert User.query.count() == 1

    def test_register_duplicate_username(self, client):
        client.post('/api/auth/register', json=_registration())
        response = client.post('/api/auth/register', json=_registration(email='other@example.com'))

        assert response.status_code == 400
        assert 'username' in json.loads(response.data)['message']
        assert User.query.count() == 1

    def test_register_weak_password(self, client):
        response = client.post('/api/auth/register', json=_registration(password='123'))

        assert response.status_code == 400
        data = json.loads(response.data)
        assert any('password' in error['field'] for error in data['errors'])

    def test_register_invalid_email(self, client):
        response = client.post('/api/auth/register', json=_registration(email='not-an-email'))
        assert response.status_code == 400

    def test_register_ignores_server_owned_fields(self, client):
        response = client.post('/api/auth/register', json=_registration(id=999, password_hash='x'))

        assert response.status_code == 201
        user = User.query.one()
        assert user.id != 999
        assert user.password_hash.startswith('$2b$')

    def test_password_hashed_with_bcrypt(self, app, client):
        client.post('/api/auth/register', json=_registration())
        user = User.query.one()

        assert user.password_hash != 'SecurePass123!'
        assert user.password_hash.startswith('$2b$10$')


class TestLogin:
    """Test user login flows"""

    def test_login_with_email(self, client, customer):
        response = client.post('/api/auth/login', json={
            'email': customer.email,
            'password': 'TestPass123!',
        })

        assert response.status_code == 200
        data = json.loads(response.data)
        assert 'token' in data
        assert data['user']['email'] == customer.email
        assert data['user']['role'] == 'customer'

    def test_login_with_username_identifier(self, client, customer):
        response = client.post('/api/auth/login', json={
            'identifier': customer.username,
            'password': 'TestPass123!',
        })
        assert response.status_code == 200

    def test_login_failures_are_indistinguishable(self, client, customer):
        wrong_password = client.post('/api/auth/login', json={
            'email': customer.email,
            'password': 'WrongPassword123!',
        })
        unknown_user = client.post('/api/auth/login', json={
            'email': 'nonexistent@example.com',
            'password': 'TestPass123!',
        })

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert json.loads(wrong_password.data) == json.loads(unknown_user.data) == {'message': 'Invalid credentials'}

    def test_login_missing_identifier(self, client):
        response = client.post('/api/auth/login', json={'password': 'TestPass123!'})
        assert response.status_code == 400

    def test_token_payload(self, app, client, customer):
        response = client.post('/api/auth/login', json={
            'email': customer.email,
            'password': 'TestPass123!',
        })
        token = json.loads(response.data)['token']
        payload = jwt.decode(token, app.config['JWT_SECRET_KEY'], algorithms=['HS256'])

        assert payload['user_id'] == customer.id
        assert payload['role'] == 'customer'
        assert timedelta(days=6) < timedelta(seconds=payload['exp'] - payload['iat']) <= timedelta(days=7)


class TestTokenResolution:
    """Bad credentials leave the request anonymous"""

    def test_current_user(self, client, customer, customer_headers):
        response = client.get('/api/auth/user', headers=customer_headers)

        assert response.status_code == 200
        assert json.loads(response.data)['user']['id'] == customer.id

    def test_anonymous_is_unauthorized(self, client):
        response = client.get('/api/auth/user')
        assert response.status_code == 401

    def test_expired_token(self, app, client, customer):
        past = datetime.now(timezone.utc) - timedelta(days=8)
        token = jwt.encode({
            'user_id': customer.id,
            'role': customer.role,
            'iat': past,
            'exp': past + timedelta(days=7),
        }, app.config['JWT_SECRET_KEY'], algorithm='HS256')

        response = client.get('/api/auth/user', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    def test_token_from_another_secret(self, client, customer):
        other = AuthService(secret_key='some-other-secret', token_expires=timedelta(days=7))
        token = other.generate_token(customer.id, customer.role)

        response = client.get('/api/auth/user', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    def test_garbage_token_on_public_route(self, client):
        response = client.get('/api/listings', headers={'Authorization': 'Bearer not-a-token'})
        assert response.status_code == 200

    def test_log_rounds_never_below_minimum(self):
        service = AuthService(secret_key='x', log_rounds=4)
        assert service.log_rounds == 10


class TestSessionMode:
    """Server-side sessions carried in an HttpOnly cookie"""

    def test_register_sets_cookie(self, session_app):
        client = session_app.test_client()
        response = client.post('/api/auth/register', json=_registration())

        assert response.status_code == 201
        data = json.loads(response.data)
        assert 'token' not in data
        cookie_header = response.headers['Set-Cookie']
        assert 'hustlx_auth=' in cookie_header
        assert 'HttpOnly' in cookie_header
        assert AuthSession.query.count() == 1

    def test_login_then_logout(self, session_app):
        client = session_app.test_client()
        client.post('/api/auth/register', json=_registration())
        client.post('/api/auth/logout')

        response = client.post('/api/auth/login', json={'identifier': 'jane', 'password': 'SecurePass123!'})
        assert response.status_code == 200
        assert client.get('/api/auth/user').status_code == 200

        response = client.post('/api/auth/logout')
        assert response.status_code == 200
        assert AuthSession.query.count() == 0
        assert client.get('/api/auth/user').status_code == 401

    def test_expired_session_is_anonymous(self, session_app):
        client = session_app.test_client()
        client.post('/api/auth/register', json=_registration())

        auth_session = AuthSession.query.one()
        auth_session.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        db.session.commit()

        assert client.get('/api/auth/user').status_code == 401

    def test_bearer_token_ignored(self, session_app):
        client = session_app.test_client()
        response = client.post('/api/auth/register', json=_registration())
        user_id = json.loads(response.data)['user']['id']
        token = session_app.extensions['auth'].generate_token(user_id, 'homemaker')

        anonymous = session_app.test_client()
        response = anonymous.get('/api/auth/user', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401
