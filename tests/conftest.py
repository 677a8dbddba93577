"""
Pytest configuration and fixtures for Hustlx backend tests
"""
import pytest

from hustlx import create_app, db
from hustlx.models import Listing, Order, User

DEFAULT_PASSWORD = 'TestPass123!'


def _build_app(tmp_path, **overrides):
    overrides.setdefault('UPLOAD_FOLDER', str(tmp_path / 'uploads'))
    app = create_app('testing', overrides)
    return app


@pytest.fixture
def app(tmp_path):
    """Create application instance for testing (token auth)"""
    app = _build_app(tmp_path)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def session_app(tmp_path):
    """Application instance using server-side sessions"""
    app = _build_app(tmp_path, AUTH_MODE='session')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def user_factory(app):
    """Factory for creating users of any role"""
    counter = {'n': 0}

    def _create_user(role='customer', password=DEFAULT_PASSWORD, **kwargs):
        counter['n'] += 1
        defaults = {
            'email': f'{role}{counter["n"]}@example.com',
            'username': f'{role}{counter["n"]}',
            'first_name': 'Test',
            'last_name': role.capitalize(),
            'phone': '555-0000',
            'role': role,
        }
        defaults.update(kwargs)

        user = User(password_hash=app.extensions['auth'].hash_password(password), **defaults)
        db.session.add(user)
        db.session.commit()
        return user

    return _create_user


@pytest.fixture
def homemaker(user_factory):
    return user_factory('homemaker', email='homemaker@example.com', username='homemaker')


@pytest.fixture
def customer(user_factory):
    return user_factory('customer', email='customer@example.com', username='customer')


@pytest.fixture
def mentor(user_factory):
    return user_factory('mentor', email='mentor@example.com', username='mentor', specialty='Baking business')


@pytest.fixture
def make_headers(app):
    """Build bearer headers for a user"""
    def _headers(user):
        token = app.extensions['auth'].generate_token(user.id, user.role)
        return {'Authorization': f'Bearer {token}'}

    return _headers


@pytest.fixture
def homemaker_headers(make_headers, homemaker):
    return make_headers(homemaker)


@pytest.fixture
def customer_headers(make_headers, customer):
    return make_headers(customer)


@pytest.fixture
def mentor_headers(make_headers, mentor):
    return make_headers(mentor)


@pytest.fixture
def listing_factory(homemaker):
    """Factory for creating listings (owned by the homemaker fixture by default)"""
    def _create_listing(**kwargs):
        defaults = {
            'homemaker_id': homemaker.id,
            'title': 'Homemade Sourdough',
            'description': 'Fresh sourdough loaf baked to order',
            'price': 5000,
            'type': 'product',
            'category': 'baking',
            'tags': ['bread', 'vegan'],
            'images': [],
            'status': 'active',
        }
        defaults.update(kwargs)

        listing = Listing(**defaults)
        db.session.add(listing)
        db.session.commit()
        return listing

    return _create_listing


@pytest.fixture
def listing(listing_factory):
    return listing_factory()


@pytest.fixture
def order_factory(listing, customer):
    """Factory for orders in any status, bypassing the state machine"""
    def _create_order(status='pending', quantity=1, **kwargs):
        target = kwargs.pop('listing', listing)
        defaults = {
            'listing_id': target.id,
            'customer_id': customer.id,
            'homemaker_id': target.homemaker_id,
            'status': status,
            'quantity': quantity,
            'total_amount': target.price * quantity,
        }
        defaults.update(kwargs)

        order = Order(**defaults)
        db.session.add(order)
        db.session.commit()
        return order

    return _create_order
