"""
Testing configuration for the Hustlx backend
"""
import os
import tempfile

from hustlx.config.settings import Config


class TestingConfig(Config):
    """Testing configuration with isolated database and safe defaults"""

    TESTING = True
    DEBUG = False

    # Use in-memory SQLite for fast tests
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'TEST_DATABASE_URL',
        'sqlite:///:memory:'
    )
    SQLALCHEMY_ENGINE_OPTIONS = {}

    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret'

    # Lowest cost the auth service accepts
    BCRYPT_LOG_ROUNDS = 10

    SESSION_COOKIE_SECURE = False

    # Disable rate limiting in tests
    RATELIMIT_ENABLED = False

    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'hustlx_test_uploads')

    # Never reach the real AI provider from tests
    GROQ_API_KEY = ''

    PAYMENT_WEBHOOK_SECRET = 'test-webhook-secret'
    REVIEWS_REQUIRE_COMPLETED_ORDER = True

    # Logging
    LOG_LEVEL = 'WARNING'

    CORS_ORIGINS = ['http://localhost:5173', 'http://localhost:3000']
