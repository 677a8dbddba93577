"""
Configuration settings for different environments
"""
import os
import logging
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

_DEV_SECRET_KEY = 'dev-secret-key-change-in-production'
_DEV_JWT_SECRET = 'dev-jwt-secret-change-in-production'


def _database_url():
    """Read DATABASE_URL, fixing postgres:// to postgresql:// for SQLAlchemy 2.x"""
    url = os.environ.get('DATABASE_URL', '')
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url or 'sqlite:///hustlx.db'


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or _DEV_SECRET_KEY

    # Database
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }

    API_PREFIX = '/api'

    # Authentication
    AUTH_MODE = os.environ.get('AUTH_MODE', 'token')  # token, session
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET') or _DEV_JWT_SECRET
    JWT_ALGORITHM = 'HS256'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)
    SESSION_LIFETIME = timedelta(hours=24)
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', 12))

    # Security
    AUTH_COOKIE_NAME = 'hustlx_auth'
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # CORS
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Rate limiting
    RATELIMIT_ENABLED = True

    # File uploads
    MAX_CONTENT_LENGTH = 100 * 1024 * 1024  # 100MB
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(os.getcwd(), 'uploads')

    # Groq (OpenAI-compatible chat completions)
    GROQ_API_KEY = os.environ.get('GROQ_API_KEY', '')
    GROQ_API_URL = os.environ.get('GROQ_API_URL', 'https://api.groq.com/openai/v1/chat/completions')
    GROQ_MODEL = os.environ.get('GROQ_MODEL', 'llama3-70b-8192')
    GROQ_TIMEOUT = float(os.environ.get('GROQ_TIMEOUT', 20))

    # Payment processor callback (pending -> paid)
    PAYMENT_WEBHOOK_SECRET = os.environ.get('PAYMENT_WEBHOOK_SECRET', '')

    # Only customers holding a completed order may review a listing
    REVIEWS_REQUIRE_COMPLETED_ORDER = os.environ.get(
        'REVIEWS_REQUIRE_COMPLETED_ORDER', 'true'
    ).lower() in ['true', 'on', '1']

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    SESSION_COOKIE_SECURE = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    # Enforce HTTPS
    SESSION_COOKIE_SECURE = True

    # Production-specific settings
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 20,
        'max_overflow': 40,
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }


def warn_insecure_defaults(settings, config_name):
    """Warn loudly when a non-development app still uses a default secret."""
    if config_name in ('development', 'testing', 'default'):
        return

    logger = logging.getLogger('hustlx.startup')
    if settings.get('SECRET_KEY') == _DEV_SECRET_KEY:
        logger.warning('SECRET_KEY is using an insecure default. Set it via environment variable!')
    if settings.get('JWT_SECRET_KEY') == _DEV_JWT_SECRET:
        logger.warning('JWT_SECRET is using an insecure default. Set it via environment variable!')
    if not settings.get('PAYMENT_WEBHOOK_SECRET'):
        logger.warning('PAYMENT_WEBHOOK_SECRET is not set -- payment confirmations are disabled.')
    if not settings.get('GROQ_API_KEY'):
        logger.warning('GROQ_API_KEY is not set -- AI features will serve fallback responses.')
