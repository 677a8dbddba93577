from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import logging
import os

db = SQLAlchemy()


def create_app(config_name=None, overrides=None):
    """Flask application factory

    ``overrides`` is a mapping applied on top of the selected config class.
    """
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    from hustlx.config import config, warn_insecure_defaults
    app.config.from_object(config[config_name])
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    warn_insecure_defaults(app.config, config_name)

    # Initialize extensions
    from hustlx.extensions import limiter
    from hustlx.auth import AuthService, resolve_identity
    from hustlx.services.groq import GroqClient

    db.init_app(app)
    limiter.init_app(app)
    CORS(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}}, supports_credentials=True)

    app.extensions['auth'] = AuthService(
        secret_key=app.config['JWT_SECRET_KEY'],
        algorithm=app.config['JWT_ALGORITHM'],
        token_expires=app.config['JWT_ACCESS_TOKEN_EXPIRES'],
        session_lifetime=app.config['SESSION_LIFETIME'],
        log_rounds=app.config['BCRYPT_LOG_ROUNDS'],
        mode=app.config['AUTH_MODE'],
        cookie_name=app.config['AUTH_COOKIE_NAME'],
    )
    app.extensions['groq'] = GroqClient(
        api_key=app.config['GROQ_API_KEY'],
        api_url=app.config['GROQ_API_URL'],
        model=app.config['GROQ_MODEL'],
        timeout=app.config['GROQ_TIMEOUT'],
    )

    from hustlx.middleware import RequestIdMiddleware
    app.wsgi_app = RequestIdMiddleware(app.wsgi_app)

    app.before_request(resolve_identity)

    from hustlx.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from hustlx.routes.auth import auth_bp
    from hustlx.routes.users import users_bp
    from hustlx.routes.skills import skills_bp
    from hustlx.routes.listings import listings_bp
    from hustlx.routes.homemakers import homemakers_bp
    from hustlx.routes.orders import orders_bp
    from hustlx.routes.reviews import reviews_bp
    from hustlx.routes.media import media_bp, uploads_bp
    from hustlx.routes.ai import ai_bp, mentors_bp

    api_prefix = app.config['API_PREFIX']
    app.register_blueprint(auth_bp, url_prefix=f'{api_prefix}/auth')
    app.register_blueprint(users_bp, url_prefix=f'{api_prefix}/users')
    app.register_blueprint(skills_bp, url_prefix=f'{api_prefix}/skills')
    app.register_blueprint(listings_bp, url_prefix=f'{api_prefix}/listings')
    app.register_blueprint(homemakers_bp, url_prefix=f'{api_prefix}/homemakers')
    app.register_blueprint(orders_bp, url_prefix=f'{api_prefix}/orders')
    app.register_blueprint(reviews_bp, url_prefix=f'{api_prefix}/reviews')
    app.register_blueprint(media_bp, url_prefix=api_prefix)
    app.register_blueprint(uploads_bp)
    app.register_blueprint(ai_bp, url_prefix=api_prefix)
    app.register_blueprint(mentors_bp, url_prefix=f'{api_prefix}/mentors')

    # Health check endpoint
    @app.route('/health')
    def health():
        return {'status': 'healthy', 'service': 'hustlx-backend'}, 200

    return app
