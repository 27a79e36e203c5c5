"""
MusicFinder - music catalog search, playlists and favorites.

Flask application factory and initialization.
"""

import os
from datetime import timedelta
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import config

# Endpoints reachable without a session; everything else is default-deny.
PUBLIC_ENDPOINTS = {
    'auth.register',
    'auth.login',
    'api.index',
    'api.health',
    'api.spa_fallback',
    'static',
}
PUBLIC_BLUEPRINTS = {'catalog'}

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
    "font-src 'self' https://fonts.gstatic.com",
    "script-src 'self' 'unsafe-inline'",
    "img-src 'self' data: https: http:",
    "connect-src 'self' https://api.spotify.com",
])


def _register_error_handlers(app):
    from app.exceptions import ApiError
    from app.models import db

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if not request.path.startswith('/api/'):
            return error.get_response()
        return jsonify({'error': error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        app.logger.exception('Unhandled error on %s %s', request.method, request.path)
        db.session.rollback()
        body = {'error': 'Something went wrong!'}
        if app.config.get('ENV_MODE') == 'development':
            body['message'] = str(error)
        return jsonify(body), 500


def create_app(testing=False, catalog_client=None):
    """Create and configure the Flask application."""

    app = Flask(__name__,
                static_folder=str(config.STATIC_DIR),
                static_url_path='/static')

    app.config['TESTING'] = testing
    app.config['ENV_MODE'] = 'testing' if testing else config.ENV
    app.config['LOG_LEVEL'] = config.LOG_LEVEL

    # Configuration
    app.config['SECRET_KEY'] = os.getenv('SESSION_SECRET') or os.getenv('SECRET_KEY') or config.SECRET_KEY
    app.config['SQLALCHEMY_DATABASE_URI'] = config.SQLALCHEMY_DATABASE_URI
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JSON_SORT_KEYS'] = False

    # Session cookie security (24h, refreshed on every request)
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['SESSION_COOKIE_SECURE'] = config.is_production
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(hours=config.SESSION_LIFETIME_HOURS)
    app.config['SESSION_REFRESH_EACH_REQUEST'] = True

    from app.logger import configure_logging
    configure_logging(app)

    # Initialize database
    from app.models import init_db
    init_db(app)

    # Initialize authentication
    from app.auth import init_auth
    init_auth(app)

    # Initialize rate limiter
    from app.limiter import limiter
    if app.config.get('TESTING'):
        app.config['RATELIMIT_ENABLED'] = False
    limiter.init_app(app)

    # CORS for the configured front-end origin
    from flask_cors import CORS
    CORS(app, resources={r'/api/*': {'origins': config.APP_URL}}, supports_credentials=True)

    # Catalog proxy: one client (and one cached token) per process
    if catalog_client is None:
        from app.services.catalog import CatalogClient
        catalog_client = CatalogClient.from_config(config)
    app.extensions['catalog'] = catalog_client

    _register_error_handlers(app)

    # Register blueprints
    from app.auth.routes import bp as auth_bp
    from app.routes.api import bp as api_bp
    from app.routes.catalog import bp as catalog_bp
    from app.routes.playlists import bp as playlists_bp
    from app.routes.users import bp as users_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(playlists_bp, url_prefix='/api')
    app.register_blueprint(catalog_bp, url_prefix='/api/spotify')
    app.register_blueprint(api_bp)

    @app.before_request
    def require_auth():
        from flask_login import current_user as cu

        endpoint = request.endpoint
        if endpoint is None:
            return
        if endpoint in PUBLIC_ENDPOINTS:
            return
        if request.blueprint in PUBLIC_BLUEPRINTS:
            return
        if request.method == 'OPTIONS':
            return
        if cu.is_authenticated:
            return
        return jsonify({'error': 'Authentication required'}), 401

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['Content-Security-Policy'] = CONTENT_SECURITY_POLICY
        return response

    app.logger.info('MusicFinder started (%s mode)', app.config['ENV_MODE'])
    return app


__all__ = ['create_app', 'PUBLIC_ENDPOINTS', 'PUBLIC_BLUEPRINTS']
