"""
Main Routes - Index page, SPA fallback and health check.
"""

from flask import Blueprint, current_app, jsonify, send_from_directory

from app.exceptions import NotFoundError

bp = Blueprint('api', __name__)


@bp.route('/')
def index():
    """Serve the main application page."""
    return send_from_directory(current_app.static_folder, 'index.html')


@bp.route('/api/health')
def health():
    return jsonify({'status': 'ok'})


@bp.route('/<path:path>')
def spa_fallback(path):
    """Unknown API paths are JSON 404s; everything else gets the app shell."""
    if path == 'api' or path.startswith('api/'):
        raise NotFoundError('Not found')
    return send_from_directory(current_app.static_folder, 'index.html')
