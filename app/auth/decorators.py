"""
Auth decorators for session-gated routes.
"""

from functools import wraps

from flask import jsonify, g
from flask_login import current_user, login_required


def guest_only(f):
    """Reject the request when a session is already established."""
    @wraps(f)
    def decorated(*args, **kwargs):
        if current_user.is_authenticated:
            return jsonify({'error': 'Already authenticated'}), 403
        return f(*args, **kwargs)
    return decorated


def owns_playlist(param_name='playlist_id'):
    """
    Decorator that loads the playlist named by the route parameter and checks
    the current user owns it. The playlist is exposed as ``g.playlist``.
    Missing and foreign playlists both answer 404.
    """
    def decorator(f):
        @wraps(f)
        @login_required
        def decorated(*args, **kwargs):
            from app.services.collections import require_owned_playlist

            g.playlist = require_owned_playlist(kwargs.get(param_name), current_user.id)
            return f(*args, **kwargs)
        return decorated
    return decorator
