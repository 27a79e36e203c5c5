"""
Routes package for MusicFinder.
Blueprints for the JSON API; auth lives in app.auth.
"""

from .api import bp as api_bp
from .catalog import bp as catalog_bp
from .playlists import bp as playlists_bp
from .users import bp as users_bp

__all__ = ['api_bp', 'catalog_bp', 'playlists_bp', 'users_bp']
