"""
Models package for MusicFinder.
"""

from .database import db, init_db
from .favorite import UserFavorite
from .playlist import Playlist, PlaylistTrack
from .search_history import SearchHistory
from .user import User

__all__ = [
    'db', 'init_db', 'User', 'Playlist', 'PlaylistTrack',
    'UserFavorite', 'SearchHistory',
]
