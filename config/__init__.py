"""
Configuration Module for MusicFinder.
Centralizes all app settings with environment variable support.
"""

import hashlib
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_int(name, default):
    raw = os.getenv(name, '')
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _env_float(name, default):
    raw = os.getenv(name, '')
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


class Config:
    """Application configuration with sensible defaults."""

    # Paths
    BASE_DIR = Path(__file__).parent.parent
    STATIC_DIR = BASE_DIR / 'static'
    DATABASE_PATH = BASE_DIR / 'musicfinder.db'

    # Environment mode: development | production | testing
    ENV = (os.getenv('APP_ENV') or os.getenv('FLASK_ENV') or 'development').lower()

    # Server
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = _env_int('PORT', 3000)
    APP_URL = os.getenv('APP_URL', 'http://localhost:3000')

    # Stable fallback key derived from the DB path
    _fallback_key = hashlib.sha256(
        f'musicfinder-secret-{Path(__file__).parent.parent / "musicfinder.db"}'.encode()
    ).hexdigest()
    SECRET_KEY = os.getenv('SESSION_SECRET') or os.getenv('SECRET_KEY') or _fallback_key
    SESSION_LIFETIME_HOURS = 24

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', f'sqlite:///{DATABASE_PATH}')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Spotify (client-credentials grant)
    SPOTIFY_CLIENT_ID = os.getenv('SPOTIFY_CLIENT_ID', '')
    SPOTIFY_CLIENT_SECRET = os.getenv('SPOTIFY_CLIENT_SECRET', '')
    SPOTIFY_TOKEN_URL = os.getenv('SPOTIFY_TOKEN_URL', 'https://accounts.spotify.com/api/token')
    SPOTIFY_API_URL = os.getenv('SPOTIFY_API_URL', 'https://api.spotify.com/v1')
    CATALOG_TIMEOUT = _env_float('CATALOG_TIMEOUT', 10.0)
    CATALOG_MAX_RETRIES = max(0, _env_int('CATALOG_MAX_RETRIES', 0))

    # Rate limiting / logging
    RATE_LIMIT = os.getenv('RATE_LIMIT', '100 per 15 minutes')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    @property
    def is_production(self):
        return self.ENV == 'production'

    @property
    def is_development(self):
        return self.ENV == 'development'


# Create default instance
config = Config()
