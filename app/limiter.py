"""
Rate limiter shared by all blueprints.
"""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from config import config

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[config.RATE_LIMIT],
    storage_uri='memory://',
)
