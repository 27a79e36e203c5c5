"""Logging setup for the Flask app and its service modules."""

import logging
import sys

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ('urllib3', 'werkzeug', 'sqlalchemy.engine')


def configure_logging(app, level: str = None):
    """
    Attach a single stream handler to the root logger.

    Args:
        app: Flask application (its logger propagates to root)
        level: Log level name; defaults to app.config['LOG_LEVEL']
    """
    level_name = (level or app.config.get('LOG_LEVEL') or 'INFO').upper()
    numeric = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not any(getattr(h, '_musicfinder', False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._musicfinder = True
        root.addHandler(handler)
    root.setLevel(numeric)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))

    app.logger.setLevel(numeric)
    return root
