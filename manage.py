#!/usr/bin/env python3
"""
MusicFinder CLI - maintenance commands.

Usage:
    python manage.py init-db
    python manage.py check-catalog

Settings come from env vars (or the .env file, loaded by the config module).
"""

import sys


def init_db():
    """Create all tables in the configured database."""
    from app import create_app

    app = create_app()
    print(f"✅ Database ready: {app.config['SQLALCHEMY_DATABASE_URI']}")
    print("   Tables are created automatically; no migrations to run.")


def check_catalog():
    """Exchange the configured client credentials for a catalog token."""
    from config import config
    from app.exceptions import UpstreamAuthError
    from app.services.catalog import CatalogClient

    if not config.SPOTIFY_CLIENT_ID or not config.SPOTIFY_CLIENT_SECRET:
        print("❌ SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET must be set.")
        sys.exit(1)

    client = CatalogClient.from_config(config)
    try:
        client.get_token()
    except UpstreamAuthError as e:
        status = f" (HTTP {e.upstream_status})" if e.upstream_status else ''
        print(f"❌ {e.message}{status}")
        sys.exit(1)

    remaining = client.token_cache.expires_at - client.token_cache.now()
    print(f"✅ Catalog credentials OK, token valid for {int(remaining)}s")


COMMANDS = {
    'init-db': (init_db, 'Create database tables'),
    'check-catalog': (check_catalog, 'Verify Spotify client credentials'),
}


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in COMMANDS:
        if argv:
            print(f"❌ Unknown command: {argv[0]}")
        print("Usage: python manage.py <command>")
        print("Commands:")
        for name, (_, help_text) in COMMANDS.items():
            print(f"  {name:<15} {help_text}")
        sys.exit(1)

    COMMANDS[argv[0]][0]()


if __name__ == '__main__':
    main()
