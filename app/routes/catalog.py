"""
Catalog Routes - Spotify search and lookups through the server-side token.
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user

from app.exceptions import CatalogError, ValidationError
from app.services.catalog import parse_limit, parse_search_type
from app.services.collections import record_search

logger = logging.getLogger(__name__)

bp = Blueprint('catalog', __name__)


def _client():
    return current_app.extensions['catalog']


def _limit(default):
    try:
        return parse_limit(request.args.get('limit'), default)
    except (TypeError, ValueError):
        raise ValidationError('limit must be an integer between 1 and 50')


def _market():
    return (request.args.get('market') or '').strip() or None


def _call(message, fn, *args, **kwargs):
    """Run a catalog call, relabelling catalog failures for this operation."""
    try:
        return fn(*args, **kwargs)
    except CatalogError as e:
        raise e.with_message(message) from e


@bp.route('/search', methods=['GET'])
def search():
    """Search the catalog. Signed-in searches are logged to search history."""
    query = (request.args.get('q') or '').strip()
    if not query:
        raise ValidationError('Search query is required')

    try:
        search_type = parse_search_type(request.args.get('type'))
    except ValueError as e:
        raise ValidationError(str(e))

    offset = request.args.get('offset')
    if offset is not None:
        try:
            offset = int(offset)
        except ValueError:
            raise ValidationError('offset must be an integer')
        if offset < 0:
            raise ValidationError('offset must be an integer')

    data = _call('Search failed', _client().search, query, search_type,
                 _limit(20), market=_market(), offset=offset)

    if current_user.is_authenticated:
        record_search(current_user.id, query, search_type)

    return jsonify(data)


@bp.route('/tracks/<track_id>', methods=['GET'])
def get_track(track_id):
    return jsonify(_call('Failed to get track', _client().get_track, track_id, market=_market()))


@bp.route('/albums/<album_id>', methods=['GET'])
def get_album(album_id):
    return jsonify(_call('Failed to get album', _client().get_album, album_id, market=_market()))


@bp.route('/artists/<artist_id>', methods=['GET'])
def get_artist(artist_id):
    return jsonify(_call('Failed to get artist', _client().get_artist, artist_id))


@bp.route('/artists/<artist_id>/top-tracks', methods=['GET'])
def get_artist_top_tracks(artist_id):
    market = _market() or 'US'
    return jsonify(_call('Failed to get top tracks', _client().get_artist_top_tracks,
                         artist_id, market=market))


@bp.route('/recommendations', methods=['GET'])
def recommendations():
    """Popular tracks from the current year."""
    return jsonify(_call('Failed to get recommendations', _client().recommendations, _limit(20)))


@bp.route('/featured-playlists', methods=['GET'])
def featured_playlists():
    return jsonify(_call('Failed to get featured playlists', _client().featured_playlists, _limit(10)))


@bp.route('/new-releases', methods=['GET'])
def new_releases():
    return jsonify(_call('Failed to get new releases', _client().new_releases, _limit(20)))
