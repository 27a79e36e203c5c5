"""
Collection Service - owner-scoped playlist, favorite and search-history writes.

Routes call these helpers after the session guard has admitted the request.
Ownership is checked explicitly: the record is loaded first, then compared
with the caller before anything is read or changed.
"""

import logging
from typing import Optional

from flask import request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import db, Playlist, PlaylistTrack, SearchHistory, UserFavorite

logger = logging.getLogger(__name__)

TRACK_FIELDS = {
    'spotify_track_id': ('spotify_track_id', 'spotifyTrackId', 'external_id', 'externalId'),
    'track_name': ('track_name', 'trackName', 'name'),
    'artist_name': ('artist_name', 'artistName', 'artist'),
    'album_name': ('album_name', 'albumName', 'album'),
    'duration_ms': ('duration_ms', 'durationMs', 'duration'),
    'preview_url': ('preview_url', 'previewUrl'),
    'album_art_url': ('album_art_url', 'albumArtUrl'),
    'position': ('position',),
}


_TRUE_STRINGS = frozenset(['true', '1', 'yes', 'on'])
_FALSE_STRINGS = frozenset(['false', '0', 'no', 'off', ''])


def json_body() -> dict:
    """Request JSON as a dict. An absent body is empty; any non-object is rejected."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Invalid JSON body')
    return data


def pick(data: dict, *names, default=None):
    """Return the first key of ``names`` present in ``data``."""
    for name in names:
        if name in data and data[name] is not None:
            return data[name]
    return default


def parse_bool(value, field) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValidationError(f'{field} must be a boolean')


def _optional_int(value, field):
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be an integer')


def _clean_str(value, limit):
    if value is None:
        return None
    return str(value).strip()[:limit] or None


def parse_track_snapshot(data: dict, required=('spotify_track_id', 'track_name', 'artist_name')) -> dict:
    """Normalize a track payload (snake_case, camelCase or short keys)."""
    snapshot = {field: pick(data, *names) for field, names in TRACK_FIELDS.items()}

    for field in ('spotify_track_id', 'track_name', 'artist_name', 'album_name'):
        snapshot[field] = _clean_str(snapshot[field], 300)
    for field in ('preview_url', 'album_art_url'):
        snapshot[field] = _clean_str(snapshot[field], 500)
    snapshot['duration_ms'] = _optional_int(snapshot['duration_ms'], 'duration_ms')
    snapshot['position'] = _optional_int(snapshot['position'], 'position')

    missing = [f for f in required if not snapshot.get(f)]
    if missing:
        raise ValidationError('Track id, name and artist are required',
                              payload={'missing': missing})
    return snapshot


# ==================== Playlists ====================

def require_owned_playlist(playlist_id: int, user_id: Optional[int]) -> Playlist:
    """
    Load a playlist and verify the caller owns it.

    A foreign playlist is reported exactly like a missing one.
    """
    playlist = db.session.get(Playlist, playlist_id)
    if playlist is None or not playlist.is_owned_by(user_id):
        raise NotFoundError('Playlist not found')
    return playlist


def list_playlists(user_id: int):
    return (
        Playlist.query
        .filter_by(user_id=user_id)
        .order_by(Playlist.created_at.desc(), Playlist.id.desc())
        .all()
    )


def create_playlist(user_id: int, name, description='', is_public=False, spotify_playlist_id='') -> Playlist:
    name = str(name or '').strip()
    if not name:
        raise ValidationError('Playlist name is required')
    if len(name) > 120:
        raise ValidationError('Playlist name is too long')

    playlist = Playlist(
        user_id=user_id,
        name=name,
        description=str(description or '').strip()[:500],
        is_public=parse_bool(is_public, 'is_public'),
        spotify_playlist_id=str(spotify_playlist_id or '').strip()[:100],
    )
    db.session.add(playlist)
    db.session.commit()
    logger.info('User %s created playlist %s', user_id, playlist.id)
    return playlist


def update_playlist(playlist: Playlist, data: dict) -> Playlist:
    name = pick(data, 'name')
    if name is not None:
        name = str(name).strip()
        if not name:
            raise ValidationError('Playlist name is required')
        if len(name) > 120:
            raise ValidationError('Playlist name is too long')
        playlist.name = name

    description = pick(data, 'description')
    if description is not None:
        playlist.description = str(description).strip()[:500]

    is_public = pick(data, 'is_public', 'isPublic')
    if is_public is not None:
        playlist.is_public = parse_bool(is_public, 'is_public')

    db.session.commit()
    return playlist


def delete_playlist(playlist: Playlist):
    """Delete a playlist together with every track it holds."""
    playlist_id = playlist.id
    removed = PlaylistTrack.query.filter_by(playlist_id=playlist_id).delete()
    db.session.delete(playlist)
    db.session.commit()
    logger.info('Deleted playlist %s (%d tracks)', playlist_id, removed)


def add_track(playlist: Playlist, data: dict) -> PlaylistTrack:
    snapshot = parse_track_snapshot(data)
    if snapshot['position'] is None:
        snapshot['position'] = playlist.tracks.count()

    track = PlaylistTrack(playlist_id=playlist.id, **snapshot)
    db.session.add(track)
    db.session.commit()
    return track


def remove_track(playlist: Playlist, track_id: int):
    track = PlaylistTrack.query.filter_by(id=track_id, playlist_id=playlist.id).first()
    if not track:
        raise NotFoundError('Track not found in playlist')
    db.session.delete(track)
    db.session.commit()


# ==================== Favorites ====================

def list_favorites(user_id: int):
    return (
        UserFavorite.query
        .filter_by(user_id=user_id)
        .order_by(UserFavorite.added_at.desc(), UserFavorite.id.desc())
        .all()
    )


def add_favorite(user_id: int, data: dict) -> UserFavorite:
    snapshot = parse_track_snapshot(data)

    existing = UserFavorite.query.filter_by(
        user_id=user_id,
        spotify_track_id=snapshot['spotify_track_id'],
    ).first()
    if existing:
        raise ConflictError('Track already in favorites')

    favorite = UserFavorite(
        user_id=user_id,
        spotify_track_id=snapshot['spotify_track_id'],
        track_name=snapshot['track_name'],
        artist_name=snapshot['artist_name'],
        album_art_url=snapshot['album_art_url'],
    )
    db.session.add(favorite)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent add of the same track
        db.session.rollback()
        raise ConflictError('Track already in favorites')
    return favorite


def remove_favorite(user_id: int, spotify_track_id: str):
    favorite = UserFavorite.query.filter_by(
        user_id=user_id,
        spotify_track_id=spotify_track_id,
    ).first()
    if not favorite:
        raise NotFoundError('Favorite not found')
    db.session.delete(favorite)
    db.session.commit()


# ==================== Search history ====================

def record_search(user_id: int, query: str, search_type: str) -> bool:
    """Append a search history row. Failures are logged, never raised."""
    try:
        db.session.add(SearchHistory(
            user_id=user_id,
            query_text=str(query)[:500],
            search_type=search_type,
        ))
        db.session.commit()
        return True
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning('Failed to record search history for user %s: %s', user_id, e)
        return False
