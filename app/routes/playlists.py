"""
Playlist Routes - CRUD and track management.
"""

from flask import Blueprint, g, jsonify
from flask_login import login_required, current_user

from app.auth.decorators import owns_playlist
from app.services import collections
from app.services.collections import json_body, pick

bp = Blueprint('playlists', __name__)


# ==================== Playlist CRUD ====================

@bp.route('/playlists', methods=['GET'])
@login_required
def list_playlists():
    """Return playlists owned by the current user, newest first."""
    playlists = collections.list_playlists(current_user.id)
    return jsonify([p.to_dict() for p in playlists])


@bp.route('/playlists', methods=['POST'])
@login_required
def create_playlist():
    """Create a new playlist."""
    data = json_body()
    playlist = collections.create_playlist(
        current_user.id,
        name=data.get('name'),
        description=data.get('description', ''),
        is_public=pick(data, 'is_public', 'isPublic', default=False),
        spotify_playlist_id=pick(data, 'spotify_playlist_id', 'spotifyPlaylistId', default=''),
    )
    return jsonify({
        'message': 'Playlist created successfully',
        'playlist': playlist.to_dict(),
    }), 201


@bp.route('/playlists/<int:playlist_id>', methods=['GET'])
@owns_playlist('playlist_id')
def get_playlist(playlist_id):
    """Return a playlist with its tracks in order."""
    playlist = g.playlist
    return jsonify({
        'playlist': playlist.to_dict(),
        'tracks': [t.to_dict() for t in playlist.ordered_tracks()],
    })


@bp.route('/playlists/<int:playlist_id>', methods=['PUT', 'PATCH'])
@owns_playlist('playlist_id')
def update_playlist(playlist_id):
    """Update playlist metadata."""
    data = json_body()
    playlist = collections.update_playlist(g.playlist, data)
    return jsonify({
        'message': 'Playlist updated successfully',
        'playlist': playlist.to_dict(),
    })


@bp.route('/playlists/<int:playlist_id>', methods=['DELETE'])
@owns_playlist('playlist_id')
def delete_playlist(playlist_id):
    """Delete playlist and all of its tracks."""
    collections.delete_playlist(g.playlist)
    return jsonify({'message': 'Playlist deleted successfully'})


# ==================== Track Management ====================

@bp.route('/playlists/<int:playlist_id>/tracks', methods=['GET'])
@owns_playlist('playlist_id')
def get_playlist_tracks(playlist_id):
    return jsonify({'tracks': [t.to_dict() for t in g.playlist.ordered_tracks()]})


@bp.route('/playlists/<int:playlist_id>/tracks', methods=['POST'])
@owns_playlist('playlist_id')
def add_track(playlist_id):
    """Add a catalog track snapshot to a playlist."""
    data = json_body()
    track = collections.add_track(g.playlist, data)
    return jsonify({
        'message': 'Track added to playlist',
        'track': track.to_dict(),
    }), 201


@bp.route('/playlists/<int:playlist_id>/tracks/<int:track_id>', methods=['DELETE'])
@owns_playlist('playlist_id')
def remove_track(playlist_id, track_id):
    """Remove one track from a playlist."""
    collections.remove_track(g.playlist, track_id)
    return jsonify({'message': 'Track removed from playlist'})
