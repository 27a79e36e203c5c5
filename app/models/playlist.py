"""
Playlist models: user-owned playlists and their track snapshots.
"""

from datetime import datetime

from .database import db


class Playlist(db.Model):
    """Playlist owned by exactly one user."""

    __tablename__ = 'playlists'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.String(500), default='', nullable=False)
    is_public = db.Column(db.Boolean, default=False, nullable=False)
    spotify_playlist_id = db.Column(db.String(100), default='', nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    tracks = db.relationship(
        'PlaylistTrack',
        back_populates='playlist',
        cascade='all, delete-orphan',
        lazy='dynamic',
    )
    owner = db.relationship('User', back_populates='playlists')

    def is_owned_by(self, user_id):
        return user_id is not None and self.user_id == user_id

    def ordered_tracks(self):
        return (
            self.tracks
            .order_by(PlaylistTrack.position.asc(), PlaylistTrack.added_at.asc(), PlaylistTrack.id.asc())
            .all()
        )

    def to_dict(self):
        """Serialize playlist for API responses."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'description': self.description,
            'is_public': self.is_public,
            'spotify_playlist_id': self.spotify_playlist_id,
            'track_count': self.tracks.count(),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class PlaylistTrack(db.Model):
    """Denormalized snapshot of a catalog track inside a playlist."""

    __tablename__ = 'playlist_tracks'

    id = db.Column(db.Integer, primary_key=True)
    playlist_id = db.Column(
        db.Integer,
        db.ForeignKey('playlists.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    spotify_track_id = db.Column(db.String(100), nullable=False)
    track_name = db.Column(db.String(300), nullable=False)
    artist_name = db.Column(db.String(300), nullable=False)
    album_name = db.Column(db.String(300), nullable=True)
    duration_ms = db.Column(db.Integer, nullable=True)
    preview_url = db.Column(db.String(500), nullable=True)
    album_art_url = db.Column(db.String(500), nullable=True)
    position = db.Column(db.Integer, nullable=True)
    added_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    playlist = db.relationship('Playlist', back_populates='tracks')

    def to_dict(self):
        return {
            'id': self.id,
            'playlist_id': self.playlist_id,
            'spotify_track_id': self.spotify_track_id,
            'track_name': self.track_name,
            'artist_name': self.artist_name,
            'album_name': self.album_name,
            'duration_ms': self.duration_ms,
            'preview_url': self.preview_url,
            'album_art_url': self.album_art_url,
            'position': self.position,
            'added_at': self.added_at.isoformat() if self.added_at else None,
        }
