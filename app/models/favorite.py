"""
User favorite model - one row per (user, catalog track).
"""

from datetime import datetime

from .database import db


class UserFavorite(db.Model):
    """Track a user has favorited."""

    __tablename__ = 'user_favorites'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'spotify_track_id', name='uq_user_favorite'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    spotify_track_id = db.Column(db.String(100), nullable=False)
    track_name = db.Column(db.String(300), nullable=False)
    artist_name = db.Column(db.String(300), nullable=False)
    album_art_url = db.Column(db.String(500), nullable=True)
    added_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'spotify_track_id': self.spotify_track_id,
            'track_name': self.track_name,
            'artist_name': self.artist_name,
            'album_art_url': self.album_art_url,
            'added_at': self.added_at.isoformat() if self.added_at else None,
        }
