"""
Search history model - append-only log of catalog searches.
"""

from datetime import datetime

from .database import db


class SearchHistory(db.Model):
    """One catalog search made by a signed-in user."""

    __tablename__ = 'search_history'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    # 'query' is taken by Model.query
    query_text = db.Column('query', db.String(500), nullable=False)
    search_type = db.Column(db.String(100), nullable=True)
    searched_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
