"""
User Routes - Profile and favorites.
"""

from datetime import datetime

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from app.exceptions import ValidationError
from app.models import db
from app.services import collections
from app.services.collections import json_body, pick

bp = Blueprint('users', __name__)


# ==================== Profile ====================

@bp.route('/profile', methods=['GET'])
@login_required
def get_profile():
    """Return the current user's profile."""
    return jsonify(current_user.to_dict())


@bp.route('/profile', methods=['PUT', 'PATCH'])
@login_required
def update_profile():
    """Update display name and/or avatar. Empty values are ignored."""
    data = json_body()

    display_name = str(pick(data, 'display_name', 'displayName', default='') or '').strip()
    avatar_url = str(pick(data, 'avatar_url', 'avatarUrl', default='') or '').strip()

    if len(display_name) > 100:
        raise ValidationError('Display name is too long')
    if len(avatar_url) > 500:
        raise ValidationError('Avatar URL is too long')

    if display_name:
        current_user.display_name = display_name
    if avatar_url:
        current_user.avatar_url = avatar_url

    current_user.updated_at = datetime.utcnow()
    db.session.commit()

    return jsonify({
        'message': 'Profile updated successfully',
        'user': current_user.to_dict(),
    })


# ==================== Favorites ====================

@bp.route('/favorites', methods=['GET'])
@login_required
def list_favorites():
    """Return the current user's favorites, newest first."""
    return jsonify([f.to_dict() for f in collections.list_favorites(current_user.id)])


@bp.route('/favorites', methods=['POST'])
@login_required
def add_favorite():
    """Favorite a catalog track. Each track can be favorited once."""
    data = json_body()
    favorite = collections.add_favorite(current_user.id, data)
    return jsonify({
        'message': 'Track added to favorites',
        'favorite': favorite.to_dict(),
    }), 201


@bp.route('/favorites/<track_id>', methods=['DELETE'])
@login_required
def remove_favorite(track_id):
    """Remove a favorite by catalog track id."""
    collections.remove_favorite(current_user.id, track_id)
    return jsonify({'message': 'Track removed from favorites'})
