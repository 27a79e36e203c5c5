"""
Auth Routes - Register, login, logout, current user.
"""

import logging
import re

from flask import Blueprint, jsonify, session
from flask_login import current_user, login_required, login_user, logout_user
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from app.auth.decorators import guest_only
from app.exceptions import AuthenticationError, ConflictError, ValidationError
from app.limiter import limiter
from app.models import db, User
from app.services.collections import json_body, pick

logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__)

MIN_PASSWORD_LENGTH = 6


def _is_valid_email(email):
    """Basic email format validation."""
    return bool(re.match(r'^[^@\s]+@[^@\s]+\.[^@\s]+$', email))


def _start_session(user):
    """Log the user in with a 24h sliding session."""
    session.permanent = True
    login_user(user)


def _public_user(user):
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'display_name': user.display_name,
        'avatar_url': user.avatar_url,
    }


@bp.route('/api/auth/register', methods=['POST'])
@guest_only
@limiter.limit("5 per minute")
def register():
    """Create a new user account and sign it in."""
    data = json_body()

    username = str(data.get('username') or '').strip()
    email = str(data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    display_name = str(pick(data, 'display_name', 'displayName', default='') or '').strip()

    if not username or not email or not password:
        raise ValidationError('All fields are required')
    if len(username) > 50:
        raise ValidationError('Username is too long')
    if not _is_valid_email(email):
        raise ValidationError('Valid email is required')
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

    existing = User.query.filter(
        or_(User.username == username, User.email == email)
    ).first()
    if existing:
        raise ConflictError('Username or email already exists')

    user = User(
        username=username,
        email=email,
        display_name=display_name[:100] or username,
    )
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Username or email already exists')

    _start_session(user)
    logger.info('Registered user %s (%s)', user.id, user.username)

    return jsonify({
        'message': 'User registered successfully',
        'user': _public_user(user),
    }), 201


@bp.route('/api/auth/login', methods=['POST'])
@guest_only
@limiter.limit("10 per minute")
def login():
    """Login with username (or email) and password."""
    data = json_body()

    identifier = str(data.get('username') or data.get('email') or '').strip()
    password = data.get('password') or ''

    if not identifier or not password:
        raise ValidationError('Username and password are required')
    if not isinstance(password, str):
        raise ValidationError('Password must be a string')

    user = User.query.filter(
        or_(User.username == identifier, User.email == identifier.lower())
    ).first()

    if not user or not user.check_password(password):
        raise AuthenticationError('Invalid credentials')

    _start_session(user)

    return jsonify({
        'message': 'Login successful',
        'user': _public_user(user),
    })


@bp.route('/api/auth/logout', methods=['POST'])
@login_required
def logout():
    """End the current session."""
    logout_user()
    session.clear()
    return jsonify({'message': 'Logout successful'})


@bp.route('/api/auth/me', methods=['GET'])
@login_required
def me():
    """Get current user."""
    data = _public_user(current_user)
    data['created_at'] = current_user.created_at.isoformat() if current_user.created_at else None
    return jsonify(data)
