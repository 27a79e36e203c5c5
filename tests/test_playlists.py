"""
Tests for playlist CRUD and playlist tracks.

Covers:
  - Create / list / read / update / delete
  - Validation errors → 400
  - Track add (snake_case, camelCase and short keys), ordering, removal
  - Delete cascades to every track of the playlist
  - Ownership check on its own, outside any route
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture(scope='module')
def app():
    os.environ['SECRET_KEY'] = 'test-secret-key-playlists'

    from config import config
    config.SQLALCHEMY_DATABASE_URI = 'sqlite://'

    from app import create_app
    application = create_app(testing=True)
    yield application


@pytest.fixture(scope='module')
def client(app):
    client = app.test_client()
    resp = client.post('/api/auth/register', json={
        'username': 'pat',
        'email': 'pat@test.com',
        'password': 'patpass1',
    })
    assert resp.status_code == 201
    return client


def _create(client, name='Mix', **extra):
    payload = {'name': name}
    payload.update(extra)
    resp = client.post('/api/playlists', json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()['playlist']


def _add_track(client, playlist_id, track_id='t1', **extra):
    payload = {'spotify_track_id': track_id, 'track_name': 'Song', 'artist_name': 'Band'}
    payload.update(extra)
    return client.post(f'/api/playlists/{playlist_id}/tracks', json=payload)


# ===========================================================================
# 1. Playlist CRUD
# ===========================================================================

class TestPlaylistCRUD:

    def test_create(self, client):
        resp = client.post('/api/playlists', json={
            'name': '  Chill  ',
            'description': 'Evening',
            'isPublic': True,
        })
        assert resp.status_code == 201
        data = resp.get_json()
        assert data['message'] == 'Playlist created successfully'
        playlist = data['playlist']
        assert playlist['name'] == 'Chill'
        assert playlist['description'] == 'Evening'
        assert playlist['is_public'] is True
        assert playlist['track_count'] == 0

    def test_create_defaults_private(self, client):
        playlist = _create(client, 'Private One')
        assert playlist['is_public'] is False
        assert playlist['description'] == ''

    @pytest.mark.parametrize('raw,expected', [
        ('false', False), ('False', False), ('0', False), (0, False),
        ('true', True), ('yes', True), (1, True),
    ])
    def test_is_public_string_forms(self, client, raw, expected):
        playlist = _create(client, 'Flagged', isPublic=raw)
        assert playlist['is_public'] is expected

    @pytest.mark.parametrize('raw', ['maybe', 2, [True]])
    def test_is_public_rejects_non_boolean(self, client, raw):
        resp = client.post('/api/playlists', json={'name': 'Bad Flag', 'is_public': raw})
        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'is_public must be a boolean'

    def test_update_is_public_false_string(self, client):
        playlist = _create(client, 'Public Then Private', is_public=True)
        resp = client.patch(f"/api/playlists/{playlist['id']}", json={'isPublic': 'false'})
        assert resp.status_code == 200
        assert resp.get_json()['playlist']['is_public'] is False

    def test_create_requires_name(self, client):
        resp = client.post('/api/playlists', json={'description': 'no name'})
        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Playlist name is required'

    def test_create_name_too_long(self, client):
        resp = client.post('/api/playlists', json={'name': 'x' * 121})
        assert resp.status_code == 400

    def test_list_newest_first(self, client):
        first = _create(client, 'Older')
        second = _create(client, 'Newer')
        ids = [p['id'] for p in client.get('/api/playlists').get_json()]
        assert ids.index(second['id']) < ids.index(first['id'])

    def test_read(self, client):
        playlist = _create(client, 'Readable')
        resp = client.get(f"/api/playlists/{playlist['id']}")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['playlist']['name'] == 'Readable'
        assert data['tracks'] == []

    def test_read_missing(self, client):
        resp = client.get('/api/playlists/99999')
        assert resp.status_code == 404
        assert resp.get_json()['error'] == 'Playlist not found'

    def test_update(self, client):
        playlist = _create(client, 'Before')
        resp = client.put(f"/api/playlists/{playlist['id']}", json={
            'name': 'After',
            'description': 'changed',
            'is_public': True,
        })
        assert resp.status_code == 200
        updated = resp.get_json()['playlist']
        assert updated['name'] == 'After'
        assert updated['description'] == 'changed'
        assert updated['is_public'] is True

    def test_partial_update_keeps_other_fields(self, client):
        playlist = _create(client, 'Keep', description='kept')
        resp = client.patch(f"/api/playlists/{playlist['id']}", json={'is_public': True})
        assert resp.status_code == 200
        updated = resp.get_json()['playlist']
        assert updated['name'] == 'Keep'
        assert updated['description'] == 'kept'

    def test_update_rejects_empty_name(self, client):
        playlist = _create(client, 'Named')
        resp = client.put(f"/api/playlists/{playlist['id']}", json={'name': '   '})
        assert resp.status_code == 400

    def test_delete(self, client):
        playlist = _create(client, 'Doomed')
        resp = client.delete(f"/api/playlists/{playlist['id']}")
        assert resp.status_code == 200
        assert resp.get_json()['message'] == 'Playlist deleted successfully'
        assert client.get(f"/api/playlists/{playlist['id']}").status_code == 404

    def test_delete_missing(self, client):
        assert client.delete('/api/playlists/99999').status_code == 404


# ===========================================================================
# 2. Tracks
# ===========================================================================

class TestPlaylistTracks:

    def test_add_track(self, client):
        playlist = _create(client, 'With Tracks')
        resp = _add_track(client, playlist['id'], album_name='Album', duration_ms=180000,
                          preview_url='https://p.example/1', album_art_url='https://i.example/1')
        assert resp.status_code == 201
        track = resp.get_json()['track']
        assert track['spotify_track_id'] == 't1'
        assert track['album_name'] == 'Album'
        assert track['duration_ms'] == 180000
        assert track['position'] == 0

    def test_add_track_camel_case(self, client):
        playlist = _create(client, 'Camel')
        resp = client.post(f"/api/playlists/{playlist['id']}/tracks", json={
            'spotifyTrackId': 'c1',
            'trackName': 'Camel Song',
            'artistName': 'Camel Band',
            'durationMs': 1000,
            'albumArtUrl': 'https://i.example/c1',
        })
        assert resp.status_code == 201
        track = resp.get_json()['track']
        assert track['track_name'] == 'Camel Song'
        assert track['album_art_url'] == 'https://i.example/c1'

    def test_add_track_missing_fields(self, client):
        playlist = _create(client, 'Incomplete')
        resp = client.post(f"/api/playlists/{playlist['id']}/tracks", json={'track_name': 'Song'})
        assert resp.status_code == 400
        assert set(resp.get_json()['missing']) == {'spotify_track_id', 'artist_name'}

    def test_add_track_bad_duration(self, client):
        playlist = _create(client, 'Bad Duration')
        resp = _add_track(client, playlist['id'], duration_ms='long')
        assert resp.status_code == 400

    def test_tracks_are_appended_in_order(self, client):
        playlist = _create(client, 'Ordered')
        for track_id in ('a', 'b', 'c'):
            assert _add_track(client, playlist['id'], track_id=track_id).status_code == 201

        data = client.get(f"/api/playlists/{playlist['id']}").get_json()
        assert [t['spotify_track_id'] for t in data['tracks']] == ['a', 'b', 'c']
        assert [t['position'] for t in data['tracks']] == [0, 1, 2]
        assert data['playlist']['track_count'] == 3

    def test_explicit_position_orders_tracks(self, client):
        playlist = _create(client, 'Positioned')
        _add_track(client, playlist['id'], track_id='late', position=5)
        _add_track(client, playlist['id'], track_id='early', position=1)

        tracks = client.get(f"/api/playlists/{playlist['id']}/tracks").get_json()['tracks']
        assert [t['spotify_track_id'] for t in tracks] == ['early', 'late']

    def test_remove_track(self, client):
        playlist = _create(client, 'Removal')
        track = _add_track(client, playlist['id']).get_json()['track']

        resp = client.delete(f"/api/playlists/{playlist['id']}/tracks/{track['id']}")
        assert resp.status_code == 200
        assert resp.get_json()['message'] == 'Track removed from playlist'
        assert client.get(f"/api/playlists/{playlist['id']}").get_json()['tracks'] == []

    def test_remove_track_missing(self, client):
        playlist = _create(client, 'Nothing To Remove')
        resp = client.delete(f"/api/playlists/{playlist['id']}/tracks/99999")
        assert resp.status_code == 404
        assert resp.get_json()['error'] == 'Track not found in playlist'

    def test_remove_track_from_other_playlist(self, client):
        first = _create(client, 'First')
        second = _create(client, 'Second')
        track = _add_track(client, first['id']).get_json()['track']

        resp = client.delete(f"/api/playlists/{second['id']}/tracks/{track['id']}")
        assert resp.status_code == 404


# ===========================================================================
# 3. Cascade delete
# ===========================================================================

class TestCascadeDelete:

    def test_delete_removes_all_tracks(self, app, client):
        keep = _create(client, 'Survivor')
        _add_track(client, keep['id'], track_id='keep-1')

        doomed = _create(client, 'Cascade')
        for track_id in ('x1', 'x2', 'x3'):
            _add_track(client, doomed['id'], track_id=track_id)

        assert client.delete(f"/api/playlists/{doomed['id']}").status_code == 200

        with app.app_context():
            from app.models import PlaylistTrack
            assert PlaylistTrack.query.filter_by(playlist_id=doomed['id']).count() == 0
            assert PlaylistTrack.query.filter_by(playlist_id=keep['id']).count() == 1

        assert client.get(f"/api/playlists/{doomed['id']}").status_code == 404
        assert client.get(f"/api/playlists/{doomed['id']}/tracks").status_code == 404


# ===========================================================================
# 4. Ownership check
# ===========================================================================

class TestRequireOwnedPlaylist:

    def test_owner_passes_and_others_do_not(self, app):
        from app.exceptions import NotFoundError
        from app.models import db, Playlist, User
        from app.services.collections import require_owned_playlist

        with app.app_context():
            owner = User(username='owner', email='owner@test.com')
            owner.set_password('ownerpass')
            other = User(username='other', email='other@test.com')
            other.set_password('otherpass')
            db.session.add_all([owner, other])
            db.session.commit()

            playlist = Playlist(user_id=owner.id, name='Owned')
            db.session.add(playlist)
            db.session.commit()

            assert require_owned_playlist(playlist.id, owner.id).id == playlist.id

            with pytest.raises(NotFoundError):
                require_owned_playlist(playlist.id, other.id)
            with pytest.raises(NotFoundError):
                require_owned_playlist(playlist.id, None)
            with pytest.raises(NotFoundError):
                require_owned_playlist(99999, owner.id)
