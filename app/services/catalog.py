"""
Catalog Service - Spotify Web API access via the client-credentials grant.

One bearer token is cached per process. It is fetched on the first catalog
call, reused until its expiry instant, and replaced on the next call after
that. Two requests racing past the expiry may both refresh; the last write
wins and both tokens are valid, so no lock is taken.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

import requests
from requests.utils import quote

from app.exceptions import CatalogError, UpstreamAuthError

logger = logging.getLogger(__name__)

SEARCH_TYPES = frozenset([
    'album', 'artist', 'playlist', 'track', 'show', 'episode', 'audiobook',
])

MIN_LIMIT = 1
MAX_LIMIT = 50


# ─────────────────────────────────────────────
# Token cache
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class AccessToken:
    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenCache:
    """
    Size-one TTL cache for the catalog access token.

    The cache owns the only reference to the live token. ``store`` swaps the
    whole value; readers never see a half-written token.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._token: Optional[AccessToken] = None

    def now(self) -> float:
        return self._clock()

    def get(self) -> Optional[str]:
        """Return the cached token string, or None if absent or expired."""
        token = self._token
        if token is not None and token.is_valid(self._clock()):
            return token.value
        return None

    def store(self, value: str, lifetime_s: float) -> AccessToken:
        token = AccessToken(value=value, expires_at=self._clock() + lifetime_s)
        self._token = token
        return token

    def clear(self):
        self._token = None

    @property
    def expires_at(self) -> Optional[float]:
        return self._token.expires_at if self._token else None


# ─────────────────────────────────────────────
# Retry policy
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class RetryPolicy:
    """How many times a transport failure is retried. Zero means fail fast."""
    max_retries: int = 0

    @property
    def attempts(self) -> int:
        return 1 + max(0, self.max_retries)


NO_RETRY = RetryPolicy(max_retries=0)


# ─────────────────────────────────────────────
# Client
# ─────────────────────────────────────────────

class CatalogClient:
    """
    Thin pass-through client for the Spotify Web API.

    Responses are returned as the decoded upstream JSON, unmodified.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_url: str = 'https://accounts.spotify.com/api/token',
        api_url: str = 'https://api.spotify.com/v1',
        timeout: float = 10.0,
        retry_policy: RetryPolicy = NO_RETRY,
        session: Optional[requests.Session] = None,
        token_cache: Optional[TokenCache] = None,
    ):
        self.client_id = client_id or ''
        self.client_secret = client_secret or ''
        self.token_url = token_url
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.retry_policy = retry_policy
        self._session = session or requests.Session()
        self.token_cache = token_cache or TokenCache()

    @classmethod
    def from_config(cls, cfg) -> 'CatalogClient':
        return cls(
            client_id=cfg.SPOTIFY_CLIENT_ID,
            client_secret=cfg.SPOTIFY_CLIENT_SECRET,
            token_url=cfg.SPOTIFY_TOKEN_URL,
            api_url=cfg.SPOTIFY_API_URL,
            timeout=cfg.CATALOG_TIMEOUT,
            retry_policy=RetryPolicy(max_retries=cfg.CATALOG_MAX_RETRIES),
        )

    # ── transport ──

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        """Issue one request, retrying transport failures per the policy."""
        attempts = self.retry_policy.attempts
        for attempt in range(1, attempts + 1):
            try:
                return self._session.request(method, url, timeout=self.timeout, **kwargs)
            except requests.RequestException as e:
                if attempt >= attempts:
                    raise
                logger.warning('Catalog request %s %s failed (attempt %d/%d): %s',
                               method, url, attempt, attempts, e)

    # ── token ──

    def get_token(self) -> str:
        """Return a valid access token, exchanging credentials if needed."""
        cached = self.token_cache.get()
        if cached:
            return cached
        return self._fetch_token()

    def _fetch_token(self) -> str:
        if not self.client_id or not self.client_secret:
            logger.error('Spotify token error: SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET not configured')
            raise UpstreamAuthError()

        try:
            resp = self._send(
                'POST',
                self.token_url,
                data={'grant_type': 'client_credentials'},
                auth=(self.client_id, self.client_secret),
            )
        except requests.RequestException as e:
            logger.error('Spotify token error: %s', e)
            raise UpstreamAuthError() from e

        if not resp.ok:
            details = _error_body(resp)
            logger.error('Spotify token error: %s %s', resp.status_code, details)
            raise UpstreamAuthError(upstream_status=resp.status_code, details=details)

        try:
            body = resp.json()
            value = body['access_token']
            lifetime = float(body.get('expires_in', 3600))
        except (ValueError, KeyError, TypeError) as e:
            logger.error('Spotify token error: malformed token response (%s)', e)
            raise UpstreamAuthError(upstream_status=resp.status_code) from e

        self.token_cache.store(value, lifetime)
        logger.info('Fetched Spotify access token (expires in %ds)', int(lifetime))
        return value

    # ── catalog ──

    def _get(self, path: str, params: Optional[Dict] = None) -> Dict:
        token = self.get_token()
        url = f'{self.api_url}/{path.lstrip("/")}'
        try:
            resp = self._send(
                'GET',
                url,
                headers={'Authorization': f'Bearer {token}'},
                params={k: v for k, v in (params or {}).items() if v is not None},
            )
        except requests.RequestException as e:
            logger.warning('Catalog request GET %s failed: %s', path, e)
            raise CatalogError('Catalog request failed') from e

        if not resp.ok:
            details = _error_body(resp)
            logger.warning('Catalog request GET %s returned %s: %s', path, resp.status_code, details)
            raise CatalogError('Catalog request failed',
                               upstream_status=resp.status_code, details=details)

        try:
            return resp.json()
        except ValueError as e:
            raise CatalogError('Catalog returned an invalid response',
                               upstream_status=resp.status_code) from e

    def search(self, query: str, search_type: str = 'track', limit: int = 20,
               market: Optional[str] = None, offset: Optional[int] = None) -> Dict:
        return self._get('search', {
            'q': query,
            'type': search_type,
            'limit': limit,
            'market': market,
            'offset': offset,
        })

    def get_track(self, track_id: str, market: Optional[str] = None) -> Dict:
        return self._get(f'tracks/{_segment(track_id)}', {'market': market})

    def get_album(self, album_id: str, market: Optional[str] = None) -> Dict:
        return self._get(f'albums/{_segment(album_id)}', {'market': market})

    def get_artist(self, artist_id: str) -> Dict:
        return self._get(f'artists/{_segment(artist_id)}')

    def get_artist_top_tracks(self, artist_id: str, market: str = 'US') -> Dict:
        return self._get(f'artists/{_segment(artist_id)}/top-tracks', {'market': market})

    # The upstream browse/recommendation endpoints are not used; these are
    # fixed searches standing in for them.

    def recommendations(self, limit: int = 20) -> Dict:
        year = datetime.utcnow().year
        data = self.search(f'year:{year}', 'track', limit)
        return {'tracks': (data.get('tracks') or {}).get('items', [])}

    def featured_playlists(self, limit: int = 10) -> Dict:
        data = self.search('hits', 'playlist', limit)
        return {'playlists': data.get('playlists')}

    def new_releases(self, limit: int = 20) -> Dict:
        data = self.search('tag:new', 'album', limit)
        return {'albums': data.get('albums')}


def _error_body(resp):
    """Decoded upstream error payload, or raw text when it is not JSON."""
    try:
        return resp.json()
    except ValueError:
        return (resp.text or '')[:500] or None


def _segment(value) -> str:
    """Encode a caller-supplied id as exactly one URL path segment."""
    encoded = quote(str(value), safe='')
    if encoded in ('.', '..'):
        encoded = encoded.replace('.', '%2E')
    return encoded


def parse_search_type(raw: Optional[str]) -> str:
    """Validate a comma-separated search type list. Raises ValueError."""
    value = (raw or 'track').strip()
    parts = [p.strip() for p in value.split(',') if p.strip()]
    if not parts or any(p not in SEARCH_TYPES for p in parts):
        raise ValueError(f'Invalid search type: {value}')
    return ','.join(parts)


def parse_limit(raw, default: int) -> int:
    """Validate a result limit in 1..50. Raises ValueError."""
    if raw is None or raw == '':
        return default
    limit = int(raw)
    if limit < MIN_LIMIT or limit > MAX_LIMIT:
        raise ValueError(f'limit must be between {MIN_LIMIT} and {MAX_LIMIT}')
    return limit
