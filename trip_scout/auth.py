from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

import requests

from .errors import AuthError

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v1/security/oauth2/token"
EXPIRY_MARGIN = timedelta(seconds=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenSession:
    """
    OAuth2 client-credentials token cache shared by every marketplace call.

    Build one per process and hand it to the clients. The token/expiry
    pair is only read or written while holding ``lock``; the HTTP exchange
    itself runs outside it, so concurrent refreshes may overlap; the
    token that expires latest is the one kept.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str,
        *,
        timeout: float = 30.0,
        lock: Optional[threading.Lock] = None,
        clock: Callable[[], datetime] = _utcnow,
        margin: timedelta = EXPIRY_MARGIN,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = base_url.rstrip("/") + TOKEN_PATH
        self.timeout = timeout
        self.margin = margin
        self._lock = lock or threading.Lock()
        self._clock = clock
        self._access_token: Optional[str] = None
        self._expires_at: Optional[datetime] = None

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    # ──────────────────────────────────────────────────────────

    def _usable(self, now: datetime) -> bool:
        return (
            bool(self._access_token)
            and self._expires_at is not None
            and now < self._expires_at - self.margin
        )

    def is_valid(self) -> bool:
        with self._lock:
            return self._usable(self._clock())

    def acquire(self) -> str:
        """Return a bearer token, refreshing it when absent or about to expire."""
        with self._lock:
            if self._usable(self._clock()):
                return self._access_token  # type: ignore[return-value]
        return self.refresh()

    def refresh(self) -> str:
        issued_at = self._clock()
        token, expires_in = self._exchange()
        expires_at = issued_at + timedelta(seconds=expires_in)
        with self._lock:
            # an overlapping refresh may already have stored a longer-lived token
            if self._expires_at is None or expires_at > self._expires_at:
                self._access_token = token
                self._expires_at = expires_at
        logger.info("Marketplace token refreshed, valid for %ss", expires_in)
        return token

    def warm_up(self) -> bool:
        """Fetch a token eagerly; failures are logged, not raised."""
        if not self.configured:
            return False
        try:
            self.refresh()
        except AuthError as exc:
            logger.warning("Marketplace token pre-warm failed: %s", exc)
            return False
        return True

    def _exchange(self) -> Tuple[str, int]:
        if not self.configured:
            raise AuthError("marketplace credentials are not configured")

        try:
            resp = requests.post(
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AuthError(f"token request failed: {exc}") from exc

        if resp.status_code != 200:
            raise AuthError(
                f"token request failed ({resp.status_code}): {resp.text[:200]}"
            )

        try:
            payload = resp.json()
            token = payload["access_token"]
            expires_in = int(payload["expires_in"])
        except (ValueError, KeyError, TypeError) as exc:
            raise AuthError(f"failed to parse token response: {exc}") from exc
        if not isinstance(token, str) or not token:
            raise AuthError("token response carried an empty access_token")
        return token, expires_in


__all__ = ["TokenSession", "EXPIRY_MARGIN"]
