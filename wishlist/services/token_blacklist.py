"""In-memory revocation registry for bearer tokens.

Bearer tokens are stateless, so logout records the token's JTI here until the
token would have expired anyway. The Auth Gate consults this registry on every
authenticated request, so lookups take no lock: a plain dict membership test
is atomic under the interpreter lock. Writes use ``dict.setdefault`` (also
atomic) and never change the expiry of an existing entry, which lets the sweep
delete expired keys without re-checking them under a lock.

Cleanup is amortized: ``revoke()`` starts a sweep when more than
``sweep_interval_seconds`` have passed since the last one. Concurrent callers
race on a compare-and-set of the last-sweep timestamp and exactly one of them
wins; a second guard makes any overlapping ``sweep()`` call a no-op.
"""

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 3600.0


class TokenBlacklist:
    """Concurrent JTI -> expiry registry with lazy expiry sweep.

    ``clock`` returns Unix seconds; tests inject a fake one to simulate time.
    """

    def __init__(
        self,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._entries: dict[str, float] = {}
        self._sweep_interval = sweep_interval_seconds
        self._clock = clock
        self._last_sweep = clock()
        # Guards only the compare-and-set of _last_sweep; readers never take it
        self._cas_lock = threading.Lock()
        # Held for the duration of a sweep; acquired non-blocking
        self._sweep_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def last_sweep(self) -> float:
        return self._last_sweep

    def revoke(self, token_id: str, expires_at: float) -> None:
        """Record a token as revoked until ``expires_at`` (Unix seconds).

        Idempotent: revoking an already revoked token is a no-op.
        """
        self._entries.setdefault(token_id, expires_at)

        observed = self._last_sweep
        now = self._clock()
        if now - observed > self._sweep_interval and self._claim_sweep(observed, now):
            self.sweep()

    def is_revoked(self, token_id: str) -> bool:
        """Check whether a token has been revoked."""
        return token_id in self._entries

    def sweep(self) -> int:
        """Remove every entry whose expiry has passed. Returns count removed.

        If another sweep is already running this returns 0 immediately.
        """
        if not self._sweep_lock.acquire(blocking=False):
            return 0
        try:
            now = self._clock()
            # dict.copy() is atomic, so concurrent revoke() calls cannot break iteration
            expired = [jti for jti, exp in self._entries.copy().items() if exp < now]
            for jti in expired:
                self._entries.pop(jti, None)
            with self._cas_lock:
                if now > self._last_sweep:
                    self._last_sweep = now
        finally:
            self._sweep_lock.release()

        if expired:
            logger.info(f"Token blacklist sweep removed {len(expired)} expired entries")
        return len(expired)

    def _claim_sweep(self, observed: float, now: float) -> bool:
        """Compare-and-set the last-sweep time; True for the single winner."""
        with self._cas_lock:
            if self._last_sweep != observed:
                return False
            self._last_sweep = now
            return True
