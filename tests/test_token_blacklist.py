"""Tests for the in-memory token blacklist."""

import threading
from concurrent.futures import ThreadPoolExecutor

from wishlist.services.token_blacklist import TokenBlacklist


class FakeClock:
    """Manually advanced Unix-seconds clock."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestRevocation:
    """Tests for revoke / is_revoked."""

    def test_unknown_token_is_not_revoked(self):
        blacklist = TokenBlacklist()
        assert blacklist.is_revoked("nope") is False

    def test_revoked_token_is_reported(self):
        clock = FakeClock()
        blacklist = TokenBlacklist(clock=clock)
        blacklist.revoke("jti-1", clock.now + 60)
        assert blacklist.is_revoked("jti-1") is True
        assert blacklist.is_revoked("jti-2") is False

    def test_revoke_is_idempotent(self):
        """Revoking twice keeps one entry and the original expiry."""
        clock = FakeClock()
        blacklist = TokenBlacklist(clock=clock)
        blacklist.revoke("jti-1", clock.now + 60)
        blacklist.revoke("jti-1", clock.now + 10_000)
        assert len(blacklist) == 1

        clock.advance(61)
        assert blacklist.sweep() == 1
        assert blacklist.is_revoked("jti-1") is False


class TestSweep:
    """Tests for expiry sweeping."""

    def test_entry_survives_until_expiry(self):
        clock = FakeClock()
        blacklist = TokenBlacklist(clock=clock)
        blacklist.revoke("jti-1", clock.now + 60)

        clock.advance(60)
        assert blacklist.sweep() == 0
        assert blacklist.is_revoked("jti-1") is True

    def test_sweep_removes_expired_entries_only(self):
        clock = FakeClock()
        blacklist = TokenBlacklist(clock=clock)
        blacklist.revoke("short", clock.now + 10)
        blacklist.revoke("long", clock.now + 1000)

        clock.advance(11)
        assert blacklist.sweep() == 1
        assert blacklist.is_revoked("short") is False
        assert blacklist.is_revoked("long") is True
        assert len(blacklist) == 1

    def test_memory_returns_to_baseline(self):
        clock = FakeClock()
        blacklist = TokenBlacklist(clock=clock)
        for i in range(100):
            blacklist.revoke(f"jti-{i}", clock.now + 5)

        clock.advance(6)
        blacklist.sweep()
        assert len(blacklist) == 0

    def test_sweep_updates_last_sweep(self):
        clock = FakeClock()
        blacklist = TokenBlacklist(clock=clock)
        clock.advance(30)
        blacklist.sweep()
        assert blacklist.last_sweep == clock.now

    def test_overlapping_sweep_is_noop(self):
        """A sweep that finds another one running returns without work."""
        clock = FakeClock()
        blacklist = TokenBlacklist(clock=clock)
        blacklist.revoke("jti-1", clock.now + 1)
        clock.advance(2)

        blacklist._sweep_lock.acquire()
        try:
            assert blacklist.sweep() == 0
            assert blacklist.is_revoked("jti-1") is True
        finally:
            blacklist._sweep_lock.release()

        assert blacklist.sweep() == 1


class TestOpportunisticSweep:
    """Tests for the sweep triggered from revoke()."""

    def test_revoke_within_interval_does_not_sweep(self):
        clock = FakeClock()
        blacklist = TokenBlacklist(sweep_interval_seconds=3600, clock=clock)
        blacklist.revoke("old", clock.now + 10)

        clock.advance(100)
        blacklist.revoke("new", clock.now + 10)
        assert blacklist.is_revoked("old") is True

    def test_revoke_after_interval_sweeps(self):
        clock = FakeClock()
        blacklist = TokenBlacklist(sweep_interval_seconds=3600, clock=clock)
        blacklist.revoke("old", clock.now + 10)

        clock.advance(3601)
        blacklist.revoke("new", clock.now + 10)
        assert blacklist.is_revoked("old") is False
        assert blacklist.is_revoked("new") is True
        assert blacklist.last_sweep == clock.now

    def test_only_one_caller_claims_the_sweep(self):
        clock = FakeClock()
        blacklist = TokenBlacklist(sweep_interval_seconds=60, clock=clock)
        observed = blacklist.last_sweep
        clock.advance(61)

        assert blacklist._claim_sweep(observed, clock.now) is True
        assert blacklist._claim_sweep(observed, clock.now) is False


class TestConcurrency:
    """Concurrent revoke / is_revoked / sweep from many threads."""

    def test_no_revocation_is_lost(self):
        blacklist = TokenBlacklist(sweep_interval_seconds=0)
        far_future = 4_000_000_000.0
        start = threading.Barrier(8)

        def worker(n: int) -> list[str]:
            start.wait()
            ids = []
            for i in range(500):
                jti = f"{n}-{i}"
                blacklist.revoke(jti, far_future)
                blacklist.sweep()
                ids.append(jti)
            return ids

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(worker, range(8)))

        revoked = [jti for ids in results for jti in ids]
        assert all(blacklist.is_revoked(jti) for jti in revoked)
        assert len(blacklist) == 8 * 500

    def test_expired_entries_removed_under_contention(self):
        clock = FakeClock()
        blacklist = TokenBlacklist(sweep_interval_seconds=0, clock=clock)
        for i in range(1000):
            blacklist.revoke(f"expired-{i}", clock.now + 1)
        clock.advance(2)

        def worker(n: int) -> None:
            for i in range(100):
                blacklist.revoke(f"live-{n}-{i}", clock.now + 1000)
                blacklist.sweep()

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(worker, range(8)))

        assert len(blacklist) == 800
        assert not any(blacklist.is_revoked(f"expired-{i}") for i in range(1000))
