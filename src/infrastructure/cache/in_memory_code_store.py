"""
In-process implementation of CodeStore.

Codes live in a dict owned by the application process. Nothing survives a
restart and nothing is shared between processes.

Decision: Lock striping over a single global lock. Each key hashes onto one
of N locks, so requests for different recipients almost never wait on each
other while every operation on one recipient is serialized.
"""

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from src.domain.code_store import CodeStore
from src.domain.exceptions import InvalidOrExpiredCodeError
from src.domain.verification_code import VerificationCode

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class InMemoryCodeStore(CodeStore):
    """
    Thread-safe TTL mapping from recipient key to VerificationCode.

    Expiry is enforced on every read. purge_expired() does active eviction
    so abandoned codes don't accumulate.
    """

    DEFAULT_LOCK_STRIPES = 64

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        lock_stripes: int = DEFAULT_LOCK_STRIPES,
    ):
        """
        Initialize the store.

        Args:
            clock: Returns the current UTC time (injected for testing)
            lock_stripes: Number of locks keys are spread over
        """
        if lock_stripes < 1:
            raise ValueError("lock_stripes must be at least 1")

        self._clock = clock or _utc_now
        self._records: dict[str, VerificationCode] = {}
        self._locks = [threading.Lock() for _ in range(lock_stripes)]

    def _lock_for(self, key: str) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    def _live_record(self, key: str, now: datetime) -> VerificationCode | None:
        # Caller must hold the key's lock
        record = self._records.get(key)
        if record is None:
            return None

        if record.is_expired(now):
            del self._records[key]
            return None

        return record

    def put(self, key: str, code: str, ttl: timedelta) -> None:
        record = VerificationCode(code=code, created_at=self._clock(), expires_in=ttl)
        with self._lock_for(key):
            replaced = key in self._records
            self._records[key] = record
        logger.debug(f"Stored verification code for {key} (replaced: {replaced})")

    def try_get(self, key: str) -> str | None:
        with self._lock_for(key):
            record = self._live_record(key, self._clock())
            return record.code if record else None

    def remove(self, key: str) -> None:
        with self._lock_for(key):
            self._records.pop(key, None)

    def consume(self, key: str, code: str) -> None:
        with self._lock_for(key):
            now = self._clock()
            record = self._live_record(key, now)
            if record is None:
                raise InvalidOrExpiredCodeError()

            record.verify(code, current_time=now)
            del self._records[key]
        logger.debug(f"Consumed verification code for {key}")

    def purge_expired(self) -> int:
        now = self._clock()
        evicted = 0
        for key in list(self._records.keys()):
            with self._lock_for(key):
                record = self._records.get(key)
                if record is not None and record.is_expired(now):
                    del self._records[key]
                    evicted += 1

        if evicted:
            logger.info(f"Evicted {evicted} expired verification code(s)")
        return evicted

    def __len__(self) -> int:
        """Number of resident records, expired or not."""
        return len(self._records)
