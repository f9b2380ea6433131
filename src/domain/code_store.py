"""
Code store interface (Port).

This interface defines the contract for holding issued verification codes.
Following Hexagonal Architecture, the domain defines the interface,
and the infrastructure layer provides the implementation.
"""

from abc import ABC, abstractmethod
from datetime import timedelta


class CodeStore(ABC):
    """
    Abstract time-to-live mapping from recipient key to current code.

    This is a "port" in Hexagonal Architecture terminology.

    Contract:
    - At most one live code per key; put() replaces any previous one.
    - A code is never returned at or after its expiry, even if the
      implementation hasn't physically evicted it yet.
    - Operations on the same key are linearizable. Operations on
      different keys must not serialize behind each other.
    """

    @abstractmethod
    def put(self, key: str, code: str, ttl: timedelta) -> None:
        """
        Store the code for a key, replacing any previous record.

        Args:
            key: Normalized recipient key
            code: Code value
            ttl: How long the code stays valid from now
        """
        pass

    @abstractmethod
    def try_get(self, key: str) -> str | None:
        """
        Look up the live code for a key.

        Args:
            key: Normalized recipient key

        Returns:
            The code if a live record exists, None otherwise
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Delete any record for a key. No error if absent.

        Args:
            key: Normalized recipient key
        """
        pass

    @abstractmethod
    def consume(self, key: str, code: str) -> None:
        """
        Atomically look up, compare and remove the record for a key.

        Args:
            key: Normalized recipient key
            code: Code submitted by the client

        Raises:
            InvalidOrExpiredCodeError: If there is no live record or the code
                doesn't match. The record is left untouched in that case.
        """
        pass

    @abstractmethod
    def purge_expired(self) -> int:
        """
        Evict every expired record.

        Returns:
            Number of records evicted
        """
        pass
