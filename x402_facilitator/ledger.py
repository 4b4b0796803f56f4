"""Replay protection: the set of authorization nonces already settled."""

from __future__ import annotations

import logging
import threading

from .mechanisms.evm.utils import normalize_nonce

logger = logging.getLogger(__name__)


class NonceLedger:
    """Thread-safe record of consumed nonces.

    Every read and write goes through one lock, so a check-and-insert by
    ``try_consume`` is atomic with respect to concurrent settlements.

    Each entry keeps the ``valid_before`` of the authorization that consumed
    it. Once that time has passed the authorization is rejected as expired
    anyway, so ``prune`` can drop the entry. A caller holding an older clock
    reading could still see such an authorization as unexpired, so after a
    prune ``try_consume`` refuses anything expiring before the pruning time.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, int | None] = {}
        self._pruned_before: int | None = None

    def contains(self, nonce: str) -> bool:
        key = normalize_nonce(nonce)
        with self._lock:
            return key in self._entries

    def try_consume(self, nonce: str, expires_at: int | None = None) -> bool:
        """Consume a nonce if it has not been consumed yet.

        Args:
            nonce: bytes32 hex nonce.
            expires_at: Unix time after which the entry may be pruned. None
                keeps it for the lifetime of the ledger.

        Returns:
            True if this call consumed the nonce, False if it already was
            or if its entry could have been pruned.
        """
        key = normalize_nonce(nonce)
        with self._lock:
            if key in self._entries:
                return False
            pruned_before = self._pruned_before
            if expires_at is None or pruned_before is None or expires_at >= pruned_before:
                self._entries[key] = expires_at
                return True

        # Not a replay. The caller clock is behind the last prune.
        logger.warning(
            f"Refused nonce {key}: expires at {expires_at}, before prune time {pruned_before}"
        )
        return False

    def consume(self, nonce: str, expires_at: int | None = None) -> None:
        """Consume a nonce. Consuming an already consumed nonce is a no-op."""
        self.try_consume(nonce, expires_at)

    def prune(self, now: int) -> int:
        """Drop entries whose expiry is before ``now``.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            expired = [
                key
                for key, expires_at in self._entries.items()
                if expires_at is not None and expires_at < now
            ]
            for key in expired:
                del self._entries[key]
            if self._pruned_before is None or now > self._pruned_before:
                self._pruned_before = now

        if expired:
            logger.debug(f"Pruned {len(expired)} expired nonces")
        return len(expired)

    def __contains__(self, nonce: object) -> bool:
        return isinstance(nonce, str) and self.contains(nonce)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
