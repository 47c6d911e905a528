"""LRU cache of verifying keys keyed by certificate URL."""

import threading
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, Optional

from loguru import logger

from ...models.verifying_key import VerifyingKey

# Number of certificates remembered
DEFAULT_CACHE_SIZE = 10

KeyLoader = Callable[[str], Awaitable[VerifyingKey]]


class CertificateCache:
    """
    Thread-safe, bounded LRU cache mapping certificate URL to VerifyingKey.

    URLs are matched exactly, without normalization. Only successfully
    loaded keys are stored; load failures propagate and leave no entry.

    The lock is never held while a certificate is being downloaded, so two
    concurrent misses for the same URL can both fetch. The second insert
    replaces the first with an equivalent key.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_SIZE):
        """
        Initialize certificate cache.

        Args:
            capacity: Maximum number of keys kept in memory
        """
        if capacity < 1:
            raise ValueError("Certificate cache capacity must be at least 1")

        self._entries: OrderedDict[str, VerifyingKey] = OrderedDict()
        self._lock = threading.Lock()
        self._capacity = capacity
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        """Maximum number of entries."""
        return self._capacity

    def get(self, cert_url: str) -> Optional[VerifyingKey]:
        """
        Look up a key and mark it most recently used.

        Args:
            cert_url: Certificate URL

        Returns:
            Cached key or None on a miss
        """
        with self._lock:
            key = self._entries.get(cert_url)
            if key is None:
                self._misses += 1
                return None
            self._entries.move_to_end(cert_url)
            self._hits += 1
            return key

    def put(self, cert_url: str, key: VerifyingKey) -> None:
        """
        Insert or replace a key, evicting the least recently used entry when full.

        Args:
            cert_url: Certificate URL the key was loaded from
            key: Verifying key extracted from that certificate
        """
        with self._lock:
            self._entries[cert_url] = key
            self._entries.move_to_end(cert_url)

            while len(self._entries) > self._capacity:
                evicted_url, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted certificate key for {evicted_url}")

    async def get_or_load(self, cert_url: str, loader: KeyLoader) -> VerifyingKey:
        """
        Return the cached key for cert_url, loading it on a miss.

        Args:
            cert_url: Certificate URL
            loader: Coroutine function producing the key for a URL

        Returns:
            Verifying key for cert_url

        Raises:
            CertificateError: Whatever the loader raises; nothing is cached
        """
        key = self.get(cert_url)
        if key is not None:
            return key

        # Lock released while loading
        key = await loader(cert_url)
        self.put(cert_url, key)
        return key

    def invalidate(self, cert_url: str) -> bool:
        """
        Drop the entry for cert_url.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            return self._entries.pop(cert_url, None) is not None

    def clear(self) -> int:
        """
        Remove all entries.

        Returns:
            Number of entries cleared
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            logger.info(f"Certificate cache cleared ({count} entries)")
            return count

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, cert_url: object) -> bool:
        with self._lock:
            return cert_url in self._entries
