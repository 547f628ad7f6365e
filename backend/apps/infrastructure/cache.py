# apps/infrastructure/cache.py
"""
Tagged Cache

Read-through cache on top of Django's cache framework with tag-based
invalidation.

Each tag owns a generation token. An entry records the tokens of its
tags when it is computed; invalidating a tag replaces its token, which
makes every entry recorded under the old token stale at once.
"""
import logging
import time
from typing import Any, Callable, Dict, Iterable, Optional
from uuid import uuid4

from django.db import transaction

logger = logging.getLogger(__name__)


class TaggedCache:
    """
    Cache with per-key TTL and tag invalidation

    Supports:
    - get-or-compute reads
    - Synchronous invalidation by tag
    - An injectable clock so expiry can be tested without sleeping
    """

    def __init__(
        self,
        backend=None,
        clock: Callable[[], float] = time.time,
        prefix: str = "tagged_cache:",
    ):
        """
        Args:
            backend: Django cache backend; defaults to caches["default"]
            clock: Returns the current time in seconds
            prefix: Namespace for entry and tag keys
        """
        if backend is None:
            from django.core.cache import caches
            backend = caches["default"]

        self._backend = backend
        self._clock = clock
        self._prefix = prefix

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Any],
        ttl: int,
        tags: Iterable[str] = (),
    ) -> Any:
        """
        Return a fresh cached value or compute and store a new one

        Tag tokens are read before computing, so an invalidation that lands
        while `compute` runs leaves the stored entry already stale.
        """
        tags = tuple(tags)
        entry = self._backend.get(self._entry_key(key))

        if entry is not None and self._is_fresh(entry):
            logger.debug(f"Cache hit for {key}")
            return entry["value"]

        tokens = {tag: self._token(tag) for tag in tags}
        value = compute()

        self._backend.set(
            self._entry_key(key),
            {
                "value": value,
                "expires_at": self._clock() + ttl,
                "tags": tokens,
            },
            timeout=ttl,
        )
        logger.debug(f"Cache miss for {key}, stored for {ttl}s under {tags}")
        return value

    def invalidate(self, *tags: str) -> None:
        """
        Expire every entry recorded under any of `tags`

        Inside a transaction the tokens rotate again on commit: a reader
        that recomputed from the pre-commit rows in between stored its
        entry under the first new token, and that entry must not outlive
        the commit.
        """
        if not tags:
            return

        self._rotate(tags)
        if transaction.get_connection().in_atomic_block:
            transaction.on_commit(lambda: self._rotate(tags))
        logger.info(f"Invalidated cache tags: {', '.join(tags)}")

    def delete(self, key: str) -> None:
        self._backend.delete(self._entry_key(key))

    def _rotate(self, tags) -> None:
        for tag in tags:
            self._backend.set(self._tag_key(tag), uuid4().hex, timeout=None)

    def _is_fresh(self, entry: Dict[str, Any]) -> bool:
        if entry.get("expires_at", 0) <= self._clock():
            return False

        for tag, token in entry.get("tags", {}).items():
            if self._backend.get(self._tag_key(tag)) != token:
                return False
        return True

    def _token(self, tag: str) -> Optional[str]:
        token = self._backend.get(self._tag_key(tag))
        if token is None:
            token = uuid4().hex
            # Another process may have set it first; keep theirs
            if not self._backend.add(self._tag_key(tag), token, timeout=None):
                token = self._backend.get(self._tag_key(tag))
        return token

    def _entry_key(self, key: str) -> str:
        return f"{self._prefix}entry:{key}"

    def _tag_key(self, tag: str) -> str:
        return f"{self._prefix}tag:{tag}"
