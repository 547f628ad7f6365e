# apps/domain/ports/cache.py

"""
Cache Port - Tagged read-through cache
"""

from typing import Any, Callable, Iterable, Protocol


class ITaggedCache(Protocol):
    """
    Read-through cache whose entries can be expired by tag

    Entries live for `ttl` seconds unless one of their tags is
    invalidated first. Invalidation is synchronous: the next read after
    `invalidate` returns recomputes.
    """

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Any],
        ttl: int,
        tags: Iterable[str] = (),
    ) -> Any:
        """
        Return the cached value for `key`, computing and storing it on a miss

        Args:
            key: Stable cache key
            compute: Zero-argument callable producing the value
            ttl: Lifetime in seconds
            tags: Invalidation tags recorded with the entry

        Returns:
            The cached or freshly computed value
        """
        ...

    def invalidate(self, *tags: str) -> None:
        """Expire every entry recorded under any of `tags`"""
        ...
