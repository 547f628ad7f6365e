# apps/infrastructure/test_cache.py
"""
Tests for TaggedCache
"""
import pytest
from django.core.cache import caches

from apps.infrastructure.cache import TaggedCache


class FakeClock:
    def __init__(self, now=1_000.0):
        self.now = now

    def __call__(self):
        return self.now


class Source:
    """Counts how often the value is computed"""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value


class TestTaggedCache:
    def setup_method(self):
        self.clock = FakeClock()
        self.cache = TaggedCache(backend=caches["default"], clock=self.clock)

    def test_computes_once_while_fresh(self):
        source = Source(["a"])

        assert self.cache.get_or_compute("k", source, ttl=300) == ["a"]
        assert self.cache.get_or_compute("k", source, ttl=300) == ["a"]
        assert source.calls == 1

    def test_stale_for_at_most_ttl_without_invalidation(self):
        source = Source("old")
        self.cache.get_or_compute("k", source, ttl=300, tags=["tags"])
        source.value = "new"

        self.clock.now += 299.9
        assert self.cache.get_or_compute("k", source, ttl=300, tags=["tags"]) == "old"

        self.clock.now += 0.1
        assert self.cache.get_or_compute("k", source, ttl=300, tags=["tags"]) == "new"

    def test_invalidate_refreshes_next_read(self):
        source = Source("old")
        self.cache.get_or_compute("k", source, ttl=300, tags=["tags"])
        source.value = "new"

        self.cache.invalidate("tags")

        assert self.cache.get_or_compute("k", source, ttl=300, tags=["tags"]) == "new"
        assert source.calls == 2

    def test_invalidate_only_touches_matching_tags(self):
        tagged = Source(1)
        other = Source(2)
        self.cache.get_or_compute("tagged", tagged, ttl=300, tags=["tags"])
        self.cache.get_or_compute("other", other, ttl=300, tags=["prompts"])

        self.cache.invalidate("tags")
        self.cache.get_or_compute("tagged", tagged, ttl=300, tags=["tags"])
        self.cache.get_or_compute("other", other, ttl=300, tags=["prompts"])

        assert (tagged.calls, other.calls) == (2, 1)

    def test_invalidation_during_compute_leaves_entry_stale(self):
        def compute():
            self.cache.invalidate("tags")
            return "racy"

        self.cache.get_or_compute("k", compute, ttl=300, tags=["tags"])

        source = Source("fresh")
        assert self.cache.get_or_compute("k", source, ttl=300, tags=["tags"]) == "fresh"

    def test_delete(self):
        source = Source("v")
        self.cache.get_or_compute("k", source, ttl=300)

        self.cache.delete("k")
        self.cache.get_or_compute("k", source, ttl=300)

        assert source.calls == 2

    def test_empty_values_are_cached(self):
        source = Source([])

        self.cache.get_or_compute("k", source, ttl=300)
        self.cache.get_or_compute("k", source, ttl=300)

        assert source.calls == 1

    @pytest.mark.django_db
    def test_read_before_commit_does_not_outlive_commit(self, django_capture_on_commit_callbacks):
        source = Source("old")
        self.cache.get_or_compute("k", source, ttl=300, tags=["tags"])

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            self.cache.invalidate("tags")
            # Another request reads the rows before this transaction commits
            assert self.cache.get_or_compute("k", source, ttl=300, tags=["tags"]) == "old"
            source.value = "new"

        assert len(callbacks) == 1
        assert self.cache.get_or_compute("k", source, ttl=300, tags=["tags"]) == "new"
