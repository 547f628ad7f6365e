# apps/domain/tests/test_tag_service.py
"""
Unit tests for TagService against the in-memory repositories
"""
from uuid import uuid4

import pytest

from apps.domain.models import ConflictError, NotFoundError, ValidationError
from apps.domain.services.tag_service import DEFAULT_TAGS
from apps.infrastructure.cache import TaggedCache
from apps.infrastructure.container import (
    create_prompt_service,
    create_repositories,
    create_tag_service,
)

OWNER = 1
STRANGER = 2


class FakeClock:
    def __init__(self, now=1_000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestTagService:
    def setup_method(self):
        self.clock = FakeClock()
        self.cache = TaggedCache(clock=self.clock)
        self.repositories = create_repositories(use_inmemory=True)
        self.tags = create_tag_service(repositories=self.repositories, cache=self.cache)
        self.prompts = create_prompt_service(repositories=self.repositories, cache=self.cache)
        self.prompt = self.prompts.create_prompt(OWNER, title="Launch email")

    def test_add_same_tag_twice_leaves_one_association(self):
        self.tags.add_tag_to_prompt(OWNER, self.prompt.id, "Marketing")
        prompt = self.tags.add_tag_to_prompt(OWNER, self.prompt.id, "Marketing")

        assert prompt.tag_names == ["Marketing"]
        assert self.repositories["tags"].count() == 1

    def test_add_tag_trims_name(self):
        prompt = self.tags.add_tag_to_prompt(OWNER, self.prompt.id, "  Marketing  ")

        assert prompt.tag_names == ["Marketing"]

    @pytest.mark.parametrize("name", ["", "   ", "x" * 51])
    def test_add_tag_rejects_bad_names(self, name):
        with pytest.raises(ValidationError):
            self.tags.add_tag_to_prompt(OWNER, self.prompt.id, name)

    def test_add_tag_to_foreign_prompt(self):
        with pytest.raises(NotFoundError):
            self.tags.add_tag_to_prompt(STRANGER, self.prompt.id, "Marketing")

    def test_remove_unattached_tag_is_noop(self):
        self.tags.create_tag("Unused")

        prompt = self.tags.remove_tag_from_prompt(OWNER, self.prompt.id, "Unused")

        assert prompt.tags == []
        assert self.tags.get_tags_data()[0].name == "Unused"

    def test_remove_unknown_tag_is_noop(self):
        prompt = self.tags.remove_tag_from_prompt(OWNER, self.prompt.id, "Missing")

        assert prompt.tags == []

    def test_listing_reflects_association_immediately(self):
        assert self.tags.get_tags_data() == []

        self.tags.add_tag_to_prompt(OWNER, self.prompt.id, "Marketing")

        [summary] = self.tags.get_tags_data()
        assert summary.name == "Marketing"
        assert summary.prompt_count == 1

    def test_rename_is_visible_immediately(self):
        tag = self.tags.create_tag("Old")
        self.tags.get_tags_data()

        self.tags.update_tag(tag.id, name="New")

        assert [t.name for t in self.tags.get_tags_data()] == ["New"]

    def test_unannounced_write_is_stale_until_ttl(self):
        tag = self.tags.create_tag("Old")
        self.tags.get_tags_data()

        # Write behind the service's back, without invalidation
        stored = self.repositories["tags"].get(tag.id)
        stored.name = "New"
        self.repositories["tags"].save(stored)

        self.clock.now += 299
        assert [t.name for t in self.tags.get_tags_data()] == ["Old"]

        self.clock.now += 2
        assert [t.name for t in self.tags.get_tags_data()] == ["New"]

    def test_create_existing_returns_same_tag(self):
        first = self.tags.create_tag("Education", "Teaching")
        second = self.tags.create_tag("Education", "Other")

        assert first.id == second.id
        assert second.description == "Teaching"

    def test_rename_conflict(self):
        self.tags.create_tag("Taken")
        tag = self.tags.create_tag("Free")

        with pytest.raises(ConflictError):
            self.tags.update_tag(tag.id, name="Taken")

    def test_rename_to_own_name_is_allowed(self):
        tag = self.tags.create_tag("Same")

        assert self.tags.update_tag(tag.id, name="Same", description="d").description == "d"

    def test_delete_tag_detaches(self):
        self.tags.add_tag_to_prompt(OWNER, self.prompt.id, "Doomed")
        tag = self.repositories["tags"].get_by_name("Doomed")

        self.tags.delete_tag(tag.id)

        assert self.prompts.get_prompt(OWNER, self.prompt.id).tags == []
        assert self.tags.get_tags_data() == []

    def test_delete_unknown_tag(self):
        with pytest.raises(NotFoundError):
            self.tags.delete_tag(uuid4())

    def test_search_tags(self):
        for name in ["Marketing", "Markdown", "Debugging"]:
            self.tags.create_tag(name)

        assert [t.name for t in self.tags.search_tags("MARK")] == ["Markdown", "Marketing"]
        assert self.tags.search_tags("  ") == []
        assert len(self.tags.search_tags("mark", limit=1)) == 1

    def test_popular_tags(self):
        other = self.prompts.create_prompt(OWNER, title="Second")
        self.tags.add_tag_to_prompt(OWNER, self.prompt.id, "Common")
        self.tags.add_tag_to_prompt(OWNER, other.id, "Common")
        self.tags.add_tag_to_prompt(OWNER, other.id, "Rare")

        assert [t.name for t in self.tags.get_popular_tags(1)] == ["Common"]

    def test_tags_with_prompts_are_owner_scoped(self):
        theirs = self.prompts.create_prompt(STRANGER, title="Theirs")
        self.tags.add_tag_to_prompt(OWNER, self.prompt.id, "Shared")
        self.tags.add_tag_to_prompt(STRANGER, theirs.id, "Shared")

        [(summary, prompts)] = self.tags.get_tags_with_prompts(OWNER)

        assert summary.prompt_count == 2
        assert [p.title for p in prompts] == ["Launch email"]

    def test_seed_default_tags_is_an_upsert(self):
        self.tags.create_tag("ChatGPT", "stale")

        created, updated = self.tags.seed_default_tags()

        assert (created, updated) == (len(DEFAULT_TAGS) - 1, 1)
        assert self.repositories["tags"].get_by_name("ChatGPT").description != "stale"
        assert self.tags.seed_default_tags() == (0, len(DEFAULT_TAGS))
