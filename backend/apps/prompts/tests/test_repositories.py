# apps/prompts/tests/test_repositories.py
"""
Tests for the Django ORM repositories
"""
import pytest

from apps.adapters.repositories.django_repos import (
    DjangoFolderRepository,
    DjangoPromptRepository,
    DjangoSharedPromptRepository,
    DjangoTagRepository,
    DjangoVersionRepository,
)
from apps.domain.models import (
    ConflictError,
    Folder,
    Prompt,
    PromptVersion,
    SharedPrompt,
    Tag,
)
from apps.prompts.models import PromptVersion as ORMVersion


@pytest.mark.django_db
class TestDjangoTagRepository:
    def setup_method(self):
        self.repo = DjangoTagRepository()

    def test_save_and_get(self):
        tag = self.repo.save(Tag(name="Education", description="Teaching"))

        loaded = self.repo.get(tag.id)
        assert loaded.name == "Education"
        assert loaded.description == "Teaching"

    def test_save_duplicate_name_conflicts(self):
        self.repo.save(Tag(name="Education"))

        with pytest.raises(ConflictError):
            self.repo.save(Tag(name="Education"))

    def test_get_or_create_is_idempotent(self):
        first = self.repo.get_or_create("Marketing")
        second = self.repo.get_or_create("Marketing", "ignored")

        assert first.id == second.id
        assert self.repo.count() == 1

    def test_delete_unknown_returns_false(self):
        assert self.repo.delete(Tag().id) is False


@pytest.mark.django_db
class TestDjangoPromptRepository:
    @pytest.fixture(autouse=True)
    def _repos(self, user, other_user):
        self.user = user
        self.other_user = other_user
        self.tags = DjangoTagRepository()
        self.repo = DjangoPromptRepository(tag_repo=self.tags)

    def _prompt(self, title, owner=None, **kwargs):
        owner = owner or self.user
        return self.repo.save(Prompt(owner_id=owner.id, title=title, **kwargs))

    def test_add_tag_twice_keeps_one_row(self):
        prompt = self._prompt("Tagged")
        tag = self.tags.get_or_create("AI")

        self.repo.add_tag(prompt.id, tag)
        self.repo.add_tag(prompt.id, tag)

        assert self.repo.get(prompt.id).tag_names == ["AI"]

    def test_search_does_not_duplicate_on_multiple_tag_hits(self):
        prompt = self._prompt("Writer")
        self.repo.add_tag(prompt.id, self.tags.get_or_create("copy"))
        self.repo.add_tag(prompt.id, self.tags.get_or_create("copywriting"))

        results = self.repo.search(self.user.id, "copy")

        assert [p.id for p in results] == [prompt.id]

    def test_search_is_owner_scoped(self):
        self._prompt("Shared word", owner=self.other_user)

        assert self.repo.search(self.user.id, "shared") == []

    def test_like_state_is_per_viewer(self):
        prompt = self._prompt("Liked")

        assert self.repo.toggle_like(prompt.id, self.user.id) is True

        mine = self.repo.get(prompt.id, viewer_id=self.user.id)
        theirs = self.repo.get(prompt.id, viewer_id=self.other_user.id)
        assert mine.like_count == theirs.like_count == 1
        assert mine.is_liked_by_user is True
        assert theirs.is_liked_by_user is False

    def test_max_order_per_folder(self):
        assert self.repo.max_order(self.user.id, None) == -1

        self._prompt("First", order=0)
        self._prompt("Second", order=3)

        assert self.repo.max_order(self.user.id, None) == 3


@pytest.mark.django_db
class TestDjangoVersionRepository:
    @pytest.fixture(autouse=True)
    def _repos(self, user):
        self.prompt = DjangoPromptRepository().save(Prompt(owner_id=user.id, title="P"))
        self.repo = DjangoVersionRepository()

    def test_newest_first(self):
        for label in ["1.0", "1.1", "2.0"]:
            self.repo.add(PromptVersion(prompt_id=self.prompt.id, content=label, version=label))

        assert [v.version for v in self.repo.list_by_prompt(self.prompt.id)] == ["2.0", "1.1", "1.0"]
        assert self.repo.latest(self.prompt.id).version == "2.0"

    def test_versions_are_append_only(self):
        version = self.repo.add(PromptVersion(prompt_id=self.prompt.id, content="x"))

        orm_version = ORMVersion.objects.get(id=version.id)
        orm_version.content = "changed"
        with pytest.raises(ValueError):
            orm_version.save()


@pytest.mark.django_db
class TestDjangoFolderRepository:
    def test_parent_delete_cascades(self, user):
        repo = DjangoFolderRepository()
        parent = repo.save(Folder(owner_id=user.id, name="Parent"))
        child = repo.save(Folder(owner_id=user.id, name="Child", parent_id=parent.id))

        assert repo.delete(parent.id) is True
        assert repo.get(child.id) is None


@pytest.mark.django_db
class TestDjangoSharedPromptRepository:
    @pytest.fixture(autouse=True)
    def _repos(self, user, other_user):
        self.user = user
        self.other_user = other_user
        self.tags = DjangoTagRepository()
        self.prompts = DjangoPromptRepository(tag_repo=self.tags)
        self.repo = DjangoSharedPromptRepository(tag_repo=self.tags)

    def _publish(self, title, content=""):
        prompt = self.prompts.save(Prompt(owner_id=self.user.id, title=title, content=content))
        return self.repo.save(
            SharedPrompt(prompt_id=prompt.id, author_id=self.user.id, title=title, content=content)
        )

    def test_tags_come_from_source_prompt(self):
        shared = self._publish("Summarizer")
        self.prompts.add_tag(shared.prompt_id, self.tags.get_or_create("Writing"))

        loaded = self.repo.get(shared.id)

        assert loaded.tag_names == ["Writing"]
        assert loaded.author_name == "alice"

    def test_publishing_same_prompt_twice_conflicts(self):
        shared = self._publish("Summarizer")

        with pytest.raises(ConflictError):
            self.repo.save(
                SharedPrompt(prompt_id=shared.prompt_id, author_id=self.user.id, title="Again")
            )

    def test_record_copy_once_per_user(self):
        shared = self._publish("Summarizer")

        assert self.repo.record_copy(shared.id, self.other_user.id) is True
        assert self.repo.record_copy(shared.id, self.other_user.id) is False
        assert self.repo.get(shared.id).copy_count == 1

    def test_search_and_sort(self):
        plain = self._publish("Plain", content="French text")
        popular = self._publish("Popular")
        self.repo.record_copy(popular.id, self.other_user.id)

        assert [s.title for s in self.repo.search("french")] == ["Plain"]
        assert [s.id for s in self.repo.search("", "copied")] == [popular.id, plain.id]

    def test_get_by_prompt_and_delete(self):
        shared = self._publish("Summarizer")

        assert self.repo.get_by_prompt(shared.prompt_id).id == shared.id
        assert self.repo.delete(shared.id) is True
        assert self.repo.get_by_prompt(shared.prompt_id) is None
        assert self.repo.delete(shared.id) is False
