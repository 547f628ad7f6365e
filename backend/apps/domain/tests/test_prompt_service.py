# apps/domain/tests/test_prompt_service.py
"""
Unit tests for PromptService
"""
import pytest

from apps.domain.models import NotFoundError, ValidationError
from apps.infrastructure.config import get_config
from apps.infrastructure.container import (
    create_folder_service,
    create_prompt_service,
    create_repositories,
    create_tag_service,
)

OWNER = 1
STRANGER = 2


class TestPromptService:
    def setup_method(self):
        self.repositories = create_repositories(use_inmemory=True)
        self.service = create_prompt_service(repositories=self.repositories)
        self.folders = create_folder_service(self.repositories)

    def test_create_prompt(self):
        prompt = self.service.create_prompt(
            OWNER, title="  Summarise  ", content="Summarise {text}", tags=["a", "b", "a"]
        )

        assert prompt.title == "Summarise"
        assert prompt.owner_id == OWNER
        assert prompt.tag_names == ["a", "b"]
        assert self.repositories["versions"].latest(prompt.id).version == "1.0"

    @pytest.mark.parametrize("title", ["", "   ", "x" * 256])
    def test_create_prompt_rejects_bad_title(self, title):
        with pytest.raises(ValidationError):
            self.service.create_prompt(OWNER, title=title)

    def test_create_in_foreign_folder(self):
        folder = self.folders.create_folder(STRANGER, "Theirs")

        with pytest.raises(NotFoundError):
            self.service.create_prompt(OWNER, title="Mine", folder_id=folder.id)

    def test_prompts_appended_after_siblings(self):
        first = self.service.create_prompt(OWNER, title="First")
        second = self.service.create_prompt(OWNER, title="Second")

        assert second.order == first.order + 1

    def test_get_foreign_prompt(self):
        prompt = self.service.create_prompt(OWNER, title="Mine")

        with pytest.raises(NotFoundError):
            self.service.get_prompt(STRANGER, prompt.id)

    def test_update_content_appends_version(self):
        prompt = self.service.create_prompt(OWNER, title="Draft", content="v1")

        self.service.update_prompt(OWNER, prompt.id, content="v2", change_message="Reworded")

        latest = self.repositories["versions"].latest(prompt.id)
        assert latest.version == "1.1"
        assert latest.change_message == "Reworded"

    def test_update_without_content_change_keeps_history(self):
        prompt = self.service.create_prompt(OWNER, title="Draft", content="v1")

        updated = self.service.update_prompt(OWNER, prompt.id, title="Final", content="v1")

        assert updated.title == "Final"
        assert len(self.repositories["versions"].list_by_prompt(prompt.id)) == 1

    def test_update_replaces_tags(self):
        prompt = self.service.create_prompt(OWNER, title="Draft", tags=["old"])

        updated = self.service.update_prompt(OWNER, prompt.id, tags=["new"])

        assert updated.tag_names == ["new"]

    def test_create_with_bad_tag_writes_nothing(self):
        db = self.repositories["prompts"]._db

        with pytest.raises(ValidationError):
            self.service.create_prompt(OWNER, title="Draft", tags=["ok", "x" * 51])

        assert db.prompts == {}
        assert db.versions == {}
        assert db.tags == {}

    def test_update_with_bad_tag_keeps_content(self):
        prompt = self.service.create_prompt(OWNER, title="Draft", content="v1", tags=["old"])

        with pytest.raises(ValidationError):
            self.service.update_prompt(OWNER, prompt.id, content="v2", tags=["  "])

        current = self.service.get_prompt(OWNER, prompt.id)
        assert current.content == "v1"
        assert current.tag_names == ["old"]
        assert len(self.repositories["versions"].list_by_prompt(prompt.id)) == 1

    def test_crlf_content_is_stored_with_lf(self):
        prompt = self.service.create_prompt(OWNER, title="Draft", content="line1\r\nline2\rline3")

        assert prompt.content == "line1\nline2\nline3"

    def test_line_endings_alone_are_not_a_content_change(self):
        prompt = self.service.create_prompt(OWNER, title="Draft", content="line1\nline2")

        updated = self.service.update_prompt(OWNER, prompt.id, content="line1\r\nline2")

        assert updated.content == "line1\nline2"
        assert len(self.repositories["versions"].list_by_prompt(prompt.id)) == 1

    def test_search_matches_title_content_and_tags(self):
        by_title = self.service.create_prompt(OWNER, title="Invoice reminder")
        by_content = self.service.create_prompt(OWNER, title="Email", content="Chase the INVOICE")
        by_tag = self.service.create_prompt(OWNER, title="Other", tags=["invoices"])
        self.service.create_prompt(OWNER, title="Unrelated")
        self.service.create_prompt(STRANGER, title="Invoice of someone else")

        results = self.service.search_prompts(OWNER, "invoice")

        assert [p.id for p in results] == [by_tag.id, by_content.id, by_title.id]

    def test_search_is_ordered_by_last_update(self):
        older = self.service.create_prompt(OWNER, title="Alpha")
        self.service.create_prompt(OWNER, title="Alpha two")

        self.service.update_prompt(OWNER, older.id, description="bumped")

        assert self.service.search_prompts(OWNER, "alpha")[0].id == older.id

    def test_blank_search_lists_everything(self):
        self.service.create_prompt(OWNER, title="One")
        self.service.create_prompt(OWNER, title="Two")

        assert len(self.service.search_prompts(OWNER, "  ")) == 2
        assert len(self.service.search_prompts(OWNER, None)) == 2

    def test_blank_search_can_return_nothing(self):
        config = get_config()
        config["search"] = {**config["search"], "empty_query_returns_all": False}
        service = create_prompt_service(config=config, repositories=self.repositories)
        service.create_prompt(OWNER, title="One")

        assert service.search_prompts(OWNER, "") == []

    def test_move_prompt(self):
        folder = self.folders.create_folder(OWNER, "Work")
        prompt = self.service.create_prompt(OWNER, title="Draft")

        moved = self.service.move_prompt(OWNER, prompt.id, folder.id)

        assert moved.folder_id == folder.id
        assert [p.id for p in self.service.get_prompts_by_folder(OWNER, folder.id)] == [prompt.id]
        assert self.service.get_prompts_by_folder(OWNER, None) == []

    def test_move_prompt_with_explicit_order(self):
        prompt = self.service.create_prompt(OWNER, title="Draft")

        assert self.service.move_prompt(OWNER, prompt.id, None, order=7).order == 7

    def test_delete_prompt_refreshes_tag_counts(self):
        tags = create_tag_service(repositories=self.repositories)
        prompt = self.service.create_prompt(OWNER, title="Draft", tags=["solo"])
        assert tags.get_tags_data()[0].prompt_count == 1

        self.service.delete_prompt(OWNER, prompt.id)

        assert tags.get_tags_data()[0].prompt_count == 0
        with pytest.raises(NotFoundError):
            self.service.get_prompt(OWNER, prompt.id)

    def test_delete_foreign_prompt(self):
        prompt = self.service.create_prompt(OWNER, title="Mine")

        with pytest.raises(NotFoundError):
            self.service.delete_prompt(STRANGER, prompt.id)

    def test_toggle_like(self):
        prompt = self.service.create_prompt(OWNER, title="Liked")

        assert self.service.toggle_like(OWNER, prompt.id) is True
        liked = self.service.get_prompt(OWNER, prompt.id)
        assert (liked.like_count, liked.is_liked_by_user) == (1, True)

        assert self.service.toggle_like(OWNER, prompt.id) is False
        assert self.service.get_prompt(OWNER, prompt.id).like_count == 0

    def test_dashboard_summary(self):
        self.folders.create_folder(OWNER, "Work")
        first = self.service.create_prompt(OWNER, title="First", tags=["common"])
        self.service.create_prompt(OWNER, title="Second", tags=["common", "rare"])
        self.service.create_prompt(STRANGER, title="Not counted")
        self.service.update_prompt(OWNER, first.id, content="changed")

        summary = self.service.get_dashboard_summary(OWNER)

        assert summary.prompt_count == 2
        assert summary.folder_count == 1
        assert summary.tag_count == 2
        assert summary.version_count == 3
        assert summary.recent_prompts[0].id == first.id
        assert [t.name for t in summary.top_tags] == ["common", "rare"]
