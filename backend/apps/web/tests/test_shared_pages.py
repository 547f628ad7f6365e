# apps/web/tests/test_shared_pages.py
"""
Tests for publishing, browsing and copying shared prompts from the pages
"""
import pytest
from django.test import Client

from apps.prompts.models import Folder, Prompt, SharedPrompt


@pytest.mark.django_db
class TestSharedPromptPages:
    @pytest.fixture(autouse=True)
    def _login(self, user, other_user):
        self.author = Client()
        self.author.force_login(user)
        self.reader = Client()
        self.reader.force_login(other_user)
        self.other_user = other_user
        self.prompt = Prompt.objects.create(owner=user, title="Summarizer", content="Summarize")

    def _publish(self):
        self.author.post(f"/prompts/{self.prompt.id}/publish")
        return SharedPrompt.objects.get(prompt=self.prompt)

    def test_publish_from_detail_page(self):
        assert b"Publish to Shared Prompts" in self.author.get(f"/prompts/{self.prompt.id}").content

        response = self.author.post(f"/prompts/{self.prompt.id}/publish")

        shared = SharedPrompt.objects.get(prompt=self.prompt)
        assert response.status_code == 302
        assert response.url == f"/shared-prompts/{shared.id}"
        assert self.author.get(f"/prompts/{self.prompt.id}").context["shared"].id == shared.id

    def test_publish_twice_flashes_error(self):
        self._publish()

        response = self.author.post(f"/prompts/{self.prompt.id}/publish", follow=True)

        messages = [str(m) for m in response.context["messages"]]
        assert "Prompt is already published" in messages
        assert SharedPrompt.objects.count() == 1

    def test_publish_foreign_prompt_is_404(self):
        response = self.reader.post(f"/prompts/{self.prompt.id}/publish")

        assert response.status_code == 404

    def test_listing_with_search(self):
        self._publish()

        response = self.reader.get("/shared-prompts", {"q": "summ", "sort": "bogus"})

        assert response.status_code == 200
        assert [s.title for s in response.context["shared_prompts"]] == ["Summarizer"]
        assert response.context["sort"] == "recent"

    def test_copy_into_folder(self):
        shared = self._publish()
        folder = Folder.objects.create(owner=self.other_user, name="Borrowed")

        response = self.reader.post(
            f"/shared-prompts/{shared.id}/copy", {"folder_id": str(folder.id)}
        )

        copy = Prompt.objects.get(owner=self.other_user)
        assert response.status_code == 302
        assert response.url == f"/prompts/{copy.id}"
        assert copy.folder_id == folder.id
        assert copy.title == "Summarizer (Copy)"

    def test_only_author_sees_unpublish(self):
        shared = self._publish()

        assert self.author.get(f"/shared-prompts/{shared.id}").context["is_author"] is True
        assert self.reader.get(f"/shared-prompts/{shared.id}").context["is_author"] is False
        assert self.reader.post(f"/shared-prompts/{shared.id}/unpublish").status_code == 404

        response = self.author.post(f"/shared-prompts/{shared.id}/unpublish")

        assert response.status_code == 302
        assert not SharedPrompt.objects.exists()

    def test_sidebar_marks_shared_prompts(self):
        response = self.reader.get("/shared-prompts")

        active = [item["label"] for item in response.context["nav_items"] if item["active"]]
        assert active == ["Shared Prompts"]
