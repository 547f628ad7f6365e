# apps/web/tests/test_modals.py
"""
Tests for the session-backed modal store and modal actions
"""
import pytest
from django.test import Client

from apps.prompts.models import Folder, Prompt, PromptVersion, Tag
from apps.web.modals import SESSION_KEY


@pytest.mark.django_db
class TestModalEndpoints:
    @pytest.fixture(autouse=True)
    def _login(self, user):
        self.user = user
        self.client = Client()
        self.client.force_login(user)

    def _open(self, modal_type, **data):
        return self.client.post(
            "/modals/open/", {"type": modal_type, "next": "/prompts", **data}
        )

    def test_open_stores_state_in_session(self):
        response = self._open("renameFolder", folder_id="abc", name="Old")

        assert response.status_code == 302
        assert response.url == "/prompts"
        assert self.client.session[SESSION_KEY] == {
            "type": "renameFolder",
            "data": {"folder_id": "abc", "name": "Old"},
            "is_open": True,
        }

    def test_open_replaces_current_modal(self):
        self._open("createFolder")
        self._open("createTag")

        assert self.client.session[SESSION_KEY]["type"] == "createTag"

    def test_close_resets_state(self):
        self._open("createFolder")

        self.client.post("/modals/close/", {"next": "/prompts"})

        assert SESSION_KEY not in self.client.session

    def test_open_modal_is_rendered(self):
        self._open("createTag")

        response = self.client.get("/tags")

        assert b'data-modal="createTag"' in response.content
        assert response.context["modal"].is_open

    def test_unknown_type_is_rejected(self):
        self._open("launchRockets")

        assert SESSION_KEY not in self.client.session

    def test_open_ignores_offsite_next(self):
        response = self.client.post(
            "/modals/open/", {"type": "createFolder", "next": "https://evil.example"}
        )

        assert response.url == "/dashboard"

    def test_submit_create_folder_closes_modal(self):
        self._open("createFolder", parent_id="")

        response = self.client.post("/modals/submit/", {"name": "Work"})

        folder = Folder.objects.get(name="Work")
        assert response.url == f"/prompts?folder={folder.id}"
        assert SESSION_KEY not in self.client.session

    def test_submit_error_keeps_modal_open(self):
        self._open("createFolder")

        self.client.post("/modals/submit/", {"name": "   ", "next": "/prompts"})

        assert not Folder.objects.exists()
        assert self.client.session[SESSION_KEY]["type"] == "createFolder"

    def test_submit_edit_tag_conflict_keeps_modal_open(self):
        Tag.objects.create(name="Taken")
        tag = Tag.objects.create(name="Mine")
        self._open("editTag", tag_id=str(tag.id), name="Mine")

        self.client.post("/modals/submit/", {"name": "Taken"})

        tag.refresh_from_db()
        assert tag.name == "Mine"
        assert self.client.session[SESSION_KEY]["type"] == "editTag"

    def test_submit_save_version(self):
        self.client.post("/prompts/new", {"title": "Doc", "content": "v1"})
        prompt = Prompt.objects.get(title="Doc")
        self._open("saveVersion", prompt_id=str(prompt.id))

        response = self.client.post(
            "/modals/submit/",
            {"content": "v2", "version_type": "major", "change_message": "Big rewrite"},
        )

        assert response.url == f"/prompts/{prompt.id}"
        newest = PromptVersion.objects.filter(prompt=prompt).first()
        assert newest.version == "2.0"
        prompt.refresh_from_db()
        assert prompt.content == "v2"

    def test_submit_delete_prompt(self):
        prompt = Prompt.objects.create(owner=self.user, title="Bye")
        self._open("deletePrompt", prompt_id=str(prompt.id), title="Bye")

        self.client.post("/modals/submit/")

        assert not Prompt.objects.filter(id=prompt.id).exists()

    def test_submit_without_open_modal_is_noop(self):
        response = self.client.post("/modals/submit/", {"next": "/tags"})

        assert response.url == "/tags"
