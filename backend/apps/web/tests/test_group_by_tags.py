# apps/web/tests/test_group_by_tags.py
"""
Tests for the tag selection cookie on /group-by-tags
"""
import json
import logging

import pytest
from django.test import Client

from apps.domain.state import SELECTED_TAG_KEY
from apps.infrastructure.container import create_tag_service
from apps.prompts.models import Prompt, Tag


@pytest.mark.django_db
class TestGroupByTags:
    @pytest.fixture(autouse=True)
    def _login(self, user):
        self.client = Client()
        self.client.force_login(user)
        self.tag = Tag.objects.create(name="Marketing")
        tagged = Prompt.objects.create(owner=user, title="Launch email")
        tagged.tags.add(self.tag)
        Prompt.objects.create(owner=user, title="Untagged")

    def _cookie(self, response):
        return json.loads(response.cookies[SELECTED_TAG_KEY].value)

    def test_default_is_all_prompts(self):
        response = self.client.get("/group-by-tags")

        assert response.status_code == 200
        assert self._cookie(response) == {"id": None, "name": "All Prompts"}
        assert len(response.context["prompts"]) == 2

    def test_stored_all_prompts_is_restored_exactly(self):
        self.client.cookies[SELECTED_TAG_KEY] = '{"id":null,"name":"All Prompts"}'

        response = self.client.get("/group-by-tags")

        assert response.context["selected"].id is None
        assert response.context["selected"].name == "All Prompts"
        assert response.cookies[SELECTED_TAG_KEY].value == '{"id":null,"name":"All Prompts"}'

    def test_selecting_a_tag_persists_it(self):
        response = self.client.get("/group-by-tags", {"tag": str(self.tag.id)})

        assert self._cookie(response) == {"id": str(self.tag.id), "name": "Marketing"}
        assert [p.title for p in response.context["prompts"]] == ["Launch email"]

        # Next visit without a parameter keeps the selection
        response = self.client.get("/group-by-tags")
        assert response.context["selected"].name == "Marketing"

    def test_malformed_cookie_falls_back_and_logs(self, caplog):
        self.client.cookies[SELECTED_TAG_KEY] = "{not json"

        with caplog.at_level(logging.ERROR):
            response = self.client.get("/group-by-tags")

        assert response.status_code == 200
        assert response.context["selected"].is_all
        assert any("Error parsing saved selectedTag" in r.message for r in caplog.records)

    def test_wrong_shape_cookie_falls_back(self):
        self.client.cookies[SELECTED_TAG_KEY] = '{"tag": 1}'

        response = self.client.get("/group-by-tags")

        assert response.context["selected"].is_all

    def test_deleted_tag_falls_back_to_all(self):
        self.client.cookies[SELECTED_TAG_KEY] = json.dumps(
            {"id": "00000000-0000-0000-0000-000000000000", "name": "Gone"}
        )

        response = self.client.get("/group-by-tags")

        assert response.context["selected"].is_all
        assert len(response.context["prompts"]) == 2

    def test_renamed_tag_refreshes_stored_name(self):
        self.client.cookies[SELECTED_TAG_KEY] = json.dumps(
            {"id": str(self.tag.id), "name": "Marketing"}
        )
        create_tag_service().update_tag(self.tag.id, name="Growth")

        response = self.client.get("/group-by-tags")

        assert response.context["selected"].name == "Growth"
        assert self._cookie(response) == {"id": str(self.tag.id), "name": "Growth"}
        assert [p.title for p in response.context["prompts"]] == ["Launch email"]
