# apps/prompts/tests/test_seed_tags.py
from io import StringIO

import pytest
from django.core.management import call_command

from apps.domain.services.tag_service import DEFAULT_TAGS
from apps.prompts.models import Tag


@pytest.mark.django_db
class TestSeedTagsCommand:
    def test_seeds_default_tags(self):
        out = StringIO()

        call_command("seed_tags", stdout=out)

        assert Tag.objects.count() == len(DEFAULT_TAGS)
        assert f"{len(DEFAULT_TAGS)} created" in out.getvalue()

    def test_rerun_updates_descriptions(self):
        Tag.objects.create(name="ChatGPT", description="stale")

        out = StringIO()
        call_command("seed_tags", stdout=out)

        assert Tag.objects.count() == len(DEFAULT_TAGS)
        assert Tag.objects.get(name="ChatGPT").description != "stale"
        assert "1 updated" in out.getvalue()

    def test_list_does_not_write(self):
        out = StringIO()

        call_command("seed_tags", "--list", stdout=out)

        assert Tag.objects.count() == 0
        assert "ChatGPT" in out.getvalue()
