# apps/domain/tests/test_version_service.py
"""
Unit tests for VersionService
"""
from uuid import uuid4

import pytest

from apps.domain.models import NotFoundError
from apps.infrastructure.container import (
    create_prompt_service,
    create_repositories,
    create_version_service,
)

OWNER = 1
STRANGER = 2


class TestVersionService:
    def setup_method(self):
        repositories = create_repositories(use_inmemory=True)
        self.prompts = create_prompt_service(repositories=repositories)
        self.versions = create_version_service(repositories)
        self.prompt = self.prompts.create_prompt(OWNER, title="Draft", content="v1")

    def test_initial_version(self):
        [version] = self.versions.get_prompt_versions(OWNER, self.prompt.id)

        assert version.version == "1.0"
        assert version.content == "v1"
        assert version.change_message == "Initial version"

    def test_versions_newest_first(self):
        self.versions.create_prompt_version(OWNER, self.prompt.id, "v2")
        self.versions.create_prompt_version(OWNER, self.prompt.id, "v3", version_type="major")
        self.versions.create_prompt_version(OWNER, self.prompt.id, "v4")

        labels = [v.version for v in self.versions.get_prompt_versions(OWNER, self.prompt.id)]

        assert labels == ["2.1", "2.0", "1.1", "1.0"]

    def test_create_version_sets_content(self):
        self.versions.create_prompt_version(OWNER, self.prompt.id, "v2", "Tightened wording")

        assert self.prompts.get_prompt(OWNER, self.prompt.id).content == "v2"

    def test_restore_sets_content_to_snapshot(self):
        first = self.versions.get_prompt_versions(OWNER, self.prompt.id)[0]
        self.prompts.update_prompt(OWNER, self.prompt.id, content="v2")

        restored = self.versions.restore_version(OWNER, first.id)

        assert restored.content == "v1"
        assert self.prompts.get_prompt(OWNER, self.prompt.id).content == "v1"

    def test_restore_keeps_history(self):
        first = self.versions.get_prompt_versions(OWNER, self.prompt.id)[0]
        self.prompts.update_prompt(OWNER, self.prompt.id, content="v2")

        self.versions.restore_version(OWNER, first.id)

        history = self.versions.get_prompt_versions(OWNER, self.prompt.id)
        assert [v.content for v in history] == ["v1", "v2", "v1"]
        assert history[0].change_message == "Restored from version 1.0"

    def test_restore_current_content_is_noop(self):
        first = self.versions.get_prompt_versions(OWNER, self.prompt.id)[0]

        self.versions.restore_version(OWNER, first.id)

        assert len(self.versions.get_prompt_versions(OWNER, self.prompt.id)) == 1

    def test_restore_unknown_version(self):
        with pytest.raises(NotFoundError):
            self.versions.restore_version(OWNER, uuid4())

    def test_restore_foreign_version(self):
        first = self.versions.get_prompt_versions(OWNER, self.prompt.id)[0]

        with pytest.raises(NotFoundError):
            self.versions.restore_version(STRANGER, first.id)

    def test_versions_of_foreign_prompt(self):
        with pytest.raises(NotFoundError):
            self.versions.get_prompt_versions(STRANGER, self.prompt.id)
