# apps/domain/tests/test_models.py
"""
Tests for domain value objects and version labels
"""
from uuid import uuid4

import pytest

from apps.domain.models import (
    Prompt,
    PromptVersion,
    Tag,
    ValidationError,
    VersionType,
    next_version,
    parse_version,
)


class TestVersionLabels:
    def test_parse(self):
        assert parse_version("3.14") == (3, 14)

    @pytest.mark.parametrize("label", ["", "1", "1.2.3", "a.b", None])
    def test_parse_rejects_malformed(self, label):
        with pytest.raises(ValidationError):
            parse_version(label)

    @pytest.mark.parametrize("latest,version_type,expected", [
        (None, VersionType.MINOR, "1.0"),
        (None, VersionType.MAJOR, "1.0"),
        ("1.0", VersionType.MINOR, "1.1"),
        ("1.9", VersionType.MINOR, "1.10"),
        ("1.9", VersionType.MAJOR, "2.0"),
    ])
    def test_next_version(self, latest, version_type, expected):
        assert next_version(latest, version_type) == expected

    def test_version_parts(self):
        version = PromptVersion(prompt_id=uuid4(), content="", version="2.5")

        assert (version.major, version.minor) == (2, 5)


class TestPrompt:
    def test_tag_helpers(self):
        prompt = Prompt(title="t", tags=[Tag(name="a"), Tag(name="b")])

        assert prompt.tag_names == ["a", "b"]
        assert prompt.has_tag("b")
        assert not prompt.has_tag("B")

    def test_to_dict(self):
        prompt = Prompt(owner_id=1, title="t", tags=[Tag(name="a")])

        data = prompt.to_dict()

        assert data["id"] == str(prompt.id)
        assert data["folder_id"] is None
        assert data["tags"][0]["name"] == "a"
        assert "owner_id" not in data
