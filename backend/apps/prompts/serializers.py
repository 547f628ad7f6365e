# apps/prompts/serializers.py
"""
Request serializers for the prompt API

They only validate input shape; business rules (ownership, uniqueness,
length limits on trimmed values) live in the domain services.
"""
from rest_framework import serializers

from apps.domain.models import (
    FOLDER_NAME_MAX_LENGTH,
    PROMPT_TITLE_MAX_LENGTH,
    TAG_DESCRIPTION_MAX_LENGTH,
    TAG_NAME_MAX_LENGTH,
    VersionType,
)


class PromptCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=PROMPT_TITLE_MAX_LENGTH)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    content = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    folder_id = serializers.UUIDField(required=False, allow_null=True)
    tags = serializers.ListField(
        child=serializers.CharField(max_length=TAG_NAME_MAX_LENGTH),
        required=False,
        default=list,
    )


class PromptUpdateSerializer(serializers.Serializer):
    """All fields optional; omitted fields keep their value"""

    title = serializers.CharField(max_length=PROMPT_TITLE_MAX_LENGTH, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    content = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    tags = serializers.ListField(
        child=serializers.CharField(max_length=TAG_NAME_MAX_LENGTH),
        required=False,
    )
    change_message = serializers.CharField(required=False, allow_blank=True)


class PromptMoveSerializer(serializers.Serializer):
    folder_id = serializers.UUIDField(allow_null=True)
    order = serializers.IntegerField(required=False, min_value=0)


class VersionCreateSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
    change_message = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    version_type = serializers.ChoiceField(
        choices=[choice.value for choice in VersionType],
        default=VersionType.MINOR.value,
    )


class TagNameSerializer(serializers.Serializer):
    # Length is checked after trimming by the service
    name = serializers.CharField(trim_whitespace=False, allow_blank=True)


class TagSerializer(serializers.Serializer):
    name = serializers.CharField(trim_whitespace=False, allow_blank=True)
    description = serializers.CharField(
        max_length=TAG_DESCRIPTION_MAX_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
    )


class TagUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, trim_whitespace=False, allow_blank=True)
    description = serializers.CharField(
        max_length=TAG_DESCRIPTION_MAX_LENGTH,
        required=False,
        allow_blank=True,
    )


class FolderCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=FOLDER_NAME_MAX_LENGTH)
    parent_id = serializers.UUIDField(required=False, allow_null=True)


class FolderRenameSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=FOLDER_NAME_MAX_LENGTH)


class FolderMoveSerializer(serializers.Serializer):
    parent_id = serializers.UUIDField(allow_null=True)
    order = serializers.IntegerField(required=False, min_value=0)


class PublishSerializer(serializers.Serializer):
    """Title and description default to the source prompt's"""

    prompt_id = serializers.UUIDField()
    title = serializers.CharField(max_length=PROMPT_TITLE_MAX_LENGTH, required=False)
    description = serializers.CharField(required=False, allow_blank=True)


class CopySerializer(serializers.Serializer):
    folder_id = serializers.UUIDField(required=False, allow_null=True)
