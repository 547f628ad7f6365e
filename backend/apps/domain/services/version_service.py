# apps/domain/services/version_service.py

"""
Version Service - Prompt history

Every content change appends a PromptVersion holding the new content,
so the newest version always matches the prompt. Versions are never
edited or removed individually.
"""

import logging
from typing import List, Optional
from uuid import UUID

from apps.domain.models import (
    NotFoundError,
    Prompt,
    PromptVersion,
    VersionType,
    next_version,
)
from apps.domain.ports.repositories import IPromptRepository, IVersionRepository
from apps.domain.services.ownership import normalize_newlines, owned_prompt

logger = logging.getLogger(__name__)


def append_version(
    version_repo: IVersionRepository,
    prompt_id: UUID,
    content: str,
    change_message: Optional[str] = None,
    version_type: VersionType = VersionType.MINOR,
) -> PromptVersion:
    """Append a snapshot labelled after the prompt's newest version"""
    latest = version_repo.latest(prompt_id)
    version = PromptVersion(
        prompt_id=prompt_id,
        content=content,
        version=next_version(latest.version if latest else None, version_type),
        change_message=change_message,
    )
    return version_repo.add(version)


class VersionService:
    """
    Version history for a caller's prompts

    Responsibilities:
    - List versions newest first
    - Save explicit minor/major versions
    - Restore a snapshot as a fresh save
    """

    def __init__(
        self,
        prompt_repo: IPromptRepository,
        version_repo: IVersionRepository,
    ):
        self._prompt_repo = prompt_repo
        self._version_repo = version_repo

    def get_prompt_versions(self, user_id: int, prompt_id: UUID) -> List[PromptVersion]:
        """
        All versions of a prompt, newest first

        Raises:
            NotFoundError: If the prompt does not exist or is not the caller's
        """
        owned_prompt(self._prompt_repo, user_id, prompt_id)
        return self._version_repo.list_by_prompt(prompt_id)

    def create_prompt_version(
        self,
        user_id: int,
        prompt_id: UUID,
        content: str,
        change_message: Optional[str] = None,
        version_type: VersionType = VersionType.MINOR,
    ) -> PromptVersion:
        """
        Save `content` as a new version and make it the prompt's content

        Args:
            user_id: Caller
            prompt_id: Prompt to version
            content: New content
            change_message: Optional note shown in the history
            version_type: Minor bumps X.Y to X.(Y+1), major to (X+1).0

        Returns:
            The appended version
        """
        prompt = owned_prompt(self._prompt_repo, user_id, prompt_id)
        content = normalize_newlines(content)

        version = append_version(
            self._version_repo,
            prompt.id,
            content,
            change_message=change_message,
            version_type=VersionType(version_type),
        )

        prompt.content = content
        prompt.touch()
        self._prompt_repo.save(prompt)

        logger.info(f"Saved version {version.version} of prompt {prompt.id}")
        return version

    def restore_version(self, user_id: int, version_id: UUID) -> Prompt:
        """
        Make a stored snapshot the prompt's current content

        Steps:
        1. Resolve the version and check the caller owns its prompt
        2. Stop if the content already matches (nothing to save)
        3. Append a version carrying the restored snapshot
        4. Overwrite the prompt content

        Raises:
            NotFoundError: If the version is unknown or not the caller's
        """
        version = self._version_repo.get(version_id)
        if version is None:
            raise NotFoundError("Version not found")

        try:
            prompt = owned_prompt(self._prompt_repo, user_id, version.prompt_id)
        except NotFoundError:
            raise NotFoundError("Version not found") from None

        if prompt.content == version.content:
            logger.info(f"Prompt {prompt.id} already at version {version.version}")
            return prompt

        append_version(
            self._version_repo,
            prompt.id,
            version.content,
            change_message=f"Restored from version {version.version}",
        )

        prompt.content = version.content
        prompt.touch()
        self._prompt_repo.save(prompt)

        logger.info(f"Restored prompt {prompt.id} to version {version.version}")
        return self._prompt_repo.get(prompt.id, viewer_id=user_id)
