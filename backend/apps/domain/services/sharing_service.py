# apps/domain/services/sharing_service.py

"""
Sharing Service - Publish prompts and copy them into a library

A shared prompt is a snapshot of one of the author's prompts. Anyone
signed in can read it and copy it; only the author can unpublish it.
"""

import logging
from typing import List, Optional
from uuid import UUID

from apps.domain.models import (
    PROMPT_TITLE_MAX_LENGTH,
    ConflictError,
    NotFoundError,
    Prompt,
    SharedPrompt,
    ValidationError,
)
from apps.domain.ports.repositories import IPromptRepository, ISharedPromptRepository
from apps.domain.services.ownership import clean_text, owned_prompt
from apps.domain.services.prompt_service import PromptService

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("recent", "copied")
COPY_SUFFIX = " (Copy)"


class SharingService:
    """
    Shared prompt use cases

    Copies go through PromptService so they get an initial version and
    tag cache invalidation like any other new prompt.
    """

    def __init__(
        self,
        shared_repo: ISharedPromptRepository,
        prompt_repo: IPromptRepository,
        prompt_service: PromptService,
    ):
        self._shared_repo = shared_repo
        self._prompt_repo = prompt_repo
        self._prompt_service = prompt_service

    def publish_prompt(
        self,
        user_id: int,
        prompt_id: UUID,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> SharedPrompt:
        """
        Publish one of the caller's prompts

        Title and description default to the prompt's own.

        Raises:
            NotFoundError: If the prompt is not the caller's
            ConflictError: If the prompt is already published
            ValidationError: If the title is blank or too long
        """
        prompt = owned_prompt(self._prompt_repo, user_id, prompt_id)
        if self._shared_repo.get_by_prompt(prompt.id) is not None:
            raise ConflictError("Prompt is already published")

        shared = self._shared_repo.save(
            SharedPrompt(
                prompt_id=prompt.id,
                author_id=user_id,
                title=clean_text(title or prompt.title, "Title", PROMPT_TITLE_MAX_LENGTH),
                description=(description or prompt.description or "").strip() or None,
                content=prompt.content,
            )
        )

        logger.info(f"User {user_id} published prompt {prompt.id} as {shared.id}")
        return shared

    def get_shared_prompts(
        self, query: Optional[str] = None, sort_by: str = "recent"
    ) -> List[SharedPrompt]:
        if sort_by not in SORT_OPTIONS:
            raise ValidationError(f"sort_by must be one of: {', '.join(SORT_OPTIONS)}")
        return self._shared_repo.search((query or "").strip(), sort_by)

    def get_shared_prompt(self, shared_id: UUID) -> SharedPrompt:
        shared = self._shared_repo.get(shared_id)
        if shared is None:
            raise NotFoundError(f"Shared prompt {shared_id} not found")
        return shared

    def get_shared_for_prompt(self, user_id: int, prompt_id: UUID) -> Optional[SharedPrompt]:
        prompt = owned_prompt(self._prompt_repo, user_id, prompt_id)
        return self._shared_repo.get_by_prompt(prompt.id)

    def copy_shared_prompt(
        self, user_id: int, shared_id: UUID, folder_id: Optional[UUID] = None
    ) -> Prompt:
        """
        Copy a shared prompt into the caller's library

        The copy is titled "<title> (Copy)" and carries the source tags.
        Copying again makes another prompt but counts once per user.

        Raises:
            NotFoundError: If the shared prompt or the folder does not exist
        """
        shared = self.get_shared_prompt(shared_id)

        base = shared.title[:PROMPT_TITLE_MAX_LENGTH - len(COPY_SUFFIX)]
        prompt = self._prompt_service.create_prompt(
            user_id,
            title=base + COPY_SUFFIX,
            content=shared.content,
            description=shared.description,
            folder_id=folder_id,
            tags=shared.tag_names,
        )

        if self._shared_repo.record_copy(shared.id, user_id):
            logger.info(f"User {user_id} copied shared prompt {shared.id}")
        return prompt

    def unpublish(self, user_id: int, shared_id: UUID) -> None:
        """
        Remove a shared prompt; the source prompt is untouched

        Raises:
            NotFoundError: If it does not exist or the caller is not the author
        """
        shared = self._shared_repo.get(shared_id)
        if shared is None or shared.author_id != user_id:
            raise NotFoundError(f"Shared prompt {shared_id} not found")

        self._shared_repo.delete(shared.id)
        logger.info(f"Unpublished shared prompt {shared.id}")
