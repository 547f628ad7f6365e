# apps/domain/services/prompt_service.py

"""
Prompt Service - Prompt CRUD, search, likes and dashboard

This service coordinates prompt, tag, version and folder repositories
for everything a user does with their own prompts.
"""

import logging
from typing import List, Optional
from uuid import UUID

from apps.domain.models import (
    PROMPT_TITLE_MAX_LENGTH,
    DashboardSummary,
    Prompt,
)
from apps.domain.ports.cache import ITaggedCache
from apps.domain.ports.repositories import (
    IFolderRepository,
    IPromptRepository,
    ITagRepository,
    IVersionRepository,
)
from apps.domain.services.ownership import (
    clean_text,
    normalize_newlines,
    owned_folder,
    owned_prompt,
)
from apps.domain.services.tag_service import TAG_CACHE_TAGS, clean_tag_name
from apps.domain.services.version_service import append_version

logger = logging.getLogger(__name__)


class PromptService:
    """
    Prompt use cases, always scoped to the calling user

    Responsibilities:
    - Create, edit, move and delete prompts
    - Keep the version history in step with content changes
    - Search and list prompts with tags and like data
    - Build the dashboard summary
    """

    def __init__(
        self,
        prompt_repo: IPromptRepository,
        tag_repo: ITagRepository,
        version_repo: IVersionRepository,
        folder_repo: IFolderRepository,
        cache: ITaggedCache,
        empty_query_returns_all: bool = True,
        recent_prompts_limit: int = 5,
        popular_tags_limit: int = 10,
    ):
        """
        Initialize prompt service

        Args:
            prompt_repo: Repository for prompt persistence
            tag_repo: Repository for tag lookups on create/update
            version_repo: Repository for version history
            folder_repo: Repository for folder checks
            cache: Tagged cache, invalidated when tag membership changes
            empty_query_returns_all: Whether a blank search lists every prompt
            recent_prompts_limit: Prompts shown on the dashboard
            popular_tags_limit: Tags shown on the dashboard
        """
        self._prompt_repo = prompt_repo
        self._tag_repo = tag_repo
        self._version_repo = version_repo
        self._folder_repo = folder_repo
        self._cache = cache
        self._empty_query_returns_all = empty_query_returns_all
        self._recent_prompts_limit = recent_prompts_limit
        self._popular_tags_limit = popular_tags_limit

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def search_prompts(self, user_id: int, query: Optional[str]) -> List[Prompt]:
        """
        Caller's prompts whose title, content or a tag name contains `query`

        Matching is case-insensitive. A blank query lists all of the
        caller's prompts (or none when configured that way).

        Returns:
            Prompts ordered by updated_at, newest first
        """
        query = (query or "").strip()
        if not query and not self._empty_query_returns_all:
            return []
        return self._prompt_repo.search(user_id, query)

    def get_all_prompts(self, user_id: int) -> List[Prompt]:
        return self._prompt_repo.list_by_owner(user_id)

    def get_prompts_by_folder(self, user_id: int, folder_id: Optional[UUID]) -> List[Prompt]:
        if folder_id is not None:
            owned_folder(self._folder_repo, user_id, folder_id)
        return self._prompt_repo.list_by_folder(user_id, folder_id)

    def get_prompt(self, user_id: int, prompt_id: UUID) -> Prompt:
        return owned_prompt(self._prompt_repo, user_id, prompt_id)

    def get_dashboard_summary(self, user_id: int) -> DashboardSummary:
        return DashboardSummary(
            prompt_count=self._prompt_repo.count_by_owner(user_id),
            folder_count=self._folder_repo.count_by_owner(user_id),
            tag_count=self._tag_repo.count(),
            version_count=self._version_repo.count_by_owner(user_id),
            recent_prompts=self._prompt_repo.list_by_owner(
                user_id, limit=self._recent_prompts_limit
            ),
            top_tags=self._tag_repo.popular(self._popular_tags_limit),
        )

    # ------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------

    def create_prompt(
        self,
        user_id: int,
        title: str,
        content: str = "",
        description: Optional[str] = None,
        folder_id: Optional[UUID] = None,
        tags: Optional[List[str]] = None,
    ) -> Prompt:
        """
        Create a prompt with its initial version

        Steps:
        1. Validate title, tag names and folder
        2. Place the prompt after its last sibling
        3. Save it and append version 1.0
        4. Attach tags (created on demand)

        Nothing is written when any input is invalid.

        Raises:
            ValidationError: If the title or a tag name is blank or too long
            NotFoundError: If the folder is not the caller's
        """
        title = clean_text(title, "Title", PROMPT_TITLE_MAX_LENGTH)
        tag_names = _clean_tag_names(tags) if tags else []
        if folder_id is not None:
            owned_folder(self._folder_repo, user_id, folder_id)

        prompt = Prompt(
            owner_id=user_id,
            title=title,
            description=(description or "").strip() or None,
            content=normalize_newlines(content) or "",
            folder_id=folder_id,
            order=self._prompt_repo.max_order(user_id, folder_id) + 1,
        )
        prompt = self._prompt_repo.save(prompt)
        append_version(
            self._version_repo, prompt.id, prompt.content, change_message="Initial version"
        )

        if tag_names:
            self._replace_tags(prompt.id, tag_names)

        logger.info(f"Created prompt {prompt.id} for user {user_id}")
        return self._prompt_repo.get(prompt.id, viewer_id=user_id)

    def update_prompt(
        self,
        user_id: int,
        prompt_id: UUID,
        title: Optional[str] = None,
        description: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[List[str]] = None,
        change_message: Optional[str] = None,
    ) -> Prompt:
        """
        Edit a prompt

        Only the fields that are passed change. A content change appends a
        new minor version; a `tags` list replaces the tag set. Line endings
        are normalized before content is compared.

        Raises:
            NotFoundError: If the prompt does not exist or is not the caller's
            ValidationError: If the title or a tag name is blank or too long
        """
        prompt = owned_prompt(self._prompt_repo, user_id, prompt_id)

        if title is not None:
            prompt.title = clean_text(title, "Title", PROMPT_TITLE_MAX_LENGTH)
        if description is not None:
            prompt.description = description.strip() or None
        tag_names = _clean_tag_names(tags) if tags is not None else None
        content = normalize_newlines(content)

        if content is not None and content != prompt.content:
            append_version(
                self._version_repo,
                prompt.id,
                content,
                change_message=change_message or "Updated content",
            )
            prompt.content = content

        prompt.touch()
        self._prompt_repo.save(prompt)

        if tag_names is not None:
            self._replace_tags(prompt.id, tag_names)

        logger.info(f"Updated prompt {prompt.id}")
        return self._prompt_repo.get(prompt.id, viewer_id=user_id)

    def rename_prompt(self, user_id: int, prompt_id: UUID, title: str) -> Prompt:
        return self.update_prompt(user_id, prompt_id, title=title)

    def move_prompt(
        self,
        user_id: int,
        prompt_id: UUID,
        folder_id: Optional[UUID],
        order: Optional[int] = None,
    ) -> Prompt:
        """
        Move a prompt into a folder (None for the root)

        Without an explicit `order` the prompt goes after its new siblings.
        """
        prompt = owned_prompt(self._prompt_repo, user_id, prompt_id)
        if folder_id is not None:
            owned_folder(self._folder_repo, user_id, folder_id)

        if order is None:
            order = self._prompt_repo.max_order(user_id, folder_id) + 1

        prompt.folder_id = folder_id
        prompt.order = order
        prompt.touch()
        self._prompt_repo.save(prompt)

        logger.info(f"Moved prompt {prompt.id} to folder {folder_id}")
        return self._prompt_repo.get(prompt.id, viewer_id=user_id)

    def delete_prompt(self, user_id: int, prompt_id: UUID) -> None:
        prompt = owned_prompt(self._prompt_repo, user_id, prompt_id)
        self._prompt_repo.delete(prompt.id)

        if prompt.tags:
            self._cache.invalidate(*TAG_CACHE_TAGS)
        logger.info(f"Deleted prompt {prompt.id}")

    def toggle_like(self, user_id: int, prompt_id: UUID) -> bool:
        prompt = owned_prompt(self._prompt_repo, user_id, prompt_id)
        return self._prompt_repo.toggle_like(prompt.id, user_id)

    def _replace_tags(self, prompt_id: UUID, names: List[str]) -> None:
        tags = [self._tag_repo.get_or_create(name) for name in names]
        self._prompt_repo.set_tags(prompt_id, tags)
        self._cache.invalidate(*TAG_CACHE_TAGS)


def _clean_tag_names(names: List[str]) -> List[str]:
    """Trimmed, de-duplicated tag names; raises before anything is written"""
    seen = []
    for name in names:
        name = clean_tag_name(name)
        if name not in seen:
            seen.append(name)
    return seen
