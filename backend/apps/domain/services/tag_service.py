# apps/domain/services/tag_service.py

"""
Tag Service - Tag listing, management and prompt associations

The tag listing is served through the tagged cache. Every write that
changes tag metadata or tag membership invalidates the `tags` and
`tags-page` cache tags before it returns.
"""

import logging
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from apps.domain.models import (
    TAG_DESCRIPTION_MAX_LENGTH,
    TAG_NAME_MAX_LENGTH,
    ConflictError,
    NotFoundError,
    Prompt,
    Tag,
    TagSummary,
    utcnow,
)
from apps.domain.ports.cache import ITaggedCache
from apps.domain.ports.repositories import IPromptRepository, ITagRepository
from apps.domain.services.ownership import clean_text, owned_prompt

logger = logging.getLogger(__name__)

TAGS_CACHE_KEY = "tags:all"
TAG_CACHE_TAGS = ("tags", "tags-page")
DEFAULT_TAG_CACHE_TTL = 300

DEFAULT_TAGS: List[Tuple[str, str]] = [
    # AI platforms
    ("ChatGPT", "Prompts optimized for OpenAI's ChatGPT models"),
    ("Claude", "Prompts designed for Anthropic's Claude AI assistant"),
    ("Midjourney", "Image generation prompts for Midjourney AI"),
    ("Stable Diffusion", "Text-to-image prompts for Stable Diffusion models"),
    ("Gemini", "Prompts for Google's Gemini AI models"),
    # Prompt engineering techniques
    ("Few-Shot", "Prompts using few-shot learning with examples"),
    ("Chain-of-Thought", "Step-by-step reasoning prompts for complex problems"),
    ("Role-Playing", "Prompts that assign specific roles or personas to AI"),
    ("System Prompt", "Initial system-level instructions and configurations"),
    ("Template", "Reusable prompt structures with variables"),
    # Content types
    ("Code Generation", "Programming and development-related prompts"),
    ("Writing & Copy", "Content creation, copywriting, and editing prompts"),
    ("Data Analysis", "Prompts for analyzing and interpreting data"),
    ("Creative Content", "Art, storytelling, and creative writing prompts"),
    ("Research & Summarization", "Information gathering and summarization tasks"),
    # Professional categories
    ("Marketing", "Business marketing and promotional content prompts"),
    ("Education", "Teaching, learning, and educational content prompts"),
    ("Technical Documentation", "Technical writing and documentation prompts"),
    # Output formats
    ("Structured Data", "Prompts requiring JSON, YAML, or structured responses"),
    ("Long-Form", "Detailed articles, reports, and comprehensive content"),
    ("Quick Reference", "Short, concise answers and quick information"),
    # Use cases
    ("Debugging", "Problem-solving and troubleshooting prompts"),
    ("Brainstorming", "Idea generation and creative thinking exercises"),
    ("Productivity", "Task management and workflow optimization prompts"),
]


def clean_tag_name(name: Optional[str]) -> str:
    return clean_text(name, "Tag name", TAG_NAME_MAX_LENGTH)


def clean_tag_description(description: Optional[str]) -> Optional[str]:
    return clean_text(
        description, "Description", TAG_DESCRIPTION_MAX_LENGTH, required=False
    ) or None


class TagService:
    """
    Tag use cases

    Tags are global; prompt associations are only changed on prompts the
    caller owns.
    """

    def __init__(
        self,
        tag_repo: ITagRepository,
        prompt_repo: IPromptRepository,
        cache: ITaggedCache,
        cache_ttl: int = DEFAULT_TAG_CACHE_TTL,
    ):
        """
        Initialize tag service

        Args:
            tag_repo: Repository for tag persistence
            prompt_repo: Repository holding prompt/tag associations
            cache: Tagged cache for the tag listing
            cache_ttl: Lifetime of the cached listing in seconds
        """
        self._tag_repo = tag_repo
        self._prompt_repo = prompt_repo
        self._cache = cache
        self._cache_ttl = cache_ttl

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def get_tags_data(self) -> List[TagSummary]:
        """
        All tags with prompt counts, alphabetical

        Served from cache for up to `cache_ttl` seconds unless a tag
        write invalidates it first.
        """
        return self._cache.get_or_compute(
            TAGS_CACHE_KEY,
            self._tag_repo.list_with_counts,
            ttl=self._cache_ttl,
            tags=TAG_CACHE_TAGS,
        )

    def get_tag(self, tag_id: UUID) -> Tag:
        tag = self._tag_repo.get(tag_id)
        if tag is None:
            raise NotFoundError(f"Tag {tag_id} not found")
        return tag

    def search_tags(self, query: str, limit: int = 10) -> List[Tag]:
        query = (query or "").strip()
        if not query:
            return []
        return self._tag_repo.search(query, limit=limit)

    def get_popular_tags(self, limit: int = 10) -> List[TagSummary]:
        return self._tag_repo.popular(limit)

    def get_tags_with_prompts(self, user_id: int) -> List[Tuple[TagSummary, List[Prompt]]]:
        """
        Each tag paired with the caller's prompts carrying it

        Tags come from the cached listing; prompts are read fresh.
        """
        by_tag: Dict[UUID, List[Prompt]] = {}
        for prompt in self._prompt_repo.list_by_owner(user_id):
            for tag in prompt.tags:
                by_tag.setdefault(tag.id, []).append(prompt)

        return [(summary, by_tag.get(summary.id, [])) for summary in self.get_tags_data()]

    # ------------------------------------------------------------
    # Tag management
    # ------------------------------------------------------------

    def create_tag(self, name: str, description: Optional[str] = None) -> Tag:
        """
        Create a tag

        A tag that already has this name is returned unchanged, so
        creating twice is not an error.

        Raises:
            ValidationError: If the name is blank or either field is too long
        """
        name = clean_tag_name(name)
        description = clean_tag_description(description)

        existing = self._tag_repo.get_by_name(name)
        if existing is not None:
            logger.info(f"Tag '{name}' already exists, returning existing tag")
            return existing

        tag = self._tag_repo.get_or_create(name, description)
        self.invalidate_caches()

        logger.info(f"Created tag '{name}'")
        return tag

    def update_tag(
        self,
        tag_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Tag:
        """
        Rename a tag or change its description

        Raises:
            NotFoundError: If the tag does not exist
            ConflictError: If another tag already has the new name
            ValidationError: If a field is blank or too long
        """
        tag = self.get_tag(tag_id)

        if name is not None:
            name = clean_tag_name(name)
            clash = self._tag_repo.get_by_name(name)
            if clash is not None and clash.id != tag.id:
                raise ConflictError(f"A tag named '{name}' already exists")
            tag.name = name

        if description is not None:
            tag.description = clean_tag_description(description)

        tag.updated_at = utcnow()
        tag = self._tag_repo.save(tag)
        self.invalidate_caches()

        logger.info(f"Updated tag {tag.id} ('{tag.name}')")
        return tag

    def delete_tag(self, tag_id: UUID) -> None:
        """
        Delete a tag after detaching it from every prompt

        Raises:
            NotFoundError: If the tag does not exist
        """
        if not self._tag_repo.delete(tag_id):
            raise NotFoundError(f"Tag {tag_id} not found")

        self.invalidate_caches()
        logger.info(f"Deleted tag {tag_id}")

    def seed_default_tags(
        self, defaults: Optional[List[Tuple[str, str]]] = None
    ) -> Tuple[int, int]:
        """
        Upsert the default tag set

        Existing tags keep their id and get the default description.

        Returns:
            Tuple of (created, updated) counts
        """
        created = updated = 0

        for name, description in defaults if defaults is not None else DEFAULT_TAGS:
            existing = self._tag_repo.get_by_name(name)
            if existing is None:
                self._tag_repo.get_or_create(name, description)
                created += 1
            else:
                existing.description = description
                existing.updated_at = utcnow()
                self._tag_repo.save(existing)
                updated += 1

        self.invalidate_caches()
        logger.info(f"Seeded default tags: {created} created, {updated} updated")
        return created, updated

    # ------------------------------------------------------------
    # Prompt associations
    # ------------------------------------------------------------

    def add_tag_to_prompt(self, user_id: int, prompt_id: UUID, tag_name: str) -> Prompt:
        """
        Attach a tag to a prompt by name, creating the tag when needed

        Idempotent: attaching a tag the prompt already has changes nothing.

        Raises:
            NotFoundError: If the prompt does not exist or is not the caller's
            ValidationError: If the name is blank or too long
        """
        tag_name = clean_tag_name(tag_name)
        prompt = owned_prompt(self._prompt_repo, user_id, prompt_id)

        if not prompt.has_tag(tag_name):
            tag = self._tag_repo.get_or_create(tag_name)
            self._prompt_repo.add_tag(prompt.id, tag)
            logger.info(f"Tagged prompt {prompt.id} with '{tag_name}'")

        self.invalidate_caches()
        return self._prompt_repo.get(prompt.id, viewer_id=user_id)

    def remove_tag_from_prompt(self, user_id: int, prompt_id: UUID, tag_name: str) -> Prompt:
        """
        Detach a tag from a prompt by name

        Idempotent: an unknown tag or one that is not attached is a no-op.

        Raises:
            NotFoundError: If the prompt does not exist or is not the caller's
        """
        prompt = owned_prompt(self._prompt_repo, user_id, prompt_id)
        tag_name = (tag_name or "").strip()

        tag = self._tag_repo.get_by_name(tag_name) if tag_name else None
        if tag is not None and prompt.has_tag(tag.name):
            self._prompt_repo.remove_tag(prompt.id, tag.id)
            logger.info(f"Removed tag '{tag_name}' from prompt {prompt.id}")

        self.invalidate_caches()
        return self._prompt_repo.get(prompt.id, viewer_id=user_id)

    def invalidate_caches(self) -> None:
        self._cache.invalidate(*TAG_CACHE_TAGS)
