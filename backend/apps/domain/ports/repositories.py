# apps/domain/ports/repositories.py

"""
Repository Ports - Interfaces for data persistence

These ports define contracts for accessing stored data.
"""

from typing import Protocol, Optional, List
from uuid import UUID

from apps.domain.models import Folder, Prompt, PromptVersion, SharedPrompt, Tag, TagSummary


class IPromptRepository(Protocol):
    """
    Interface for prompt persistence

    Handles prompts, their tag associations and likes. Reads take an
    optional viewer so `is_liked_by_user` can be filled in.
    """

    def save(self, prompt: Prompt) -> Prompt:
        """
        Save a prompt (create or update)

        Only scalar fields are written; tags are managed through
        `add_tag`, `remove_tag` and `set_tags`.

        Args:
            prompt: Prompt domain object to save

        Returns:
            Saved prompt with any generated fields populated
        """
        ...

    def get(self, prompt_id: UUID, viewer_id: Optional[int] = None) -> Optional[Prompt]:
        """
        Retrieve a prompt by ID

        Args:
            prompt_id: UUID of the prompt
            viewer_id: User whose like state should be reported

        Returns:
            Prompt with tags and like data if found, None otherwise
        """
        ...

    def delete(self, prompt_id: UUID) -> bool:
        """
        Delete a prompt together with its versions and likes

        Returns:
            True if deleted, False if not found
        """
        ...

    def list_by_owner(self, owner_id: int, limit: Optional[int] = None) -> List[Prompt]:
        """
        Get all prompts of an owner

        Returns:
            List of prompts ordered by updated_at (newest first)
        """
        ...

    def list_by_folder(self, owner_id: int, folder_id: Optional[UUID]) -> List[Prompt]:
        """
        Get the prompts directly inside a folder

        Args:
            owner_id: Owner of the prompts
            folder_id: Folder UUID, or None for prompts at the root

        Returns:
            List of prompts ordered by their position
        """
        ...

    def search(self, owner_id: int, query: str) -> List[Prompt]:
        """
        Case-insensitive search over title, content and tag names

        Args:
            owner_id: Owner of the prompts
            query: Substring to look for; an empty string matches everything

        Returns:
            Matching prompts ordered by updated_at (newest first)
        """
        ...

    def max_order(self, owner_id: int, folder_id: Optional[UUID]) -> int:
        """Highest position inside a folder, -1 when it is empty"""
        ...

    def count_by_owner(self, owner_id: int) -> int:
        ...

    def add_tag(self, prompt_id: UUID, tag: Tag) -> None:
        """Associate a tag; associating twice keeps a single association"""
        ...

    def remove_tag(self, prompt_id: UUID, tag_id: UUID) -> None:
        """Dissociate a tag; a missing association is a no-op"""
        ...

    def set_tags(self, prompt_id: UUID, tags: List[Tag]) -> None:
        """Replace the whole tag set of a prompt"""
        ...

    def toggle_like(self, prompt_id: UUID, user_id: int) -> bool:
        """
        Like or unlike a prompt

        Returns:
            True if the prompt is liked after the call
        """
        ...


class ITagRepository(Protocol):
    """
    Interface for tag persistence

    Tags are global; names are unique.
    """

    def save(self, tag: Tag) -> Tag:
        """
        Save a tag (create or update)

        Raises:
            ConflictError: If another tag already uses the name
        """
        ...

    def get(self, tag_id: UUID) -> Optional[Tag]:
        ...

    def get_by_name(self, name: str) -> Optional[Tag]:
        """Exact-match lookup by name"""
        ...

    def get_or_create(self, name: str, description: Optional[str] = None) -> Tag:
        """
        Return the tag with this name, creating it when missing

        Safe against concurrent creation of the same name.
        """
        ...

    def delete(self, tag_id: UUID) -> bool:
        """
        Delete a tag, detaching it from every prompt first

        Returns:
            True if deleted, False if not found
        """
        ...

    def list_with_counts(self) -> List[TagSummary]:
        """
        All tags with their prompt counts

        Returns:
            List of TagSummary ordered alphabetically by name
        """
        ...

    def popular(self, limit: int) -> List[TagSummary]:
        """Tags with the most prompts first"""
        ...

    def search(self, query: str, limit: Optional[int] = None) -> List[Tag]:
        """Case-insensitive substring match on names, alphabetical"""
        ...

    def count(self) -> int:
        ...


class IVersionRepository(Protocol):
    """
    Interface for prompt version persistence

    Append-only: there is no update and no single-version delete.
    """

    def add(self, version: PromptVersion) -> PromptVersion:
        """Append a version"""
        ...

    def get(self, version_id: UUID) -> Optional[PromptVersion]:
        ...

    def list_by_prompt(self, prompt_id: UUID) -> List[PromptVersion]:
        """
        All versions of a prompt

        Returns:
            List ordered newest first (created_at, then label)
        """
        ...

    def latest(self, prompt_id: UUID) -> Optional[PromptVersion]:
        ...

    def count_by_owner(self, owner_id: int) -> int:
        ...


class IFolderRepository(Protocol):
    """
    Interface for folder persistence
    """

    def save(self, folder: Folder) -> Folder:
        """Save a folder (create or update); children are ignored"""
        ...

    def get(self, folder_id: UUID) -> Optional[Folder]:
        ...

    def delete(self, folder_id: UUID) -> bool:
        """Delete one folder row; callers handle subfolders and prompts"""
        ...

    def list_by_owner(self, owner_id: int) -> List[Folder]:
        """
        All folders of an owner as a flat list

        Returns:
            List ordered by position
        """
        ...

    def max_order(self, owner_id: int, parent_id: Optional[UUID]) -> int:
        """Highest position among siblings, -1 when there are none"""
        ...

    def count_by_owner(self, owner_id: int) -> int:
        ...


class ISharedPromptRepository(Protocol):
    """
    Interface for published prompts and their copy records

    A prompt is published at most once. Deleting the source prompt
    removes its shared entry.
    """

    def save(self, shared: SharedPrompt) -> SharedPrompt:
        """Publish a snapshot; tags and copy_count are not written"""
        ...

    def get(self, shared_id: UUID) -> Optional[SharedPrompt]:
        """Shared prompt with source tags and copy count"""
        ...

    def get_by_prompt(self, prompt_id: UUID) -> Optional[SharedPrompt]:
        ...

    def delete(self, shared_id: UUID) -> bool:
        """Unpublish, dropping the copy records"""
        ...

    def search(self, query: str, sort_by: str = "recent") -> List[SharedPrompt]:
        """
        Case-insensitive match on title, description and content

        Args:
            query: Substring to look for; an empty string matches everything
            sort_by: "recent" (newest first) or "copied" (most copied first)
        """
        ...

    def record_copy(self, shared_id: UUID, user_id: int) -> bool:
        """
        Note that a user copied a shared prompt

        Returns:
            True the first time this user copies it, False afterwards
        """
        ...
