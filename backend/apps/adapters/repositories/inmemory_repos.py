# apps/adapters/repositories/inmemory_repos.py
"""
In-Memory Repository Adapters for testing

All repositories built on the same InMemoryDatabase see each other's
writes, the way ORM repositories share one database.
"""
from typing import Optional, List, Dict, Set, Tuple
from uuid import UUID
from copy import deepcopy

from apps.domain.models import (
    ConflictError,
    Folder,
    Prompt,
    PromptVersion,
    SharedPrompt,
    Tag,
    TagSummary,
)


class InMemoryDatabase:
    """Shared storage for the in-memory repositories"""

    def __init__(self):
        self.prompts: Dict[UUID, Prompt] = {}
        self.tags: Dict[UUID, Tag] = {}
        self.prompt_tags: Dict[UUID, List[UUID]] = {}
        self.likes: Set[Tuple[UUID, int]] = set()
        self.versions: Dict[UUID, PromptVersion] = {}
        self.folders: Dict[UUID, Folder] = {}
        self.shared: Dict[UUID, SharedPrompt] = {}
        self.copies: Set[Tuple[UUID, int]] = set()

    def prompt_count_for_tag(self, tag_id: UUID) -> int:
        return sum(1 for tag_ids in self.prompt_tags.values() if tag_id in tag_ids)

    def drop_shared(self, shared_id: UUID) -> None:
        self.shared.pop(shared_id, None)
        self.copies = {copy for copy in self.copies if copy[0] != shared_id}

    def clear(self):
        """Clear all tables"""
        self.prompts.clear()
        self.tags.clear()
        self.prompt_tags.clear()
        self.likes.clear()
        self.versions.clear()
        self.folders.clear()
        self.shared.clear()
        self.copies.clear()


class InMemoryPromptRepository:
    """
    In-memory prompt repository for testing
    """

    def __init__(self, db: Optional[InMemoryDatabase] = None):
        self._db = db or InMemoryDatabase()

    def save(self, prompt: Prompt) -> Prompt:
        """Save prompt scalars to memory"""
        stored = deepcopy(prompt)
        stored.tags = []
        self._db.prompts[prompt.id] = stored
        self._db.prompt_tags.setdefault(prompt.id, [])
        return prompt

    def get(self, prompt_id: UUID, viewer_id: Optional[int] = None) -> Optional[Prompt]:
        """Get prompt by ID with tags and like data"""
        stored = self._db.prompts.get(prompt_id)
        if stored is None:
            return None
        return self._hydrate(stored, viewer_id)

    def delete(self, prompt_id: UUID) -> bool:
        """Delete prompt, its versions, tag links, likes and shared entry"""
        if prompt_id not in self._db.prompts:
            return False

        del self._db.prompts[prompt_id]
        self._db.prompt_tags.pop(prompt_id, None)
        self._db.likes = {like for like in self._db.likes if like[0] != prompt_id}
        for version_id in [
            v.id for v in self._db.versions.values() if v.prompt_id == prompt_id
        ]:
            del self._db.versions[version_id]
        for shared_id in [
            s.id for s in self._db.shared.values() if s.prompt_id == prompt_id
        ]:
            self._db.drop_shared(shared_id)
        return True

    def list_by_owner(self, owner_id: int, limit: Optional[int] = None) -> List[Prompt]:
        """List prompts of an owner, newest update first"""
        prompts = self._owned(owner_id)
        prompts.sort(key=lambda p: p.updated_at, reverse=True)

        if limit:
            prompts = prompts[:limit]

        return [self._hydrate(p, owner_id) for p in prompts]

    def list_by_folder(self, owner_id: int, folder_id: Optional[UUID]) -> List[Prompt]:
        """List prompts in a folder by position"""
        prompts = [p for p in self._owned(owner_id) if p.folder_id == folder_id]
        prompts.sort(key=lambda p: (p.order, p.created_at))
        return [self._hydrate(p, owner_id) for p in prompts]

    def search(self, owner_id: int, query: str) -> List[Prompt]:
        """Case-insensitive match on title, content and tag names"""
        needle = query.lower()
        matches = [
            p for p in (self._hydrate(s, owner_id) for s in self._owned(owner_id))
            if needle in p.title.lower()
            or needle in p.content.lower()
            or any(needle in name.lower() for name in p.tag_names)
        ]
        matches.sort(key=lambda p: p.updated_at, reverse=True)
        return matches

    def max_order(self, owner_id: int, folder_id: Optional[UUID]) -> int:
        orders = [p.order for p in self._owned(owner_id) if p.folder_id == folder_id]
        return max(orders, default=-1)

    def count_by_owner(self, owner_id: int) -> int:
        return len(self._owned(owner_id))

    def add_tag(self, prompt_id: UUID, tag: Tag) -> None:
        tag_ids = self._db.prompt_tags.setdefault(prompt_id, [])
        if tag.id not in tag_ids:
            tag_ids.append(tag.id)

    def remove_tag(self, prompt_id: UUID, tag_id: UUID) -> None:
        tag_ids = self._db.prompt_tags.get(prompt_id, [])
        if tag_id in tag_ids:
            tag_ids.remove(tag_id)

    def set_tags(self, prompt_id: UUID, tags: List[Tag]) -> None:
        self._db.prompt_tags[prompt_id] = []
        for tag in tags:
            self.add_tag(prompt_id, tag)

    def toggle_like(self, prompt_id: UUID, user_id: int) -> bool:
        key = (prompt_id, user_id)
        if key in self._db.likes:
            self._db.likes.remove(key)
            return False
        self._db.likes.add(key)
        return True

    def clear(self):
        """Clear all prompts"""
        self._db.prompts.clear()
        self._db.prompt_tags.clear()
        self._db.likes.clear()

    def _owned(self, owner_id: int) -> List[Prompt]:
        return [p for p in self._db.prompts.values() if p.owner_id == owner_id]

    def _hydrate(self, stored: Prompt, viewer_id: Optional[int]) -> Prompt:
        prompt = deepcopy(stored)
        tags = [
            deepcopy(self._db.tags[tag_id])
            for tag_id in self._db.prompt_tags.get(stored.id, [])
            if tag_id in self._db.tags
        ]
        prompt.tags = sorted(tags, key=lambda t: t.name)
        prompt.like_count = sum(1 for like in self._db.likes if like[0] == stored.id)
        prompt.is_liked_by_user = (
            viewer_id is not None and (stored.id, viewer_id) in self._db.likes
        )
        return prompt


class InMemoryTagRepository:
    """
    In-memory tag repository for testing
    """

    def __init__(self, db: Optional[InMemoryDatabase] = None):
        self._db = db or InMemoryDatabase()

    def save(self, tag: Tag) -> Tag:
        """Save tag to memory, rejecting duplicate names"""
        clash = self.get_by_name(tag.name)
        if clash is not None and clash.id != tag.id:
            raise ConflictError(f"A tag named '{tag.name}' already exists")
        self._db.tags[tag.id] = deepcopy(tag)
        return tag

    def get(self, tag_id: UUID) -> Optional[Tag]:
        return deepcopy(self._db.tags.get(tag_id))

    def get_by_name(self, name: str) -> Optional[Tag]:
        for tag in self._db.tags.values():
            if tag.name == name:
                return deepcopy(tag)
        return None

    def get_or_create(self, name: str, description: Optional[str] = None) -> Tag:
        existing = self.get_by_name(name)
        if existing is not None:
            return existing
        return self.save(Tag(name=name, description=description))

    def delete(self, tag_id: UUID) -> bool:
        if tag_id not in self._db.tags:
            return False

        for tag_ids in self._db.prompt_tags.values():
            if tag_id in tag_ids:
                tag_ids.remove(tag_id)
        del self._db.tags[tag_id]
        return True

    def list_with_counts(self) -> List[TagSummary]:
        tags = sorted(self._db.tags.values(), key=lambda t: t.name)
        return [self._summary(t) for t in tags]

    def popular(self, limit: int) -> List[TagSummary]:
        summaries = sorted(
            (self._summary(t) for t in self._db.tags.values()),
            key=lambda s: (-s.prompt_count, s.name),
        )
        return summaries[:limit]

    def search(self, query: str, limit: Optional[int] = None) -> List[Tag]:
        needle = query.lower()
        tags = sorted(
            (t for t in self._db.tags.values() if needle in t.name.lower()),
            key=lambda t: t.name,
        )
        if limit:
            tags = tags[:limit]
        return [deepcopy(t) for t in tags]

    def count(self) -> int:
        return len(self._db.tags)

    def clear(self):
        """Clear all tags"""
        self._db.tags.clear()

    def _summary(self, tag: Tag) -> TagSummary:
        return TagSummary(
            id=tag.id,
            name=tag.name,
            description=tag.description,
            created_at=tag.created_at,
            prompt_count=self._db.prompt_count_for_tag(tag.id),
        )


class InMemoryVersionRepository:
    """
    In-memory version repository for testing
    """

    def __init__(self, db: Optional[InMemoryDatabase] = None):
        self._db = db or InMemoryDatabase()

    def add(self, version: PromptVersion) -> PromptVersion:
        self._db.versions[version.id] = version
        return version

    def get(self, version_id: UUID) -> Optional[PromptVersion]:
        return self._db.versions.get(version_id)

    def list_by_prompt(self, prompt_id: UUID) -> List[PromptVersion]:
        versions = [v for v in self._db.versions.values() if v.prompt_id == prompt_id]
        versions.sort(key=lambda v: (v.created_at, v.major, v.minor), reverse=True)
        return versions

    def latest(self, prompt_id: UUID) -> Optional[PromptVersion]:
        versions = self.list_by_prompt(prompt_id)
        return versions[0] if versions else None

    def count_by_owner(self, owner_id: int) -> int:
        owned = {p.id for p in self._db.prompts.values() if p.owner_id == owner_id}
        return sum(1 for v in self._db.versions.values() if v.prompt_id in owned)

    def clear(self):
        """Clear all versions"""
        self._db.versions.clear()


class InMemoryFolderRepository:
    """
    In-memory folder repository for testing
    """

    def __init__(self, db: Optional[InMemoryDatabase] = None):
        self._db = db or InMemoryDatabase()

    def save(self, folder: Folder) -> Folder:
        stored = deepcopy(folder)
        stored.children = []
        self._db.folders[folder.id] = stored
        return folder

    def get(self, folder_id: UUID) -> Optional[Folder]:
        return deepcopy(self._db.folders.get(folder_id))

    def delete(self, folder_id: UUID) -> bool:
        if folder_id in self._db.folders:
            del self._db.folders[folder_id]
            return True
        return False

    def list_by_owner(self, owner_id: int) -> List[Folder]:
        folders = [f for f in self._db.folders.values() if f.owner_id == owner_id]
        folders.sort(key=lambda f: (f.order, f.name))
        return [deepcopy(f) for f in folders]

    def max_order(self, owner_id: int, parent_id: Optional[UUID]) -> int:
        orders = [
            f.order for f in self._db.folders.values()
            if f.owner_id == owner_id and f.parent_id == parent_id
        ]
        return max(orders, default=-1)

    def count_by_owner(self, owner_id: int) -> int:
        return sum(1 for f in self._db.folders.values() if f.owner_id == owner_id)

    def clear(self):
        """Clear all folders"""
        self._db.folders.clear()


class InMemorySharedPromptRepository:
    """
    In-memory shared prompt repository for testing
    """

    def __init__(self, db: Optional[InMemoryDatabase] = None):
        self._db = db or InMemoryDatabase()

    def save(self, shared: SharedPrompt) -> SharedPrompt:
        if self.get_by_prompt(shared.prompt_id) is not None:
            raise ConflictError("Prompt is already published")
        stored = deepcopy(shared)
        stored.tags = []
        self._db.shared[shared.id] = stored
        return self._hydrate(stored)

    def get(self, shared_id: UUID) -> Optional[SharedPrompt]:
        stored = self._db.shared.get(shared_id)
        return self._hydrate(stored) if stored else None

    def get_by_prompt(self, prompt_id: UUID) -> Optional[SharedPrompt]:
        for stored in self._db.shared.values():
            if stored.prompt_id == prompt_id:
                return self._hydrate(stored)
        return None

    def delete(self, shared_id: UUID) -> bool:
        if shared_id not in self._db.shared:
            return False
        self._db.drop_shared(shared_id)
        return True

    def search(self, query: str, sort_by: str = "recent") -> List[SharedPrompt]:
        needle = query.lower()
        matches = [
            self._hydrate(s) for s in self._db.shared.values()
            if needle in s.title.lower()
            or needle in (s.description or "").lower()
            or needle in s.content.lower()
        ]
        if sort_by == "copied":
            matches.sort(key=lambda s: (s.copy_count, s.published_at), reverse=True)
        else:
            matches.sort(key=lambda s: s.published_at, reverse=True)
        return matches

    def record_copy(self, shared_id: UUID, user_id: int) -> bool:
        key = (shared_id, user_id)
        if key in self._db.copies:
            return False
        self._db.copies.add(key)
        return True

    def _hydrate(self, stored: SharedPrompt) -> SharedPrompt:
        shared = deepcopy(stored)
        tags = [
            deepcopy(self._db.tags[tag_id])
            for tag_id in self._db.prompt_tags.get(stored.prompt_id, [])
            if tag_id in self._db.tags
        ]
        shared.tags = sorted(tags, key=lambda t: t.name)
        shared.copy_count = sum(1 for copy in self._db.copies if copy[0] == stored.id)
        return shared
