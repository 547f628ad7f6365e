# apps/domain/models.py#

"""
Domain Models - Value Objects and Entities

Value Objects: Immutable, defined by attributes (e.g., PromptVersion, TagSummary)
Entities: Have identity, mutable (e.g., Prompt, Tag, Folder, SharedPrompt)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Tuple
from datetime import datetime, timezone
from uuid import UUID, uuid4
from enum import Enum


TAG_NAME_MAX_LENGTH = 50
TAG_DESCRIPTION_MAX_LENGTH = 500
PROMPT_TITLE_MAX_LENGTH = 255
FOLDER_NAME_MAX_LENGTH = 255

INITIAL_VERSION = "1.0"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VersionType(str, Enum):
    """How far a saved version moves the label"""
    MINOR = "minor"
    MAJOR = "major"


# ============================================================
# VALUE OBJECTS (Immutable)
# ============================================================

@dataclass(frozen=True)
class PromptVersion:
    """
    An immutable snapshot of a prompt's content

    Versions are appended, never updated. The label is "<major>.<minor>".
    """
    prompt_id: UUID
    content: str
    version: str = INITIAL_VERSION
    change_message: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)

    @property
    def major(self) -> int:
        return parse_version(self.version)[0]

    @property
    def minor(self) -> int:
        return parse_version(self.version)[1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'prompt_id': str(self.prompt_id),
            'content': self.content,
            'version': self.version,
            'change_message': self.change_message,
            'created_at': self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class TagSummary:
    """
    A tag row as shown in tag listings

    Carries the aggregate prompt count alongside the tag metadata.
    """
    id: UUID
    name: str
    description: Optional[str]
    created_at: datetime
    prompt_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'name': self.name,
            'description': self.description,
            'created_at': self.created_at.isoformat(),
            'prompt_count': self.prompt_count,
        }


@dataclass(frozen=True)
class DashboardSummary:
    """Counts and highlights for the dashboard page"""
    prompt_count: int
    folder_count: int
    tag_count: int
    version_count: int
    recent_prompts: List["Prompt"] = field(default_factory=list)
    top_tags: List[TagSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'prompt_count': self.prompt_count,
            'folder_count': self.folder_count,
            'tag_count': self.tag_count,
            'version_count': self.version_count,
            'recent_prompts': [p.to_dict() for p in self.recent_prompts],
            'top_tags': [t.to_dict() for t in self.top_tags],
        }


# ============================================================
# ENTITIES (Have Identity, Mutable)
# ============================================================

@dataclass
class Tag:
    """
    A named label attachable to many prompts

    Names are unique across the whole tag set.
    """
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    description: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'name': self.name,
            'description': self.description,
            'created_at': self.created_at.isoformat(),
        }


@dataclass
class Prompt:
    """
    A user-authored prompt

    `like_count` and `is_liked_by_user` are derived per read for the viewer.
    """
    id: UUID = field(default_factory=uuid4)
    owner_id: Optional[int] = None
    title: str = ""
    description: Optional[str] = None
    content: str = ""
    folder_id: Optional[UUID] = None
    order: int = 0
    tags: List[Tag] = field(default_factory=list)
    like_count: int = 0
    is_liked_by_user: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.tags]

    def has_tag(self, name: str) -> bool:
        return name in self.tag_names

    def touch(self) -> None:
        self.updated_at = utcnow()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'title': self.title,
            'description': self.description,
            'content': self.content,
            'folder_id': str(self.folder_id) if self.folder_id else None,
            'order': self.order,
            'tags': [tag.to_dict() for tag in self.tags],
            'like_count': self.like_count,
            'is_liked_by_user': self.is_liked_by_user,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }


@dataclass
class Folder:
    """
    A hierarchical container for prompts

    `children` is only populated when a tree is built.
    """
    id: UUID = field(default_factory=uuid4)
    owner_id: Optional[int] = None
    name: str = ""
    parent_id: Optional[UUID] = None
    order: int = 0
    children: List["Folder"] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'name': self.name,
            'parent_id': str(self.parent_id) if self.parent_id else None,
            'order': self.order,
            'children': [child.to_dict() for child in self.children],
        }


@dataclass
class SharedPrompt:
    """
    A published snapshot of a prompt, readable and copyable by everyone

    `tags` come from the source prompt; `copy_count` counts distinct
    users who copied it.
    """
    prompt_id: UUID
    author_id: int
    title: str
    content: str = ""
    description: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    author_name: str = ""
    tags: List[Tag] = field(default_factory=list)
    copy_count: int = 0
    published_at: datetime = field(default_factory=utcnow)

    @property
    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.tags]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'prompt_id': str(self.prompt_id),
            'author': self.author_name,
            'title': self.title,
            'description': self.description,
            'content': self.content,
            'tags': [tag.to_dict() for tag in self.tags],
            'copy_count': self.copy_count,
            'published_at': self.published_at.isoformat(),
        }


# ============================================================
# HELPERS
# ============================================================

def parse_version(label: str) -> Tuple[int, int]:
    """
    Split a "<major>.<minor>" label into integers

    Raises:
        ValidationError: If the label is malformed
    """
    try:
        major, minor = label.split(".")
        return int(major), int(minor)
    except (ValueError, AttributeError):
        raise ValidationError(f"Invalid version label: {label!r}")


def next_version(latest: Optional[str], version_type: VersionType = VersionType.MINOR) -> str:
    """
    Label that follows `latest`

    "1.0" when there is no previous version, "X.(Y+1)" for a minor
    bump and "(X+1).0" for a major bump.
    """
    if latest is None:
        return INITIAL_VERSION

    major, minor = parse_version(latest)
    if version_type == VersionType.MAJOR:
        return f"{major + 1}.0"
    return f"{major}.{minor + 1}"


# ============================================================
# DOMAIN EXCEPTIONS
# ============================================================

class DomainException(Exception):
    """Base exception for domain layer"""
    pass


class ValidationError(DomainException):
    """Raised when domain validation fails"""
    pass


class NotFoundError(DomainException):
    """Raised when entity not found or not visible to the caller"""
    pass


class UnauthorizedError(DomainException):
    """Raised when there is no valid session"""
    pass


class ConflictError(DomainException):
    """Raised when a write collides with an existing unique value"""
    pass
