# apps/adapters/repositories/django_repos.py
"""
Django ORM Repository Adapters

Implements repository ports using Django models.
"""
from typing import Optional, List
from uuid import UUID
import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Exists, OuterRef, Q, Max, Value, BooleanField

from apps.domain.models import (
    ConflictError,
    Folder,
    Prompt,
    PromptVersion,
    SharedPrompt,
    Tag,
    TagSummary,
    parse_version,
)

logger = logging.getLogger(__name__)


class DjangoTagRepository:
    """
    Tag repository using Django ORM

    Wraps Django Tag model with domain interface.
    """

    def save(self, tag: Tag) -> Tag:
        """
        Save tag to database

        Args:
            tag: Domain Tag object

        Returns:
            Saved tag with database fields populated

        Raises:
            ConflictError: If another tag already has this name
        """
        from apps.prompts.models import Tag as ORMTag

        try:
            with transaction.atomic():
                try:
                    orm_tag = ORMTag.objects.get(id=tag.id)
                    orm_tag.name = tag.name
                    orm_tag.description = tag.description
                    orm_tag.save(update_fields=['name', 'description', 'updated_at'])

                except ORMTag.DoesNotExist:
                    orm_tag = ORMTag.objects.create(
                        id=tag.id,
                        name=tag.name,
                        description=tag.description
                    )

        except IntegrityError as e:
            logger.warning(f"Tag name conflict for '{tag.name}': {e}")
            raise ConflictError(f"A tag named '{tag.name}' already exists")

        return self._to_domain(orm_tag)

    def get(self, tag_id: UUID) -> Optional[Tag]:
        from apps.prompts.models import Tag as ORMTag

        try:
            return self._to_domain(ORMTag.objects.get(id=tag_id))
        except ORMTag.DoesNotExist:
            return None

    def get_by_name(self, name: str) -> Optional[Tag]:
        from apps.prompts.models import Tag as ORMTag

        try:
            return self._to_domain(ORMTag.objects.get(name=name))
        except ORMTag.DoesNotExist:
            return None

    def get_or_create(self, name: str, description: Optional[str] = None) -> Tag:
        """
        Get tag by name or create it

        get_or_create retries the lookup when a concurrent insert wins
        the unique constraint.
        """
        from apps.prompts.models import Tag as ORMTag

        orm_tag, created = ORMTag.objects.get_or_create(
            name=name, defaults={'description': description}
        )
        if created:
            logger.info(f"Created tag '{name}'")
        return self._to_domain(orm_tag)

    def delete(self, tag_id: UUID) -> bool:
        """
        Delete tag after detaching it from its prompts

        Returns:
            True if deleted, False if not found
        """
        from apps.prompts.models import Tag as ORMTag

        try:
            orm_tag = ORMTag.objects.get(id=tag_id)
        except ORMTag.DoesNotExist:
            return False

        orm_tag.prompts.clear()
        orm_tag.delete()
        return True

    def list_with_counts(self) -> List[TagSummary]:
        from apps.prompts.models import Tag as ORMTag

        queryset = ORMTag.objects.annotate(
            prompt_count=Count('prompts', distinct=True)
        ).order_by('name')

        return [self._to_summary(tag) for tag in queryset]

    def popular(self, limit: int) -> List[TagSummary]:
        from apps.prompts.models import Tag as ORMTag

        queryset = ORMTag.objects.annotate(
            prompt_count=Count('prompts', distinct=True)
        ).order_by('-prompt_count', 'name')[:limit]

        return [self._to_summary(tag) for tag in queryset]

    def search(self, query: str, limit: Optional[int] = None) -> List[Tag]:
        from apps.prompts.models import Tag as ORMTag

        queryset = ORMTag.objects.filter(name__icontains=query).order_by('name')

        if limit:
            queryset = queryset[:limit]

        return [self._to_domain(tag) for tag in queryset]

    def count(self) -> int:
        from apps.prompts.models import Tag as ORMTag

        return ORMTag.objects.count()

    def _to_domain(self, orm_tag) -> Tag:
        """Convert ORM model to domain model"""
        return Tag(
            id=orm_tag.id,
            name=orm_tag.name,
            description=orm_tag.description,
            created_at=orm_tag.created_at,
            updated_at=orm_tag.updated_at
        )

    def _to_summary(self, orm_tag) -> TagSummary:
        return TagSummary(
            id=orm_tag.id,
            name=orm_tag.name,
            description=orm_tag.description,
            created_at=orm_tag.created_at,
            prompt_count=orm_tag.prompt_count
        )


class DjangoPromptRepository:
    """
    Prompt repository using Django ORM

    Reads annotate like counts and the viewer's like flag in the same query.
    """

    def __init__(self, tag_repo: Optional[DjangoTagRepository] = None):
        self._tag_repo = tag_repo or DjangoTagRepository()

    def save(self, prompt: Prompt) -> Prompt:
        """
        Save prompt scalars to database

        Args:
            prompt: Domain Prompt object

        Returns:
            Saved prompt (tags and likes are not reloaded)
        """
        from apps.prompts.models import Prompt as ORMPrompt

        try:
            try:
                orm_prompt = ORMPrompt.objects.get(id=prompt.id)
                orm_prompt.title = prompt.title
                orm_prompt.description = prompt.description
                orm_prompt.content = prompt.content
                orm_prompt.folder_id = prompt.folder_id
                orm_prompt.order = prompt.order
                orm_prompt.save(update_fields=[
                    'title', 'description', 'content', 'folder', 'order', 'updated_at'
                ])

            except ORMPrompt.DoesNotExist:
                orm_prompt = ORMPrompt.objects.create(
                    id=prompt.id,
                    owner_id=prompt.owner_id,
                    title=prompt.title,
                    description=prompt.description,
                    content=prompt.content,
                    folder_id=prompt.folder_id,
                    order=prompt.order
                )

            prompt.created_at = orm_prompt.created_at
            prompt.updated_at = orm_prompt.updated_at
            return prompt

        except Exception as e:
            logger.error(f"Error saving prompt {prompt.id}: {e}")
            raise

    def get(self, prompt_id: UUID, viewer_id: Optional[int] = None) -> Optional[Prompt]:
        from apps.prompts.models import Prompt as ORMPrompt

        try:
            orm_prompt = self._queryset(viewer_id).get(id=prompt_id)
            return self._to_domain(orm_prompt)

        except ORMPrompt.DoesNotExist:
            return None

    def delete(self, prompt_id: UUID) -> bool:
        from apps.prompts.models import Prompt as ORMPrompt

        deleted, _ = ORMPrompt.objects.filter(id=prompt_id).delete()
        return deleted > 0

    def list_by_owner(self, owner_id: int, limit: Optional[int] = None) -> List[Prompt]:
        queryset = self._queryset(owner_id).filter(owner_id=owner_id).order_by('-updated_at')

        if limit:
            queryset = queryset[:limit]

        return [self._to_domain(p) for p in queryset]

    def list_by_folder(self, owner_id: int, folder_id: Optional[UUID]) -> List[Prompt]:
        queryset = self._queryset(owner_id).filter(
            owner_id=owner_id, folder_id=folder_id
        ).order_by('order', 'created_at')

        return [self._to_domain(p) for p in queryset]

    def search(self, owner_id: int, query: str) -> List[Prompt]:
        """
        Search prompts by title, content or tag name

        Matching ids are collected first so the tag join cannot duplicate
        rows or skew the like counts.
        """
        from apps.prompts.models import Prompt as ORMPrompt

        matching_ids = ORMPrompt.objects.filter(owner_id=owner_id).filter(
            Q(title__icontains=query)
            | Q(content__icontains=query)
            | Q(tags__name__icontains=query)
        ).values('id')

        queryset = self._queryset(owner_id).filter(id__in=matching_ids).order_by('-updated_at')
        return [self._to_domain(p) for p in queryset]

    def max_order(self, owner_id: int, folder_id: Optional[UUID]) -> int:
        from apps.prompts.models import Prompt as ORMPrompt

        result = ORMPrompt.objects.filter(
            owner_id=owner_id, folder_id=folder_id
        ).aggregate(max_order=Max('order'))
        return result['max_order'] if result['max_order'] is not None else -1

    def count_by_owner(self, owner_id: int) -> int:
        from apps.prompts.models import Prompt as ORMPrompt

        return ORMPrompt.objects.filter(owner_id=owner_id).count()

    def add_tag(self, prompt_id: UUID, tag: Tag) -> None:
        from apps.prompts.models import Prompt as ORMPrompt

        ORMPrompt.tags.through.objects.get_or_create(prompt_id=prompt_id, tag_id=tag.id)

    def remove_tag(self, prompt_id: UUID, tag_id: UUID) -> None:
        from apps.prompts.models import Prompt as ORMPrompt

        ORMPrompt.tags.through.objects.filter(prompt_id=prompt_id, tag_id=tag_id).delete()

    def set_tags(self, prompt_id: UUID, tags: List[Tag]) -> None:
        from apps.prompts.models import Prompt as ORMPrompt

        orm_prompt = ORMPrompt.objects.get(id=prompt_id)
        orm_prompt.tags.set([tag.id for tag in tags])

    def toggle_like(self, prompt_id: UUID, user_id: int) -> bool:
        from apps.prompts.models import PromptLike

        deleted, _ = PromptLike.objects.filter(prompt_id=prompt_id, user_id=user_id).delete()
        if deleted:
            return False

        PromptLike.objects.get_or_create(prompt_id=prompt_id, user_id=user_id)
        return True

    def _queryset(self, viewer_id: Optional[int]):
        from apps.prompts.models import Prompt as ORMPrompt, PromptLike

        if viewer_id is None:
            liked = Value(False, output_field=BooleanField())
        else:
            liked = Exists(
                PromptLike.objects.filter(prompt=OuterRef('pk'), user_id=viewer_id)
            )

        return ORMPrompt.objects.annotate(
            like_count=Count('likes', distinct=True),
            is_liked_by_user=liked,
        ).prefetch_related('tags')

    def _to_domain(self, orm_prompt) -> Prompt:
        """Convert ORM model to domain model"""
        return Prompt(
            id=orm_prompt.id,
            owner_id=orm_prompt.owner_id,
            title=orm_prompt.title,
            description=orm_prompt.description,
            content=orm_prompt.content,
            folder_id=orm_prompt.folder_id,
            order=orm_prompt.order,
            tags=[self._tag_repo._to_domain(t) for t in orm_prompt.tags.all()],
            like_count=orm_prompt.like_count,
            is_liked_by_user=bool(orm_prompt.is_liked_by_user),
            created_at=orm_prompt.created_at,
            updated_at=orm_prompt.updated_at
        )


class DjangoVersionRepository:
    """
    Prompt version repository using Django ORM

    Append-only; the ORM model refuses updates.
    """

    def add(self, version: PromptVersion) -> PromptVersion:
        from apps.prompts.models import PromptVersion as ORMVersion

        major, minor = parse_version(version.version)
        orm_version = ORMVersion.objects.create(
            id=version.id,
            prompt_id=version.prompt_id,
            content=version.content,
            major=major,
            minor=minor,
            change_message=version.change_message
        )
        return self._to_domain(orm_version)

    def get(self, version_id: UUID) -> Optional[PromptVersion]:
        from apps.prompts.models import PromptVersion as ORMVersion

        try:
            return self._to_domain(ORMVersion.objects.get(id=version_id))
        except ORMVersion.DoesNotExist:
            return None

    def list_by_prompt(self, prompt_id: UUID) -> List[PromptVersion]:
        from apps.prompts.models import PromptVersion as ORMVersion

        queryset = ORMVersion.objects.filter(
            prompt_id=prompt_id
        ).order_by('-created_at', '-major', '-minor')

        return [self._to_domain(v) for v in queryset]

    def latest(self, prompt_id: UUID) -> Optional[PromptVersion]:
        from apps.prompts.models import PromptVersion as ORMVersion

        orm_version = ORMVersion.objects.filter(
            prompt_id=prompt_id
        ).order_by('-created_at', '-major', '-minor').first()

        return self._to_domain(orm_version) if orm_version else None

    def count_by_owner(self, owner_id: int) -> int:
        from apps.prompts.models import PromptVersion as ORMVersion

        return ORMVersion.objects.filter(prompt__owner_id=owner_id).count()

    def _to_domain(self, orm_version) -> PromptVersion:
        """Convert ORM model to domain model"""
        return PromptVersion(
            id=orm_version.id,
            prompt_id=orm_version.prompt_id,
            content=orm_version.content,
            version=orm_version.version,
            change_message=orm_version.change_message,
            created_at=orm_version.created_at
        )


class DjangoFolderRepository:
    """
    Folder repository using Django ORM
    """

    def save(self, folder: Folder) -> Folder:
        from apps.prompts.models import Folder as ORMFolder

        try:
            orm_folder = ORMFolder.objects.get(id=folder.id)
            orm_folder.name = folder.name
            orm_folder.parent_id = folder.parent_id
            orm_folder.order = folder.order
            orm_folder.save(update_fields=['name', 'parent', 'order', 'updated_at'])

        except ORMFolder.DoesNotExist:
            orm_folder = ORMFolder.objects.create(
                id=folder.id,
                owner_id=folder.owner_id,
                name=folder.name,
                parent_id=folder.parent_id,
                order=folder.order
            )

        return self._to_domain(orm_folder)

    def get(self, folder_id: UUID) -> Optional[Folder]:
        from apps.prompts.models import Folder as ORMFolder

        try:
            return self._to_domain(ORMFolder.objects.get(id=folder_id))
        except ORMFolder.DoesNotExist:
            return None

    def delete(self, folder_id: UUID) -> bool:
        from apps.prompts.models import Folder as ORMFolder

        deleted, _ = ORMFolder.objects.filter(id=folder_id).delete()
        return deleted > 0

    def list_by_owner(self, owner_id: int) -> List[Folder]:
        from apps.prompts.models import Folder as ORMFolder

        queryset = ORMFolder.objects.filter(owner_id=owner_id).order_by('order', 'name')
        return [self._to_domain(f) for f in queryset]

    def max_order(self, owner_id: int, parent_id: Optional[UUID]) -> int:
        from apps.prompts.models import Folder as ORMFolder

        result = ORMFolder.objects.filter(
            owner_id=owner_id, parent_id=parent_id
        ).aggregate(max_order=Max('order'))
        return result['max_order'] if result['max_order'] is not None else -1

    def count_by_owner(self, owner_id: int) -> int:
        from apps.prompts.models import Folder as ORMFolder

        return ORMFolder.objects.filter(owner_id=owner_id).count()

    def _to_domain(self, orm_folder) -> Folder:
        """Convert ORM model to domain model"""
        return Folder(
            id=orm_folder.id,
            owner_id=orm_folder.owner_id,
            name=orm_folder.name,
            parent_id=orm_folder.parent_id,
            order=orm_folder.order,
            created_at=orm_folder.created_at,
            updated_at=orm_folder.updated_at
        )


class DjangoSharedPromptRepository:
    """
    Shared prompt repository using Django ORM

    Copy counts are annotated from the copy records, tags are prefetched
    from the source prompt.
    """

    SORT_ORDERS = {
        'recent': ('-published_at',),
        'copied': ('-copy_count', '-published_at'),
    }

    def __init__(self, tag_repo: Optional[DjangoTagRepository] = None):
        self._tag_repo = tag_repo or DjangoTagRepository()

    def save(self, shared: SharedPrompt) -> SharedPrompt:
        """
        Publish a snapshot

        Raises:
            ConflictError: If the source prompt is already published
        """
        from apps.prompts.models import SharedPrompt as ORMShared

        try:
            with transaction.atomic():
                ORMShared.objects.create(
                    id=shared.id,
                    prompt_id=shared.prompt_id,
                    author_id=shared.author_id,
                    title=shared.title,
                    description=shared.description,
                    content=shared.content
                )
        except IntegrityError as e:
            logger.warning(f"Prompt {shared.prompt_id} published twice: {e}")
            raise ConflictError("Prompt is already published")

        return self.get(shared.id)

    def get(self, shared_id: UUID) -> Optional[SharedPrompt]:
        from apps.prompts.models import SharedPrompt as ORMShared

        try:
            return self._to_domain(self._queryset().get(id=shared_id))
        except ORMShared.DoesNotExist:
            return None

    def get_by_prompt(self, prompt_id: UUID) -> Optional[SharedPrompt]:
        orm_shared = self._queryset().filter(prompt_id=prompt_id).first()
        return self._to_domain(orm_shared) if orm_shared else None

    def delete(self, shared_id: UUID) -> bool:
        from apps.prompts.models import SharedPrompt as ORMShared

        deleted, _ = ORMShared.objects.filter(id=shared_id).delete()
        return deleted > 0

    def search(self, query: str, sort_by: str = 'recent') -> List[SharedPrompt]:
        queryset = self._queryset()

        if query:
            queryset = queryset.filter(
                Q(title__icontains=query)
                | Q(description__icontains=query)
                | Q(content__icontains=query)
            )

        queryset = queryset.order_by(*self.SORT_ORDERS[sort_by])
        return [self._to_domain(s) for s in queryset]

    def record_copy(self, shared_id: UUID, user_id: int) -> bool:
        from apps.prompts.models import PromptCopy

        _, created = PromptCopy.objects.get_or_create(
            shared_prompt_id=shared_id, user_id=user_id
        )
        return created

    def _queryset(self):
        from apps.prompts.models import SharedPrompt as ORMShared

        return ORMShared.objects.annotate(
            copy_count=Count('copies', distinct=True),
        ).select_related('author', 'prompt').prefetch_related('prompt__tags')

    def _to_domain(self, orm_shared) -> SharedPrompt:
        """Convert ORM model to domain model"""
        return SharedPrompt(
            id=orm_shared.id,
            prompt_id=orm_shared.prompt_id,
            author_id=orm_shared.author_id,
            author_name=orm_shared.author.username,
            title=orm_shared.title,
            description=orm_shared.description,
            content=orm_shared.content,
            tags=[self._tag_repo._to_domain(t) for t in orm_shared.prompt.tags.all()],
            copy_count=orm_shared.copy_count,
            published_at=orm_shared.published_at
        )
