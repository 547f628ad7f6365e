# apps/domain/services/folder_service.py

"""
Folder Service - Folder hierarchy

Keeps the folder tree acyclic: a folder can never become its own
ancestor.
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from apps.domain.models import (
    FOLDER_NAME_MAX_LENGTH,
    Folder,
    ValidationError,
    utcnow,
)
from apps.domain.ports.repositories import IFolderRepository, IPromptRepository
from apps.domain.services.ownership import clean_text, owned_folder

logger = logging.getLogger(__name__)


class FolderService:
    """Folder use cases, scoped to the calling user"""

    def __init__(
        self,
        folder_repo: IFolderRepository,
        prompt_repo: IPromptRepository,
    ):
        self._folder_repo = folder_repo
        self._prompt_repo = prompt_repo

    def get_folder_tree(self, user_id: int) -> List[Folder]:
        """
        Root folders with nested children

        Every level is sorted by position.
        """
        folders = self._folder_repo.list_by_owner(user_id)
        by_id: Dict[UUID, Folder] = {f.id: f for f in folders}

        roots = []
        for folder in folders:
            folder.children = []
        for folder in folders:
            parent = by_id.get(folder.parent_id) if folder.parent_id else None
            if parent is None:
                roots.append(folder)
            else:
                parent.children.append(folder)

        _sort_tree(roots)
        return roots

    def get_folder(self, user_id: int, folder_id: UUID) -> Folder:
        return owned_folder(self._folder_repo, user_id, folder_id)

    def create_folder(
        self, user_id: int, name: str, parent_id: Optional[UUID] = None
    ) -> Folder:
        """
        Create a folder after its last sibling

        Raises:
            ValidationError: If the name is blank or too long
            NotFoundError: If the parent is not the caller's
        """
        name = clean_text(name, "Folder name", FOLDER_NAME_MAX_LENGTH)
        if parent_id is not None:
            owned_folder(self._folder_repo, user_id, parent_id)

        folder = Folder(
            owner_id=user_id,
            name=name,
            parent_id=parent_id,
            order=self._folder_repo.max_order(user_id, parent_id) + 1,
        )
        folder = self._folder_repo.save(folder)

        logger.info(f"Created folder {folder.id} for user {user_id}")
        return folder

    def rename_folder(self, user_id: int, folder_id: UUID, name: str) -> Folder:
        folder = owned_folder(self._folder_repo, user_id, folder_id)
        folder.name = clean_text(name, "Folder name", FOLDER_NAME_MAX_LENGTH)
        folder.updated_at = utcnow()
        return self._folder_repo.save(folder)

    def move_folder(
        self,
        user_id: int,
        folder_id: UUID,
        parent_id: Optional[UUID],
        order: Optional[int] = None,
    ) -> Folder:
        """
        Re-parent a folder (None for the root)

        Raises:
            ValidationError: If the new parent is the folder itself or one
                of its descendants
            NotFoundError: If either folder is not the caller's
        """
        folder = owned_folder(self._folder_repo, user_id, folder_id)

        if parent_id is not None:
            owned_folder(self._folder_repo, user_id, parent_id)
            if self._is_same_or_descendant(parent_id, folder.id):
                raise ValidationError(
                    "A folder cannot be moved into itself or one of its subfolders"
                )

        if order is None:
            order = self._folder_repo.max_order(user_id, parent_id) + 1

        folder.parent_id = parent_id
        folder.order = order
        folder.updated_at = utcnow()
        folder = self._folder_repo.save(folder)

        logger.info(f"Moved folder {folder.id} under {parent_id}")
        return folder

    def delete_folder(self, user_id: int, folder_id: UUID) -> int:
        """
        Delete a folder and all of its subfolders

        Prompts inside any of them move to the root.

        Returns:
            Number of folders deleted
        """
        folder = owned_folder(self._folder_repo, user_id, folder_id)
        doomed = self._subtree(user_id, folder.id)

        root_order = self._prompt_repo.max_order(user_id, None)
        for doomed_id in doomed:
            for prompt in self._prompt_repo.list_by_folder(user_id, doomed_id):
                root_order += 1
                prompt.folder_id = None
                prompt.order = root_order
                self._prompt_repo.save(prompt)

        # Children before parents
        for doomed_id in reversed(doomed):
            self._folder_repo.delete(doomed_id)

        logger.info(f"Deleted folder {folder.id} with {len(doomed) - 1} subfolders")
        return len(doomed)

    def _subtree(self, user_id: int, folder_id: UUID) -> List[UUID]:
        """Folder id followed by its descendants, breadth first"""
        children: Dict[UUID, List[UUID]] = {}
        for f in self._folder_repo.list_by_owner(user_id):
            if f.parent_id is not None:
                children.setdefault(f.parent_id, []).append(f.id)

        ordered = [folder_id]
        index = 0
        while index < len(ordered):
            ordered.extend(
                child for child in children.get(ordered[index], []) if child not in ordered
            )
            index += 1
        return ordered

    def _is_same_or_descendant(self, candidate_id: UUID, ancestor_id: UUID) -> bool:
        seen = set()
        current: Optional[UUID] = candidate_id
        while current is not None and current not in seen:
            if current == ancestor_id:
                return True
            seen.add(current)
            parent = self._folder_repo.get(current)
            current = parent.parent_id if parent else None
        return False


def _sort_tree(folders: List[Folder]) -> None:
    folders.sort(key=lambda f: (f.order, f.name))
    for folder in folders:
        _sort_tree(folder.children)
