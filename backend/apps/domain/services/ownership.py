# apps/domain/services/ownership.py

"""
Ownership checks and input cleaning shared by the services

A resource that exists but belongs to someone else is reported exactly
like a missing one, so callers cannot discover foreign ids.
"""

from typing import Optional
from uuid import UUID

from apps.domain.models import Folder, NotFoundError, Prompt, ValidationError
from apps.domain.ports.repositories import IFolderRepository, IPromptRepository


def owned_prompt(
    prompt_repo: IPromptRepository, user_id: int, prompt_id: UUID
) -> Prompt:
    prompt = prompt_repo.get(prompt_id, viewer_id=user_id)
    if prompt is None or prompt.owner_id != user_id:
        raise NotFoundError(f"Prompt {prompt_id} not found")
    return prompt


def owned_folder(
    folder_repo: IFolderRepository, user_id: int, folder_id: UUID
) -> Folder:
    folder = folder_repo.get(folder_id)
    if folder is None or folder.owner_id != user_id:
        raise NotFoundError(f"Folder {folder_id} not found")
    return folder


def clean_text(
    value: Optional[str], field_name: str, max_length: int, required: bool = True
) -> Optional[str]:
    """
    Trim a user-supplied string and check its length

    Raises:
        ValidationError: If a required value is blank or any value is too long
    """
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    value = value.strip()
    if required and not value:
        raise ValidationError(f"{field_name} cannot be empty")
    if len(value) > max_length:
        raise ValidationError(
            f"{field_name} must be at most {max_length} characters"
        )
    return value


def normalize_newlines(value: Optional[str]) -> Optional[str]:
    """Store content with LF line endings whatever the client submitted"""
    if value is None:
        return None
    return value.replace("\r\n", "\n").replace("\r", "\n")
