# backend/apps/prompts/models.py
"""
Prompt Manager models: prompts, tags, folders, versions, likes and sharing
"""
import uuid

from django.contrib.auth.models import User
from django.db import models


class Tag(models.Model):
    """A global label; names are unique"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True)
    description = models.TextField(max_length=500, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Folder(models.Model):
    """A node in a user's folder tree"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    parent = models.ForeignKey(
        "self",
        related_name="children",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
    )
    owner = models.ForeignKey(User, related_name="folders", on_delete=models.CASCADE)
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "name"]
        indexes = [
            models.Index(fields=["owner", "parent", "order"], name="prompts_folder_tree_idx"),
        ]

    def __str__(self):
        return self.name


class Prompt(models.Model):
    """A user-authored prompt"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)
    content = models.TextField(blank=True, default="")
    order = models.IntegerField(default=0)
    owner = models.ForeignKey(User, related_name="prompts", on_delete=models.CASCADE)
    folder = models.ForeignKey(
        Folder,
        related_name="prompts",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    tags = models.ManyToManyField(Tag, related_name="prompts", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["owner", "-updated_at"], name="prompts_owner_updated_idx"),
            models.Index(fields=["owner", "folder", "order"], name="prompts_owner_folder_idx"),
        ]

    def __str__(self):
        return self.title


class PromptVersion(models.Model):
    """Immutable content snapshot of a prompt"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    prompt = models.ForeignKey(Prompt, related_name="versions", on_delete=models.CASCADE)
    content = models.TextField(blank=True, default="")
    major = models.PositiveIntegerField(default=1)
    minor = models.PositiveIntegerField(default=0)
    change_message = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-major", "-minor"]
        constraints = [
            models.UniqueConstraint(
                fields=["prompt", "major", "minor"], name="unique_prompt_version_label"
            ),
        ]

    def __str__(self):
        return f"{self.prompt_id} v{self.version}"

    @property
    def version(self):
        return f"{self.major}.{self.minor}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Prompt versions are immutable")
        super().save(*args, **kwargs)


class PromptLike(models.Model):
    """One user's like of one prompt"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    prompt = models.ForeignKey(Prompt, related_name="likes", on_delete=models.CASCADE)
    user = models.ForeignKey(User, related_name="prompt_likes", on_delete=models.CASCADE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["prompt", "user"], name="unique_prompt_like"),
        ]

    def __str__(self):
        return f"{self.user_id} likes {self.prompt_id}"


class SharedPrompt(models.Model):
    """
    A prompt published for every user to read and copy

    Title, description and content are a snapshot taken at publish time;
    tags are read from the source prompt.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    prompt = models.OneToOneField(Prompt, related_name="shared", on_delete=models.CASCADE)
    author = models.ForeignKey(User, related_name="shared_prompts", on_delete=models.CASCADE)
    title = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)
    content = models.TextField(blank=True, default="")
    published_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-published_at"]

    def __str__(self):
        return self.title


class PromptCopy(models.Model):
    """One user having copied one shared prompt; repeat copies are not recounted"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shared_prompt = models.ForeignKey(SharedPrompt, related_name="copies", on_delete=models.CASCADE)
    user = models.ForeignKey(User, related_name="prompt_copies", on_delete=models.CASCADE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["shared_prompt", "user"], name="unique_prompt_copy"),
        ]

    def __str__(self):
        return f"{self.user_id} copied {self.shared_prompt_id}"
