# apps/prompts/admin.py
"""
Admin configuration for prompt models
"""
from django.contrib import admin

from .models import Folder, Prompt, PromptLike, PromptVersion, SharedPrompt, Tag


class PromptVersionInline(admin.TabularInline):
    model = PromptVersion
    extra = 0
    fields = ["version", "change_message", "created_at"]
    readonly_fields = ["version", "change_message", "created_at"]
    can_delete = False

    def has_add_permission(self, request, obj=None):
        # Versions are append-only through the services
        return False


@admin.register(Prompt)
class PromptAdmin(admin.ModelAdmin):
    list_display = ["title", "owner", "folder", "tag_list", "version_count", "updated_at"]
    list_filter = ["tags", "created_at"]
    search_fields = ["title", "content", "tags__name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    filter_horizontal = ["tags"]
    inlines = [PromptVersionInline]

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related("tags", "versions")

    def tag_list(self, obj):
        return ", ".join(tag.name for tag in obj.tags.all())

    tag_list.short_description = "Tags"

    def version_count(self, obj):
        return len(obj.versions.all())

    version_count.short_description = "Versions"


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "description", "prompt_count", "created_at"]
    search_fields = ["name", "description"]
    readonly_fields = ["id", "created_at", "updated_at"]

    def prompt_count(self, obj):
        return obj.prompts.count()

    prompt_count.short_description = "Prompts"


@admin.register(Folder)
class FolderAdmin(admin.ModelAdmin):
    list_display = ["name", "owner", "parent", "order", "created_at"]
    list_filter = ["owner"]
    search_fields = ["name"]
    readonly_fields = ["id", "created_at", "updated_at"]


@admin.register(PromptLike)
class PromptLikeAdmin(admin.ModelAdmin):
    list_display = ["prompt", "user", "created_at"]
    readonly_fields = ["id", "created_at"]


@admin.register(SharedPrompt)
class SharedPromptAdmin(admin.ModelAdmin):
    list_display = ["title", "author", "copy_count", "published_at"]
    search_fields = ["title", "description", "content"]
    readonly_fields = ["id", "published_at"]

    def copy_count(self, obj):
        return obj.copies.count()

    copy_count.short_description = "Copies"
