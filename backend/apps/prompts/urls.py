# apps/prompts/urls.py
"""
Prompt Manager API URLs, mounted under /api/
"""
from django.urls import path

from . import views

app_name = "prompts"

urlpatterns = [
    # Prompts; search must come BEFORE the detail route.
    path("prompts/", views.prompt_list, name="prompt-list"),
    path("prompts/search/", views.search_prompts, name="prompt-search"),
    path("prompts/<uuid:prompt_id>/", views.prompt_detail, name="prompt-detail"),
    path("prompts/<uuid:prompt_id>/move/", views.move_prompt, name="prompt-move"),
    path("prompts/<uuid:prompt_id>/like/", views.toggle_like, name="prompt-like"),
    path("prompts/<uuid:prompt_id>/versions/", views.prompt_versions, name="prompt-versions"),
    path("prompts/<uuid:prompt_id>/tags/", views.add_prompt_tag, name="prompt-tag-add"),
    # Tag names may contain "/"
    path(
        "prompts/<uuid:prompt_id>/tags/<path:tag_name>/",
        views.remove_prompt_tag,
        name="prompt-tag-remove",
    ),
    # Versions
    path("versions/<uuid:version_id>/restore/", views.restore_version, name="version-restore"),
    # Tags
    path("tags/", views.tag_list, name="tag-list"),
    path("tags/search/", views.search_tags, name="tag-search"),
    path("tags/popular/", views.popular_tags, name="tag-popular"),
    path("tags/grouped/", views.tags_with_prompts, name="tag-grouped"),
    path("tags/<uuid:tag_id>/", views.tag_detail, name="tag-detail"),
    # Folders
    path("folders/", views.folder_list, name="folder-list"),
    path("folders/<uuid:folder_id>/", views.folder_detail, name="folder-detail"),
    path("folders/<uuid:folder_id>/move/", views.move_folder, name="folder-move"),
    # Shared prompts
    path("shared-prompts/", views.shared_prompt_list, name="shared-list"),
    path("shared-prompts/<uuid:shared_id>/", views.shared_prompt_detail, name="shared-detail"),
    path("shared-prompts/<uuid:shared_id>/copy/", views.copy_shared_prompt, name="shared-copy"),
    # Dashboard
    path("dashboard/", views.dashboard_summary, name="dashboard"),
]
