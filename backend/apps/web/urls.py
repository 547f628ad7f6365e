# apps/web/urls.py
"""
Page URLs

Page paths carry no trailing slash.
"""
from django.contrib.auth.views import LogoutView
from django.urls import path

from . import views

app_name = "web"

urlpatterns = [
    path("", views.index, name="index"),
    path("sign-in", views.SignInView.as_view(), name="sign_in"),
    path("sign-up", views.SignUpView.as_view(), name="sign_up"),
    path("sign-out", LogoutView.as_view(), name="sign_out"),
    path("dashboard", views.dashboard, name="dashboard"),
    # /prompts/new and /prompts/search must come BEFORE the detail route
    path("prompts", views.prompt_list, name="prompts"),
    path("prompts/new", views.prompt_new, name="prompt_new"),
    path("prompts/search", views.prompt_search, name="prompt_search"),
    path("prompts/<uuid:prompt_id>", views.prompt_detail, name="prompt_detail"),
    path("prompts/<uuid:prompt_id>/publish", views.publish_prompt, name="prompt_publish"),
    path("versions/<uuid:version_id>/restore", views.restore_version, name="version_restore"),
    path("tags", views.tags_page, name="tags"),
    path("group-by-tags", views.group_by_tags, name="group_by_tags"),
    path("shared-prompts", views.shared_prompts, name="shared_prompts"),
    path("shared-prompts/<uuid:shared_id>", views.shared_prompt_detail, name="shared_prompt_detail"),
    path("shared-prompts/<uuid:shared_id>/copy", views.copy_shared_prompt, name="shared_prompt_copy"),
    path(
        "shared-prompts/<uuid:shared_id>/unpublish",
        views.unpublish_prompt,
        name="shared_prompt_unpublish",
    ),
    path("modals/open/", views.modal_open, name="modal_open"),
    path("modals/close/", views.modal_close, name="modal_close"),
    path("modals/submit/", views.modal_submit, name="modal_submit"),
]
