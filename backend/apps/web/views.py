# apps/web/views.py
"""
Server-rendered pages

Pages call the same domain services as the JSON API. Domain errors
raised by a form post become flash messages and roll back the request
transaction; a missing or foreign resource is a 404.
"""
import logging
import uuid

from django.contrib import messages
from django.contrib.auth import login
from django.contrib.auth.forms import UserCreationForm
from django.contrib.auth.views import LoginView
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse_lazy
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST
from django.views.generic import CreateView
from rest_framework.views import set_rollback

from apps.core.auth import session_required
from apps.domain.models import (
    DomainException,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from apps.domain.services.sharing_service import SORT_OPTIONS
from apps.domain.state import (
    ALL_PROMPTS,
    SELECTED_TAG_KEY,
    ModalType,
    SelectedTag,
    parse_selected_tag,
)
from apps.infrastructure.container import (
    create_folder_service,
    create_prompt_service,
    create_repositories,
    create_sharing_service,
    create_tag_service,
    create_version_service,
)
from apps.prompts.serializers import VersionCreateSerializer
from apps.web.modals import modal_store

logger = logging.getLogger(__name__)

SELECTED_TAG_MAX_AGE = 60 * 60 * 24 * 365


def _uuid_or_none(value):
    if value in (None, "", "root"):
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise Http404(f"Invalid id: {value}")


def _split_tags(raw):
    return [name.strip() for name in (raw or "").split(",") if name.strip()]


def _safe_next(request, default):
    target = request.POST.get("next") or request.GET.get("next")
    if target and url_has_allowed_host_and_scheme(
        target, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return target
    return default


# ============================================================
# AUTH
# ============================================================

class SignInView(LoginView):
    template_name = "web/sign_in.html"
    redirect_authenticated_user = True

    def form_invalid(self, form):
        logger.warning(f"Failed sign-in for {form.data.get('username')!r}")
        return super().form_invalid(form)


class SignUpView(CreateView):
    """Create an account and sign straight in"""

    form_class = UserCreationForm
    template_name = "web/sign_up.html"
    success_url = reverse_lazy("web:dashboard")

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            return redirect(self.success_url)
        return super().dispatch(request, *args, **kwargs)

    def form_valid(self, form):
        response = super().form_valid(form)
        login(self.request, self.object)
        logger.info(f"New account {self.object.username!r}")
        return response


def index(request):
    return redirect("web:dashboard")


# ============================================================
# PAGES
# ============================================================

@session_required
def dashboard(request):
    summary = create_prompt_service().get_dashboard_summary(request.user.id)
    return render(request, "web/dashboard.html", {"summary": summary})


@session_required
def prompt_list(request):
    """Folder tree on the left, prompts of the chosen folder on the right"""
    user_id = request.user.id
    repositories = create_repositories()
    prompt_service = create_prompt_service(repositories=repositories)
    folder_service = create_folder_service(repositories)

    folder_param = request.GET.get("folder")
    current_folder = None
    try:
        if folder_param is None:
            prompts = prompt_service.get_all_prompts(user_id)
        else:
            folder_id = _uuid_or_none(folder_param)
            if folder_id is not None:
                current_folder = folder_service.get_folder(user_id, folder_id)
            prompts = prompt_service.get_prompts_by_folder(user_id, folder_id)
    except NotFoundError as e:
        raise Http404(str(e))

    return render(
        request,
        "web/prompts.html",
        {
            "folders": folder_service.get_folder_tree(user_id),
            "prompts": prompts,
            "current_folder": current_folder,
            "folder_param": folder_param,
        },
    )


@session_required
def prompt_new(request):
    user_id = request.user.id
    folders = create_folder_service().get_folder_tree(user_id)

    if request.method != "POST":
        return render(
            request,
            "web/prompt_new.html",
            {"folders": folders, "folder_id": request.GET.get("folder", "")},
        )

    try:
        prompt = create_prompt_service().create_prompt(
            user_id,
            title=request.POST.get("title", ""),
            description=request.POST.get("description"),
            content=request.POST.get("content", ""),
            folder_id=_uuid_or_none(request.POST.get("folder_id")),
            tags=_split_tags(request.POST.get("tags")),
        )
    except NotFoundError as e:
        raise Http404(str(e))
    except DomainException as e:
        set_rollback()
        messages.error(request, str(e))
        return render(
            request,
            "web/prompt_new.html",
            {"folders": folders, "form": request.POST},
            status=400,
        )

    messages.success(request, f"Created '{prompt.title}'")
    return redirect("web:prompt_detail", prompt_id=prompt.id)


@session_required
def prompt_detail(request, prompt_id):
    """Editor, tags and version history for one prompt"""
    user_id = request.user.id
    repositories = create_repositories()
    prompt_service = create_prompt_service(repositories=repositories)

    if request.method == "POST":
        try:
            prompt_service.update_prompt(
                user_id,
                prompt_id,
                title=request.POST.get("title"),
                description=request.POST.get("description"),
                content=request.POST.get("content"),
                tags=_split_tags(request.POST.get("tags")) if "tags" in request.POST else None,
                change_message=request.POST.get("change_message") or None,
            )
        except NotFoundError as e:
            raise Http404(str(e))
        except DomainException as e:
            set_rollback()
            messages.error(request, str(e))
        else:
            messages.success(request, "Prompt saved")
        return redirect("web:prompt_detail", prompt_id=prompt_id)

    try:
        prompt = prompt_service.get_prompt(user_id, prompt_id)
        versions = create_version_service(repositories).get_prompt_versions(user_id, prompt_id)
        shared = create_sharing_service(repositories=repositories).get_shared_for_prompt(
            user_id, prompt_id
        )
    except NotFoundError as e:
        raise Http404(str(e))

    return render(
        request,
        "web/prompt_detail.html",
        {
            "prompt": prompt,
            "versions": versions,
            "shared": shared,
            "folders": create_folder_service(repositories).get_folder_tree(user_id),
        },
    )


@session_required
@require_POST
def publish_prompt(request, prompt_id):
    try:
        shared = create_sharing_service().publish_prompt(
            request.user.id,
            prompt_id,
            title=request.POST.get("title") or None,
            description=request.POST.get("description") or None,
        )
    except NotFoundError as e:
        raise Http404(str(e))
    except DomainException as e:
        set_rollback()
        messages.error(request, str(e))
        return redirect("web:prompt_detail", prompt_id=prompt_id)

    messages.success(request, f"Published '{shared.title}'")
    return redirect("web:shared_prompt_detail", shared_id=shared.id)


@session_required
@require_POST
def restore_version(request, version_id):
    try:
        prompt = create_version_service().restore_version(request.user.id, version_id)
    except NotFoundError as e:
        raise Http404(str(e))

    messages.success(request, "Version restored")
    return redirect("web:prompt_detail", prompt_id=prompt.id)


@session_required
def prompt_search(request):
    query = request.GET.get("q", "")
    prompts = create_prompt_service().search_prompts(request.user.id, query)
    return render(request, "web/search.html", {"query": query, "prompts": prompts})


@session_required
def tags_page(request):
    tags = create_tag_service().get_tags_data()
    return render(request, "web/tags.html", {"tags": tags})


@session_required
def group_by_tags(request):
    """
    Tag list beside the prompts of the selected tag

    The selection is kept in the `selectedTag` cookie; `?tag=<id>` or
    `?tag=all` changes it.
    """
    groups = create_tag_service().get_tags_with_prompts(request.user.id)

    selected = parse_selected_tag(request.COOKIES.get(SELECTED_TAG_KEY))
    requested = request.GET.get("tag")
    if requested == "all":
        selected = ALL_PROMPTS
    elif requested:
        match = next((summary for summary, _ in groups if str(summary.id) == requested), None)
        selected = SelectedTag(id=str(match.id), name=match.name) if match else ALL_PROMPTS

    if selected.is_all:
        prompts = create_prompt_service().get_all_prompts(request.user.id)
    else:
        match = next(
            ((summary, prompts) for summary, prompts in groups if str(summary.id) == selected.id),
            None,
        )
        if match is None:
            # The stored tag was deleted since it was chosen
            selected, prompts = ALL_PROMPTS, create_prompt_service().get_all_prompts(request.user.id)
        else:
            summary, prompts = match
            # Names can change after the cookie was written
            selected = SelectedTag(id=str(summary.id), name=summary.name)

    response = render(
        request,
        "web/group_by_tags.html",
        {"groups": groups, "selected": selected, "prompts": prompts},
    )
    response.set_cookie(
        SELECTED_TAG_KEY, selected.dumps(), max_age=SELECTED_TAG_MAX_AGE, samesite="Lax"
    )
    return response


# ============================================================
# SHARED PROMPTS
# ============================================================

@session_required
def shared_prompts(request):
    query = request.GET.get("q", "")
    sort_by = request.GET.get("sort")
    if sort_by not in SORT_OPTIONS:
        sort_by = "recent"

    shared = create_sharing_service().get_shared_prompts(query, sort_by=sort_by)
    return render(
        request,
        "web/shared_prompts.html",
        {"shared_prompts": shared, "query": query, "sort": sort_by},
    )


@session_required
def shared_prompt_detail(request, shared_id):
    try:
        shared = create_sharing_service().get_shared_prompt(shared_id)
    except NotFoundError as e:
        raise Http404(str(e))

    return render(
        request,
        "web/shared_prompt_detail.html",
        {
            "shared": shared,
            "is_author": shared.author_id == request.user.id,
            "folders": create_folder_service().get_folder_tree(request.user.id),
        },
    )


@session_required
@require_POST
def copy_shared_prompt(request, shared_id):
    try:
        prompt = create_sharing_service().copy_shared_prompt(
            request.user.id, shared_id, _uuid_or_none(request.POST.get("folder_id"))
        )
    except NotFoundError as e:
        raise Http404(str(e))

    messages.success(request, f"Copied to '{prompt.title}'")
    return redirect("web:prompt_detail", prompt_id=prompt.id)


@session_required
@require_POST
def unpublish_prompt(request, shared_id):
    try:
        create_sharing_service().unpublish(request.user.id, shared_id)
    except NotFoundError as e:
        raise Http404(str(e))

    messages.success(request, "Prompt unpublished")
    return redirect("web:shared_prompts")


# ============================================================
# MODALS
# ============================================================

@session_required
@require_POST
def modal_open(request):
    """Open a modal; every POST field except type/next becomes its payload"""
    try:
        modal_type = ModalType(request.POST.get("type"))
    except ValueError:
        messages.error(request, "Unknown dialog")
        return redirect(_safe_next(request, "/dashboard"))

    data = {
        key: value
        for key, value in request.POST.items()
        if key not in ("type", "next", "csrfmiddlewaretoken")
    }
    modal_store(request).open(modal_type, data)
    return redirect(_safe_next(request, "/dashboard"))


@session_required
@require_POST
def modal_close(request):
    modal_store(request).close()
    return redirect(_safe_next(request, "/dashboard"))


@session_required
@require_POST
def modal_submit(request):
    """
    Run the action behind the open modal

    On success the modal closes; on a domain error it stays open with
    the error flashed so the user can correct the input.
    """
    store = modal_store(request)
    state = store.state
    next_url = _safe_next(request, "/dashboard")

    if not state.is_open:
        return redirect(next_url)

    handler = MODAL_ACTIONS[state.type]
    try:
        result_url = handler(request, {**state.data, **request.POST.dict()})
    except UnauthorizedError:
        set_rollback()
        return redirect("web:sign_in")
    except DomainException as e:
        set_rollback()
        messages.error(request, str(e))
        return redirect(next_url)

    store.close()
    return redirect(result_url or next_url)


def _create_folder(request, data):
    folder = create_folder_service().create_folder(
        request.user.id, data.get("name", ""), _uuid_or_none(data.get("parent_id"))
    )
    messages.success(request, f"Folder '{folder.name}' created")
    return f"/prompts?folder={folder.id}"


def _rename_folder(request, data):
    create_folder_service().rename_folder(
        request.user.id, _uuid_or_none(data.get("folder_id")), data.get("name", "")
    )
    messages.success(request, "Folder renamed")


def _delete_folder(request, data):
    deleted = create_folder_service().delete_folder(
        request.user.id, _uuid_or_none(data.get("folder_id"))
    )
    messages.success(request, f"Deleted {deleted} folder(s)")
    return "/prompts"


def _create_prompt(request, data):
    prompt = create_prompt_service().create_prompt(
        request.user.id,
        title=data.get("title", ""),
        folder_id=_uuid_or_none(data.get("folder_id")),
    )
    return f"/prompts/{prompt.id}"


def _rename_prompt(request, data):
    create_prompt_service().rename_prompt(
        request.user.id, _uuid_or_none(data.get("prompt_id")), data.get("title", "")
    )
    messages.success(request, "Prompt renamed")


def _move_prompt(request, data):
    create_prompt_service().move_prompt(
        request.user.id,
        _uuid_or_none(data.get("prompt_id")),
        _uuid_or_none(data.get("folder_id")),
    )
    messages.success(request, "Prompt moved")


def _delete_prompt(request, data):
    create_prompt_service().delete_prompt(request.user.id, _uuid_or_none(data.get("prompt_id")))
    messages.success(request, "Prompt deleted")
    return "/prompts"


def _create_tag(request, data):
    tag = create_tag_service().create_tag(data.get("name", ""), data.get("description"))
    messages.success(request, f"Tag '{tag.name}' saved")


def _edit_tag(request, data):
    create_tag_service().update_tag(
        _uuid_or_none(data.get("tag_id")),
        name=data.get("name"),
        description=data.get("description"),
    )
    messages.success(request, "Tag updated")


def _delete_tag(request, data):
    create_tag_service().delete_tag(_uuid_or_none(data.get("tag_id")))
    messages.success(request, "Tag deleted")


def _save_version(request, data):
    serializer = VersionCreateSerializer(data=data)
    if not serializer.is_valid():
        raise ValidationError("Version content and type are required")

    prompt_id = _uuid_or_none(data.get("prompt_id"))
    version = create_version_service().create_prompt_version(
        request.user.id, prompt_id, **serializer.validated_data
    )
    messages.success(request, f"Saved version {version.version}")
    return f"/prompts/{prompt_id}"


MODAL_ACTIONS = {
    ModalType.CREATE_FOLDER: _create_folder,
    ModalType.RENAME_FOLDER: _rename_folder,
    ModalType.DELETE_FOLDER: _delete_folder,
    ModalType.CREATE_PROMPT: _create_prompt,
    ModalType.RENAME_PROMPT: _rename_prompt,
    ModalType.MOVE_PROMPT: _move_prompt,
    ModalType.DELETE_PROMPT: _delete_prompt,
    ModalType.CREATE_TAG: _create_tag,
    ModalType.EDIT_TAG: _edit_tag,
    ModalType.DELETE_TAG: _delete_tag,
    ModalType.SAVE_VERSION: _save_version,
}
