# apps/prompts/views.py
"""
Prompt Manager API

Each view is one server action: it resolves the caller from the
session, validates the request body and calls a domain service.
Domain exceptions are turned into {"error": ...} responses by
apps.core.exceptions.domain_exception_handler.
"""
import logging
import uuid

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.settings import api_settings

from apps.core.auth import require_auth
from apps.infrastructure.config import get_config
from apps.infrastructure.container import (
    create_folder_service,
    create_prompt_service,
    create_repositories,
    create_sharing_service,
    create_tag_service,
    create_version_service,
)

from .serializers import (
    CopySerializer,
    FolderCreateSerializer,
    FolderMoveSerializer,
    FolderRenameSerializer,
    PromptCreateSerializer,
    PromptMoveSerializer,
    PromptUpdateSerializer,
    PublishSerializer,
    TagNameSerializer,
    TagSerializer,
    TagUpdateSerializer,
    VersionCreateSerializer,
)

logger = logging.getLogger(__name__)


def _invalid(serializer):
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# ============================================================
# PROMPTS
# ============================================================

@extend_schema(
    tags=["Prompts"],
    summary="List or create prompts",
    parameters=[
        OpenApiParameter("folder", OpenApiTypes.STR, description="Folder id, or 'root'"),
    ],
    request=PromptCreateSerializer,
    responses={200: OpenApiTypes.OBJECT, 201: OpenApiTypes.OBJECT},
)
@api_view(["GET", "POST"])
def prompt_list(request):
    """
    GET: the caller's prompts, newest first; `?folder=<id>` or
    `?folder=root` lists one folder by manual order.
    POST: create a prompt with its initial version.
    """
    user_id = require_auth(request)
    service = create_prompt_service()

    if request.method == "GET":
        folder = request.query_params.get("folder")
        if folder is None:
            prompts = service.get_all_prompts(user_id)
        elif folder in ("", "root"):
            prompts = service.get_prompts_by_folder(user_id, None)
        else:
            try:
                folder_id = uuid.UUID(folder)
            except ValueError:
                return Response(
                    {"error": f"Invalid folder id: {folder}"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            prompts = service.get_prompts_by_folder(user_id, folder_id)
        return Response([prompt.to_dict() for prompt in prompts])

    serializer = PromptCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    prompt = service.create_prompt(user_id, **serializer.validated_data)
    return Response(prompt.to_dict(), status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Prompts"],
    summary="Search prompts",
    description=(
        "Case-insensitive match on title, content or any tag name. "
        "An empty query returns all of the caller's prompts."
    ),
    parameters=[OpenApiParameter("q", OpenApiTypes.STR)],
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["GET"])
def search_prompts(request):
    user_id = require_auth(request)
    query = request.query_params.get("q", "")

    prompts = create_prompt_service().search_prompts(user_id, query)
    return Response([prompt.to_dict() for prompt in prompts])


@extend_schema(
    tags=["Prompts"],
    summary="Read, edit or delete a prompt",
    request=PromptUpdateSerializer,
    responses={200: OpenApiTypes.OBJECT, 204: None},
)
@api_view(["GET", "PATCH", "DELETE"])
def prompt_detail(request, prompt_id):
    user_id = require_auth(request)
    repositories = create_repositories()
    service = create_prompt_service(repositories=repositories)

    if request.method == "GET":
        prompt = service.get_prompt(user_id, prompt_id)
        versions = create_version_service(repositories).get_prompt_versions(user_id, prompt_id)

        data = prompt.to_dict()
        data["versions"] = [version.to_dict() for version in versions]
        return Response(data)

    if request.method == "DELETE":
        service.delete_prompt(user_id, prompt_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = PromptUpdateSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        return _invalid(serializer)

    prompt = service.update_prompt(user_id, prompt_id, **serializer.validated_data)
    return Response(prompt.to_dict())


@extend_schema(
    tags=["Prompts"],
    summary="Move a prompt to a folder",
    request=PromptMoveSerializer,
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["POST"])
def move_prompt(request, prompt_id):
    user_id = require_auth(request)

    serializer = PromptMoveSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    prompt = create_prompt_service().move_prompt(
        user_id,
        prompt_id,
        serializer.validated_data["folder_id"],
        serializer.validated_data.get("order"),
    )
    return Response(prompt.to_dict())


@extend_schema(
    tags=["Prompts"],
    summary="Like or unlike a prompt",
    request=None,
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["POST"])
def toggle_like(request, prompt_id):
    user_id = require_auth(request)

    liked = create_prompt_service().toggle_like(user_id, prompt_id)
    return Response({"liked": liked})


# ============================================================
# VERSIONS
# ============================================================

@extend_schema(
    tags=["Versions"],
    summary="List or save prompt versions",
    request=VersionCreateSerializer,
    responses={200: OpenApiTypes.OBJECT, 201: OpenApiTypes.OBJECT},
)
@api_view(["GET", "POST"])
def prompt_versions(request, prompt_id):
    """
    GET: versions of the prompt, newest first.
    POST: save new content as a minor or major version.
    """
    user_id = require_auth(request)
    service = create_version_service()

    if request.method == "GET":
        versions = service.get_prompt_versions(user_id, prompt_id)
        return Response([version.to_dict() for version in versions])

    serializer = VersionCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    version = service.create_prompt_version(user_id, prompt_id, **serializer.validated_data)
    return Response(version.to_dict(), status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Versions"],
    summary="Restore a version",
    description="Make the version's snapshot the prompt's current content.",
    request=None,
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["POST"])
def restore_version(request, version_id):
    user_id = require_auth(request)

    prompt = create_version_service().restore_version(user_id, version_id)
    return Response(prompt.to_dict())


# ============================================================
# PROMPT TAGS
# ============================================================

@extend_schema(
    tags=["Tags"],
    summary="Attach a tag to a prompt",
    description="Creates the tag when it does not exist. Attaching twice is a no-op.",
    request=TagNameSerializer,
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["POST"])
def add_prompt_tag(request, prompt_id):
    user_id = require_auth(request)

    serializer = TagNameSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    prompt = create_tag_service().add_tag_to_prompt(
        user_id, prompt_id, serializer.validated_data["name"]
    )
    return Response(prompt.to_dict())


@extend_schema(
    tags=["Tags"],
    summary="Detach a tag from a prompt",
    description="Unknown or unattached tags are a no-op.",
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["DELETE"])
def remove_prompt_tag(request, prompt_id, tag_name):
    user_id = require_auth(request)

    prompt = create_tag_service().remove_tag_from_prompt(user_id, prompt_id, tag_name)
    return Response(prompt.to_dict())


# ============================================================
# TAGS
# ============================================================

@extend_schema(
    tags=["Tags"],
    summary="List or create tags",
    description="Tags with prompt counts, alphabetical. The listing is cached.",
    request=TagSerializer,
    responses={200: OpenApiTypes.OBJECT, 201: OpenApiTypes.OBJECT},
)
@api_view(["GET", "POST"])
def tag_list(request):
    require_auth(request)
    service = create_tag_service()

    if request.method == "GET":
        return Response([summary.to_dict() for summary in service.get_tags_data()])

    serializer = TagSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    tag = service.create_tag(**serializer.validated_data)
    return Response(tag.to_dict(), status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Tags"],
    summary="Search tags by name",
    parameters=[
        OpenApiParameter("q", OpenApiTypes.STR),
        OpenApiParameter("limit", OpenApiTypes.INT),
    ],
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["GET"])
def search_tags(request):
    require_auth(request)
    query = request.query_params.get("q", "")
    limit = _limit(request, default=get_config()["tags"]["search_limit"])

    tags = create_tag_service().search_tags(query, limit=limit)
    return Response([tag.to_dict() for tag in tags])


@extend_schema(
    tags=["Tags"],
    summary="Most used tags",
    parameters=[OpenApiParameter("limit", OpenApiTypes.INT)],
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["GET"])
def popular_tags(request):
    require_auth(request)

    limit = _limit(request, default=get_config()["tags"]["popular_limit"])

    tags = create_tag_service().get_popular_tags(limit)
    return Response([summary.to_dict() for summary in tags])


@extend_schema(
    tags=["Tags"],
    summary="The caller's prompts grouped by tag",
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["GET"])
def tags_with_prompts(request):
    user_id = require_auth(request)

    groups = create_tag_service().get_tags_with_prompts(user_id)
    return Response(
        [
            {**summary.to_dict(), "prompts": [prompt.to_dict() for prompt in prompts]}
            for summary, prompts in groups
        ]
    )


@extend_schema(
    tags=["Tags"],
    summary="Read, edit or delete a tag",
    request=TagUpdateSerializer,
    responses={200: OpenApiTypes.OBJECT, 204: None},
)
@api_view(["GET", "PATCH", "DELETE"])
def tag_detail(request, tag_id):
    require_auth(request)
    service = create_tag_service()

    if request.method == "GET":
        return Response(service.get_tag(tag_id).to_dict())

    if request.method == "DELETE":
        service.delete_tag(tag_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = TagUpdateSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        return _invalid(serializer)

    tag = service.update_tag(tag_id, **serializer.validated_data)
    return Response(tag.to_dict())


def _limit(request, default):
    try:
        return max(1, min(int(request.query_params.get("limit", default)), 100))
    except (TypeError, ValueError):
        return default


# ============================================================
# FOLDERS
# ============================================================

@extend_schema(
    tags=["Folders"],
    summary="Folder tree or create a folder",
    request=FolderCreateSerializer,
    responses={200: OpenApiTypes.OBJECT, 201: OpenApiTypes.OBJECT},
)
@api_view(["GET", "POST"])
def folder_list(request):
    user_id = require_auth(request)
    service = create_folder_service()

    if request.method == "GET":
        return Response([folder.to_dict() for folder in service.get_folder_tree(user_id)])

    serializer = FolderCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    folder = service.create_folder(user_id, **serializer.validated_data)
    return Response(folder.to_dict(), status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Folders"],
    summary="Rename or delete a folder",
    description="Deleting removes every subfolder; their prompts move to the root.",
    request=FolderRenameSerializer,
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["PATCH", "DELETE"])
def folder_detail(request, folder_id):
    user_id = require_auth(request)
    service = create_folder_service()

    if request.method == "DELETE":
        deleted = service.delete_folder(user_id, folder_id)
        return Response({"deleted": deleted})

    serializer = FolderRenameSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    folder = service.rename_folder(user_id, folder_id, serializer.validated_data["name"])
    return Response(folder.to_dict())


@extend_schema(
    tags=["Folders"],
    summary="Move a folder",
    request=FolderMoveSerializer,
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["POST"])
def move_folder(request, folder_id):
    user_id = require_auth(request)

    serializer = FolderMoveSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    folder = create_folder_service().move_folder(
        user_id,
        folder_id,
        serializer.validated_data["parent_id"],
        serializer.validated_data.get("order"),
    )
    return Response(folder.to_dict())


# ============================================================
# SHARED PROMPTS
# ============================================================

@extend_schema(
    tags=["Shared Prompts"],
    summary="Browse or publish shared prompts",
    parameters=[
        OpenApiParameter("q", OpenApiTypes.STR),
        OpenApiParameter("sort", OpenApiTypes.STR, enum=["recent", "copied"]),
        OpenApiParameter("page", OpenApiTypes.INT),
    ],
    request=PublishSerializer,
    responses={200: OpenApiTypes.OBJECT, 201: OpenApiTypes.OBJECT},
)
@api_view(["GET", "POST"])
def shared_prompt_list(request):
    """
    GET: every shared prompt, paginated; `?q=` filters, `?sort=copied`
    puts the most copied first.
    POST: publish one of the caller's prompts.
    """
    user_id = require_auth(request)
    service = create_sharing_service()

    if request.method == "GET":
        shared = service.get_shared_prompts(
            request.query_params.get("q"),
            sort_by=request.query_params.get("sort", "recent"),
        )
        paginator = api_settings.DEFAULT_PAGINATION_CLASS()
        page = paginator.paginate_queryset(shared, request)
        return paginator.get_paginated_response([item.to_dict() for item in page])

    serializer = PublishSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    data = serializer.validated_data
    shared = service.publish_prompt(
        user_id, data["prompt_id"], data.get("title"), data.get("description")
    )
    return Response(shared.to_dict(), status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Shared Prompts"],
    summary="Read or unpublish a shared prompt",
    description="Only the author can unpublish.",
    responses={200: OpenApiTypes.OBJECT, 204: None},
)
@api_view(["GET", "DELETE"])
def shared_prompt_detail(request, shared_id):
    user_id = require_auth(request)
    service = create_sharing_service()

    if request.method == "DELETE":
        service.unpublish(user_id, shared_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    return Response(service.get_shared_prompt(shared_id).to_dict())


@extend_schema(
    tags=["Shared Prompts"],
    summary="Copy a shared prompt into your library",
    request=CopySerializer,
    responses={201: OpenApiTypes.OBJECT},
)
@api_view(["POST"])
def copy_shared_prompt(request, shared_id):
    user_id = require_auth(request)

    serializer = CopySerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)

    prompt = create_sharing_service().copy_shared_prompt(
        user_id, shared_id, serializer.validated_data.get("folder_id")
    )
    return Response(prompt.to_dict(), status=status.HTTP_201_CREATED)


# ============================================================
# DASHBOARD
# ============================================================

@extend_schema(
    tags=["Dashboard"],
    summary="Counts, recent prompts and top tags",
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(["GET"])
def dashboard_summary(request):
    user_id = require_auth(request)

    return Response(create_prompt_service().get_dashboard_summary(user_id).to_dict())
