# apps/web/context_processors.py
"""
Template context shared by every page
"""
from apps.web.modals import modal_store

NAV_ITEMS = [
    {"href": "/dashboard", "label": "Dashboard"},
    {"href": "/prompts", "label": "My Prompts"},
    {"href": "/tags", "label": "Tags"},
    {"href": "/group-by-tags", "label": "Group by Tags"},
    {"href": "/shared-prompts", "label": "Shared Prompts"},
]


def modal(request):
    """Expose the current modal state as `modal`"""
    if not hasattr(request, "session"):
        return {}
    return {"modal": modal_store(request).state}


def navigation(request):
    """Sidebar links with the active one marked"""
    path = getattr(request, "path", "")
    return {
        "nav_items": [
            {
                **item,
                "active": path == item["href"] or path.startswith(item["href"] + "/"),
            }
            for item in NAV_ITEMS
        ]
    }
