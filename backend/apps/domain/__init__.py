# apps/domain/__init__.py
"""
Domain Layer - Pure Python Business Logic

This package contains the core rules of the prompt manager: prompts,
versions, tags, folders and the per-session UI state.
It has no dependencies on Django, databases, or external services.

Key principles:
- Pure Python (no framework imports)
- Unit testable against in-memory repositories
- Independent of delivery mechanism (HTML pages, JSON API, management commands)
"""

__version__ = "1.0.0"
