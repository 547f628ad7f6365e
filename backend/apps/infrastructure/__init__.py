# apps/infrastructure/__init__.py
"""
Infrastructure Layer - Cross-Cutting Concerns

This layer handles:
- Dependency injection (container)
- Configuration management
- Tagged caching
- Rate limit settings
"""

__version__ = "1.0.0"
