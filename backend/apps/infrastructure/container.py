# apps/infrastructure/container.py

"""
Dependency Injection Container

Simple factory functions for creating fully-wired services.
No magic, no framework - just explicit construction.
"""

from typing import Dict, Any, Optional
import logging

from apps.infrastructure.config import get_config

logger = logging.getLogger(__name__)


# ============================================================
# ADAPTER FACTORIES
# ============================================================

def create_repositories(use_inmemory: bool = False) -> Dict[str, Any]:
    """
    Factory for the full set of repositories

    In-memory repositories share one InMemoryDatabase so that services
    built from the same set see each other's writes.

    Args:
        use_inmemory: If True, use in-memory repos (for testing)

    Returns:
        Dict with 'prompts', 'tags', 'versions', 'folders' and 'shared' repositories
    """
    if use_inmemory:
        from apps.adapters.repositories.inmemory_repos import (
            InMemoryDatabase,
            InMemoryFolderRepository,
            InMemoryPromptRepository,
            InMemorySharedPromptRepository,
            InMemoryTagRepository,
            InMemoryVersionRepository,
        )

        db = InMemoryDatabase()
        return {
            'prompts': InMemoryPromptRepository(db),
            'tags': InMemoryTagRepository(db),
            'versions': InMemoryVersionRepository(db),
            'folders': InMemoryFolderRepository(db),
            'shared': InMemorySharedPromptRepository(db),
        }

    from apps.adapters.repositories.django_repos import (
        DjangoFolderRepository,
        DjangoPromptRepository,
        DjangoSharedPromptRepository,
        DjangoTagRepository,
        DjangoVersionRepository,
    )

    tag_repo = DjangoTagRepository()
    return {
        'prompts': DjangoPromptRepository(tag_repo=tag_repo),
        'tags': tag_repo,
        'versions': DjangoVersionRepository(),
        'folders': DjangoFolderRepository(),
        'shared': DjangoSharedPromptRepository(tag_repo=tag_repo),
    }


def create_tagged_cache(config: Optional[Dict] = None, clock=None):
    """
    Factory for the tagged cache

    Args:
        config: Optional configuration dict. If None, uses environment config.
        clock: Optional time source (for testing)

    Returns:
        TaggedCache bound to the configured Django cache alias
    """
    from django.core.cache import caches
    from apps.infrastructure.cache import TaggedCache

    config = config or get_config()
    alias = config['cache'].get('alias', 'default')

    if clock is None:
        return TaggedCache(backend=caches[alias])
    return TaggedCache(backend=caches[alias], clock=clock)


# ============================================================
# SERVICE FACTORIES
# ============================================================

def create_tag_service(
    config: Optional[Dict] = None,
    repositories: Optional[Dict[str, Any]] = None,
    cache=None,
):
    """
    Create fully-wired TagService

    Args:
        config: Optional configuration dict. If None, uses environment config.
        repositories: Optional repositories from create_repositories()
        cache: Optional tagged cache

    Returns:
        TagService instance with all dependencies injected
    """
    from apps.domain.services.tag_service import TagService

    config = config or get_config()
    validate_config(config)
    repositories = repositories or create_repositories()

    return TagService(
        tag_repo=repositories['tags'],
        prompt_repo=repositories['prompts'],
        cache=cache or create_tagged_cache(config),
        cache_ttl=config['cache']['tag_ttl'],
    )


def create_prompt_service(
    config: Optional[Dict] = None,
    repositories: Optional[Dict[str, Any]] = None,
    cache=None,
):
    """
    Create fully-wired PromptService

    This is the main entry point for prompt use cases.

    Example:
        >>> service = create_prompt_service()
        >>> prompts = service.search_prompts(user_id=1, query="summary")
    """
    from apps.domain.services.prompt_service import PromptService

    config = config or get_config()
    validate_config(config)
    repositories = repositories or create_repositories()

    return PromptService(
        prompt_repo=repositories['prompts'],
        tag_repo=repositories['tags'],
        version_repo=repositories['versions'],
        folder_repo=repositories['folders'],
        cache=cache or create_tagged_cache(config),
        empty_query_returns_all=config['search']['empty_query_returns_all'],
        recent_prompts_limit=config['dashboard']['recent_prompts_limit'],
        popular_tags_limit=config['tags']['popular_limit'],
    )


def create_version_service(repositories: Optional[Dict[str, Any]] = None):
    """Create VersionService over the given (or ORM) repositories"""
    from apps.domain.services.version_service import VersionService

    repositories = repositories or create_repositories()
    return VersionService(
        prompt_repo=repositories['prompts'],
        version_repo=repositories['versions'],
    )


def create_folder_service(repositories: Optional[Dict[str, Any]] = None):
    """Create FolderService over the given (or ORM) repositories"""
    from apps.domain.services.folder_service import FolderService

    repositories = repositories or create_repositories()
    return FolderService(
        folder_repo=repositories['folders'],
        prompt_repo=repositories['prompts'],
    )


def create_sharing_service(
    config: Optional[Dict] = None,
    repositories: Optional[Dict[str, Any]] = None,
    cache=None,
):
    """Create SharingService; copies are made through a PromptService on the same repositories"""
    from apps.domain.services.sharing_service import SharingService

    repositories = repositories or create_repositories()
    return SharingService(
        shared_repo=repositories['shared'],
        prompt_repo=repositories['prompts'],
        prompt_service=create_prompt_service(config, repositories, cache),
    )


# ============================================================
# VALIDATION
# ============================================================

def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if valid

    Raises:
        ValueError: If configuration is invalid
    """
    required_keys = ['cache', 'tags', 'dashboard', 'search']

    for key in required_keys:
        if key not in config:
            raise ValueError(f"Missing required config key: {key}")

    ttl = config['cache'].get('tag_ttl')
    if not isinstance(ttl, int) or ttl <= 0:
        raise ValueError(f"Cache tag_ttl must be a positive integer, got {ttl!r}")

    return True


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_service_info(config: Optional[Dict] = None) -> Dict[str, Any]:
    """
    Get information about configured services

    Args:
        config: Optional config dict, uses environment config if None

    Returns:
        Dict with service configuration info
    """
    config = config or get_config()

    return {
        'environment': config.get('environment', 'unknown'),
        'cache': {
            'alias': config['cache'].get('alias', 'default'),
            'tag_ttl': config['cache'].get('tag_ttl'),
        },
        'search': {
            'empty_query_returns_all': config['search'].get('empty_query_returns_all'),
        },
    }
