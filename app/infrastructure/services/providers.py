"""
Factory functions for application-scoped providers.

Only configuration is cached per process. Services that own resources (the
Slack dispatcher and its worker pool) are constructed explicitly by
``main.NotifierApp`` and passed to the components that need them.
"""

from functools import lru_cache

from infrastructure.configuration import Settings


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process.
    Tests that need different values should construct ``Settings(...)``
    directly instead of mutating the cached instance.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()
