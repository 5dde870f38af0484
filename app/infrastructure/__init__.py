"""Infrastructure modules for the repository notifier.

Centralized infrastructure components:
- configuration: Settings management (Settings, settings)
- logging: Structured logging (configure_logging, get_module_logger)
- services: Cached providers (get_settings)
"""
