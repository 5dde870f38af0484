"""Custom log processors for structured logging.

The webhook URL carries the Slack token as a query parameter and failed
deliveries log the complete outbound JSON, so both masking and truncation run
on every log entry.

Usage:
    from infrastructure.logging.formatters import add_app_info, mask_sensitive_data

Dependencies:
    - structlog processors
"""

import re
from typing import Any


def add_app_info(app_name: str, app_version: str = "unknown"):
    """Create a processor that adds application info to log entries.

    Args:
        app_name: Name of the application.
        app_version: Version string for the application.

    Returns:
        A structlog processor function.
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = app_version
        return event_dict

    return processor


# Key patterns whose values are always masked
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
    }
)

# token=... inside URLs and other free text
TOKEN_QUERY_PATTERN = re.compile(r"(token=)[^&\s\"']+", re.IGNORECASE)


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: frozenset[str] | None = None,
):
    """Create a processor that masks sensitive data in log entries.

    Values of keys containing a sensitive pattern (case-insensitive) are
    replaced entirely. String values of other keys have ``token=`` query
    parameters masked in place.

    Args:
        mask_value: The string to replace sensitive values with.
        additional_patterns: Extra patterns to consider sensitive.

    Returns:
        A structlog processor function.
    """
    patterns = SENSITIVE_PATTERNS
    if additional_patterns:
        patterns = patterns | additional_patterns

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        masked_dict = {}
        for key, value in event_dict.items():
            key_lower = key.lower()
            is_sensitive = any(pattern in key_lower for pattern in patterns)
            if is_sensitive and value is not None:
                masked_dict[key] = mask_value
            elif isinstance(value, str):
                masked_dict[key] = TOKEN_QUERY_PATTERN.sub(
                    lambda m: m.group(1) + mask_value, value
                )
            else:
                masked_dict[key] = value
        return masked_dict

    return processor


# Keys logged verbatim by the Slack dispatcher
FULL_LENGTH_KEYS = frozenset({"payload", "response_body"})


def truncate_large_values(
    max_length: int = 4000,
    exempt_keys: frozenset[str] = FULL_LENGTH_KEYS,
):
    """Create a processor that truncates overly large string values.

    Outbound Slack JSON and Slack's reply are logged in full so a failed
    delivery can be replayed.

    Args:
        max_length: Maximum string length before truncation.
        exempt_keys: Keys whose values are never truncated.

    Returns:
        A structlog processor function.
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if key in exempt_keys:
                continue
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    value[:max_length] + f"...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
