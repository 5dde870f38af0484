"""Host web interface settings used for link construction and rendering."""

from pydantic import field_validator

from infrastructure.configuration.base import InfrastructureSettings


class WebSettings(InfrastructureSettings):
    """Settings describing the repository host's web interface.

    Environment Variables:
        CANONICAL_URL: Base URL of the web interface (default: https://localhost:8443)
        SHORT_COMMIT_ID_LENGTH: Displayed commit id length (default: 6)
        MARKUP_PARSE_TIMEOUT_SECONDS: Bound on rich-text parsing (default: 2.0)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        base_url = settings.web.CANONICAL_URL
        ```
    """

    CANONICAL_URL: str = "https://localhost:8443"
    SHORT_COMMIT_ID_LENGTH: int = 6
    MARKUP_PARSE_TIMEOUT_SECONDS: float = 2.0

    @field_validator("SHORT_COMMIT_ID_LENGTH")
    @classmethod
    def validate_short_commit_id_length(cls, v: int) -> int:
        """Commit ids are 40 hex characters."""
        if v < 1 or v > 40:
            raise ValueError(f"SHORT_COMMIT_ID_LENGTH must be within 1..40: {v}")
        return v
