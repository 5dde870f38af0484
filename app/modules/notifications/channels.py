"""Project-scoped channel routing."""

from typing import Optional


def resolve_channel(
    use_project_channels: bool,
    default_channel: Optional[str],
    project_path: Optional[str],
) -> Optional[str]:
    """Compute the destination channel for a repository's project.

    Returns None when project channels are disabled or the repository has no
    project; the dispatcher then falls back to the global default channel.
    Normalization (``#`` prefix, lower case) happens at send time.
    """
    if not use_project_channels or not project_path:
        return None
    if default_channel:
        return f"{default_channel}-{project_path}"
    return project_path
