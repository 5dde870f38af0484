"""URLs into the repository host's web UI."""

from typing import Optional, Union


class LinkBuilder:
    """Builds web UI links against the canonical base URL."""

    def __init__(self, canonical_url: str):
        self.base_url = canonical_url.rstrip("/")

    def repository_url(
        self,
        repository: str,
        old_id: Optional[str] = None,
        new_id: Optional[str] = None,
    ) -> str:
        """Link to a repository view selected by which object ids are given.

        new only: commit view; old only: log view; both: compare view;
        neither: summary view.
        """
        if old_id and new_id:
            return f"{self.base_url}/compare?r={repository}&h={old_id}..{new_id}"
        if new_id:
            return f"{self.base_url}/commit?r={repository}&h={new_id}"
        if old_id:
            return f"{self.base_url}/log?r={repository}&h={old_id}"
        return f"{self.base_url}/summary?r={repository}"

    def user_url(self, username: str) -> str:
        return f"{self.base_url}/user/{username}"

    def ticket_url(self, repository: str, number: Union[int, str]) -> str:
        return f"{self.base_url}/tickets?r={repository}&h={number}"
