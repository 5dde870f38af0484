"""Collaborators the repository host provides to the composers."""

from typing import List, Optional, Protocol

from models.repositories import Commit, RepositoryModel, User
from models.tickets import Ticket


class RepositoryDirectory(Protocol):
    def get_user(self, username: str) -> Optional[User]:
        ...

    def get_repository(self, name: str) -> Optional[RepositoryModel]:
        ...

    def get_commits(
        self, repository: RepositoryModel, base_id: Optional[str], tip_id: str
    ) -> List[Commit]:
        """Commits reachable from ``tip_id`` but not ``base_id``, newest first."""
        ...

    def get_ticket_url(self, ticket: Ticket) -> str:
        ...
