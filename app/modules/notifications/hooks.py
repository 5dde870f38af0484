"""Entry points the repository host calls after pushes and ticket changes.

Hooks never raise: notification problems are logged and the host operation
carries on.
"""

from typing import Callable, Iterable, Optional

from infrastructure.configuration import NotificationFeatureSettings
from infrastructure.logging import get_module_logger
from integrations.slack import SlackDispatcher
from models.repositories import RefUpdate, RepositoryModel, User
from models.slack import Payload
from models.tickets import Change, Ticket
from modules.notifications import policy
from modules.notifications.directory import RepositoryDirectory
from modules.notifications.exceptions import DataDependencyError
from modules.notifications.ref_changes import RefChangeComposer
from modules.notifications.tickets import TicketComposer

logger = get_module_logger()


class ReceiveHook:
    """Posts branch and tag updates after a push has been received."""

    def __init__(
        self,
        composer: RefChangeComposer,
        dispatcher: SlackDispatcher,
        features: NotificationFeatureSettings,
    ):
        self.composer = composer
        self.dispatcher = dispatcher
        self.features = features

    def on_post_receive(
        self,
        user: User,
        repository: RepositoryModel,
        updates: Iterable[RefUpdate],
    ) -> None:
        if not policy.should_post_repository(self.features, repository):
            logger.debug("repository_not_posted", repository=repository.name)
            return

        for update in updates:
            if not policy.should_post_ref(self.features, update):
                continue
            try:
                payload = self.composer.compose(user, repository, update)
            except DataDependencyError as e:
                logger.error(
                    "ref_change_compose_failed",
                    repository=repository.name,
                    ref_name=update.ref_name,
                    error=str(e),
                )
                continue
            except Exception as e:
                logger.exception(
                    "ref_change_compose_failed",
                    repository=repository.name,
                    ref_name=update.ref_name,
                    error=str(e),
                )
                continue
            _submit(self.dispatcher, payload)


class TicketHook:
    """Posts ticket creation and ticket changes."""

    def __init__(
        self,
        composer: TicketComposer,
        dispatcher: SlackDispatcher,
        directory: RepositoryDirectory,
        features: NotificationFeatureSettings,
    ):
        self.composer = composer
        self.dispatcher = dispatcher
        self.directory = directory
        self.features = features

    def on_new_ticket(self, ticket: Ticket) -> None:
        self._post(ticket, lambda: self.composer.compose_new(ticket))

    def on_update_ticket(self, ticket: Ticket, change: Change) -> None:
        self._post(ticket, lambda: self.composer.compose_update(ticket, change))

    def _post(self, ticket: Ticket, compose: Callable[[], Optional[Payload]]) -> None:
        try:
            if not self._should_post(ticket):
                return
            payload = compose()
        except DataDependencyError as e:
            logger.error(
                "ticket_compose_failed",
                ticket=ticket.number,
                repository=ticket.repository,
                error=str(e),
            )
            return
        except Exception as e:
            logger.exception(
                "ticket_compose_failed",
                ticket=ticket.number,
                repository=ticket.repository,
                error=str(e),
            )
            return
        _submit(self.dispatcher, payload)

    def _should_post(self, ticket: Ticket) -> bool:
        if not policy.should_post_tickets(self.features):
            return False
        repository = self.directory.get_repository(ticket.repository)
        if repository is None:
            logger.warning("ticket_repository_unknown", repository=ticket.repository)
            return False
        return policy.should_post_repository(self.features, repository)


def _submit(dispatcher: SlackDispatcher, payload: Optional[Payload]) -> None:
    if payload is None:
        return
    dispatcher.send_async(payload)
