"""Application wiring for the repository Slack notifier.

The repository host builds one ``NotifierApp`` at startup, calls its hooks
for every push and ticket change, and stops it at shutdown.
"""

from typing import Optional

from dotenv import load_dotenv

from infrastructure.configuration import Settings
from infrastructure.logging import configure_logging, get_module_logger
from infrastructure.services import get_settings
from integrations.slack import SlackDispatcher
from modules.notifications import (
    LinkBuilder,
    MarkupTranslator,
    ReceiveHook,
    RefChangeComposer,
    TicketComposer,
    TicketHook,
)
from modules.notifications.directory import RepositoryDirectory

logger = get_module_logger()

load_dotenv()


class NotifierApp:
    """Owns the dispatcher, translator, composers and hooks.

    Args:
        directory: Host lookups for users, repositories, commits and tickets
        settings: Configuration; the cached process settings when omitted
        dispatcher: Pre-built dispatcher, e.g. one with a fake session
    """

    def __init__(
        self,
        directory: RepositoryDirectory,
        settings: Optional[Settings] = None,
        dispatcher: Optional[SlackDispatcher] = None,
    ):
        self.settings = settings or get_settings()
        configure_logging(settings=self.settings)

        self.directory = directory
        self.dispatcher = dispatcher or SlackDispatcher(self.settings.slack)
        self.links = LinkBuilder(self.settings.web.CANONICAL_URL)

        short_length = self.settings.web.SHORT_COMMIT_ID_LENGTH
        self.translator = MarkupTranslator(
            self.links,
            short_commit_id_length=short_length,
            parse_timeout=self.settings.web.MARKUP_PARSE_TIMEOUT_SECONDS,
        )

        features = self.settings.notifications
        self.ref_changes = RefChangeComposer(
            directory,
            self.links,
            self.settings.slack,
            features,
            short_commit_id_length=short_length,
        )
        self.tickets = TicketComposer(
            directory,
            self.links,
            self.translator,
            self.settings.slack,
            features,
            short_commit_id_length=short_length,
        )
        self.receive_hook = ReceiveHook(self.ref_changes, self.dispatcher, features)
        self.ticket_hook = TicketHook(
            self.tickets, self.dispatcher, directory, features
        )

    def start(self) -> "NotifierApp":
        logger.info("application_startup", git_sha=self.settings.GIT_SHA)
        list_configs(self.settings)
        self.dispatcher.start()
        return self

    def stop(self) -> None:
        """Stop without waiting for queued or in-flight notifications."""
        self.dispatcher.stop()
        self.translator.close()
        logger.info("application_shutdown")


def list_configs(settings: Settings) -> None:
    """List all configuration settings keys"""
    config_settings = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)
