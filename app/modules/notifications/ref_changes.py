"""Notifications for branch and tag updates received by a push."""

from typing import Optional

from infrastructure.configuration import NotificationFeatureSettings, SlackSettings
from infrastructure.logging import get_module_logger
from models.repositories import (
    RefType,
    RefUpdate,
    RefUpdateType,
    RepositoryModel,
    User,
)
from models.slack import Payload
from modules.notifications.channels import resolve_channel
from modules.notifications.digest import commit_digest
from modules.notifications.directory import RepositoryDirectory
from modules.notifications.links import LinkBuilder

logger = get_module_logger()


class RefChangeComposer:
    """Builds one headline per ref update, with a commit digest for pushes.

    Refs outside ``refs/heads/`` and ``refs/tags/`` produce no notification.
    """

    def __init__(
        self,
        directory: RepositoryDirectory,
        links: LinkBuilder,
        slack: SlackSettings,
        features: NotificationFeatureSettings,
        short_commit_id_length: int = 6,
    ):
        self.directory = directory
        self.links = links
        self.slack = slack
        self.features = features
        self.short_commit_id_length = short_commit_id_length

    def compose(
        self, user: User, repository: RepositoryModel, update: RefUpdate
    ) -> Optional[Payload]:
        ref_type = update.ref_type
        if ref_type is None:
            logger.debug("ref_update_ignored", ref_name=update.ref_name)
            return None

        match update.type:
            case RefUpdateType.CREATE:
                text = self._created(user, repository, update, ref_type)
            case RefUpdateType.UPDATE:
                text = self._updated(user, repository, update, ref_type, True)
            case RefUpdateType.UPDATE_NONFASTFORWARD:
                text = self._updated(user, repository, update, ref_type, False)
            case RefUpdateType.DELETE:
                text = self._deleted(user, repository, update, ref_type)
            case _:
                return None

        payload = Payload(text=text)
        payload.channel = resolve_channel(
            self.features.USE_PROJECT_CHANNELS,
            self.slack.SLACK_DEFAULT_CHANNEL,
            repository.project_path,
        )
        payload.set_icon(self.slack.SLACK_GIT_EMOJI)
        return payload

    def _repository_link(self, repository: RepositoryModel) -> str:
        url = self.links.repository_url(repository.name)
        return f"<{url}|{repository.display_name}>"

    def _created(
        self,
        user: User,
        repository: RepositoryModel,
        update: RefUpdate,
        ref_type: RefType,
    ) -> str:
        ref = update.short_ref
        log_url = self.links.repository_url(repository.name, ref, None)
        return (
            f"*{user.display}* has created {ref_type.value} <{log_url}|{ref}> "
            f"in {self._repository_link(repository)}"
        )

    def _updated(
        self,
        user: User,
        repository: RepositoryModel,
        update: RefUpdate,
        ref_type: RefType,
        fast_forward: bool,
    ) -> str:
        ref = update.short_ref
        digest = ""

        if ref_type is RefType.TAG:
            url = self.links.repository_url(repository.name, None, ref)
            action = "*MOVED* tag"
        else:
            url = self.links.repository_url(repository.name, ref, None)
            if fast_forward:
                commits = self.directory.get_commits(
                    repository, update.old_id, update.new_id
                )
                if len(commits) == 1:
                    action = "pushed 1 commit to"
                else:
                    action = f"pushed {len(commits)} commits to"
                digest = commit_digest(
                    self.links,
                    repository.name,
                    commits,
                    update.old_id,
                    update.new_id,
                    self.short_commit_id_length,
                )
            else:
                action = "*REWRITTEN*"

        headline = (
            f"*{user.display}* has {action} <{url}|{ref}> "
            f"in {self._repository_link(repository)}"
        )
        return headline + digest

    def _deleted(
        self,
        user: User,
        repository: RepositoryModel,
        update: RefUpdate,
        ref_type: RefType,
    ) -> str:
        return (
            f"*{user.display}* has deleted {ref_type.value} *{update.short_ref}* "
            f"from {self._repository_link(repository)}"
        )
