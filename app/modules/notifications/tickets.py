"""Notifications for ticket creation and ticket changes.

A ticket change is classified into exactly one activity, checked in this
order: review, patchset, merge, status change, comment. Changes matching none
of them (label edits, watcher changes...) are not posted.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from infrastructure.configuration import NotificationFeatureSettings, SlackSettings
from infrastructure.logging import get_module_logger
from models.repositories import RepositoryModel, User
from models.slack import Attachment, AttachmentColor, AttachmentField, Payload
from models.tickets import Change, ReviewScore, Ticket, TicketField, TicketStatus
from modules.notifications import policy
from modules.notifications.channels import resolve_channel
from modules.notifications.digest import commit_digest
from modules.notifications.directory import RepositoryDirectory
from modules.notifications.exceptions import DataDependencyError
from modules.notifications.links import LinkBuilder
from modules.notifications.markup import MarkupTranslator

logger = get_module_logger()

NEW_TICKET_EXCLUSIONS: FrozenSet[TicketField] = frozenset(
    {
        TicketField.watchers,
        TicketField.voters,
        TicketField.status,
        TicketField.mentions,
        TicketField.body,
    }
)

UPDATE_EXCLUSIONS: FrozenSet[TicketField] = frozenset(
    {
        TicketField.watchers,
        TicketField.voters,
        TicketField.mentions,
        TicketField.title,
        TicketField.body,
        TicketField.mergeSha,
    }
)

WIDE_FIELDS = (TicketField.title, TicketField.body)

REVIEW_EMOJIS: Dict[ReviewScore, str] = {
    ReviewScore.approved: ":white_check_mark:",
    ReviewScore.looks_good: ":thumbsup:",
    ReviewScore.needs_improvement: ":thumbsdown:",
    ReviewScore.vetoed: ":no_entry_sign:",
}

STATUS_COLORS: Dict[TicketStatus, AttachmentColor] = {
    TicketStatus.Abandoned: AttachmentColor.DANGER,
    TicketStatus.Declined: AttachmentColor.DANGER,
    TicketStatus.Invalid: AttachmentColor.DANGER,
    TicketStatus.Wontfix: AttachmentColor.DANGER,
    TicketStatus.Duplicate: AttachmentColor.DANGER,
    TicketStatus.On_Hold: AttachmentColor.WARNING,
    TicketStatus.Closed: AttachmentColor.GOOD,
    TicketStatus.Fixed: AttachmentColor.GOOD,
    TicketStatus.Merged: AttachmentColor.GOOD,
    TicketStatus.Resolved: AttachmentColor.GOOD,
}


class TicketActivity(Enum):
    REVIEW = "review"
    PATCHSET = "patchset"
    MERGE = "merge"
    STATUS = "status"
    COMMENT = "comment"


def classify(change: Change, post_comments: bool = True) -> Optional[TicketActivity]:
    """Return the single activity a change is reported as, or None."""
    if change.has_review():
        return TicketActivity.REVIEW
    if change.has_patchset():
        return TicketActivity.PATCHSET
    if change.is_merge():
        return TicketActivity.MERGE
    if change.is_status_change():
        return TicketActivity.STATUS
    if change.has_comment() and post_comments:
        return TicketActivity.COMMENT
    return None


def status_color(status: TicketStatus) -> AttachmentColor:
    return STATUS_COLORS.get(status, AttachmentColor.NONE)


class TicketComposer:
    """Builds ticket notifications: a headline plus a field attachment."""

    def __init__(
        self,
        directory: RepositoryDirectory,
        links: LinkBuilder,
        translator: MarkupTranslator,
        slack: SlackSettings,
        features: NotificationFeatureSettings,
        short_commit_id_length: int = 6,
    ):
        self.directory = directory
        self.links = links
        self.translator = translator
        self.slack = slack
        self.features = features
        self.short_commit_id_length = short_commit_id_length

    def compose_new(self, ticket: Ticket) -> Payload:
        """Announce a newly created ticket.

        Raises:
            DataDependencyError: the reporter or repository is unknown
        """
        if not ticket.changes:
            raise DataDependencyError("change", f"ticket-{ticket.number}")
        change = ticket.changes[0]
        reporter = self._get_user(change.author)
        repository = self._get_repository(ticket.repository)

        text = (
            f"*{reporter.display}* has created *{repository.display_name}* "
            f"{self._ticket_link(ticket)}"
        )
        body = change.get_field(TicketField.body) or ticket.body
        description = self.translator.render(body, ticket.repository)

        payload = Payload(text=text)
        payload.add_attachment(
            self._attachment(ticket, change, NEW_TICKET_EXCLUSIONS, description)
        )
        return self._route(payload, repository, self.slack.SLACK_TICKET_EMOJI)

    def compose_update(self, ticket: Ticket, change: Change) -> Optional[Payload]:
        """Describe a ticket change, or return None when it is not reported.

        Raises:
            DataDependencyError: the author, repository or previous patchset
                revision is unknown
        """
        post_comments = policy.should_post_comments(self.features)
        activity = classify(change, post_comments)
        if activity is None:
            logger.debug(
                "ticket_change_not_reported",
                ticket=ticket.number,
                repository=ticket.repository,
            )
            return None

        author = f"*{self._get_user(change.author).display}*"
        repository = self._get_repository(ticket.repository)
        repo = f"*{repository.display_name}*"
        url = self._ticket_link(ticket)
        emoji = self.slack.SLACK_TICKET_EMOJI
        exclusions = UPDATE_EXCLUSIONS
        text = None

        match activity:
            case TicketActivity.REVIEW:
                review = change.review
                headline = (
                    f"{author} has reviewed {repo} {url} "
                    f"patchset {review.patchset}-{review.rev}"
                )
                emoji = REVIEW_EMOJIS.get(review.score, emoji)
            case TicketActivity.PATCHSET:
                headline = self._patchset_headline(
                    ticket, change, repository, author, repo, url
                )
            case TicketActivity.MERGE:
                headline = f"{author} has merged {repo} {url} to *{ticket.merge_to}*"
                exclusions = exclusions | {TicketField.status}
            case TicketActivity.STATUS:
                headline = f"{author} has changed the status of {repo} {url}"
            case TicketActivity.COMMENT:
                headline = f"{author} has commented on {repo} {url}"
                text = self.translator.render(change.comment.text, ticket.repository)

        payload = Payload(text=headline)
        payload.add_attachment(self._attachment(ticket, change, exclusions, text))
        return self._route(payload, repository, emoji)

    def _patchset_headline(
        self,
        ticket: Ticket,
        change: Change,
        repository: RepositoryModel,
        author: str,
        repo: str,
        url: str,
    ) -> str:
        patchset = change.patchset
        if patchset.rev == 1:
            if patchset.number == 1:
                lead_in = f"{author} has pushed a proposal for {repo} {url}"
            else:
                lead_in = (
                    f"{author} has rewritten the patchset for {repo} {url} "
                    f"({patchset.type})"
                )
            base = patchset.base
        else:
            noun = "commit" if patchset.added == 1 else "commits"
            lead_in = f"{author} has added {patchset.added} {noun} to {repo} {url}"
            previous = ticket.get_patchset(patchset.number, patchset.rev - 1)
            if previous is None:
                raise DataDependencyError(
                    "patchset", f"{patchset.number}-{patchset.rev - 1}"
                )
            base = previous.tip

        # Patchsets read oldest first
        commits = list(
            reversed(self.directory.get_commits(repository, base, patchset.tip))
        )
        digest = commit_digest(
            self.links,
            ticket.repository,
            commits,
            base,
            patchset.tip,
            self.short_commit_id_length,
        )
        return lead_in + (digest or "\n\n")

    def _attachment(
        self,
        ticket: Ticket,
        change: Change,
        exclusions: FrozenSet[TicketField],
        text: Optional[str],
    ) -> Attachment:
        values: Dict[TicketField, Optional[str]] = {
            field: value
            for field, value in change.fields.items()
            if field not in exclusions
        }

        # Context fields always shown when the ticket has them
        context = {
            TicketField.title: ticket.title,
            TicketField.responsible: ticket.responsible,
            TicketField.milestone: ticket.milestone,
        }
        for field, value in context.items():
            if field not in values and value:
                values[field] = value

        color = AttachmentColor.NONE
        if change.is_status_change():
            color = status_color(ticket.status)

        attachment = Attachment(fallback=ticket.title, text=text or None, color=color)
        for field in sorted(values, key=lambda f: f.ordinal):
            value = values[field]
            if field is TicketField.responsible:
                value = self._display_name(value)
            if not value:
                continue
            attachment.add_field(
                AttachmentField(
                    title=field.value,
                    value=value,
                    is_short=field not in WIDE_FIELDS,
                )
            )
        return attachment

    def _route(
        self, payload: Payload, repository: RepositoryModel, emoji: Optional[str]
    ) -> Payload:
        payload.channel = resolve_channel(
            self.features.USE_PROJECT_CHANNELS,
            self.slack.SLACK_DEFAULT_CHANNEL,
            repository.project_path,
        )
        payload.set_icon(emoji)
        return payload

    def _ticket_link(self, ticket: Ticket) -> str:
        return f"<{self.directory.get_ticket_url(ticket)}|ticket-{ticket.number}>"

    def _get_user(self, username: str) -> User:
        user = self.directory.get_user(username)
        if user is None:
            raise DataDependencyError("user", username)
        return user

    def _get_repository(self, name: str) -> RepositoryModel:
        repository = self.directory.get_repository(name)
        if repository is None:
            raise DataDependencyError("repository", name)
        return repository

    def _display_name(self, username: Optional[str]) -> Optional[str]:
        if not username:
            return username
        user = self.directory.get_user(username)
        if user is not None:
            return user.display
        return username
