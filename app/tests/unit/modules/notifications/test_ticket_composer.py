"""Unit tests for ticket notifications."""

import pytest

from infrastructure.configuration import NotificationFeatureSettings
from models.slack import AttachmentColor
from models.tickets import ReviewScore, TicketField, TicketStatus
from modules.notifications.exceptions import DataDependencyError
from modules.notifications.tickets import TicketActivity, TicketComposer, classify
from tests.factories import (
    make_change,
    make_commits,
    make_directory,
    make_patchset,
    make_ticket,
)

TICKET_URL = "https://git.example.com/tickets?r=libs/foo.git&h=7"
LINK = f"<{TICKET_URL}|ticket-7>"


@pytest.fixture
def composer(directory, links, translator, slack_settings, features):
    return TicketComposer(directory, links, translator, slack_settings, features)


def _fields(payload):
    return [(f.title, f.value, f.is_short) for f in payload.attachments[0].fields]


@pytest.mark.unit
class TestClassify:
    def test_review_beats_comment(self):
        change = make_change(comment="nice", review_score=ReviewScore.approved)

        assert classify(change) == TicketActivity.REVIEW

    def test_patchset_beats_merge(self):
        change = make_change(
            patchset=make_patchset(),
            fields={TicketField.status: "Merged", TicketField.mergeSha: "c" * 40},
        )

        assert classify(change) == TicketActivity.PATCHSET

    def test_merge_beats_status(self):
        change = make_change(
            fields={TicketField.status: "Merged", TicketField.mergeSha: "c" * 40}
        )

        assert classify(change) == TicketActivity.MERGE

    def test_status(self):
        change = make_change(fields={TicketField.status: "Resolved"})

        assert classify(change) == TicketActivity.STATUS

    def test_comment_only_when_enabled(self):
        change = make_change(comment="hello")

        assert classify(change) == TicketActivity.COMMENT
        assert classify(change, post_comments=False) is None

    def test_other_changes_are_not_reported(self):
        change = make_change(fields={TicketField.labels: "bug"})

        assert classify(change) is None


@pytest.mark.unit
class TestNewTicket:
    def test_headline_and_attachment(self, composer):
        payload = composer.compose_new(make_ticket())

        assert payload.text == f"*Alice Adams* has created *libs/foo* {LINK}"
        attachment = payload.attachments[0]
        assert attachment.fallback == "Fix the widget"
        assert attachment.text == "The widget is _broken_."
        assert attachment.color == AttachmentColor.NONE
        assert _fields(payload) == [
            ("title", "Fix the widget", False),
            ("type", "Bug", True),
        ]

    def test_unknown_reporter(self, links, translator, slack_settings, features):
        directory = make_directory(users=[])
        composer = TicketComposer(
            directory, links, translator, slack_settings, features
        )

        with pytest.raises(DataDependencyError) as exc_info:
            composer.compose_new(make_ticket())

        assert exc_info.value.kind == "user"
        assert exc_info.value.name == "alice"

    def test_unknown_repository(self, composer):
        with pytest.raises(DataDependencyError):
            composer.compose_new(make_ticket(repository="missing.git"))

    def test_ticket_emoji(self, directory, links, translator, slack_settings, features):
        slack_settings.SLACK_TICKET_EMOJI = "ticket"
        composer = TicketComposer(
            directory, links, translator, slack_settings, features
        )

        assert composer.compose_new(make_ticket()).icon_emoji == ":ticket:"


@pytest.mark.unit
class TestTicketUpdate:
    def test_review_headline_and_emoji(self, composer):
        change = make_change(comment="lgtm", review_score=ReviewScore.approved)

        payload = composer.compose_update(make_ticket(), change)

        assert payload.text == (
            f"*Bob Brown* has reviewed *libs/foo* {LINK} patchset 1-1"
        )
        assert payload.icon_emoji == ":white_check_mark:"
        assert payload.attachments[0].text is None

    @pytest.mark.parametrize(
        "score,emoji",
        [
            (ReviewScore.looks_good, ":thumbsup:"),
            (ReviewScore.needs_improvement, ":thumbsdown:"),
            (ReviewScore.vetoed, ":no_entry_sign:"),
        ],
    )
    def test_review_emojis(self, composer, score, emoji):
        payload = composer.compose_update(make_ticket(), make_change(review_score=score))

        assert payload.icon_emoji == emoji

    def test_proposal(self, composer):
        change = make_change(patchset=make_patchset(number=1, rev=1))

        payload = composer.compose_update(make_ticket(), change)

        assert payload.text.startswith(
            f"*Bob Brown* has pushed a proposal for *libs/foo* {LINK}"
        )

    def test_rewritten_patchset(self, composer):
        change = make_change(patchset=make_patchset(number=2, rev=1, type="Rebase"))

        payload = composer.compose_update(make_ticket(), change)

        assert payload.text.startswith(
            f"*Bob Brown* has rewritten the patchset for *libs/foo* {LINK} (Rebase)"
        )

    def test_fast_forward_patchset_lists_oldest_first(
        self, links, translator, slack_settings, features
    ):
        commits = make_commits(3)
        directory = make_directory(commits=commits)
        composer = TicketComposer(
            directory, links, translator, slack_settings, features
        )
        previous = make_patchset(number=1, rev=1, tip="1" * 40)
        current = make_patchset(number=1, rev=2, tip="2" * 40, added=3)
        ticket = make_ticket(
            changes=[make_change(patchset=previous), make_change(patchset=current)]
        )

        payload = composer.compose_update(ticket, make_change(patchset=current))

        headline, digest = payload.text.split("\n\n", 1)
        assert headline == f"*Bob Brown* has added 3 commits to *libs/foo* {LINK}"
        rows = [line for line in digest.split("\n") if "`" in line]
        assert commits[-1].id[:6] in rows[0]
        assert commits[0].id[:6] in rows[-1]
        assert digest.endswith(
            "<https://git.example.com/compare?r=libs/foo.git"
            f"&h={'1' * 40}..{'2' * 40}|view comparison of these 3 commits>"
        )

    def test_single_commit_added(self, composer):
        previous = make_patchset(number=1, rev=1, tip="1" * 40)
        current = make_patchset(number=1, rev=2, tip="2" * 40, added=1)
        ticket = make_ticket(changes=[make_change(patchset=previous)])

        payload = composer.compose_update(ticket, make_change(patchset=current))

        assert "has added 1 commit to" in payload.text

    def test_missing_previous_revision(self, composer):
        current = make_patchset(number=1, rev=3, tip="3" * 40)

        with pytest.raises(DataDependencyError) as exc_info:
            composer.compose_update(make_ticket(), make_change(patchset=current))

        assert exc_info.value.kind == "patchset"

    def test_merge(self, composer):
        ticket = make_ticket(status=TicketStatus.Merged, merge_to="main")
        change = make_change(
            fields={TicketField.status: "Merged", TicketField.mergeSha: "c" * 40}
        )

        payload = composer.compose_update(ticket, change)

        assert payload.text == f"*Bob Brown* has merged *libs/foo* {LINK} to *main*"
        assert payload.attachments[0].color == AttachmentColor.GOOD
        assert _fields(payload) == [("title", "Fix the widget", False)]

    @pytest.mark.parametrize(
        "status,color",
        [
            (TicketStatus.Declined, AttachmentColor.DANGER),
            (TicketStatus.Duplicate, AttachmentColor.DANGER),
            (TicketStatus.On_Hold, AttachmentColor.WARNING),
            (TicketStatus.Resolved, AttachmentColor.GOOD),
            (TicketStatus.Open, AttachmentColor.NONE),
        ],
    )
    def test_status_change_colors(self, composer, status, color):
        ticket = make_ticket(status=status)
        change = make_change(fields={TicketField.status: status.value})

        payload = composer.compose_update(ticket, change)

        assert payload.text == f"*Bob Brown* has changed the status of *libs/foo* {LINK}"
        assert payload.attachments[0].color == color
        assert ("status", status.value, True) in _fields(payload)

    def test_comment(self, composer):
        payload = composer.compose_update(make_ticket(), make_change(comment="**done**"))

        assert payload.text == f"*Bob Brown* has commented on *libs/foo* {LINK}"
        assert payload.attachments[0].text == "*done*"
        assert payload.attachments[0].color == AttachmentColor.NONE

    def test_comments_disabled(self, directory, links, translator, slack_settings):
        features = NotificationFeatureSettings(POST_TICKET_COMMENTS=False)
        composer = TicketComposer(
            directory, links, translator, slack_settings, features
        )

        assert composer.compose_update(make_ticket(), make_change(comment="x")) is None

    def test_unreported_change(self, composer):
        change = make_change(fields={TicketField.watchers: "carol"})

        assert composer.compose_update(make_ticket(), change) is None


@pytest.mark.unit
class TestAttachmentFields:
    def test_fields_are_sorted_filtered_and_backfilled(self, composer):
        ticket = make_ticket(responsible="bob", milestone="1.0")
        change = make_change(
            comment="see",
            fields={
                TicketField.labels: "ui",
                TicketField.watchers: "carol",
                TicketField.body: "new body",
                TicketField.topic: "widgets",
                TicketField.priority: "",
            },
        )

        payload = composer.compose_update(ticket, change)

        assert _fields(payload) == [
            ("title", "Fix the widget", False),
            ("responsible", "Bob Brown", True),
            ("milestone", "1.0", True),
            ("topic", "widgets", True),
            ("labels", "ui", True),
        ]

    def test_unknown_responsible_keeps_username(self, composer):
        ticket = make_ticket(responsible="zed")

        payload = composer.compose_update(ticket, make_change(comment="hi"))

        assert ("responsible", "zed", True) in _fields(payload)

    def test_changed_responsible_wins_over_snapshot(self, composer):
        ticket = make_ticket(responsible="bob")
        change = make_change(
            fields={TicketField.responsible: "alice", TicketField.status: "Open"}
        )

        payload = composer.compose_update(ticket, change)

        assert ("responsible", "Alice Adams", True) in _fields(payload)

    def test_fallback_is_title(self, composer):
        payload = composer.compose_update(make_ticket(), make_change(comment="x"))

        assert payload.attachments[0].fallback == "Fix the widget"


@pytest.mark.unit
class TestTicketRouting:
    def test_project_channel(self, directory, links, translator, slack_settings):
        features = NotificationFeatureSettings(USE_PROJECT_CHANNELS=True)
        composer = TicketComposer(
            directory, links, translator, slack_settings, features
        )

        payload = composer.compose_update(make_ticket(), make_change(comment="x"))

        assert payload.channel == "General-libs"

    def test_author_lookup(self, composer, directory):
        composer.compose_update(make_ticket(), make_change(comment="x"))

        directory.get_user.assert_any_call("bob")
