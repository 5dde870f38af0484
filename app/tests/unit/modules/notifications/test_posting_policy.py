"""Unit tests for the posting policy."""

import pytest

from infrastructure.configuration import NotificationFeatureSettings
from modules.notifications import policy
from tests.factories import make_ref_update, make_repository


@pytest.mark.unit
class TestPostingPolicy:
    def test_personal_repositories_need_opt_in(self, features):
        personal = make_repository("~alice/scratch.git", None, is_personal=True)

        assert policy.should_post_repository(features, personal) is False

        features = NotificationFeatureSettings(POST_PERSONAL_REPOS=True)
        assert policy.should_post_repository(features, personal) is True

    def test_shared_repositories_are_posted(self, features):
        assert policy.should_post_repository(features, make_repository()) is True

    def test_branch_and_tag_switches(self):
        branch = make_ref_update("refs/heads/main")
        tag = make_ref_update("refs/tags/v1")
        features = NotificationFeatureSettings(POST_BRANCHES=False, POST_TAGS=True)

        assert policy.should_post_ref(features, branch) is False
        assert policy.should_post_ref(features, tag) is True

    def test_other_refs_are_never_posted(self, features):
        assert policy.should_post_ref(features, make_ref_update("refs/notes/x")) is False

    def test_comments_require_tickets(self):
        features = NotificationFeatureSettings(
            POST_TICKETS=False, POST_TICKET_COMMENTS=True
        )

        assert policy.should_post_tickets(features) is False
        assert policy.should_post_comments(features) is False
