import sys
from pathlib import Path
from unittest.mock import MagicMock, Mock

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.configuration`) works during pytest collection.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest
import requests

from infrastructure.configuration import (
    NotificationFeatureSettings,
    Settings,
    SlackSettings,
    WebSettings,
)
from integrations.slack import SlackDispatcher
from modules.notifications import LinkBuilder, MarkupTranslator
from tests.factories.repositories import make_directory

BASE_URL = "https://git.example.com"


@pytest.fixture
def slack_settings():
    return SlackSettings(
        SLACK_TEAM="Acme",
        SLACK_TOKEN="xoxb-secret",
        SLACK_HOOK="incoming-webhook",
        SLACK_DEFAULT_CHANNEL="General",
        SLACK_DEFAULT_EMOJI="",
        SLACK_GIT_EMOJI="",
        SLACK_TICKET_EMOJI="",
    )


@pytest.fixture
def features():
    return NotificationFeatureSettings(
        POST_BRANCHES=True,
        POST_TAGS=True,
        POST_TICKETS=True,
        POST_TICKET_COMMENTS=True,
        POST_PERSONAL_REPOS=False,
        USE_PROJECT_CHANNELS=False,
        ALLOW_USER_POSTS=False,
    )


@pytest.fixture
def web_settings():
    return WebSettings(
        CANONICAL_URL=BASE_URL,
        SHORT_COMMIT_ID_LENGTH=6,
        MARKUP_PARSE_TIMEOUT_SECONDS=2.0,
    )


@pytest.fixture
def settings(slack_settings, features, web_settings):
    return Settings(
        PREFIX="test-",
        slack=slack_settings,
        notifications=features,
        web=web_settings,
    )


@pytest.fixture
def links():
    return LinkBuilder(BASE_URL)


@pytest.fixture
def translator(links):
    translator = MarkupTranslator(links, short_commit_id_length=6, parse_timeout=2.0)
    yield translator
    translator.close()


@pytest.fixture
def directory():
    return make_directory()


@pytest.fixture
def http_session():
    """requests.Session double answering 200 to every POST."""
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.post.return_value = MagicMock(status_code=200, text="ok")
    return session


@pytest.fixture
def dispatcher(slack_settings, http_session):
    dispatcher = SlackDispatcher(slack_settings, session=http_session, max_workers=4)
    yield dispatcher
    dispatcher.stop()


@pytest.fixture
def mock_settings():
    """Mock Settings instance for testing."""
    settings = Mock(spec=Settings)
    settings.LOG_LEVEL = "INFO"
    settings.is_production = False
    settings.GIT_SHA = "test"
    return settings
