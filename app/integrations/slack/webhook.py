"""Slack incoming-webhook dispatcher.

Delivers ``Payload`` messages either synchronously (``send``) or as
fire-and-forget work on a thread pool (``send_async``).

Delivery is best effort: one HTTP POST per message, no retry, no ordering
between concurrently submitted messages. Failures of asynchronous sends are
logged and dropped so they never reach the code that produced the event.

Usage:
    from integrations.slack.webhook import SlackDispatcher

    dispatcher = SlackDispatcher(settings.slack)
    dispatcher.start()

    dispatcher.send_async(Payload(text="*alice* pushed 1 commit to <...>"))

    # At process stop; queued messages still go out, new ones are refused
    dispatcher.stop()
"""

from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import Optional

import requests

from infrastructure.configuration import SlackSettings
from infrastructure.logging import get_module_logger
from integrations.slack.exceptions import (
    ConfigurationError,
    SlackError,
    TransportError,
)
from models.slack import Payload

logger = get_module_logger()

PRODUCT_NAME = "Gitblit"
USER_AGENT = "Gitblit-Slack-Notifier/1.0"
DEFAULT_HOOK = "incoming-webhook"

# (connect, read) seconds
REQUEST_TIMEOUT = (5, 5)


def normalize_channel(channel: Optional[str]) -> Optional[str]:
    """Prefix a channel name with ``#`` unless it is ``#``/``@`` prefixed,
    and lower-case it. Empty values normalize to None."""
    if not channel:
        return None
    if channel[0] not in ("#", "@"):
        channel = "#" + channel
    return channel.lower()


class SlackDispatcher:
    """Sends payloads to the Slack incoming webhook of one team.

    The dispatcher owns a thread pool used by ``send_async``. Threads are
    created on demand, but unlike an unbounded cached pool their number is
    capped at ``SLACK_DISPATCH_MAX_WORKERS``. Once that many POSTs are in
    flight further messages wait in the queue. The queue itself is unbounded
    so submitting never blocks the caller.

    Attributes:
        settings: Slack settings (team, token, hook, defaults)
        session: requests session used for every POST
    """

    def __init__(
        self,
        settings: SlackSettings,
        session: Optional[requests.Session] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.settings = settings
        self.max_workers = max_workers or settings.SLACK_DISPATCH_MAX_WORKERS
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT})
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = Lock()
        self._executor_shutdown = False

    @property
    def session(self) -> requests.Session:
        return self._session

    def webhook_url(self) -> str:
        """Build the webhook endpoint from team, token and hook path.

        Raises:
            ConfigurationError: team or token is not configured
        """
        team = self.settings.SLACK_TEAM
        if not team:
            raise ConfigurationError("SLACK_TEAM")

        token = self.settings.SLACK_TOKEN
        if not token:
            raise ConfigurationError("SLACK_TOKEN")

        hook = self.settings.SLACK_HOOK or DEFAULT_HOOK
        return f"https://{team.lower()}.slack.com/services/hooks/{hook}?token={token}"

    def prepare(self, payload: Payload) -> Payload:
        """Return a copy of ``payload`` with the process-wide defaults applied.

        Links are always unfurled, the sender is the product name, the
        configured channel and icon fill in when the payload has none.
        """
        prepared = payload.model_copy(deep=True)
        prepared.unfurl_links = True
        prepared.username = PRODUCT_NAME

        channel = normalize_channel(prepared.channel)
        if channel is None:
            channel = normalize_channel(self.settings.SLACK_DEFAULT_CHANNEL)
        prepared.channel = channel

        if not prepared.has_icon and self.settings.SLACK_DEFAULT_EMOJI:
            prepared.set_icon(self.settings.SLACK_DEFAULT_EMOJI)

        return prepared

    def send(self, payload: Payload) -> None:
        """Send a payload and block until Slack answers.

        Args:
            payload: Message to send; it is not modified

        Raises:
            ConfigurationError: team or token is missing (nothing is sent)
            TransportError: Slack answered with a status other than 200, or
                the request failed or timed out
        """
        url = self.webhook_url()
        prepared = self.prepare(payload)
        body = prepared.to_json()
        logger.debug("slack_payload_prepared", payload=body)

        try:
            response = self._session.post(
                url,
                data={"payload": body},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise TransportError(f"Slack request failed: {e}", payload=body) from e

        if response.status_code != 200:
            logger.error(
                "slack_payload_rejected",
                status_code=response.status_code,
                payload=body,
                response_body=response.text,
            )
            raise TransportError(
                f"Slack Error ({response.status_code}): {response.text}",
                status_code=response.status_code,
                response_body=response.text,
                payload=body,
            )

        logger.info("slack_payload_sent", channel=prepared.channel)

    def send_async(self, payload: Payload) -> None:
        """Submit a payload for background delivery and return immediately.

        There is no handle and no result; failures are logged by the worker.
        After ``stop`` submissions are dropped with an error log.
        """
        executor = self._get_or_create_executor()
        if executor is None:
            logger.error("slack_dispatcher_unavailable", payload=payload.to_json())
            return
        try:
            executor.submit(self._deliver, payload)
        except RuntimeError as e:
            # stop() raced with this submission
            logger.error(
                "slack_dispatcher_unavailable",
                error=str(e),
                payload=payload.to_json(),
            )

    def _deliver(self, payload: Payload) -> bool:
        """Worker body: send and swallow delivery failures."""
        try:
            self.send(payload)
            return True
        except TransportError as e:
            logger.error(
                "slack_async_send_failed",
                error=str(e),
                status_code=e.status_code,
                payload=e.payload or payload.to_json(),
                response_body=e.response_body,
            )
        except SlackError as e:
            logger.error(
                "slack_async_send_failed",
                error=str(e),
                payload=payload.to_json(),
            )
        except Exception as e:
            logger.exception(
                "slack_async_send_crashed",
                error=str(e),
                payload=payload.to_json(),
            )
        return False

    def _get_or_create_executor(self) -> Optional[ThreadPoolExecutor]:
        """Lazily create the executor; None once the dispatcher is stopped."""
        with self._executor_lock:
            if self._executor_shutdown:
                return None
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix="slack-dispatch",
                )
                logger.debug("slack_executor_created", max_workers=self.max_workers)
            return self._executor

    def start(self) -> "SlackDispatcher":
        """Create the worker pool ahead of the first submission."""
        self._get_or_create_executor()
        return self

    def stop(self) -> "SlackDispatcher":
        """Shut the worker pool down without waiting.

        Messages already queued and requests in flight are still delivered by
        the worker threads; new submissions are refused. Idempotent.
        """
        with self._executor_lock:
            self._executor_shutdown = True
            if self._executor is None:
                return self
            try:
                self._executor.shutdown(wait=False)
                logger.debug("slack_executor_shut_down")
            finally:
                self._executor = None
        return self
