"""ContentPoller: waits for a submitted content request to reach a terminal status.

Each round issues exactly one ``GET /v1/content?requestId=...`` and turns the
answer into an explicit outcome:

- ``Completed``: the provider reports ``Status == Completed``; returned at once.
- ``Fatal``: the provider reports ``Failed`` or the classifier deems the
  failure permanent; raised at once.
- ``Retry``: anything else; consumes one attempt of the budget.

Every error leaving ``poll`` carries the request id.
"""

from __future__ import annotations

import asyncio
from typing import Optional
from urllib.parse import urlencode

from personalia.core.config import PollingConfig
from personalia.core.exceptions import (
    ContentFailedError,
    PersonaliaApiError,
    PersonaliaError,
    PollingCancelledError,
    PollingTimeoutError,
    TransportError,
    format_seconds,
)
from personalia.core.interfaces.http_client import HttpClientPort
from personalia.core.logging_config import request_id_var
from personalia.core.managers.error_classifier import ErrorClassifier, default_classifier
from personalia.core.models.content import GetContentResponse
from personalia.core.models.polling import Completed, Fatal, PollingState, PollOutcome, Retry
from personalia.core.settings import logger

CONTENT_PATH = "/v1/content"


def is_success(status: Optional[int]) -> bool:
    return status is not None and 200 <= status < 300


class ContentPoller:
    """Drives status checks for one request id at a time per ``poll`` call.

    Instances hold no per-poll state, so one poller can serve concurrent polls
    of different request ids.
    """

    def __init__(
        self,
        http_client: HttpClientPort,
        base_url: str,
        config: Optional[PollingConfig] = None,
        classifier: Optional[ErrorClassifier] = None,
    ):
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self.config = config or PollingConfig()
        self._classifier = classifier or default_classifier

    def status_url(self, request_id: str) -> str:
        return f"{self._base_url}{CONTENT_PATH}?{urlencode({'requestId': request_id})}"

    async def check_once(self, request_id: str) -> PollOutcome:
        """Run a single status-check round. Never raises for API failures."""
        try:
            resp = await self._http.get(
                self.status_url(request_id), timeout=self.config.request_timeout
            )
        except TransportError as exc:
            error = self._classifier.classify_transport_failure(exc)
            logger.debug(
                f"[content:check] no response request_id={request_id} err={exc.message}"
            )
            return self._route(PersonaliaApiError(error))

        status = resp.get("status")
        body = resp.get("body")
        logger.debug(
            f"[content:check] response request_id={request_id} status={status} reason={resp.get('reason')}"
        )

        if is_success(status) and isinstance(body, dict):
            try:
                content = GetContentResponse.model_validate(body)
            except ValueError as exc:
                logger.warning(
                    f"[content:check] unparseable status payload request_id={request_id} error={exc}"
                )
            else:
                return self._evaluate(content, status)

        error = self._classifier.classify_response(resp, status_check=True)
        return self._route(PersonaliaApiError(error))

    def _evaluate(self, content: GetContentResponse, status: int) -> PollOutcome:
        if content.is_completed():
            return Completed(content)
        if content.is_failed():
            # a Failed job is final whatever the classifier thinks of its error id
            error = self._classifier.classify_failed_status(content, status_code=status)
            return Fatal(ContentFailedError(error))
        return Retry(f"content status {content.Status or 'unknown'}")

    @staticmethod
    def _route(error: PersonaliaApiError) -> PollOutcome:
        if error.is_retryable:
            return Retry(error.message, error)
        return Fatal(error)

    async def poll(
        self,
        request_id: str,
        max_attempts: Optional[int] = None,
        interval_ms: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GetContentResponse:
        """Poll until the content is ready.

        Args:
            request_id: Id returned by content creation
            max_attempts: Status-check rounds allowed (defaults to config)
            interval_ms: Wait between rounds in milliseconds (defaults to config)
            cancel_event: Optional event; setting it stops the poll promptly

        Returns:
            The completed content response.

        Raises:
            ContentFailedError: The provider marked the request Failed
            PersonaliaApiError: A permanent API failure
            PollingTimeoutError: The attempt budget was used up
            PollingCancelledError: ``cancel_event`` was set
            PersonaliaError: Any other failure, chained to the original exception
        """
        state = PollingState(
            max_attempts=max_attempts if max_attempts is not None else self.config.max_attempts,
            interval_ms=interval_ms if interval_ms is not None else self.config.interval_ms,
        )
        token = request_id_var.set(request_id)
        try:
            return await self._run(request_id, state, cancel_event)
        except PersonaliaError as exc:
            exc.annotate(request_id)
            raise
        except Exception as exc:
            logger.error(f"[content:poll] unexpected error request_id={request_id} err={exc!r}")
            raise PersonaliaError(
                f"Polling failed: {type(exc).__name__}: {exc}", request_id=request_id
            ) from exc
        finally:
            request_id_var.reset(token)

    async def _run(
        self,
        request_id: str,
        state: PollingState,
        cancel_event: Optional[asyncio.Event],
    ) -> GetContentResponse:
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise PollingCancelledError(request_id, state.attempts_made)

            logger.info(
                f"[content:poll] attempt {state.attempts_made + 1}/{state.max_attempts} request_id={request_id}"
            )
            outcome = await self.check_once(request_id)

            if isinstance(outcome, Completed):
                logger.info(
                    f"[content:poll] completed request_id={request_id} rounds={state.attempts_made + 1}"
                )
                return outcome.result

            if isinstance(outcome, Fatal):
                logger.warning(
                    f"[content:poll] permanent failure request_id={request_id} error={outcome.error.message}"
                )
                raise outcome.error

            state.consume_attempt()
            if state.exhausted:
                logger.warning(
                    f"[content:poll] attempt budget exhausted request_id={request_id} "
                    f"attempts={state.attempts_made} budget={format_seconds(state.max_attempts * state.interval_ms)}s"
                )
                raise PollingTimeoutError(request_id, state.attempts_made, state.interval_ms)

            logger.info(
                f"[content:poll] not ready ({outcome.reason}), attempt {state.attempts_made}/{state.max_attempts}. "
                f"Waiting {state.interval_ms / 1000:g} seconds... request_id={request_id}"
            )
            if await self._wait(state.interval_ms, cancel_event):
                logger.info(f"[content:poll] cancelled request_id={request_id}")
                raise PollingCancelledError(request_id, state.attempts_made)

    @staticmethod
    async def _wait(interval_ms: int, cancel_event: Optional[asyncio.Event]) -> bool:
        """Suspend between rounds. Returns True if the wait was cancelled."""
        seconds = interval_ms / 1000
        if cancel_event is None:
            await asyncio.sleep(seconds)
            return False
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True
