"""PersonaliaClient: async client for the Personalia content API.

The client is the composition root of the library: it instantiates the
aiohttp adapter, the tenacity retry adapter, the error classifier and the
content poller, and wires them together. Use it as an async context manager::

    async with PersonaliaClient(api_key) as client:
        created = await client.create_content(request)
        content = await client.poll_for_content(created.RequestId)
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel

from personalia.adapters.aiohttp_client_adapter import AioHttpClientAdapter
from personalia.adapters.retry_tenacity import TenacityRetryAdapter
from personalia.core.config import PollingConfig
from personalia.core.exceptions import (
    PersonaliaApiError,
    PersonaliaError,
    TransientPersonaliaError,
    TransportError,
)
from personalia.core.interfaces.http_client import HttpClientPort
from personalia.core.interfaces.retry import RetryPort
from personalia.core.managers.content_poller import CONTENT_PATH, ContentPoller, is_success
from personalia.core.managers.error_classifier import ErrorClassifier, default_classifier
from personalia.core.models.content import (
    CreateContentRequest,
    CreateContentResponse,
    CreateUrlResponse,
    GetContentResponse,
    TemplateInfo,
)
from personalia.core.settings import app_settings, logger

DEFAULT_BASE_URL = "https://api.personalia.io"

ModelT = TypeVar("ModelT", bound=BaseModel)


class PersonaliaClient:
    """Client for content creation, retrieval, on-demand URLs and template info.

    Args:
        api_key: Personalia API key (sent as ``Authorization: ApiKey <key>``)
        base_url: API root, defaults to the public endpoint
        config: Polling and request configuration
        http_client: Injected HttpClientPort (tests, custom transports)
        retry_port: Injected RetryPort used for idempotent reads
        classifier: Injected ErrorClassifier
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        config: Optional[PollingConfig] = None,
        http_client: Optional[HttpClientPort] = None,
        retry_port: Optional[RetryPort] = None,
        classifier: Optional[ErrorClassifier] = None,
    ):
        if not api_key:
            raise ValueError("API key is required")

        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.config = config or PollingConfig()
        self._http = http_client or AioHttpClientAdapter(
            headers={
                "Authorization": f"ApiKey {api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.config.request_timeout,
        )
        self._retry = retry_port or TenacityRetryAdapter(
            attempts=self.config.read_retry_attempts,
            wait_initial=self.config.read_retry_base_wait,
            wait_max=self.config.read_retry_max_wait,
        )
        self._classifier = classifier or default_classifier
        self._poller = ContentPoller(
            self._http, self.base_url, config=self.config, classifier=self._classifier
        )

    @classmethod
    def from_settings(cls, settings=None, **kwargs) -> "PersonaliaClient":
        """Build a client from PersonaliaSettings (environment / .env)."""
        settings = settings or app_settings
        api_key = settings.PERSONALIA_API_KEY
        return cls(
            api_key.get_secret_value() if api_key else "",
            base_url=settings.base_url,
            config=PollingConfig.from_app_settings(settings),
            **kwargs,
        )

    async def __aenter__(self) -> "PersonaliaClient":
        await self._http.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self._http.__aexit__(exc_type, exc_val, exc_tb)
        return False

    async def close(self) -> None:
        await self._http.close()

    # ---------------- Requests -----------------
    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _raise_for_response(self, resp: Dict[str, Any]) -> None:
        if is_success(resp.get("status")):
            return
        error = self._classifier.classify_response(resp)
        logger.warning(
            f"[client] request failed status={resp.get('status')} "
            f"disposition={error.disposition} error_id={error.error_id}"
        )
        raise PersonaliaApiError(error)

    def _parse(self, model: Type[ModelT], resp: Dict[str, Any]) -> ModelT:
        self._raise_for_response(resp)
        body = resp.get("body")
        try:
            return model.model_validate(body)
        except ValueError as exc:
            # A 2xx without the expected fields is as useless as an error status
            error = self._classifier.classify_response(resp)
            raise PersonaliaApiError(error) from exc

    async def _read(self, url: str, model: Type[ModelT]) -> ModelT:
        """GET with retries on retryable classified failures."""

        async def attempt() -> ModelT:
            try:
                resp = await self._http.get(url, timeout=self.config.request_timeout)
                return self._parse(model, resp)
            except TransportError as exc:
                raise TransientPersonaliaError(
                    self._classifier.classify_transport_failure(exc)
                ) from exc
            except PersonaliaApiError as exc:
                if exc.is_retryable and not isinstance(exc, TransientPersonaliaError):
                    logger.debug(f"[client] retryable read failure url={url} error={exc.message}")
                    raise TransientPersonaliaError(exc.error) from exc
                raise

        return await self._retry.execute(attempt, exception_types=(TransientPersonaliaError,))

    async def _submit(self, path: str, request: CreateContentRequest, model: Type[ModelT]) -> ModelT:
        """POST once; submissions are not idempotent and are never retried."""
        try:
            resp = await self._http.post(
                self._url(path), json=request.to_payload(), timeout=self.config.request_timeout
            )
        except TransportError as exc:
            raise PersonaliaApiError(self._classifier.classify_transport_failure(exc)) from exc
        return self._parse(model, resp)

    # ---------------- Operations -----------------
    async def create_content(self, request: CreateContentRequest) -> CreateContentResponse:
        """Submit a request for an image or PDF document creation."""
        created = await self._submit(CONTENT_PATH, request, CreateContentResponse)
        logger.info(f"[client] content request submitted request_id={created.RequestId}")
        return created

    async def get_content(self, request_id: str) -> GetContentResponse:
        """Fetch the current state (and results, once completed) of a content request."""
        url = self._poller.status_url(request_id)
        try:
            return await self._read(url, GetContentResponse)
        except PersonaliaError as exc:
            exc.annotate(request_id)
            raise

    async def create_content_url(self, request: CreateContentRequest) -> CreateUrlResponse:
        """Create a content on-demand URL."""
        return await self._submit(f"{CONTENT_PATH}/url", request, CreateUrlResponse)

    async def get_template_info(self, template_id: str) -> TemplateInfo:
        """Describe the input fields of a template."""
        url = self._url(f"{CONTENT_PATH}/templates/{quote(template_id, safe='')}/info")
        return await self._read(url, TemplateInfo)

    async def poll_for_content(
        self,
        request_id: str,
        max_attempts: Optional[int] = None,
        interval: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GetContentResponse:
        """Poll until the content is ready or the attempt budget is used up.

        ``interval`` is in milliseconds. See ContentPoller.poll for errors.
        """
        return await self._poller.poll(
            request_id,
            max_attempts=max_attempts,
            interval_ms=interval,
            cancel_event=cancel_event,
        )

    async def create_content_and_poll(
        self,
        request: CreateContentRequest,
        max_attempts: Optional[int] = None,
        interval: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GetContentResponse:
        """Create content and wait for its completion in a single call."""
        created = await self.create_content(request)
        logger.info(
            f"[client] polling for completion request_id={created.RequestId} "
            f"max_attempts={max_attempts or self.config.max_attempts} "
            f"interval={(interval or self.config.interval_ms) / 1000:g}s"
        )
        try:
            return await self.poll_for_content(
                created.RequestId,
                max_attempts=max_attempts,
                interval=interval,
                cancel_event=cancel_event,
            )
        except PersonaliaError as exc:
            exc.annotate(created.RequestId)
            raise
