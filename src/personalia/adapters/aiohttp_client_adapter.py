# personalia/adapters/aiohttp_client_adapter.py
import asyncio
import aiohttp
from typing import Any, Dict, Optional

from personalia.core.interfaces.http_client import HttpClientPort
from personalia.core.exceptions import TransportError
from personalia.core.settings import logger


class AioHttpClientAdapter(HttpClientPort):
    """aiohttp implementation of HttpClientPort.

    Every received response is returned as ``{status, reason, headers, body}``,
    whatever its status code, so the core can classify it. Only failures where
    no response arrived (timeouts, refused connections, dropped sockets) raise,
    as TransportError.
    """

    def __init__(self, headers: Dict[str, str] | None = None, timeout: float = 10.0):
        self._session: Optional[aiohttp.ClientSession] = None
        self._headers = dict(headers or {})
        # Default client timeout configuration for individual requests.
        # The adapter defines per-field timeouts at init time so callers
        # don't need to construct ClientTimeout objects themselves.
        self._default_total: float = timeout
        self._default_sock_read: float = timeout
        self._default_sock_connect: float = min(5.0, timeout)
        self._default_client_timeout = aiohttp.ClientTimeout(
            total=self._default_total,
            sock_read=self._default_sock_read,
            sock_connect=self._default_sock_connect,
        )

    async def __aenter__(self):
        """Async context manager entry"""
        self._session = aiohttp.ClientSession(headers=self._headers)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
        return False

    def _client_timeout(self, timeout: float | None) -> aiohttp.ClientTimeout:
        if timeout is None:
            return self._default_client_timeout
        # Keep adapter-level sock_read/sock_connect values but apply provided total
        return aiohttp.ClientTimeout(
            total=timeout,
            sock_read=min(self._default_sock_read, timeout),
            sock_connect=min(self._default_sock_connect, timeout),
        )

    async def get(self, url: str, timeout: float | None = None) -> Dict[str, Any]:
        return await self._request("GET", url, timeout=self._client_timeout(timeout))

    async def post(self, url: str, json: Dict[str, Any] | None, timeout: float | None = None, headers: Dict[str, str] | None = None) -> Dict[str, Any]:
        return await self._request(
            "POST", url, timeout=self._client_timeout(timeout), json=json, headers=headers
        )

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        if self._session is None:
            raise RuntimeError("HTTP client not initialized. Use 'async with' context manager.")

        try:
            async with self._session.request(method, url, **kwargs) as response:
                try:
                    body = await response.json()
                except aiohttp.ContentTypeError:
                    # Not JSON (or a JSON content type with an HTML error page); keep raw text
                    body = await self._read_text(response)
                    logger.debug(
                        "Non-JSON response from Personalia. URL: %s, Status: %s, Content: %s",
                        url,
                        response.status,
                        body[:200],
                    )
                except ValueError:
                    body = await self._read_text(response)
                    logger.debug(
                        "Malformed JSON response from Personalia. URL: %s, Status: %s",
                        url,
                        response.status,
                    )

                return {
                    "status": response.status,
                    "reason": response.reason or "",
                    "headers": dict(response.headers),
                    "body": body,
                }

        except asyncio.TimeoutError:
            logger.error("Timeout when requesting Personalia. Method: %s, URL: %s", method, url)
            raise TransportError(f"Timeout after waiting for {method} {url}", url=url)

        except aiohttp.ClientError as client_error:
            logger.error(
                "Connection error when requesting Personalia. Method: %s, URL: %s, Error: %s",
                method,
                url,
                str(client_error),
            )
            raise TransportError(
                f"Network Error: {str(client_error) or type(client_error).__name__}", url=url
            ) from client_error

    @staticmethod
    async def _read_text(response: aiohttp.ClientResponse) -> str:
        # undecodable bytes must not hide the response from the classifier
        raw = await response.read()
        try:
            return raw.decode(response.charset or "utf-8", errors="replace")
        except LookupError:
            return raw.decode("utf-8", errors="replace")

    async def close(self) -> None:
        """Close the session"""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
