import asyncio

import aiohttp
import pytest
from aioresponses import aioresponses

from personalia.adapters.aiohttp_client_adapter import AioHttpClientAdapter
from personalia.core.exceptions import TransportError

"""
Tests for AioHttpClientAdapter behavior.

The adapter hands every received response back to the core, whatever its
status code, as a dict with 'status', 'reason', 'headers' and 'body'.
Only failures without any response (timeouts, connection errors) raise,
as TransportError, so that the error classifier can tell "no response"
apart from "bad response".
"""


@pytest.mark.asyncio
async def test_get_json_response():
    # Happy path: JSON is parsed into a dict body.
    url = "http://example.test/v1/content?requestId=abc"
    with aioresponses() as m:
        m.get(url, payload={"Status": "Completed"}, status=200)

        async with AioHttpClientAdapter() as client:
            resp = await client.get(url)
            assert resp["status"] == 200
            assert resp["body"] == {"Status": "Completed"}


@pytest.mark.asyncio
async def test_get_non_json_response_keeps_text():
    # Non-JSON bodies are returned as raw text for the classifier to inspect.
    url = "http://example.test/bad"
    with aioresponses() as m:
        m.get(url, body="<html>error</html>", status=200, headers={"Content-Type": "text/html"})

        async with AioHttpClientAdapter() as client:
            resp = await client.get(url)
            assert resp["body"] == "<html>error</html>"


@pytest.mark.asyncio
async def test_error_status_is_returned_not_raised():
    # An HTTP 404 is a response; the core decides whether it is retryable.
    url = "http://example.test/v1/content?requestId=missing"
    with aioresponses() as m:
        m.get(url, status=404)

        async with AioHttpClientAdapter() as client:
            resp = await client.get(url)
            assert resp["status"] == 404
            assert resp["body"] in (None, "")


@pytest.mark.asyncio
async def test_post_handles_500():
    url = "http://example.test/v1/content"
    with aioresponses() as m:
        m.post(url, status=500, payload={"Reason": "Boom", "ErrorId": 1000})

        async with AioHttpClientAdapter() as client:
            resp = await client.post(url, json={"TemplateId": "t"})
            assert resp["status"] == 500
            assert resp["body"]["ErrorId"] == 1000


@pytest.mark.asyncio
async def test_timeout_maps_to_transport_error():
    url = "http://example.test/slow"
    with aioresponses() as m:
        m.get(url, exception=asyncio.TimeoutError())

        async with AioHttpClientAdapter() as client:
            with pytest.raises(TransportError) as excinfo:
                await client.get(url)
            assert excinfo.value.url == url


@pytest.mark.asyncio
async def test_connection_error_maps_to_transport_error():
    url = "http://example.test/down"
    with aioresponses() as m:
        m.get(url, exception=aiohttp.ClientConnectionError("Connection refused"))

        async with AioHttpClientAdapter() as client:
            with pytest.raises(TransportError) as excinfo:
                await client.get(url)
            assert "Connection refused" in excinfo.value.message


@pytest.mark.asyncio
async def test_use_outside_context_manager_fails():
    client = AioHttpClientAdapter()
    with pytest.raises(RuntimeError):
        await client.get("http://example.test/")


@pytest.mark.asyncio
async def test_undecodable_body_is_returned_not_raised():
    # Invalid UTF-8 in an error page still reaches the classifier as text.
    url = "http://example.test/v1/content?requestId=abc"
    with aioresponses() as m:
        m.get(url, body=b"\xff\xfe bad gateway", status=502, headers={"Content-Type": "text/html"})

        async with AioHttpClientAdapter() as client:
            resp = await client.get(url)
            assert resp["status"] == 502
            assert resp["body"] == "\ufffd\ufffd bad gateway"
