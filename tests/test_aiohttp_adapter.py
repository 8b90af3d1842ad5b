import asyncio
import pytest
import aiohttp
from aioresponses import aioresponses

from docparse.adapters.aiohttp_client_adapter import AioHttpClientAdapter
from docparse.core.exceptions import TransportError
from docparse.core.interfaces.http_client import FormFile

"""
Tests for AioHttpClientAdapter behavior.

The adapter is a plain transport: every HTTP response, error statuses
included, comes back as a dict with status/headers/body/content so the
poll classifier can inspect the body. Only failures to get a response
(timeouts, connection errors) raise, as TransportError.
"""


@pytest.mark.asyncio
async def test_get_returns_status_and_text_body():
    url = "http://parse.test/job/J1/result/markdown"
    with aioresponses() as m:
        m.get(url, payload={"markdown": "Hello"}, status=200)

        async with AioHttpClientAdapter() as client:
            resp = await client.get(url, headers={"Authorization": "Bearer k"})

    assert resp["status"] == 200
    assert resp["body"] == '{"markdown": "Hello"}'
    assert resp["content"] == b'{"markdown": "Hello"}'


@pytest.mark.asyncio
async def test_error_status_is_returned_not_raised():
    # 404 "still processing" must reach the classifier untouched
    url = "http://parse.test/job/J1/result/markdown"
    with aioresponses() as m:
        m.get(url, status=404, payload={"detail": "Result for Parsing Job J1 not found"})

        async with AioHttpClientAdapter() as client:
            resp = await client.get(url)

    assert resp["status"] == 404
    assert "Result for Parsing Job" in resp["body"]


@pytest.mark.asyncio
async def test_non_json_body_is_kept_as_text():
    url = "http://parse.test/job/J1/result/markdown"
    with aioresponses() as m:
        m.get(url, body="# Plain markdown", status=200, headers={"Content-Type": "text/markdown"})

        async with AioHttpClientAdapter() as client:
            resp = await client.get(url)

    assert resp["body"] == "# Plain markdown"


@pytest.mark.asyncio
async def test_post_form_sends_multipart():
    url = "http://parse.test/upload"
    with aioresponses() as m:
        m.post(url, status=200, payload={"id": "J1"})

        async with AioHttpClientAdapter() as client:
            resp = await client.post_form(
                url,
                fields={"tier": "agentic_plus"},
                file=FormFile("file", b"data", "resume.txt", "text/plain"),
                headers={"Authorization": "Bearer k"},
            )

        assert resp["status"] == 200
        (key, calls), = m.requests.items()
        assert key[0] == "POST"
        assert isinstance(calls[0].kwargs["data"], aiohttp.FormData)
        assert calls[0].kwargs["headers"] == {"Authorization": "Bearer k"}


@pytest.mark.asyncio
async def test_post_json_returns_status():
    url = "http://store.test/rest/v1/resumes"
    with aioresponses() as m:
        m.post(url, status=201, payload=[{"id": "r-1"}])

        async with AioHttpClientAdapter() as client:
            resp = await client.post(url, json={"parsed": {}})

    assert resp["status"] == 201
    assert '"r-1"' in resp["body"]


@pytest.mark.asyncio
async def test_timeout_maps_to_transport_error():
    url = "http://parse.test/slow"
    with aioresponses() as m:
        m.get(url, exception=asyncio.TimeoutError())

        async with AioHttpClientAdapter() as client:
            with pytest.raises(TransportError) as excinfo:
                await client.get(url)

    assert "timed out" in excinfo.value.message


@pytest.mark.asyncio
async def test_connection_error_maps_to_transport_error():
    url = "http://parse.test/down"
    with aioresponses() as m:
        m.get(url, exception=aiohttp.ClientConnectionError("refused"))

        async with AioHttpClientAdapter() as client:
            with pytest.raises(TransportError) as excinfo:
                await client.get(url)

    assert excinfo.value.diagnostic == "refused"


@pytest.mark.asyncio
async def test_requires_context_manager():
    client = AioHttpClientAdapter()
    with pytest.raises(RuntimeError):
        await client.get("http://parse.test/")
