# docparse/adapters/aiohttp_client_adapter.py
import asyncio
import aiohttp
from typing import Any, Mapping, Optional

from docparse.core.exceptions import TransportError
from docparse.core.interfaces.http_client import FormFile, HttpClientPort, HttpResponse
from docparse.core.settings import logger


class AioHttpClientAdapter(HttpClientPort):
    """aiohttp-backed transport.

    Returns status, headers and body for every HTTP response, error statuses
    included; interpreting them is the caller's job. Only failures to obtain
    a response (timeouts, connection errors) are raised, as TransportError.
    """

    def __init__(
        self,
        total_timeout: float = 30.0,
        sock_read_timeout: float = 30.0,
        sock_connect_timeout: float = 10.0,
    ):
        self._session: Optional[aiohttp.ClientSession] = None
        self._default_sock_read = sock_read_timeout
        self._default_sock_connect = sock_connect_timeout
        self._default_client_timeout = aiohttp.ClientTimeout(
            total=total_timeout,
            sock_read=sock_read_timeout,
            sock_connect=sock_connect_timeout,
        )

    async def __aenter__(self):
        """Async context manager entry"""
        self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
        return False

    async def get(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        return await self._request("GET", url, headers=headers, timeout=timeout)

    async def post(
        self,
        url: str,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        return await self._request("POST", url, headers=headers, timeout=timeout, json=json)

    async def post_form(
        self,
        url: str,
        fields: Mapping[str, str],
        file: FormFile | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        form = aiohttp.FormData()
        if file is not None:
            form.add_field(
                file.field,
                file.content,
                filename=file.filename,
                content_type=file.content_type,
            )
        for name, value in fields.items():
            form.add_field(name, value)
        return await self._request("POST", url, headers=headers, timeout=timeout, data=form)

    def _client_timeout(self, timeout: float | None) -> aiohttp.ClientTimeout:
        if timeout is None:
            return self._default_client_timeout
        # keep adapter-level sock_read/sock_connect values but apply provided total
        return aiohttp.ClientTimeout(
            total=timeout,
            sock_read=self._default_sock_read,
            sock_connect=self._default_sock_connect,
        )

    async def _request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        **kwargs,
    ) -> HttpResponse:
        if self._session is None:
            raise RuntimeError("HTTP client not initialized. Use 'async with' context manager.")

        try:
            async with self._session.request(
                method,
                url,
                headers=dict(headers or {}),
                timeout=self._client_timeout(timeout),
                **kwargs,
            ) as response:
                content = await response.read()
                return {
                    "status": response.status,
                    "headers": dict(response.headers),
                    "body": _decode(content, response.charset),
                    "content": content,
                }

        except asyncio.TimeoutError:
            logger.error("Timeout when requesting remote service. %s %s", method, url)
            raise TransportError(f"Request to {url} timed out")

        except aiohttp.ClientError as client_error:
            logger.error(
                "Connection error when requesting remote service. %s %s, Error: %s",
                method,
                url,
                str(client_error),
            )
            raise TransportError(
                f"Connection error with {url}",
                diagnostic=str(client_error),
            ) from client_error

    async def close(self) -> None:
        """Close the session"""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None


def _decode(content: bytes, charset: Optional[str]) -> str:
    try:
        return content.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")
