# docparse/core/interfaces/http_client.py
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping

# Response dicts carry: 'status' (int), 'headers' (dict), 'body' (decoded text)
# and 'content' (raw bytes). Adapters never raise for HTTP error statuses;
# only transport failures surface as TransportError.
HttpResponse = Dict[str, Any]


class FormFile:
    """A file part of a multipart request."""

    def __init__(self, field: str, content: bytes, filename: str, content_type: str):
        self.field = field
        self.content = content
        self.filename = filename
        self.content_type = content_type


class HttpClientPort(ABC):
    @abstractmethod
    async def __aenter__(self) -> "HttpClientPort":
        """Async context manager entry method"""
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit method"""
        pass

    @abstractmethod
    async def get(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Make a GET request and return the response dict."""
        pass

    @abstractmethod
    async def post(
        self,
        url: str,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """POST a JSON body and return the response dict."""
        pass

    @abstractmethod
    async def post_form(
        self,
        url: str,
        fields: Mapping[str, str],
        file: FormFile | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """POST a multipart form (string fields plus an optional file part)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the HTTP client session"""
        pass
