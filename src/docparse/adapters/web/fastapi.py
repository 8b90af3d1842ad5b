# docparse/adapters/web/fastapi.py
from contextlib import asynccontextmanager
from typing import Callable, Sequence

import json
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from docparse.core.exceptions import (
    DocumentInputError,
    JobCancelledError,
    JobTimeoutError,
    ParseJobError,
    PermanentPollError,
    ResultStoreError,
    SubmissionError,
    TransportError,
)
from docparse.core.interfaces.http_client import HttpClientPort
from docparse.core.logging_config import correlation_id_var
from docparse.core.managers.parse_manager import DocumentParseManager
from docparse.core.models.document import ErrorResponse, ParseRequest
from docparse.core.settings import logger

# Most specific first; the first isinstance match decides the status code
ERROR_STATUS: Sequence[tuple[type[Exception], int]] = (
    (DocumentInputError, 400),
    (JobTimeoutError, 504),
    (JobCancelledError, 503),
    (SubmissionError, 502),
    (PermanentPollError, 502),
    (TransportError, 502),
    (ResultStoreError, 502),
    (ParseJobError, 500),
)


def status_for(exc: Exception) -> int:
    for exc_type, status in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status
    return 500


# Driver adapter: depends on the core manager, the core never imports it
def create_app(
    manager_factory: Callable[[HttpClientPort], DocumentParseManager],
    http_client: HttpClientPort,
    cors_origins: Sequence[str] = ("*",),
):
    """Create the FastAPI app.

    Concrete infrastructure is assembled by the composition root and passed
    in as a factory, so this adapter only deals with HTTP concerns and the
    lifetime of the shared HTTP session.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with http_client as client:
            app.state.parse_manager = manager_factory(client)
            yield

    app = FastAPI(title="docparse", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    def render_error(status: int, message: str) -> JSONResponse:
        return JSONResponse(status_code=status, content=ErrorResponse(error=message).model_dump())

    # Correlation ID middleware: assigns per-request id (header override) and exposes it to logging
    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        cid = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        correlation_id_var.set(cid)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.set("-")
        response.headers["X-Request-ID"] = cid
        return response

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/parse-resume")
    async def parse_resume(request: Request):
        try:
            raw = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return render_error(400, "Request body must be JSON")

        try:
            parse_request = ParseRequest.model_validate(raw)
        except ValidationError as e:
            return render_error(400, f"Invalid request: {e.errors()[0].get('msg', 'invalid body')}")

        manager: DocumentParseManager = app.state.parse_manager
        try:
            result = await manager.handle(parse_request)
        except ParseJobError as exc:
            status = status_for(exc)
            logger.error("[parse:error] status=%s type=%s message=%s", status, type(exc).__name__, exc.message)
            return render_error(status, exc.message)
        except Exception as exc:
            logger.error("[parse:error] unexpected error=%r", exc)
            return render_error(500, "Internal Server Error")

        return JSONResponse(
            status_code=200,
            content=result.model_dump(by_alias=True, mode="json"),
        )

    return app
