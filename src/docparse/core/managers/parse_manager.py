"""DocumentParseManager: request-level orchestration of one parse.

Responsibilities:
1. Resolve the document bytes through the DocumentSourcePort.
2. Submit a remote job, poll it to completion, normalize the result.
3. Persist the parse record through the ResultSinkPort.
4. Return the response body for the web adapter.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from docparse.core.config import ParseServiceConfig
from docparse.core.interfaces.document_source import DocumentSourcePort
from docparse.core.interfaces.result_sink import ResultSinkPort
from docparse.core.managers.job_poller import JobPoller
from docparse.core.managers.job_submitter import JobSubmitter
from docparse.core.managers.result_normalizer import ResultNormalizer
from docparse.core.models.document import (
    DocumentInput,
    ParsedDocument,
    ParseRecord,
    ParseRequest,
    ParseResponse,
)
from docparse.core.settings import logger


class DocumentParseManager:
    def __init__(
        self,
        submitter: JobSubmitter,
        poller: JobPoller,
        source: DocumentSourcePort,
        sink: ResultSinkPort,
        config: Optional[ParseServiceConfig] = None,
        normalizer: Optional[ResultNormalizer] = None,
    ) -> None:
        self._submitter = submitter
        self._poller = poller
        self._source = source
        self._sink = sink
        self.config = config or ParseServiceConfig()
        self._normalizer = normalizer or ResultNormalizer(poller.config.result_field)

    async def parse_document(
        self,
        document: DocumentInput,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ParsedDocument:
        """Submit `document`, wait for the remote job and normalize its result."""
        job_id = await self._submitter.submit(document)
        job = self._poller.start(job_id)
        payload = await self._poller.await_result(job, cancel_event=cancel_event)
        markdown = self._normalizer.normalize(payload)
        return ParsedDocument(markdown=markdown, job_id=job_id, source=self.config.source_name)

    async def handle(
        self,
        request: ParseRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ParseResponse:
        logger.info(
            "[parse:request] inline_text=%s bucket=%s file_path=%s",
            request.has_inline_text(), request.bucket, request.file_path,
        )
        document = await self._source.load(request)
        parsed = await self.parse_document(document, cancel_event=cancel_event)

        record = ParseRecord(
            candidate_name=request.candidate_name,
            job_id=request.job_id,
            created_by=request.user_id,
            file_bucket=request.bucket,
            file_path=request.file_path,
            raw_text=self._stored_text(document.content),
            parsed=parsed.model_dump(by_alias=True),
            parser_version=self.config.parser_version,
        )
        resume_id = await self._sink.store(record)
        logger.info("[parse:stored] resume_id=%s remote_job_id=%s", resume_id, parsed.job_id)

        return ParseResponse(
            resume_id=resume_id,
            parsed=parsed,
            parser_version=self.config.parser_version,
        )

    def _stored_text(self, content: bytes) -> str:
        limit = self.config.max_stored_text
        return content.decode("utf-8", errors="replace")[:limit]
