"""DocumentParseManager tests with stub submitter/poller collaborators."""

import asyncio

import pytest

from docparse.adapters.result_sink_inmemory import InMemoryResultSink
from docparse.core.config import ParseJobConfig, ParseServiceConfig
from docparse.core.exceptions import DocumentInputError, JobCancelledError, ResultStoreError
from docparse.core.interfaces.document_source import DocumentSourcePort
from docparse.core.interfaces.result_sink import ResultSinkPort
from docparse.core.managers.parse_manager import DocumentParseManager
from docparse.core.models.document import DocumentInput, ParseRequest
from docparse.core.models.job import Job


class StubSubmitter:
    def __init__(self, job_id="J1"):
        self.job_id = job_id
        self.documents = []

    async def submit(self, document):
        self.documents.append(document)
        return self.job_id


class StubPoller:
    def __init__(self, payload=None, error=None):
        self.config = ParseJobConfig()
        self._payload = payload
        self._error = error
        self.cancel_events = []

    def start(self, job_id, timeout=None):
        return Job.create(job_id, 0.0, self.config.poll_timeout)

    async def await_result(self, job, timeout=None, poll_interval=None, cancel_event=None):
        self.cancel_events.append(cancel_event)
        if self._error:
            raise self._error
        return self._payload


class StaticSource(DocumentSourcePort):
    def __init__(self, content=b"Jane Doe"):
        self.content = content

    async def load(self, request):
        if request.candidate_name == "missing":
            raise DocumentInputError("Provide either `text` or (`bucket` and `filePath`)")
        return DocumentInput(content=self.content, filename="resume.txt", content_type="text/plain")


class FailingSink(ResultSinkPort):
    async def store(self, record):
        raise ResultStoreError("Unable to store result: permission denied")


def make_manager(payload='{"markdown": "# Jane"}', error=None, sink=None, source=None, max_stored_text=50000):
    submitter = StubSubmitter()
    poller = StubPoller(payload=payload, error=error)
    manager = DocumentParseManager(
        submitter=submitter,
        poller=poller,
        source=source or StaticSource(),
        sink=sink or InMemoryResultSink(),
        config=ParseServiceConfig(max_stored_text=max_stored_text),
    )
    return manager, submitter, poller


@pytest.mark.asyncio
async def test_parse_document_normalizes_payload():
    manager, submitter, _ = make_manager()
    document = DocumentInput(content=b"cv", filename="resume.txt", content_type="text/plain")

    parsed = await manager.parse_document(document)

    assert parsed.markdown == "# Jane"
    assert parsed.job_id == "J1"
    assert parsed.source == "llamaparse"
    assert submitter.documents == [document]


@pytest.mark.asyncio
async def test_configured_source_name_is_reported():
    manager = DocumentParseManager(
        submitter=StubSubmitter(),
        poller=StubPoller(payload="# Jane"),
        source=StaticSource(),
        sink=InMemoryResultSink(),
        config=ParseServiceConfig(source_name="llamaparse-eu"),
    )

    response = await manager.handle(ParseRequest(text="cv"))

    assert response.parsed.source == "llamaparse-eu"


@pytest.mark.asyncio
async def test_handle_stores_record_and_returns_response():
    sink = InMemoryResultSink()
    manager, _, _ = make_manager(payload="# Jane", sink=sink)

    response = await manager.handle(
        ParseRequest(text="Jane Doe", candidateName="Jane", jobId="opening-7", userId="u-1")
    )

    assert response.parser_version == "llamaparse-v1"
    record = await sink.get(response.resume_id)
    assert record.candidate_name == "Jane"
    assert record.job_id == "opening-7"
    assert record.created_by == "u-1"
    assert record.raw_text == "Jane Doe"
    assert record.parsed == {"markdown": "# Jane", "jobId": "J1", "source": "llamaparse"}

    body = response.model_dump(by_alias=True)
    assert set(body) == {"resumeId", "parsed", "parserVersion"}


@pytest.mark.asyncio
async def test_raw_text_is_truncated():
    sink = InMemoryResultSink()
    manager, _, _ = make_manager(sink=sink, source=StaticSource(b"x" * 500), max_stored_text=100)

    response = await manager.handle(ParseRequest(text="ignored"))

    record = await sink.get(response.resume_id)
    assert record.raw_text == "x" * 100


@pytest.mark.asyncio
async def test_binary_content_is_decoded_leniently():
    sink = InMemoryResultSink()
    manager, _, _ = make_manager(sink=sink, source=StaticSource(b"%PDF\xff\xfe"))

    response = await manager.handle(ParseRequest(bucket="b", filePath="cv.pdf"))

    record = await sink.get(response.resume_id)
    assert record.raw_text.startswith("%PDF")


@pytest.mark.asyncio
async def test_source_error_stops_before_submission():
    manager, submitter, _ = make_manager()

    with pytest.raises(DocumentInputError):
        await manager.handle(ParseRequest(candidateName="missing"))

    assert submitter.documents == []


@pytest.mark.asyncio
async def test_poll_error_is_not_stored():
    sink = InMemoryResultSink()
    manager, _, _ = make_manager(error=JobCancelledError("J1"), sink=sink)

    with pytest.raises(JobCancelledError):
        await manager.handle(ParseRequest(text="cv"))

    assert await sink.list() == []


@pytest.mark.asyncio
async def test_sink_error_propagates():
    manager, _, _ = make_manager(sink=FailingSink())

    with pytest.raises(ResultStoreError):
        await manager.handle(ParseRequest(text="cv"))


@pytest.mark.asyncio
async def test_cancel_event_reaches_poller():
    manager, _, poller = make_manager()
    event = asyncio.Event()

    await manager.handle(ParseRequest(text="cv"), cancel_event=event)

    assert poller.cancel_events == [event]
