"""JobPoller: turns an asynchronous remote parse job into one awaitable call.

Loop contract:
1. Check cancellation and the deadline before every query; no query is
   started at or past the deadline, a started one is allowed to finish.
2. Issue one result query and classify it (see PollClassifier).
3. ready -> return payload; permanent -> PermanentPollError;
   pending -> suspend for the poll interval (clamped to the time left) and
   loop. The interval is fixed, not exponential.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional

from docparse.core.config import ParseJobConfig
from docparse.core.exceptions import (
    JobCancelledError,
    JobTimeoutError,
    PermanentPollError,
    TransportError,
)
from docparse.core.interfaces.http_client import HttpClientPort, HttpResponse
from docparse.core.interfaces.observers import JobStateObserver
from docparse.core.interfaces.retry import RetryPort
from docparse.core.managers.poll_classifier import PollClassifier
from docparse.core.models.job import Job, JobState
from docparse.core.models.poll_outcome import PollOutcome, PollOutcomeKind
from docparse.core.settings import logger


class _RetryWindowClosed(Exception):
    """Stops transport retries once the job deadline has passed."""

    def __init__(self, last_error: TransportError):
        super().__init__(last_error.message)
        self.last_error = last_error


class JobPoller:
    """Polls a remote job until it is ready, fails, times out or is cancelled.

    Attributes:
        config: Immutable service configuration (interval, timeout, markers)
    """

    def __init__(
        self,
        http_client: HttpClientPort,
        config: ParseJobConfig,
        classifier: Optional[PollClassifier] = None,
        retry_port: Optional[RetryPort] = None,
        observers: Optional[list[JobStateObserver]] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._http = http_client
        self.config = config
        self._classifier = classifier or PollClassifier(config)
        self._retry = retry_port
        self._observers = observers or []
        self._clock = clock
        self._sleep = sleep

    def start(self, job_id: str, timeout: Optional[float] = None) -> Job:
        """Create the job record; its deadline starts counting now."""
        timeout = self.config.poll_timeout if timeout is None else timeout
        return Job.create(job_id, self._clock(), timeout)

    async def await_result(
        self,
        job: Job | str,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Any:
        """Poll until the job reaches a terminal state and return its payload.

        `timeout` only applies when a job id is given; a `Job` already carries
        its deadline from `start`.

        Raises:
            JobTimeoutError: still pending at the deadline
            PermanentPollError: the service reported a non-pending error or
                the transport failed
            JobCancelledError: `cancel_event` was set while waiting
            ValueError: both a `Job` and a `timeout` were given
        """
        if isinstance(job, str):
            job = self.start(job, timeout)
        elif timeout is not None:
            raise ValueError(f"Job {job.id} already has a deadline; pass a job id to set a timeout")
        interval = self.config.poll_interval if poll_interval is None else poll_interval
        timeout_seconds = job.deadline_at - job.created_at

        while True:
            if cancel_event is not None and cancel_event.is_set():
                await self._cancel(job)

            now = self._clock()
            if job.is_expired(now):
                elapsed = now - job.created_at
                logger.warning(
                    "[job:poll] deadline reached job_id=%s elapsed=%.1fs attempts=%s",
                    job.id, elapsed, job.attempts,
                )
                await self._transition(job, JobState.timed_out, reason="timed out")
                raise JobTimeoutError(job.id, elapsed, timeout_seconds)

            if job.state == JobState.submitted:
                await self._transition(job, JobState.running)

            outcome = await self._poll_once(job)
            job.attempts += 1

            if outcome.kind == PollOutcomeKind.ready:
                logger.info("[job:poll] result ready job_id=%s attempts=%s", job.id, job.attempts)
                await self._transition(job, JobState.succeeded, payload=outcome.payload)
                return outcome.payload

            if outcome.kind == PollOutcomeKind.pending:
                await self._transition(job, JobState.running)
                await self._suspend(job, interval, cancel_event)
                continue

            await self._fail(job, outcome)

    async def _poll_once(self, job: Job) -> PollOutcome:
        url = self.config.result_url(job.id)
        headers = self.config.auth_headers()
        logger.debug("[job:poll] GET %s attempt=%s", url, job.attempts + 1)
        failures: list[TransportError] = []

        async def query() -> HttpResponse:
            # retries share the job deadline; no new attempt once it has passed
            if failures and job.is_expired(self._clock()):
                raise _RetryWindowClosed(failures[-1])
            try:
                return await self._http.get(url, headers=headers)
            except TransportError as exc:
                failures.append(exc)
                raise

        try:
            if self._retry and self.config.transport_retry_attempts > 1:
                resp = await self._retry.execute(
                    query,
                    attempts=self.config.transport_retry_attempts,
                    wait_initial=self.config.transport_retry_base_wait,
                    wait_max=self.config.transport_retry_max_wait,
                    exception_types=(TransportError,),
                )
            else:
                resp = await query()
        except _RetryWindowClosed as closed:
            logger.warning(
                "[job:poll] deadline reached during transport retries job_id=%s attempts=%s",
                job.id, len(failures),
            )
            return self._classifier.classify_transport_error(closed.last_error)
        except TransportError as exc:
            logger.warning("[job:poll] transport failure job_id=%s error=%s", job.id, exc.message)
            return self._classifier.classify_transport_error(exc)

        outcome = self._classifier.classify(resp)
        logger.debug(
            "[job:poll] job_id=%s status=%s outcome=%s", job.id, outcome.status, outcome.kind
        )
        return outcome

    async def _suspend(
        self, job: Job, interval: float, cancel_event: Optional[asyncio.Event]
    ) -> None:
        delay = min(interval, job.remaining(self._clock()))
        logger.debug("[job:poll] still processing job_id=%s next poll in %.2fs", job.id, delay)
        if cancel_event is None:
            await self._sleep(delay)
            return
        # whichever finishes first: the interval or the cancel signal
        sleeper = asyncio.ensure_future(self._sleep(delay))
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, waiter):
                if not task.done():
                    task.cancel()
            await asyncio.gather(sleeper, waiter, return_exceptions=True)
        if cancel_event.is_set():
            await self._cancel(job)

    async def _cancel(self, job: Job) -> None:
        logger.info("[job:poll] cancelled job_id=%s attempts=%s", job.id, job.attempts)
        await self._transition(job, JobState.cancelled, reason="cancelled")
        raise JobCancelledError(job.id)

    async def _fail(self, job: Job, outcome: PollOutcome) -> None:
        message = outcome.error or "Parsing poll failed"
        logger.warning(
            "[job:poll] permanent failure job_id=%s status=%s error=%s",
            job.id, outcome.status, message,
        )
        await self._transition(job, JobState.failed, reason=message)
        raise PermanentPollError(
            job.id,
            message,
            upstream_status=outcome.status,
            upstream_body=outcome.error,
        )

    async def _transition(
        self,
        job: Job,
        new_state: JobState,
        payload: Any = None,
        reason: Optional[str] = None,
    ) -> None:
        old_state = job.transition(new_state, payload=payload, reason=reason)
        for observer in self._observers:
            try:
                await observer.on_state_changed(job, old_state, new_state)
            except Exception as exc:
                logger.error(
                    "[observer:error] on_state_changed failed observer=%s job_id=%s error=%s",
                    type(observer).__name__, job.id, exc,
                )
