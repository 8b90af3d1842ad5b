from pydantic import BaseModel, Field
from typing import Any, Optional
from datetime import datetime, timezone
from enum import StrEnum

from docparse.core.exceptions import InvalidTransitionError


class JobState(StrEnum):
    submitted = "submitted"
    running = "running"
    succeeded = "succeeded"
    failed = "failed"
    timed_out = "timed_out"
    cancelled = "cancelled"


TERMINAL_STATES = frozenset(
    {JobState.succeeded, JobState.failed, JobState.timed_out, JobState.cancelled}
)

_ALLOWED_TRANSITIONS = {
    JobState.submitted: {
        JobState.running,
        JobState.failed,
        JobState.timed_out,
        JobState.cancelled,
    },
    JobState.running: {
        JobState.running,
        JobState.succeeded,
        JobState.failed,
        JobState.timed_out,
        JobState.cancelled,
    },
}


class Job(BaseModel):
    """One remote parse job, owned by the invocation that submitted it.

    Notes:
    - `created_at` / `deadline_at` are monotonic clock readings (seconds); the
      deadline is fixed at creation and never extended by slow queries.
    - `submitted` is the UTC wall time, kept for logs and persisted records.
    - `payload` is only set on `succeeded`, `reason` on the other terminal states.
    """

    id: str
    created_at: float
    deadline_at: float
    state: JobState = JobState.submitted
    submitted: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    attempts: int = 0
    payload: Optional[Any] = None
    reason: Optional[str] = None

    @classmethod
    def create(cls, job_id: str, now: float, timeout: float) -> "Job":
        return cls(id=job_id, created_at=now, deadline_at=now + timeout)

    def is_in_terminal_state(self) -> bool:
        return self.state in TERMINAL_STATES

    def is_expired(self, now: float) -> bool:
        return now >= self.deadline_at

    def remaining(self, now: float) -> float:
        return max(0.0, self.deadline_at - now)

    def transition(
        self,
        new_state: JobState,
        payload: Optional[Any] = None,
        reason: Optional[str] = None,
    ) -> JobState:
        """Move to `new_state` and return the previous state."""
        allowed = _ALLOWED_TRANSITIONS.get(self.state, set())
        if new_state not in allowed:
            raise InvalidTransitionError(
                f"Job {self.id} cannot move from {self.state} to {new_state}",
                job_id=self.id,
            )
        old_state = self.state
        self.state = new_state
        if new_state == JobState.succeeded:
            self.payload = payload
        elif reason is not None:
            self.reason = reason
        return old_state
