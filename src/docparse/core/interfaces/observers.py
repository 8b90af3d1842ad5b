"""Observer protocol for job state transitions.

Observers decouple side effects (logging, history recording, metrics) from
the poll loop itself.
"""

from typing import Protocol
from docparse.core.models.job import Job, JobState


class JobStateObserver(Protocol):
    """Observer protocol for job state transitions.

    Observers may be shared by many concurrently polled jobs, so they
    should be stateless or keep per-job state keyed by job id.
    """

    async def on_state_changed(
        self,
        job: Job,
        old_state: JobState,
        new_state: JobState,
    ) -> None:
        """Called after the job moved from `old_state` to `new_state`.

        Args:
            job: The job with its updated state
            old_state: Previous state
            new_state: Current state (may equal old_state on a re-poll)
        """
        ...
