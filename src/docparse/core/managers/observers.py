"""Concrete observer implementations for job state transitions."""

import logging
from collections import defaultdict
from typing import Dict, List, Tuple

from docparse.core.models.job import Job, JobState


logger = logging.getLogger(__name__)


class LoggingJobObserver:
    """Logs every state change; re-polls (running -> running) at debug level."""

    async def on_state_changed(
        self,
        job: Job,
        old_state: JobState,
        new_state: JobState,
    ) -> None:
        if old_state == new_state:
            logger.debug(f"[job:state] job_id={job.id} still {new_state} attempts={job.attempts}")
            return
        if job.is_in_terminal_state():
            logger.info(
                f"[job:state] job_id={job.id} {old_state} -> {new_state} "
                f"attempts={job.attempts} reason={job.reason}"
            )
        else:
            logger.info(f"[job:state] job_id={job.id} {old_state} -> {new_state}")


class StateHistoryObserver:
    """Records the transitions seen per job id (tests and diagnostics)."""

    def __init__(self) -> None:
        self._history: Dict[str, List[Tuple[JobState, JobState]]] = defaultdict(list)

    async def on_state_changed(
        self,
        job: Job,
        old_state: JobState,
        new_state: JobState,
    ) -> None:
        self._history[job.id].append((old_state, new_state))

    def history(self, job_id: str) -> List[Tuple[JobState, JobState]]:
        return list(self._history.get(job_id, []))

    def states(self, job_id: str) -> List[JobState]:
        """Sequence of states the job went through, starting with the first old state."""
        transitions = self._history.get(job_id, [])
        if not transitions:
            return []
        return [transitions[0][0]] + [new for _, new in transitions]
