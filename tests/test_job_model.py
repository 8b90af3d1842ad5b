import pytest

from docparse.core.exceptions import InvalidTransitionError
from docparse.core.models.job import TERMINAL_STATES, Job, JobState


def test_create_fixes_deadline():
    job = Job.create("J1", now=100.0, timeout=60.0)

    assert job.state == JobState.submitted
    assert job.deadline_at == 160.0
    assert job.attempts == 0
    assert not job.is_in_terminal_state()


def test_expiry_and_remaining():
    job = Job.create("J1", now=0.0, timeout=10.0)

    assert not job.is_expired(9.99)
    assert job.is_expired(10.0)
    assert job.remaining(4.0) == 6.0
    assert job.remaining(25.0) == 0.0


def test_transition_returns_previous_state():
    job = Job.create("J1", 0.0, 10.0)

    assert job.transition(JobState.running) == JobState.submitted
    assert job.transition(JobState.running) == JobState.running
    assert job.transition(JobState.succeeded, payload="# md") == JobState.running
    assert job.payload == "# md"
    assert job.reason is None


def test_failure_keeps_reason_not_payload():
    job = Job.create("J1", 0.0, 10.0)
    job.transition(JobState.running)

    job.transition(JobState.failed, payload="ignored", reason="bad input")

    assert job.reason == "bad input"
    assert job.payload is None


def test_cannot_succeed_without_running():
    job = Job.create("J1", 0.0, 10.0)

    with pytest.raises(InvalidTransitionError):
        job.transition(JobState.succeeded, payload="x")


@pytest.mark.parametrize("terminal", sorted(TERMINAL_STATES))
@pytest.mark.parametrize("target", list(JobState))
def test_terminal_states_are_final(terminal, target):
    job = Job.create("J1", 0.0, 10.0)
    job.transition(JobState.running)
    job.transition(terminal, payload="x", reason="r")

    with pytest.raises(InvalidTransitionError) as excinfo:
        job.transition(target)

    assert excinfo.value.job_id == "J1"
    assert job.state == terminal
