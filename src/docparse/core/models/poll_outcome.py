from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel


class PollOutcomeKind(StrEnum):
    pending = "pending"
    ready = "ready"
    permanent = "permanent"
    transient = "transient"


class PollOutcome(BaseModel):
    """Classification of a single poll attempt."""

    kind: PollOutcomeKind
    payload: Optional[Any] = None
    error: Optional[str] = None
    status: Optional[int] = None

    @classmethod
    def pending(cls, status: Optional[int] = None) -> "PollOutcome":
        return cls(kind=PollOutcomeKind.pending, status=status)

    @classmethod
    def ready(cls, payload: Any, status: Optional[int] = None) -> "PollOutcome":
        return cls(kind=PollOutcomeKind.ready, payload=payload, status=status)

    @classmethod
    def permanent(cls, error: str, status: Optional[int] = None) -> "PollOutcome":
        return cls(kind=PollOutcomeKind.permanent, error=error, status=status)

    @classmethod
    def transient(cls, error: str, status: Optional[int] = None) -> "PollOutcome":
        return cls(kind=PollOutcomeKind.transient, error=error, status=status)
