"""Classification of single poll responses into PollOutcomes.

The parsing service answers "not finished yet" with the same 400/404
statuses it uses for real errors; only the `detail` message tells them
apart. Classification is therefore table driven: an ordered list of
`ClassificationRule`s is checked first, then the success/failure fallback
applies. New pending markers or statuses are configuration, not code.
"""

import json
from typing import Any, Iterable, List, Optional, Sequence

from docparse.core.config import ParseJobConfig
from docparse.core.exceptions import TransportError, truncate_body
from docparse.core.interfaces.http_client import HttpResponse
from docparse.core.models.poll_outcome import PollOutcome, PollOutcomeKind
from docparse.core.settings import logger


class ClassificationRule:
    """Maps (status set, message markers) to an outcome kind.

    A rule without markers matches on status alone. With markers, the
    response detail message must contain at least one of them.
    """

    def __init__(
        self,
        statuses: Iterable[int],
        outcome: PollOutcomeKind,
        markers: Optional[Sequence[str]] = None,
        name: str = "",
    ):
        self.statuses = frozenset(statuses)
        self.outcome = outcome
        self.markers = tuple(markers) if markers else None
        self.name = name or outcome.value

    def matches(self, status: int, message: str) -> bool:
        if status not in self.statuses:
            return False
        if self.markers is None:
            return True
        return any(marker in message for marker in self.markers)


def default_rules(config: ParseJobConfig) -> List[ClassificationRule]:
    return [
        ClassificationRule(
            config.accepted_statuses,
            PollOutcomeKind.pending,
            name="accepted",
        ),
        ClassificationRule(
            config.not_ready_statuses,
            PollOutcomeKind.pending,
            markers=config.pending_markers,
            name="still-processing",
        ),
    ]


class PollClassifier:
    def __init__(
        self,
        config: ParseJobConfig,
        rules: Optional[List[ClassificationRule]] = None,
    ):
        self.config = config
        self._rules = rules if rules is not None else default_rules(config)

    def classify(self, response: HttpResponse) -> PollOutcome:
        status = int(response.get("status", 0))
        body = response.get("body") or ""
        detail = _parse_json(body)
        message = _detail_message(detail)

        for rule in self._rules:
            if rule.matches(status, message):
                logger.debug("[job:classify] rule=%s status=%s", rule.name, status)
                return self._outcome_for(rule.outcome, status, body, message)

        if 200 <= status < 300:
            return PollOutcome.ready(self._extract_payload(detail, body), status=status)

        if status in self.config.not_ready_statuses:
            shown = json.dumps(detail) if detail is not None else body
            return PollOutcome.permanent(
                f"Parsing job error: {truncate_body(shown, self.config.error_body_limit)}",
                status=status,
            )

        return PollOutcome.permanent(
            f"Parsing poll failed ({status}): {truncate_body(body, self.config.error_body_limit)}",
            status=status,
        )

    def classify_transport_error(self, exc: TransportError) -> PollOutcome:
        # no response to inspect, so there is nothing that could mean "still processing"
        return PollOutcome.permanent(f"Parsing poll transport failure: {exc.message}")

    def _outcome_for(self, kind: PollOutcomeKind, status: int, body: str, message: str) -> PollOutcome:
        if kind == PollOutcomeKind.pending:
            return PollOutcome.pending(status=status)
        if kind == PollOutcomeKind.ready:
            return PollOutcome.ready(body, status=status)
        error = truncate_body(message or body, self.config.error_body_limit)
        if kind == PollOutcomeKind.transient:
            return PollOutcome.transient(error, status=status)
        return PollOutcome.permanent(error, status=status)

    def _extract_payload(self, data: Any, body: str) -> Any:
        # the artifact may come back as plain text instead of JSON
        if isinstance(data, dict) and isinstance(data.get(self.config.result_field), str):
            return data[self.config.result_field]
        return body


def _parse_json(body: str) -> Any:
    try:
        return json.loads(body)
    except ValueError:
        return None


def _detail_message(detail: Any) -> str:
    if isinstance(detail, dict) and isinstance(detail.get("detail"), str):
        return detail["detail"]
    return ""
