"""Best-effort normalization of terminal job payloads.

The service may hand back the artifact as a bare string, as a JSON object
wrapping it, or as a JSON document encoded inside a string. Normalization
unwraps one level of that and otherwise returns its input untouched; it
never raises, so a finished remote job is never reported as failed here.
"""

import json
from typing import Any

from docparse.core.settings import logger


class ResultNormalizer:
    def __init__(self, result_field: str = "markdown") -> None:
        self._field = result_field

    def normalize(self, payload: Any) -> Any:
        if isinstance(payload, dict):
            return self._extract(payload, payload)

        if not isinstance(payload, str):
            return payload

        stripped = payload.strip()
        if not stripped.startswith("{"):
            # plain artifact text is already the expected shape
            return payload

        try:
            decoded = json.loads(stripped)
        except ValueError:
            logger.debug("[normalize] payload looks like JSON but does not parse; keeping raw text")
            return payload

        if isinstance(decoded, dict):
            return self._extract(decoded, payload)
        return payload

    def _extract(self, data: dict, fallback: Any) -> Any:
        value = data.get(self._field)
        if isinstance(value, str):
            return value
        logger.debug(
            "[normalize] field %s missing or not a string (keys=%s); keeping payload",
            self._field,
            list(data.keys())[:5],
        )
        return fallback
