"""ResultSinkPort: hexagonal port for persisting parsed documents."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from docparse.core.models.document import ParseRecord


class ResultSinkPort(ABC):
	"""Port abstraction for parse result persistence."""

	@abstractmethod
	async def store(self, record: ParseRecord) -> Optional[str]:
		"""Persist a parse record and return the stored row id (if any).

		Raises:
			ResultStoreError: the record could not be persisted.
		"""
		raise NotImplementedError
