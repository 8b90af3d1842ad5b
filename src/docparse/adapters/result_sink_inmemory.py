"""In-memory implementation of ResultSinkPort.

Async-safe using an asyncio.Lock. Suitable for tests and local runs without
Supabase credentials; optionally dumps every record as JSON to a directory.
"""
from __future__ import annotations

import asyncio
import json
import os
import uuid
from copy import deepcopy
from datetime import datetime, timezone
from typing import Dict, List, Optional

from docparse.core.interfaces.result_sink import ResultSinkPort
from docparse.core.models.document import ParseRecord


class InMemoryResultSink(ResultSinkPort):
    def __init__(self, dump_dir: str | None = None) -> None:
        self._records: Dict[str, ParseRecord] = {}
        self._lock = asyncio.Lock()
        self._dump_dir = dump_dir or os.environ.get("DOCPARSE_RESULT_DUMP_DIR")
        if self._dump_dir:
            os.makedirs(self._dump_dir, exist_ok=True)

    def _dump(self, record_id: str, record: ParseRecord) -> None:
        if not self._dump_dir:
            return
        payload = {
            "meta": {
                "dumped_at": datetime.now(timezone.utc).isoformat(),
                "sink": "in-memory",
            },
            "id": record_id,
            "record": record.model_dump(),
        }
        path = os.path.join(self._dump_dir, f"{record_id}.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2, default=str)

    async def store(self, record: ParseRecord) -> Optional[str]:
        async with self._lock:
            record_id = str(uuid.uuid4())
            self._records[record_id] = deepcopy(record)
            self._dump(record_id, record)
            return record_id

    # Convenience accessors (not part of port but useful for tests)
    async def get(self, record_id: str) -> Optional[ParseRecord]:
        async with self._lock:
            r = self._records.get(record_id)
            return deepcopy(r) if r else None

    async def list(self) -> List[ParseRecord]:
        async with self._lock:
            return [deepcopy(r) for r in self._records.values()]
