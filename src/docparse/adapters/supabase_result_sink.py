import json
from typing import Optional

from docparse.core.exceptions import ResultStoreError, TransportError, truncate_body
from docparse.core.interfaces.http_client import HttpClientPort
from docparse.core.interfaces.result_sink import ResultSinkPort
from docparse.core.models.document import ParseRecord
from docparse.core.settings import logger


class SupabaseResultSink(ResultSinkPort):
    """Inserts parse records into a Supabase table through PostgREST."""

    def __init__(
        self,
        http_client: HttpClientPort,
        supabase_url: Optional[str],
        service_key: str,
        table: str = "resumes",
    ):
        self._http = http_client
        self._url = supabase_url.rstrip("/") if supabase_url else None
        self._key = service_key
        self._table = table

    async def store(self, record: ParseRecord) -> Optional[str]:
        if not self._url or not self._key:
            raise ResultStoreError("Result store is not configured")

        insert_url = f"{self._url}/rest/v1/{self._table}"
        headers = {
            "Authorization": f"Bearer {self._key}",
            "apikey": self._key,
            "Prefer": "return=representation",
        }
        try:
            resp = await self._http.post(insert_url, json=record.model_dump(), headers=headers)
        except TransportError as exc:
            raise ResultStoreError(f"Unable to store result: {exc.message}") from exc

        status = resp.get("status", 0)
        body = resp.get("body") or ""
        if not 200 <= status < 300:
            logger.warning("[sink:supabase] insert failed status=%s body=%s", status, truncate_body(body))
            raise ResultStoreError(f"Unable to store result: {_error_message(body)}")

        row_id = _row_id(body)
        logger.debug("[sink:supabase] inserted table=%s id=%s", self._table, row_id)
        return row_id


def _row_id(body: str) -> Optional[str]:
    try:
        rows = json.loads(body)
    except ValueError:
        return None
    row = rows[0] if isinstance(rows, list) and rows else rows
    if isinstance(row, dict) and row.get("id") is not None:
        return str(row["id"])
    return None


def _error_message(body: str) -> str:
    try:
        data = json.loads(body)
    except ValueError:
        return truncate_body(body or "unknown")
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return truncate_body(body)
