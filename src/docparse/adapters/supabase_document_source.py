from typing import Optional

from docparse.core.exceptions import DocumentInputError, TransportError, truncate_body
from docparse.core.interfaces.document_source import DocumentSourcePort
from docparse.core.interfaces.http_client import HttpClientPort
from docparse.core.models.document import DocumentInput, ParseRequest
from docparse.core.settings import logger


def infer_extension(file_path: Optional[str]) -> Optional[str]:
    """Lower-cased extension after the last dot, or None."""
    if not file_path:
        return None
    parts = file_path.split(".")
    if len(parts) < 2 or not parts[-1]:
        return None
    return parts[-1].lower()


class SupabaseDocumentSource(DocumentSourcePort):
    """Resolves inline text or downloads the referenced object from Supabase Storage."""

    def __init__(
        self,
        http_client: HttpClientPort,
        supabase_url: Optional[str],
        service_key: str,
    ):
        self._http = http_client
        self._url = supabase_url.rstrip("/") if supabase_url else None
        self._key = service_key

    async def load(self, request: ParseRequest) -> DocumentInput:
        if request.has_inline_text():
            logger.debug("[source:inline] using inline text chars=%s", len(request.text))
            return DocumentInput(
                content=request.text.encode("utf-8"),
                filename="resume.txt",
                content_type="text/plain",
            )

        if not request.bucket or not request.file_path:
            raise DocumentInputError("Provide either `text` or (`bucket` and `filePath`)")
        if not self._url or not self._key:
            raise DocumentInputError("Storage is not configured")

        object_url = f"{self._url}/storage/v1/object/{request.bucket}/{request.file_path.lstrip('/')}"
        logger.debug("[source:storage] downloading %s", object_url)
        try:
            resp = await self._http.get(
                object_url,
                headers={"Authorization": f"Bearer {self._key}", "apikey": self._key},
            )
        except TransportError as exc:
            raise DocumentInputError(f"Unable to download file: {exc.message}") from exc

        status = resp.get("status", 0)
        if not 200 <= status < 300:
            raise DocumentInputError(
                f"Unable to download file: {truncate_body(resp.get('body') or 'unknown')}"
            )

        headers = {k.lower(): v for k, v in (resp.get("headers") or {}).items()}
        content_type = headers.get("content-type", "").split(";")[0].strip()
        ext = infer_extension(request.file_path) or "bin"
        return DocumentInput(
            content=resp.get("content") or b"",
            filename=f"resume.{ext}",
            content_type=content_type or "application/octet-stream",
        )
