import json

from docparse.core.config import ParseJobConfig
from docparse.core.exceptions import SubmissionError, truncate_body
from docparse.core.interfaces.http_client import FormFile, HttpClientPort
from docparse.core.models.document import DocumentInput
from docparse.core.settings import logger


class JobSubmitter:
    """Uploads a document to the parsing service and returns the remote job id.

    Submissions are never retried: any non-2xx status or a body without a
    job id is a SubmissionError.
    """

    def __init__(self, http_client: HttpClientPort, config: ParseJobConfig):
        self._http = http_client
        self.config = config

    async def submit(self, document: DocumentInput) -> str:
        upload_url = self.config.upload_url
        logger.debug(
            "[job:submit] POST %s filename=%s content_type=%s size=%s options=%s",
            upload_url,
            document.filename,
            document.content_type,
            len(document.content),
            sorted(self.config.upload_options.keys()),
        )
        resp = await self._http.post_form(
            upload_url,
            fields=self.config.upload_options,
            file=FormFile("file", document.content, document.filename, document.content_type),
            headers=self.config.auth_headers(),
        )

        status = resp.get("status", 0)
        body = resp.get("body") or ""
        if not 200 <= status < 300:
            shown = truncate_body(body, self.config.error_body_limit)
            logger.warning("[job:submit] upload rejected status=%s body=%s", status, shown)
            raise SubmissionError(
                f"Parsing upload failed: {shown}",
                upstream_status=status,
                upstream_body=shown,
            )

        job_id = self._extract_job_id(body)
        if not job_id:
            shown = truncate_body(body, self.config.error_body_limit)
            logger.warning("[job:submit] malformed upload response status=%s body=%s", status, shown)
            raise SubmissionError(
                "Parsing upload failed: malformed response",
                upstream_status=status,
                upstream_body=shown,
            )

        logger.info("[job:submit] created remote job job_id=%s", job_id)
        return job_id

    def _extract_job_id(self, body: str) -> str | None:
        try:
            data = json.loads(body)
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        job_id = data.get("id")
        if job_id is None or job_id == "":
            return None
        return str(job_id)
