"""Configuration models for core domain components.

Pydantic value objects handed to the submitter, poller and parse manager so
the core never reads process settings or module globals.
"""

from typing import Dict, Optional, Tuple
from pydantic import BaseModel, Field, HttpUrl, SecretStr


DEFAULT_PENDING_MARKERS: Tuple[str, ...] = (
    "Job not completed yet",
    "Result for Parsing Job",
)

DEFAULT_UPLOAD_OPTIONS: Dict[str, str] = {
    "tier": "agentic_plus",
    "version": "latest",
    "high_res_ocr": "true",
    "adaptive_long_table": "true",
    "outlined_table_extraction": "true",
    "output_tables_as_HTML": "true",
    "max_pages": "0",
    "precise_bounding_box": "true",
}


class ParseJobConfig(BaseModel):
    """Configuration for one remote parsing service.

    Attributes:
        base_url: Parsing API root, e.g. https://api.cloud.llamaindex.ai/api/v1/parsing
        api_key: Bearer token sent with every request
        poll_interval: Fixed seconds between result queries
        poll_timeout: Wall-clock budget from submission to result
        result_type: Result flavour requested from the service (markdown, text, json)
        result_field: JSON field holding the artifact in a result body
        not_ready_statuses: Statuses the service reuses for "still processing"
        pending_markers: Substrings of the error detail meaning "still processing"
        accepted_statuses: Success statuses that still mean "not finished"
        error_body_limit: Max characters of an upstream body kept in errors
        transport_retry_attempts: Query attempts on transport failure (1 = fatal)
        upload_options: Form fields passed through verbatim on submission
    """

    base_url: HttpUrl = HttpUrl("https://api.cloud.llamaindex.ai/api/v1/parsing")
    api_key: SecretStr = SecretStr("")

    poll_interval: float = Field(
        default=3.0,
        gt=0,
        description="Interval in seconds between remote result polling requests"
    )

    poll_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Maximum time in seconds to wait for remote job completion"
    )

    result_type: str = "markdown"
    result_field: str = "markdown"

    not_ready_statuses: Tuple[int, ...] = (400, 404)
    pending_markers: Tuple[str, ...] = DEFAULT_PENDING_MARKERS
    accepted_statuses: Tuple[int, ...] = (202,)

    error_body_limit: int = Field(default=400, ge=1)

    transport_retry_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Attempts per poll query on transport errors; 1 treats them as fatal"
    )

    transport_retry_base_wait: float = Field(default=0.2, gt=0)
    transport_retry_max_wait: float = Field(default=1.0, gt=0)

    upload_options: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_UPLOAD_OPTIONS)
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @property
    def upload_url(self) -> str:
        return str(self.base_url).rstrip("/") + "/upload"

    def result_url(self, job_id: str) -> str:
        return str(self.base_url).rstrip("/") + f"/job/{job_id}/result/{self.result_type}"

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key.get_secret_value()}"}

    @classmethod
    def from_app_settings(cls, settings, profile: Optional[dict] = None) -> "ParseJobConfig":
        """Factory method to construct config from DocParseSettings.

        Args:
            settings: DocParseSettings instance from core.settings
            profile: Optional parser profile (upload options, pending markers)

        Returns:
            ParseJobConfig with values from app settings, overridden by profile
        """
        values = dict(
            base_url=settings.DOCPARSE_LLAMA_PARSE_BASE_URL,
            api_key=settings.DOCPARSE_LLAMA_PARSE_API_KEY,
            poll_interval=settings.DOCPARSE_POLL_INTERVAL,
            poll_timeout=settings.DOCPARSE_POLL_TIMEOUT,
            result_type=settings.DOCPARSE_RESULT_TYPE,
            transport_retry_attempts=settings.DOCPARSE_TRANSPORT_RETRY_ATTEMPTS,
        )
        if profile:
            if profile.get("upload_options") is not None:
                values["upload_options"] = {
                    str(k): _form_value(v) for k, v in profile["upload_options"].items()
                }
            if profile.get("pending_markers"):
                values["pending_markers"] = tuple(profile["pending_markers"])
            if profile.get("not_ready_statuses"):
                values["not_ready_statuses"] = tuple(int(s) for s in profile["not_ready_statuses"])
        return cls(**values)


class ParseServiceConfig(BaseModel):
    """Configuration for the request-level orchestration around a parse job."""

    parser_version: str = "llamaparse-v1"
    source_name: str = "llamaparse"
    max_stored_text: int = Field(default=50000, ge=0)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @classmethod
    def from_app_settings(cls, settings) -> "ParseServiceConfig":
        return cls(
            parser_version=settings.DOCPARSE_PARSER_VERSION,
            max_stored_text=settings.DOCPARSE_MAX_STORED_TEXT,
        )


def _form_value(value) -> str:
    # YAML booleans become "true"/"false" as the service expects
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
