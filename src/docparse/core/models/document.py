from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentInput(BaseModel):
    """Bytes to submit, independent of where they came from."""

    content: bytes
    filename: str
    content_type: str


class ParseRequest(BaseModel):
    """JSON body accepted by the parse endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: Optional[str] = None
    bucket: Optional[str] = None
    file_path: Optional[str] = Field(default=None, alias="filePath")
    candidate_name: Optional[str] = Field(default=None, alias="candidateName")
    job_id: Optional[str] = Field(default=None, alias="jobId")
    user_id: Optional[str] = Field(default=None, alias="userId")

    def has_inline_text(self) -> bool:
        return bool(self.text and self.text.strip())


class ParsedDocument(BaseModel):
    """Normalized result of one parse job."""

    model_config = ConfigDict(populate_by_name=True)

    markdown: Any = None
    job_id: Optional[str] = Field(default=None, alias="jobId")
    source: str = "llamaparse"


class ParseRecord(BaseModel):
    """Row handed to the result sink; column names follow the results table."""

    candidate_name: Optional[str] = None
    job_id: Optional[str] = None
    created_by: Optional[str] = None
    file_bucket: Optional[str] = None
    file_path: Optional[str] = None
    raw_text: Optional[str] = None
    parsed: dict
    parser_version: str
    status: str = "parsed"


class ParseResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_id: Optional[str] = Field(default=None, alias="resumeId")
    parsed: ParsedDocument
    parser_version: str = Field(alias="parserVersion")


class ErrorResponse(BaseModel):
    error: str
