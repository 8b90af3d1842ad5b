# Logging adapter for application-wide logging
from docparse.adapters.logging_adapter import LoggingAdapter

from pathlib import Path
from typing import Optional

from pydantic import HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings
from rich import print

from docparse.core.interfaces.logging import LoggingPort

# using pydantic_settings to manage environment variables
# and do automatic type casting in a central place
class DocParseSettings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }
    DOCPARSE_LOG_LEVEL: str = "INFO"
    DOCPARSE_API_SERVER_HOST: str = "0.0.0.0"
    DOCPARSE_API_SERVER_PORT: int = 8000
    DOCPARSE_CORS_ORIGINS: list[str] = ["*"]

    DOCPARSE_LLAMA_PARSE_BASE_URL: HttpUrl = HttpUrl("https://api.cloud.llamaindex.ai/api/v1/parsing")
    DOCPARSE_LLAMA_PARSE_API_KEY: SecretStr = SecretStr("")
    DOCPARSE_PARSER_PROFILE_FILE: Optional[Path] = None

    DOCPARSE_POLL_INTERVAL: float = 3.0  # seconds
    DOCPARSE_POLL_TIMEOUT: float = 60.0  # seconds
    DOCPARSE_RESULT_TYPE: str = "markdown"
    DOCPARSE_TRANSPORT_RETRY_ATTEMPTS: int = 1
    DOCPARSE_PARSER_VERSION: str = "llamaparse-v1"
    DOCPARSE_MAX_STORED_TEXT: int = 50000

    DOCPARSE_SUPABASE_URL: Optional[HttpUrl] = None
    DOCPARSE_SUPABASE_SERVICE_ROLE_KEY: SecretStr = SecretStr("")
    DOCPARSE_RESULTS_TABLE: str = "resumes"

    def print_settings(self, logger: LoggingPort):
        """Prints the settings for debugging purposes"""
        logger.info("DocParse Settings:")
        print(self)

    def missing_credentials(self) -> list[str]:
        """Names of credential settings that are still empty."""
        missing = []
        if not self.DOCPARSE_LLAMA_PARSE_API_KEY.get_secret_value():
            missing.append("DOCPARSE_LLAMA_PARSE_API_KEY")
        if self.DOCPARSE_SUPABASE_URL is None:
            missing.append("DOCPARSE_SUPABASE_URL")
        if not self.DOCPARSE_SUPABASE_SERVICE_ROLE_KEY.get_secret_value():
            missing.append("DOCPARSE_SUPABASE_SERVICE_ROLE_KEY")
        return missing

    @field_validator("DOCPARSE_RESULT_TYPE")
    def check_result_type(cls, value: str) -> str:
        """Only result flavours the parsing API serves are accepted."""
        if value not in {"markdown", "text", "json"}:
            raise ValueError(f"unsupported result type: {value}")
        return value


app_settings = DocParseSettings()

logger = LoggingAdapter("docparse", app_settings.DOCPARSE_LOG_LEVEL)
