# main.py
import uvicorn

from docparse.adapters.aiohttp_client_adapter import AioHttpClientAdapter
from docparse.adapters.parser_profile_file_adapter import ParserProfileFileAdapter
from docparse.adapters.result_sink_inmemory import InMemoryResultSink
from docparse.adapters.retry_tenacity import TenacityRetryAdapter
from docparse.adapters.supabase_document_source import SupabaseDocumentSource
from docparse.adapters.supabase_result_sink import SupabaseResultSink
from docparse.adapters.web.fastapi import create_app
from docparse.core.config import ParseJobConfig, ParseServiceConfig
from docparse.core.logging_config import configure_logging
from docparse.core.managers.job_poller import JobPoller
from docparse.core.managers.job_submitter import JobSubmitter
from docparse.core.managers.observers import LoggingJobObserver
from docparse.core.managers.parse_manager import DocumentParseManager
from docparse.core.settings import app_settings, logger


# main lives at the outermost layer (not in core)
# Instantiates all the concrete adapters
# Wires dependencies together
# Starts the application

def build_app():
    configure_logging(app_settings.DOCPARSE_LOG_LEVEL)
    app_settings.print_settings(logger)

    missing = app_settings.missing_credentials()
    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))

    profile_path = app_settings.DOCPARSE_PARSER_PROFILE_FILE
    profile = ParserProfileFileAdapter(str(profile_path) if profile_path else None).load_profile()
    job_config = ParseJobConfig.from_app_settings(app_settings, profile)
    service_config = ParseServiceConfig.from_app_settings(app_settings)

    supabase_url = (
        str(app_settings.DOCPARSE_SUPABASE_URL) if app_settings.DOCPARSE_SUPABASE_URL else None
    )
    supabase_key = app_settings.DOCPARSE_SUPABASE_SERVICE_ROLE_KEY.get_secret_value()

    def manager_factory(client):
        if supabase_url and supabase_key:
            sink = SupabaseResultSink(
                client, supabase_url, supabase_key, table=app_settings.DOCPARSE_RESULTS_TABLE
            )
        else:
            logger.warning("Supabase not configured; parse results are kept in memory")
            sink = InMemoryResultSink()
        poller = JobPoller(
            client,
            job_config,
            retry_port=TenacityRetryAdapter(
                attempts=job_config.transport_retry_attempts,
                wait_initial=job_config.transport_retry_base_wait,
                wait_max=job_config.transport_retry_max_wait,
            ),
            observers=[LoggingJobObserver()],
        )
        return DocumentParseManager(
            submitter=JobSubmitter(client, job_config),
            poller=poller,
            source=SupabaseDocumentSource(client, supabase_url, supabase_key),
            sink=sink,
            config=service_config,
        )

    return create_app(
        manager_factory=manager_factory,
        http_client=AioHttpClientAdapter(),
        cors_origins=app_settings.DOCPARSE_CORS_ORIGINS,
    )


def main():
    app = build_app()
    # Let uvicorn inherit existing logging (separate sinks & correlation ids)
    uvicorn.run(
        app,
        host=app_settings.DOCPARSE_API_SERVER_HOST,
        port=app_settings.DOCPARSE_API_SERVER_PORT,
        log_config=None,
        log_level=str(app_settings.DOCPARSE_LOG_LEVEL).lower(),
    )


if __name__ == "__main__":
    main()
