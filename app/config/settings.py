from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    redaction_mode: str = "native"

    storage_use_identity: bool = True
    storage_account_url: str = ""
    storage_connection_string: str = ""
    storage_source_container: str = "source-documents"
    storage_target_container: str = "redacted-documents"
    sas_validity_minutes: int = 120
    sas_delegated_validity_hours: int = 48
    sas_clock_skew_minutes: int = 5

    analysis_endpoint: str = ""
    analysis_api_key: str = ""
    analysis_use_identity: bool = True
    analysis_api_version: str = "2024-11-15-preview"
    analysis_token_scope: str = "https://cognitiveservices.azure.com/.default"
    analysis_language: str = "en-US"
    analysis_document_id: str = "doc_0"
    analysis_task_name: str = "Redact PII Task"
    analysis_redaction_policy: str = "entityMask"
    analysis_exclude_extraction_data: bool = False
    analysis_timeout_seconds: int = 30

    job_poll_interval_seconds: float = 2
    max_poll_attempts: int = 60

    max_upload_bytes: int = 10 * 1024 * 1024
    supported_extensions: str = ".pdf,.docx,.txt"

    pdf_engine: str = "pdfplumber"

    text_redaction_provider: str = "example"
    text_redaction_api_key: str = ""
    text_redaction_model_name: str = ""
    text_redaction_base_url: str = ""
    text_redaction_timeout_seconds: int = 30
    text_redaction_max_retries: int = 2
    text_redaction_temperature: float = 0.0

    @property
    def supported_extension_set(self) -> frozenset[str]:
        return frozenset(
            ext.strip().lower() for ext in self.supported_extensions.split(",") if ext.strip()
        )
