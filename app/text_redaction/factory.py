from app.config.settings import Settings
from app.text_redaction.example_client_adapter import ExampleClientAdapter
from app.text_redaction.openai_client_adapter import OpenAIClientAdapter
from app.text_redaction.redactor import TextRedactor


class TextRedactorFactory:
    """Creates the configured text redactor."""

    PROVIDERS = ("example", "openai", "openai_compatible")

    @classmethod
    def create(cls, settings: Settings) -> TextRedactor:
        """Create a configured text redactor from application settings."""
        provider = settings.text_redaction_provider.lower()
        if provider == "example":
            return TextRedactor(client=ExampleClientAdapter(), model="example")
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown text redaction provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        if not settings.text_redaction_model_name:
            raise ValueError(
                f"text_redaction_model_name is required for text_redaction_provider={provider}"
            )
        client = OpenAIClientAdapter(
            api_key=settings.text_redaction_api_key,
            timeout_seconds=settings.text_redaction_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
            max_retries=settings.text_redaction_max_retries,
        )
        return TextRedactor(
            client=client,
            model=settings.text_redaction_model_name,
            temperature=settings.text_redaction_temperature,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        url = settings.text_redaction_base_url.strip()
        if not url:
            raise ValueError(
                "text_redaction_base_url is required for "
                "text_redaction_provider=openai_compatible"
            )
        return url
