from azure.core.credentials_async import AsyncTokenCredential
from azure.identity.aio import DefaultAzureCredential

from app.auth.credentials import BaseProviderAuth, BearerTokenAuth, SubscriptionKeyAuth
from app.config.settings import Settings


class CredentialFactory:
    """Creates the shared identity credential and the provider auth built on it."""

    @classmethod
    def create_credential(cls, settings: Settings) -> AsyncTokenCredential | None:
        """Return a DefaultAzureCredential when any component uses identity auth."""
        if settings.storage_use_identity or settings.analysis_use_identity:
            return DefaultAzureCredential()
        return None

    @classmethod
    def create_provider_auth(
        cls,
        settings: Settings,
        credential: AsyncTokenCredential | None,
    ) -> BaseProviderAuth:
        """Bearer token when identity auth is enabled, otherwise the subscription key."""
        if settings.analysis_use_identity:
            if credential is None:
                raise ValueError("analysis_use_identity requires an identity credential")
            return BearerTokenAuth(credential, settings.analysis_token_scope)
        if settings.analysis_api_key:
            return SubscriptionKeyAuth(settings.analysis_api_key)
        raise ValueError(
            "analysis_api_key is required when analysis_use_identity is disabled"
        )
