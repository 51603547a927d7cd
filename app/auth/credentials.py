from abc import ABC, abstractmethod

from azure.core.credentials_async import AsyncTokenCredential
from azure.core.exceptions import ClientAuthenticationError

from app.auth.exceptions import CredentialError


class BaseProviderAuth(ABC):
    """Contract for attaching provider authentication to outgoing requests."""

    @abstractmethod
    async def headers(self) -> dict[str, str]:
        """Return the headers that authenticate one provider request.

        Raises:
            CredentialError: if the credential cannot produce a token.
        """


class BearerTokenAuth(BaseProviderAuth):
    """Exchanges an identity credential for a bearer token scoped to the provider."""

    def __init__(self, credential: AsyncTokenCredential, scope: str) -> None:
        self._credential = credential
        self._scope = scope

    async def headers(self) -> dict[str, str]:
        try:
            token = await self._credential.get_token(self._scope)
        except ClientAuthenticationError as exc:
            raise CredentialError(
                f"Failed to obtain token for scope '{self._scope}': {exc}"
            ) from exc
        return {"Authorization": f"Bearer {token.token}"}


class SubscriptionKeyAuth(BaseProviderAuth):
    """Static subscription key sent on every request."""

    HEADER = "Ocp-Apim-Subscription-Key"

    def __init__(self, api_key: str) -> None:
        if not api_key:
            raise ValueError("Subscription key must not be empty")
        self._api_key = api_key

    async def headers(self) -> dict[str, str]:
        return {self.HEADER: self._api_key}
