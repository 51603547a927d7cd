from datetime import timedelta

from azure.core.credentials_async import AsyncTokenCredential
from azure.storage.blob.aio import BlobServiceClient

from app.config.settings import Settings
from app.storage.blob_store import BlobArtifactStore
from app.storage.signing import (
    AccountKeyUrlIssuer,
    BaseSignedUrlIssuer,
    UserDelegationUrlIssuer,
)


class StorageFactory:
    """Creates the blob store and the signed-URL issuer matching the credential mode."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        credential: AsyncTokenCredential | None,
    ) -> tuple[BlobArtifactStore, BaseSignedUrlIssuer]:
        service_client = cls._create_service_client(settings, credential)
        store = BlobArtifactStore(
            service_client,
            source_container=settings.storage_source_container,
            target_container=settings.storage_target_container,
        )
        return store, cls._create_issuer(settings, service_client)

    @classmethod
    def _create_service_client(
        cls,
        settings: Settings,
        credential: AsyncTokenCredential | None,
    ) -> BlobServiceClient:
        if settings.storage_use_identity:
            if not settings.storage_account_url:
                raise ValueError("storage_account_url is required when storage_use_identity=true")
            if credential is None:
                raise ValueError("storage_use_identity requires an identity credential")
            return BlobServiceClient(settings.storage_account_url, credential=credential)
        if not settings.storage_connection_string:
            raise ValueError(
                "storage_connection_string is required when storage_use_identity=false"
            )
        return BlobServiceClient.from_connection_string(settings.storage_connection_string)

    @classmethod
    def _create_issuer(
        cls,
        settings: Settings,
        service_client: BlobServiceClient,
    ) -> BaseSignedUrlIssuer:
        clock_skew = timedelta(minutes=settings.sas_clock_skew_minutes)
        if settings.storage_use_identity:
            return UserDelegationUrlIssuer(
                service_client,
                default_validity=timedelta(hours=settings.sas_delegated_validity_hours),
                clock_skew=clock_skew,
            )
        account_key = getattr(service_client.credential, "account_key", None)
        if not account_key:
            raise ValueError("storage_connection_string must include an AccountKey")
        return AccountKeyUrlIssuer(
            account_url=service_client.url,
            account_name=service_client.account_name,
            account_key=account_key,
            default_validity=timedelta(minutes=settings.sas_validity_minutes),
            clock_skew=clock_skew,
        )
