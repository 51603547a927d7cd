"""Signed-URL issuance for blobs and containers.

Two strategies share one contract:

* ``AccountKeyUrlIssuer`` signs locally with the account's shared key.
* ``UserDelegationUrlIssuer`` first exchanges the caller's identity for a
  short-lived user delegation key, then signs with it. No long-lived secret
  is involved, at the cost of one extra network call per URL.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from urllib.parse import urlsplit

from azure.core.exceptions import ClientAuthenticationError, HttpResponseError
from azure.storage.blob import (
    BlobSasPermissions,
    ContainerSasPermissions,
    generate_blob_sas,
    generate_container_sas,
)
from azure.storage.blob.aio import BlobServiceClient

from app.auth.exceptions import CredentialError
from app.logging.logger import Log
from app.storage.exceptions import StorageError
from app.storage.models import ObjectRef, Permission, SignedUrlRequest

MAX_DELEGATION_WINDOW = timedelta(days=7)


def _blob_permissions(permissions: Permission) -> BlobSasPermissions:
    if Permission.LIST in permissions:
        raise ValueError("LIST permission applies to containers only")
    return BlobSasPermissions(
        read=Permission.READ in permissions,
        write=Permission.WRITE in permissions,
    )


def _container_permissions(permissions: Permission) -> ContainerSasPermissions:
    return ContainerSasPermissions(
        read=Permission.READ in permissions,
        write=Permission.WRITE in permissions,
        list=Permission.LIST in permissions,
    )


class BaseSignedUrlIssuer(ABC):
    """Contract for all signed-URL strategies."""

    def __init__(
        self,
        *,
        account_url: str,
        default_validity: timedelta,
        clock_skew: timedelta = timedelta(minutes=5),
    ) -> None:
        self._account_url = account_url.rstrip("/")
        self._default_validity = default_validity
        self._clock_skew = clock_skew

    async def issue(
        self,
        ref: ObjectRef,
        permissions: Permission,
        validity: timedelta | None = None,
    ) -> str:
        """Return a URL granting exactly *permissions* on *ref* for *validity*.

        Raises:
            CredentialError: if the active credential cannot authorize signing.
            ValueError: on an empty permission set or an invalid window.
        """
        request = SignedUrlRequest.for_window(
            ref,
            permissions,
            validity or self._default_validity,
            clock_skew=self._clock_skew,
            https_only=self._https_only(),
        )
        token = await self._sign(request)
        Log.debug(
            "Issued signed URL",
            container=ref.container,
            blob=ref.name,
            expires_on=request.expires_on.isoformat(),
        )
        return f"{ref.url(self._account_url)}?{token}"

    def _https_only(self) -> bool:
        return True

    @abstractmethod
    async def _sign(self, request: SignedUrlRequest) -> str:
        """Return the signature query string for *request*."""


class AccountKeyUrlIssuer(BaseSignedUrlIssuer):
    """Signs URLs locally with the storage account shared key."""

    def __init__(
        self,
        *,
        account_url: str,
        account_name: str,
        account_key: str,
        default_validity: timedelta = timedelta(hours=2),
        clock_skew: timedelta = timedelta(minutes=5),
    ) -> None:
        super().__init__(
            account_url=account_url,
            default_validity=default_validity,
            clock_skew=clock_skew,
        )
        self._account_name = account_name
        self._account_key = account_key

    def _https_only(self) -> bool:
        # Local emulators only speak plain HTTP.
        return urlsplit(self._account_url).scheme == "https"

    async def _sign(self, request: SignedUrlRequest) -> str:
        protocol = "https" if request.https_only else None
        if request.ref.is_container:
            return generate_container_sas(
                account_name=self._account_name,
                container_name=request.ref.container,
                account_key=self._account_key,
                permission=_container_permissions(request.permissions),
                start=request.starts_on,
                expiry=request.expires_on,
                protocol=protocol,
            )
        return generate_blob_sas(
            account_name=self._account_name,
            container_name=request.ref.container,
            blob_name=request.ref.name,
            account_key=self._account_key,
            permission=_blob_permissions(request.permissions),
            start=request.starts_on,
            expiry=request.expires_on,
            protocol=protocol,
        )


class UserDelegationUrlIssuer(BaseSignedUrlIssuer):
    """Signs URLs with a user delegation key obtained from the caller's identity.

    The delegation key is requested for the same window as the URL, once per
    call.
    """

    def __init__(
        self,
        service_client: BlobServiceClient,
        *,
        default_validity: timedelta = timedelta(hours=48),
        clock_skew: timedelta = timedelta(minutes=5),
    ) -> None:
        super().__init__(
            account_url=service_client.url,
            default_validity=default_validity,
            clock_skew=clock_skew,
        )
        self._service_client = service_client

    async def _sign(self, request: SignedUrlRequest) -> str:
        # The key may start in the past but must expire within 7 days of now.
        remaining = request.expires_on - datetime.now(timezone.utc)
        if remaining > MAX_DELEGATION_WINDOW:
            raise ValueError(
                f"User delegation window {remaining} exceeds {MAX_DELEGATION_WINDOW}"
            )
        try:
            delegation_key = await self._service_client.get_user_delegation_key(
                key_start_time=request.starts_on,
                key_expiry_time=request.expires_on,
            )
        except ClientAuthenticationError as exc:
            raise CredentialError(f"Identity cannot request a delegation key: {exc}") from exc
        except HttpResponseError as exc:
            if exc.status_code == 403:
                raise CredentialError(
                    f"Identity is not authorized to issue delegation keys: {exc}"
                ) from exc
            raise StorageError(f"Delegation key request failed: {exc}") from exc

        account_name = self._service_client.account_name
        if request.ref.is_container:
            return generate_container_sas(
                account_name=account_name,
                container_name=request.ref.container,
                user_delegation_key=delegation_key,
                permission=_container_permissions(request.permissions),
                start=request.starts_on,
                expiry=request.expires_on,
                protocol="https",
            )
        return generate_blob_sas(
            account_name=account_name,
            container_name=request.ref.container,
            blob_name=request.ref.name,
            user_delegation_key=delegation_key,
            permission=_blob_permissions(request.permissions),
            start=request.starts_on,
            expiry=request.expires_on,
            protocol="https",
        )
