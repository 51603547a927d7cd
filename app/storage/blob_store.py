import uuid
from pathlib import PurePosixPath
from typing import BinaryIO

from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)
from azure.storage.blob.aio import BlobServiceClient

from app.auth.exceptions import CredentialError
from app.logging.logger import Log
from app.storage.base import BaseArtifactStore
from app.storage.exceptions import ObjectNotFoundError, StorageError
from app.storage.models import ObjectRef


class BlobArtifactStore(BaseArtifactStore):
    """Azure Blob Storage implementation of the artifact store."""

    def __init__(
        self,
        service_client: BlobServiceClient,
        *,
        source_container: str,
        target_container: str,
    ) -> None:
        self._service_client = service_client
        self._source_container = source_container
        self._target_container = target_container

    @property
    def account_url(self) -> str:
        return self._service_client.url

    async def upload(self, stream: BinaryIO, logical_name: str) -> ObjectRef:
        file_name = PurePosixPath(logical_name.replace("\\", "/")).name
        if not file_name:
            raise ValueError(f"Invalid logical name: {logical_name!r}")
        ref = ObjectRef(self._source_container, f"{uuid.uuid4()}/{file_name}")
        blob = self._service_client.get_blob_client(ref.container, ref.name)

        stream.seek(0)
        try:
            await blob.upload_blob(stream, overwrite=True)
        except ResourceNotFoundError as exc:
            raise ObjectNotFoundError(
                f"Source container '{ref.container}' does not exist"
            ) from exc
        except ClientAuthenticationError as exc:
            raise CredentialError(f"Upload of '{ref.name}' was not authorized: {exc}") from exc
        except HttpResponseError as exc:
            raise StorageError(f"Upload of '{ref.name}' failed: {exc}") from exc

        Log.info("Uploaded source document", container=ref.container, blob=ref.name)
        return ref

    async def download(self, ref: ObjectRef) -> bytes:
        if ref.is_container:
            raise ValueError("Cannot download a container reference")
        blob = self._service_client.get_blob_client(ref.container, ref.name)
        try:
            downloader = await blob.download_blob()
            data = await downloader.readall()
        except ResourceNotFoundError as exc:
            raise ObjectNotFoundError(f"Blob not found: {ref.container}/{ref.name}") from exc
        except ClientAuthenticationError as exc:
            raise CredentialError(f"Download of '{ref.name}' was not authorized: {exc}") from exc
        except HttpResponseError as exc:
            raise StorageError(f"Download of '{ref.name}' failed: {exc}") from exc

        Log.info("Downloaded blob", container=ref.container, blob=ref.name, size=len(data))
        return data

    async def download_url(self, url: str) -> bytes:
        """Download through our own credentials; provider URLs may carry no signature."""
        return await self.download(ObjectRef.from_url(url, self.account_url))

    def target_container(self) -> ObjectRef:
        return ObjectRef(self._target_container)

    async def close(self) -> None:
        await self._service_client.close()

    async def __aenter__(self) -> "BlobArtifactStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
