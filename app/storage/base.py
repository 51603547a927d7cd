from abc import ABC, abstractmethod
from typing import BinaryIO

from app.storage.models import ObjectRef


class BaseArtifactStore(ABC):
    """Contract for moving source documents and result artifacts through object storage."""

    @property
    @abstractmethod
    def account_url(self) -> str:
        """Base URL of the storage account."""

    @abstractmethod
    async def upload(self, stream: BinaryIO, logical_name: str) -> ObjectRef:
        """Upload *stream* from position zero under a freshly generated unique prefix.

        Returns:
            Reference to the written blob in the source container.
        """

    @abstractmethod
    async def download(self, ref: ObjectRef) -> bytes:
        """Read the whole blob into memory.

        Raises:
            ObjectNotFoundError: if the blob or its container does not exist.
        """

    @abstractmethod
    async def download_url(self, url: str) -> bytes:
        """Download the blob a provider-reported URL points at."""

    @abstractmethod
    def target_container(self) -> ObjectRef:
        """Container the provider writes result artifacts into."""

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
