import asyncio
import os

import pytest
from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.blob.aio import BlobServiceClient

from app.config.settings import Settings


def _test_settings() -> Settings:
    os.environ.setdefault("STORAGE_CONNECTION_STRING", "UseDevelopmentStorage=true")
    return Settings(
        storage_use_identity=False,
        storage_source_container="it-source-documents",
        storage_target_container="it-redacted-documents",
    )


async def _ensure_containers(settings: Settings) -> None:
    async with BlobServiceClient.from_connection_string(
        settings.storage_connection_string
    ) as service:
        for name in (settings.storage_source_container, settings.storage_target_container):
            try:
                await service.create_container(name)
            except ResourceExistsError:
                pass


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def storage_settings(test_settings: Settings) -> Settings:
    try:
        asyncio.run(asyncio.wait_for(_ensure_containers(test_settings), timeout=10))
    except (AzureError, OSError, asyncio.TimeoutError) as e:
        pytest.skip(
            f"Blob storage emulator not available: {e}. "
            "Start Azurite or set STORAGE_CONNECTION_STRING"
        )
    return test_settings
