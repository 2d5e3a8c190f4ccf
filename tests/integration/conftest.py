"""Conftest."""

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from dishka import AsyncContainer

from s3gate.app import build_app, build_container
from s3gate.configs.app import AppConfig
from s3gate.configs.s3 import S3Config
from s3gate.configs.storage import StorageApiConfig
from tests.conftest import ACCESS_KEY, BUCKET, ENDPOINT_URL, SECRET_KEY
from tests.utils import FakeS3Backend


@pytest.fixture
def app_config() -> AppConfig:
    """App config pointing at the in-memory provider."""
    return AppConfig(
        s3=S3Config(
            S3_ACCESS_KEY=ACCESS_KEY,
            S3_SECRET_KEY=SECRET_KEY,
            endpoint_url=ENDPOINT_URL,
            bucket=BUCKET,
        ),
        storage_api=StorageApiConfig(max_list_limit=500),
    )


@pytest_asyncio.fixture
async def container(app_config: AppConfig, fake_s3: FakeS3Backend) -> AsyncIterator[AsyncContainer]:
    """Test container."""
    container = build_container(app_config, transport=fake_s3.transport())
    yield container
    await container.close()


@pytest_asyncio.fixture
async def api_client(app_config: AppConfig, container: AsyncContainer) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client for the storage API."""
    app = build_app(app_config, container)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
