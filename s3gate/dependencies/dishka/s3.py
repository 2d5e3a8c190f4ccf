"""Dishka S3 provider."""

from collections.abc import AsyncIterator

import httpx
from dishka import Provider, Scope, provide

from s3gate.configs.s3 import S3Config
from s3gate.configs.storage import StorageApiConfig
from s3gate.files.s3.clients.abstract import AbstractS3Client
from s3gate.files.s3.clients.httpx import HttpxS3Client
from s3gate.files.s3.pydantic import S3Credentials, S3Endpoint
from s3gate.services.storage import StorageService


class S3Provider(Provider):
    """Provides the S3 client and the storage service.

    Everything here lives for the whole application: credentials and endpoint
    are read-only, and the httpx client is shared by concurrent operations.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the provider.

        Args:
            transport: Optional httpx transport, e.g. `httpx.MockTransport` in tests.

        """
        super().__init__()
        self._transport = transport

    @provide(scope=Scope.APP)
    def credentials(self, config: S3Config) -> S3Credentials:
        """S3 credentials."""
        return config.to_credentials()

    @provide(scope=Scope.APP)
    def endpoint(self, config: S3Config) -> S3Endpoint:
        """S3 endpoint."""
        return config.to_endpoint()

    @provide(scope=Scope.APP)
    async def http_client(self, config: S3Config) -> AsyncIterator[httpx.AsyncClient]:
        """httpx client; its timeout is the deadline of every provider call."""
        async with httpx.AsyncClient(
            timeout=config.timeout_seconds,
            verify=config.verify,
            transport=self._transport,
        ) as client:
            yield client

    @provide(scope=Scope.APP)
    def s3_client(
        self,
        credentials: S3Credentials,
        endpoint: S3Endpoint,
        http_client: httpx.AsyncClient,
        config: S3Config,
    ) -> AbstractS3Client:
        """S3 client."""
        return HttpxS3Client(
            credentials,
            endpoint,
            http_client,
            user_agent=config.user_agent,
            accept=config.accept,
        )

    @provide(scope=Scope.APP)
    def storage_service(self, client: AbstractS3Client, config: StorageApiConfig) -> StorageService:
        """Storage service."""
        return StorageService(client, default_list_limit=config.default_list_limit)
