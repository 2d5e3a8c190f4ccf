"""Storage service: the four storage operations as typed outcomes."""

import logging
from collections.abc import Awaitable

from s3gate.files.s3.clients.abstract import AbstractS3Client, S3ClientException
from s3gate.files.s3.naming import build_object_key, validate_object_key
from s3gate.files.s3.pydantic import (
    S3DeletedOutcome,
    S3FailedOutcome,
    S3FailureKind,
    S3FetchedOutcome,
    S3ListedOutcome,
    S3StoredOutcome,
)

logger = logging.getLogger(__name__)


class StorageService:
    """Runs storage operations and converts client failures into `S3FailedOutcome`.

    Nothing raised by the S3 client escapes this class: callers get either a
    success outcome or a failed one carrying the failure kind and a bounded
    detail.
    """

    def __init__(self, client: AbstractS3Client, default_list_limit: int = 200) -> None:
        """Initialize the service.

        Args:
            client: The S3 client.
            default_list_limit: Page size used when a list call gives none.

        """
        self._client = client
        self._default_list_limit = default_list_limit

    async def _run[T](self, operation: str, target: str, call: Awaitable[T]) -> T | S3FailedOutcome:
        try:
            return await call
        except S3ClientException as exc:
            logger.warning(
                "Storage %s of %r failed (%s, status %s): %s",
                operation,
                target,
                exc.kind.value,
                exc.status_code,
                exc.detail,
            )
            return exc.to_failure()

    @staticmethod
    def _check_key(key: str) -> S3FailedOutcome | None:
        try:
            validate_object_key(key)
        except ValueError as exc:
            return S3FailedOutcome(kind=S3FailureKind.MALFORMED_INPUT, detail=str(exc))
        return None

    async def list(
        self,
        prefix: str = "",
        limit: int | None = None,
        continuation_token: str | None = None,
    ) -> S3ListedOutcome | S3FailedOutcome:
        """List one page of objects."""
        max_keys = limit or self._default_list_limit
        logger.info("Listing files with prefix %r, max keys %s", prefix, max_keys)
        outcome = await self._run(
            "list",
            prefix,
            self._client.list_objects(prefix=prefix, max_keys=max_keys, continuation_token=continuation_token),
        )
        if isinstance(outcome, S3ListedOutcome):
            logger.info("Found %s files", len(outcome.objects))
        return outcome

    async def get(self, key: str) -> S3FetchedOutcome | S3FailedOutcome:
        """Download one object."""
        if failure := self._check_key(key):
            return failure
        logger.info("Getting file %r", key)
        return await self._run("get", key, self._client.get_object(key))

    async def upload(
        self,
        file_name: str,
        body: bytes,
        content_type: str,
        *,
        folder: str = "",
        preserve_name: bool = False,
    ) -> S3StoredOutcome | S3FailedOutcome:
        """Upload bytes under a preserved or generated key."""
        try:
            key = build_object_key(file_name, folder=folder, preserve_name=preserve_name)
        except ValueError as exc:
            return S3FailedOutcome(kind=S3FailureKind.MALFORMED_INPUT, detail=str(exc))

        logger.info("Uploading file %r, size %s, type %s", key, len(body), content_type)
        outcome = await self._run("upload", key, self._client.put_object(key, body, content_type))
        if isinstance(outcome, S3StoredOutcome):
            logger.info("Upload successful: %s", outcome.public_url)
        return outcome

    async def delete(self, key: str) -> S3DeletedOutcome | S3FailedOutcome:
        """Delete one object."""
        if failure := self._check_key(key):
            return failure
        logger.info("Deleting file %r", key)
        return await self._run("delete", key, self._client.delete_object(key))
