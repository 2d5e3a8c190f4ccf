"""httpx S3 client signing its own requests with SigV4."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

import httpx

from s3gate.files.s3.clients.abstract import S3NoSuchKeyClientException
from s3gate.files.s3.listing import parse_list_objects_response
from s3gate.files.s3.pydantic import (
    S3Credentials,
    S3DeletedOutcome,
    S3Endpoint,
    S3FetchedOutcome,
    S3ListedOutcome,
    S3PayloadKind,
    S3SignableRequest,
    S3StoredOutcome,
)
from s3gate.files.s3.signer import canonical_object_path, canonical_query_string, sign_request
from s3gate.files.s3.transport import S3TransportGuard

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class HttpxS3Client:
    """S3 client over httpx.

    Implements the `AbstractS3Client` protocol for the four operations the
    storage service needs. Requests are path-style (`/{bucket}/{key}`), each
    one signed from scratch with a single clock reading.
    """

    def __init__(
        self,
        credentials: S3Credentials,
        endpoint: S3Endpoint,
        http_client: httpx.AsyncClient,
        *,
        user_agent: str | None = None,
        accept: str | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the client.

        Args:
            credentials: Access and secret key.
            endpoint: Provider endpoint and bucket.
            http_client: httpx client performing the calls.
            user_agent: Unsigned User-Agent header sent with every request.
            accept: Unsigned Accept header sent with every request.
            clock: Source of signing timestamps.

        """
        self._credentials = credentials
        self._endpoint = endpoint
        self._clock = clock

        default_headers: dict[str, str] = {}
        if user_agent:
            default_headers["User-Agent"] = user_agent
        if accept:
            default_headers["Accept"] = accept
        self._guard = S3TransportGuard(http_client, default_headers)

    @property
    def endpoint(self) -> S3Endpoint:
        """The provider endpoint."""
        return self._endpoint

    async def _execute(
        self,
        request: S3SignableRequest,
        *,
        expected: S3PayloadKind,
        operation: str,
    ) -> httpx.Response:
        signed = sign_request(request, self._credentials, self._endpoint, now=self._clock())

        url = f"{self._endpoint.base_url}{request.canonical_path}"
        if query := canonical_query_string(request.query):
            url = f"{url}?{query}"

        return await self._guard.send(
            request.method,
            url,
            signed,
            content=request.body,
            expected=expected,
            operation=operation,
        )

    async def list_objects(
        self,
        prefix: str = "",
        max_keys: int = 200,
        continuation_token: str | None = None,
    ) -> S3ListedOutcome:
        """List one page of objects in the bucket.

        Args:
            prefix: Only keys starting with this prefix.
            max_keys: Page size cap.
            continuation_token: Cursor from a previous truncated page.

        """
        query = {"list-type": "2", "max-keys": str(max_keys)}
        if prefix:
            query["prefix"] = prefix
        if continuation_token:
            query["continuation-token"] = continuation_token

        request = S3SignableRequest(
            method="GET",
            canonical_path=canonical_object_path(self._endpoint.bucket),
            query=query,
        )
        response = await self._execute(request, expected=S3PayloadKind.XML, operation="list")

        page = parse_list_objects_response(response.content, self._endpoint.public_base)
        return S3ListedOutcome(
            objects=page.objects,
            is_truncated=page.is_truncated,
            next_continuation_token=page.next_continuation_token,
        )

    async def get_object(self, key: str) -> S3FetchedOutcome:
        """Download an object as bytes."""
        request = S3SignableRequest(method="GET", canonical_path=canonical_object_path(self._endpoint.bucket, key))
        response = await self._execute(request, expected=S3PayloadKind.BINARY, operation="get")

        return S3FetchedOutcome(
            body=response.content,
            content_type=response.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
        )

    async def put_object(self, key: str, body: bytes, content_type: str) -> S3StoredOutcome:
        """Upload an object under `key`."""
        request = S3SignableRequest(
            method="PUT",
            canonical_path=canonical_object_path(self._endpoint.bucket, key),
            headers={"Content-Type": content_type or DEFAULT_CONTENT_TYPE},
            body=body,
        )
        await self._execute(request, expected=S3PayloadKind.EMPTY, operation="upload")

        return S3StoredOutcome(public_url=self._endpoint.public_url(key), key=key)

    async def delete_object(self, key: str) -> S3DeletedOutcome:
        """Delete an object.

        A missing key counts as deleted: the caller wanted it gone and it is.
        """
        request = S3SignableRequest(
            method="DELETE",
            canonical_path=canonical_object_path(self._endpoint.bucket, key),
        )
        try:
            await self._execute(request, expected=S3PayloadKind.EMPTY, operation="delete")
        except S3NoSuchKeyClientException:
            logger.info("S3 object %s was already absent", key)
            return S3DeletedOutcome(key=key, already_absent=True)

        return S3DeletedOutcome(key=key)
