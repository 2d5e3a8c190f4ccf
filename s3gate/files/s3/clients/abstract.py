"""Abstract S3 client and its exceptions."""

from typing import Any, ClassVar, Protocol

from s3gate.files.s3.pydantic import (
    S3DeletedOutcome,
    S3FailedOutcome,
    S3FailureKind,
    S3FetchedOutcome,
    S3ListedOutcome,
    S3StoredOutcome,
)


class S3ClientException(Exception):
    """Base exception for S3 client errors.

    Attributes:
        kind: Failure class reported to callers.
        detail: Bounded, secret-free description of the failure.
        status_code: HTTP status returned by the provider, if any.
        diagnostics: Response headers useful for triage.

    """

    kind: ClassVar[S3FailureKind] = S3FailureKind.PROVIDER_ERROR

    def __init__(
        self,
        detail: str,
        *,
        status_code: int | None = None,
        diagnostics: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception."""
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.diagnostics = diagnostics or {}

    def to_failure(self) -> S3FailedOutcome:
        """Convert the exception into a failed outcome."""
        return S3FailedOutcome(kind=self.kind, detail=self.detail)


class S3SignatureRejectedClientException(S3ClientException):
    """Raised when the provider rejects the request signature or credentials."""

    kind = S3FailureKind.SIGNATURE_REJECTED


class S3ProxyInterceptedClientException(S3ClientException):
    """Raised when an intermediary answered with an HTML page instead of the provider."""

    kind = S3FailureKind.PROXY_INTERCEPTED


class S3ProviderClientException(S3ClientException):
    """Raised for any other non-2xx provider response."""

    kind = S3FailureKind.PROVIDER_ERROR

    def __init__(
        self,
        detail: str,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        diagnostics: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception."""
        super().__init__(detail, status_code=status_code, diagnostics=diagnostics)
        self.error_code = error_code


class S3NoSuchKeyClientException(S3ProviderClientException):
    """Raised when the specified object key does not exist."""


class S3NoSuchBucketClientException(S3ProviderClientException):
    """Raised when the specified bucket does not exist."""


class S3ParseClientException(S3ClientException):
    """Raised when a listing payload does not have the expected shape."""

    kind = S3FailureKind.PARSE_ERROR


class S3TransportClientException(S3ClientException):
    """Raised when the request never got a response (connection error, timeout)."""

    kind = S3FailureKind.TRANSPORT_ERROR


class AbstractS3Client(Protocol):
    """Abstract S3 client.

    Every operation issues exactly one signed request and never retries.
    Failures are raised as `S3ClientException` subclasses.
    """

    async def list_objects(
        self,
        prefix: str = "",
        max_keys: int = 200,
        continuation_token: str | None = None,
    ) -> S3ListedOutcome:
        """List one page of objects in the bucket."""
        ...

    async def get_object(self, key: str) -> S3FetchedOutcome:
        """Download an object."""
        ...

    async def put_object(self, key: str, body: bytes, content_type: str) -> S3StoredOutcome:
        """Upload an object under the exact key given."""
        ...

    async def delete_object(self, key: str) -> S3DeletedOutcome:
        """Delete an object. Deleting a missing key succeeds."""
        ...
