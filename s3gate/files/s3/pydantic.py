"""Pydantic models for the S3 client: signing inputs, descriptors and outcomes."""

import base64
from enum import StrEnum
from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class S3FailureKind(StrEnum):
    """Failure classes surfaced by the storage subsystem."""

    CONFIGURATION_ERROR = "ConfigurationError"
    MALFORMED_INPUT = "MalformedInput"
    SIGNATURE_REJECTED = "SignatureRejected"
    PROXY_INTERCEPTED = "ProxyIntercepted"
    PROVIDER_ERROR = "ProviderError"
    PARSE_ERROR = "ParseError"
    TRANSPORT_ERROR = "TransportError"


class S3PayloadKind(StrEnum):
    """Payload the caller expects back from the provider."""

    XML = "xml"
    BINARY = "binary"
    EMPTY = "empty"


class S3Credentials(BaseModel):
    """S3 credentials.

    The secret key is a `SecretStr`, so it never shows up in `repr`, `str`
    or logged model dumps.
    """

    model_config = ConfigDict(frozen=True)

    access_key: str = Field(min_length=1)
    secret_key: SecretStr


class S3Endpoint(BaseModel):
    """Endpoint of an S3-compatible provider, fixed per deployment."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Scheme and host (with port, if any) of the provider, e.g. https://s3.example.com.")
    bucket: str = Field(min_length=1)
    region: str = "us-east-1"
    service: str = "s3"
    public_base_url: str | None = Field(
        default=None,
        description="Base URL objects are publicly served from. Defaults to {url}/{bucket}.",
    )

    @property
    def host(self) -> str:
        """Value of the canonical `Host` header."""
        return urlsplit(self.url).netloc

    @property
    def base_url(self) -> str:
        """Provider URL without a trailing slash."""
        return self.url.rstrip("/")

    @property
    def public_base(self) -> str:
        """Base of public object URLs, without a trailing slash."""
        if self.public_base_url:
            return self.public_base_url.rstrip("/")
        return f"{self.base_url}/{self.bucket}"

    def public_url(self, key: str) -> str:
        """Public URL of an object key."""
        return f"{self.public_base}/{key}"


class S3SignableRequest(BaseModel):
    """A request shape ready to be signed.

    `canonical_path` must already be URI-encoded, `query` holds the raw
    (unencoded) parameters and `headers` the extra headers that take part in
    signing.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    canonical_path: str
    query: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes | None = None


class S3SigningContext(BaseModel):
    """Per-signature values derived from a single timestamp."""

    model_config = ConfigDict(frozen=True)

    amz_date: str
    date_stamp: str
    payload_hash: str


class S3SignedHeaders(BaseModel):
    """Signer output."""

    model_config = ConfigDict(frozen=True)

    headers: dict[str, str]
    signed_headers: str
    canonical_request: str
    string_to_sign: str
    context: S3SigningContext

    @property
    def authorization(self) -> str:
        """The `Authorization` header value."""
        return self.headers["Authorization"]


class S3ObjectDescriptor(BaseModel):
    """One stored object as reported by a listing."""

    model_config = ConfigDict(frozen=True)

    key: str
    size: int = 0
    last_modified: str = ""
    public_url: str


class S3ListPage(BaseModel):
    """Parsed listing page."""

    model_config = ConfigDict(frozen=True)

    objects: list[S3ObjectDescriptor] = Field(default_factory=list)
    is_truncated: bool = False
    next_continuation_token: str | None = None


class S3ListedOutcome(S3ListPage):
    """Outcome of a successful list."""

    outcome: Literal["listed"] = "listed"


class S3FetchedOutcome(BaseModel):
    """Outcome of a successful get."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal["fetched"] = "fetched"
    body: bytes
    content_type: str = "application/octet-stream"

    def as_base64(self) -> str:
        """Body encoded as base64 text."""
        return base64.b64encode(self.body).decode("ascii")


class S3StoredOutcome(BaseModel):
    """Outcome of a successful put."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal["stored"] = "stored"
    public_url: str
    key: str


class S3DeletedOutcome(BaseModel):
    """Outcome of a successful delete.

    `already_absent` is set when the provider reported the key as missing.
    """

    model_config = ConfigDict(frozen=True)

    outcome: Literal["deleted"] = "deleted"
    key: str
    already_absent: bool = False


class S3FailedOutcome(BaseModel):
    """Outcome of a failed operation."""

    model_config = ConfigDict(frozen=True)

    outcome: Literal["failed"] = "failed"
    kind: S3FailureKind
    detail: str
