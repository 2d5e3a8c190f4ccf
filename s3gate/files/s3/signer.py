"""AWS Signature Version 4 request signing.

Builds the canonical request, the string to sign and the `Authorization`
header for path-style S3 requests. The signer is a pure function of the
request, the credentials, the endpoint and one timestamp captured per call.
"""

from collections.abc import Mapping
from datetime import UTC, datetime

from s3gate.files.s3.hashing import EMPTY_PAYLOAD_HASH, hmac_sha256, hmac_sha256_hex, sha256_hex
from s3gate.files.s3.pydantic import (
    S3Credentials,
    S3Endpoint,
    S3SignableRequest,
    S3SignedHeaders,
    S3SigningContext,
)

ALGORITHM = "AWS4-HMAC-SHA256"
SCOPE_TERMINATOR = "aws4_request"

_RESERVED_HEADERS = frozenset({"host", "x-amz-content-sha256", "x-amz-date", "authorization"})
_UNRESERVED = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~")


def uri_encode(value: str, *, encode_slash: bool = True) -> str:
    """URI-encode a value the way SigV4 expects.

    Unreserved characters (A-Z, a-z, 0-9, `-`, `_`, `.`, `~`) are kept, every
    other UTF-8 byte becomes `%XX` with uppercase hex. `/` is kept when
    `encode_slash` is False.
    """
    result: list[str] = []
    for char in value:
        if char in _UNRESERVED or (char == "/" and not encode_slash):
            result.append(char)
        else:
            result.extend(f"%{byte:02X}" for byte in char.encode("utf-8"))
    return "".join(result)


def canonical_object_path(bucket: str, key: str | None = None) -> str:
    """Path-style canonical path: `/{bucket}` or `/{bucket}/{key}`."""
    path = "/" + uri_encode(bucket)
    if key is None:
        return path
    return f"{path}/{uri_encode(key, encode_slash=False)}"


def canonical_query_string(params: Mapping[str, str]) -> str:
    """Encoded query string sorted by parameter name, empty when there are no parameters."""
    encoded = sorted((uri_encode(name), uri_encode(value)) for name, value in params.items())
    return "&".join(f"{name}={value}" for name, value in encoded)


def amz_timestamp(now: datetime) -> tuple[str, str]:
    """Return `(amz_date, date_stamp)` for a timestamp; naive datetimes are treated as UTC."""
    now = now.replace(tzinfo=UTC) if now.tzinfo is None else now.astimezone(UTC)
    amz_date = now.strftime("%Y%m%dT%H%M%SZ")
    return amz_date, amz_date[:8]


def build_signing_context(request: S3SignableRequest, now: datetime) -> S3SigningContext:
    """Compute the date values and the payload hash once for a request."""
    amz_date, date_stamp = amz_timestamp(now)
    payload_hash = EMPTY_PAYLOAD_HASH if request.body is None else sha256_hex(request.body)
    return S3SigningContext(amz_date=amz_date, date_stamp=date_stamp, payload_hash=payload_hash)


def credential_scope(date_stamp: str, endpoint: S3Endpoint) -> str:
    """`{date}/{region}/{service}/aws4_request`."""
    return f"{date_stamp}/{endpoint.region}/{endpoint.service}/{SCOPE_TERMINATOR}"


def canonical_headers(headers: Mapping[str, str]) -> tuple[str, str]:
    """Build the canonical header block and the signed header list.

    Args:
        headers: Headers to sign, any case.

    Returns:
        `(canonical_headers, signed_headers)`; every canonical line ends with
        a newline and names are in ascending order.

    """
    normalized = {name.strip().lower(): " ".join(value.split()) for name, value in headers.items()}
    names = sorted(normalized)
    block = "".join(f"{name}:{normalized[name]}\n" for name in names)
    return block, ";".join(names)


def build_canonical_request(
    method: str,
    canonical_path: str,
    canonical_query: str,
    canonical_header_block: str,
    signed_headers: str,
    payload_hash: str,
) -> str:
    """Join the six canonical request components."""
    return "\n".join(
        [
            method,
            canonical_path,
            canonical_query,
            canonical_header_block,
            signed_headers,
            payload_hash,
        ]
    )


def build_string_to_sign(amz_date: str, scope: str, canonical_request: str) -> str:
    """Build the SigV4 string to sign."""
    return "\n".join([ALGORITHM, amz_date, scope, sha256_hex(canonical_request)])


def derive_signing_key(secret_key: str, date_stamp: str, region: str, service: str) -> bytes:
    """Derive the scoped signing key through the four chained HMACs."""
    k_date = hmac_sha256(("AWS4" + secret_key).encode("utf-8"), date_stamp)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, SCOPE_TERMINATOR)


def sign_request(
    request: S3SignableRequest,
    credentials: S3Credentials,
    endpoint: S3Endpoint,
    now: datetime | None = None,
) -> S3SignedHeaders:
    """Sign a request with SigV4.

    Args:
        request: The request to sign.
        credentials: Access and secret key.
        endpoint: Provider endpoint; gives the host and the signing scope.
        now: Signing time. Read from the clock once when omitted.

    Returns:
        The headers to send along with the signing intermediates.

    Raises:
        ValueError: If a caller header collides with a header the signer owns.

    """
    context = build_signing_context(request, now or datetime.now(UTC))

    clashing = sorted(name for name in request.headers if name.strip().lower() in _RESERVED_HEADERS)
    if clashing:
        msg = f"Headers {clashing} are set by the signer and cannot be supplied by the caller"
        raise ValueError(msg)

    to_sign = {
        "host": endpoint.host,
        "x-amz-content-sha256": context.payload_hash,
        "x-amz-date": context.amz_date,
    } | dict(request.headers)
    header_block, signed_headers = canonical_headers(to_sign)

    canonical_request = build_canonical_request(
        request.method,
        request.canonical_path,
        canonical_query_string(request.query),
        header_block,
        signed_headers,
        context.payload_hash,
    )
    scope = credential_scope(context.date_stamp, endpoint)
    string_to_sign = build_string_to_sign(context.amz_date, scope, canonical_request)
    signing_key = derive_signing_key(
        credentials.secret_key.get_secret_value(), context.date_stamp, endpoint.region, endpoint.service
    )
    signature = hmac_sha256_hex(signing_key, string_to_sign)

    authorization = (
        f"{ALGORITHM} Credential={credentials.access_key}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )
    headers = {
        "Host": endpoint.host,
        "X-Amz-Date": context.amz_date,
        "X-Amz-Content-Sha256": context.payload_hash,
        "Authorization": authorization,
    } | dict(request.headers)

    return S3SignedHeaders(
        headers=headers,
        signed_headers=signed_headers,
        canonical_request=canonical_request,
        string_to_sign=string_to_sign,
        context=context,
    )
