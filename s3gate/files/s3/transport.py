"""Transport guard for S3 requests.

Sends a signed request and refuses to trust the body until the response
proves it comes from the provider: an HTML page where XML, bytes or an empty
body was expected means something in front of the provider (WAF, bot
challenge, reverse proxy error page) answered instead.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

import httpx
from lxml import etree

from s3gate.files.s3.clients.abstract import (
    S3NoSuchBucketClientException,
    S3NoSuchKeyClientException,
    S3ProviderClientException,
    S3ProxyInterceptedClientException,
    S3SignatureRejectedClientException,
    S3TransportClientException,
)
from s3gate.files.s3.pydantic import S3PayloadKind, S3SignedHeaders

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 500
DIAGNOSTIC_HEADERS = ("cf-ray", "cf-mitigated", "server", "via", "x-cache", "x-amz-request-id")
SIGNATURE_ERROR_CODES = frozenset(
    {
        "SignatureDoesNotMatch",
        "InvalidAccessKeyId",
        "AccessDenied",
        "RequestTimeTooSkewed",
        "AuthorizationHeaderMalformed",
        "ExpiredToken",
        "InvalidToken",
    }
)

_WHITESPACE_RE = re.compile(r"\s+")
_ERROR_XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, recover=True)


def body_snippet(content: bytes, limit: int = SNIPPET_LENGTH) -> str:
    """Whitespace-collapsed prefix of a response body, at most `limit` characters."""
    text = content[: limit * 4].decode("utf-8", errors="replace")
    return _WHITESPACE_RE.sub(" ", text).strip()[:limit]


def diagnostics_from(response: httpx.Response) -> dict[str, Any]:
    """Collect the status, content type and proxy/provider trace headers of a response."""
    diagnostics: dict[str, Any] = {
        "status": response.status_code,
        "content_type": response.headers.get("content-type", ""),
    }
    for name in DIAGNOSTIC_HEADERS:
        if (value := response.headers.get(name)) is not None:
            diagnostics[name] = value
    return diagnostics


def parse_error_body(content: bytes) -> tuple[str | None, str | None]:
    """Read `<Code>` and `<Message>` from an S3 XML error body, best effort."""
    if not content.strip():
        return None, None
    try:
        root = etree.fromstring(content, parser=_ERROR_XML_PARSER)
    except etree.XMLSyntaxError:
        return None, None
    if root is None:
        return None, None

    values: dict[str, str] = {}
    for element in root.iter():
        if not isinstance(element.tag, str):
            continue
        name = etree.QName(element).localname
        if name in ("Code", "Message") and name not in values and element.text:
            values[name] = element.text.strip()
    return values.get("Code"), values.get("Message")


class S3TransportGuard:
    """Performs one HTTP call per operation and validates what came back."""

    def __init__(self, http_client: httpx.AsyncClient, default_headers: Mapping[str, str] | None = None) -> None:
        """Initialize the guard.

        Args:
            http_client: The httpx client used for the call. Timeouts are configured on it.
            default_headers: Unsigned headers sent with every request (User-Agent, Accept).
                Signed headers take precedence.

        """
        self._http_client = http_client
        self._default_headers = dict(default_headers or {})

    async def send(
        self,
        method: str,
        url: str,
        signed: S3SignedHeaders,
        *,
        content: bytes | None = None,
        expected: S3PayloadKind,
        operation: str,
    ) -> httpx.Response:
        """Send a signed request and check the response.

        Args:
            method: HTTP method, upper-cased here before it goes on the wire.
            url: Full request URL, already encoded the way it was signed.
            signed: Signer output.
            content: Request body.
            expected: What a genuine provider response carries.
            operation: Operation name for logs and error details.

        Returns:
            The successful (2xx) provider response.

        Raises:
            S3ProxyInterceptedClientException: If an HTML page came back.
            S3SignatureRejectedClientException: If the provider rejected the signature.
            S3NoSuchKeyClientException: If the key does not exist.
            S3NoSuchBucketClientException: If the bucket does not exist.
            S3ProviderClientException: For any other non-2xx response.
            S3TransportClientException: If no response was received.

        """
        headers = self._default_headers | signed.headers
        try:
            response = await self._http_client.request(method.upper(), url, headers=headers, content=content)
        except httpx.TransportError as exc:
            logger.warning("S3 %s request failed before a response: %s", operation, type(exc).__name__)
            msg = f"S3 {operation} request failed: {type(exc).__name__}"
            raise S3TransportClientException(msg) from exc

        self._reject_html(response, expected=expected, operation=operation)

        if not response.is_success:
            self._raise_for_status(response, operation=operation)

        return response

    def _reject_html(self, response: httpx.Response, *, expected: S3PayloadKind, operation: str) -> None:
        content_type = response.headers.get("content-type", "").lower()
        if "text/html" not in content_type:
            return

        snippet = body_snippet(response.content)
        diagnostics = diagnostics_from(response)
        logger.error(
            "Unexpected HTML from S3 %s (expected %s): %s",
            operation,
            expected.value,
            diagnostics | {"snippet": snippet},
        )
        msg = (
            f"S3 returned HTML for {operation.upper()} (status {response.status_code}). "
            f"Likely WAF/proxy interception. Snippet: {snippet}"
        )
        raise S3ProxyInterceptedClientException(msg, status_code=response.status_code, diagnostics=diagnostics)

    def _raise_for_status(self, response: httpx.Response, *, operation: str) -> None:
        error_code, error_message = parse_error_body(response.content)
        diagnostics = diagnostics_from(response)
        status_code = response.status_code
        logger.warning(
            "S3 %s failed with status %s (%s): %s",
            operation,
            status_code,
            error_code or "no error code",
            body_snippet(response.content),
        )

        detail = f"Failed to {operation}: {status_code}"
        if error_code:
            detail += f" {error_code}"
        if error_message:
            detail += f" ({error_message})"

        if error_code in SIGNATURE_ERROR_CODES or status_code in (401, 403):
            raise S3SignatureRejectedClientException(detail, status_code=status_code, diagnostics=diagnostics)

        exception_map: dict[str, type[S3ProviderClientException]] = {
            "NoSuchKey": S3NoSuchKeyClientException,
            "NoSuchBucket": S3NoSuchBucketClientException,
        }
        exception_class = exception_map.get(error_code or "", S3ProviderClientException)
        if error_code is None and status_code == 404:
            exception_class = S3NoSuchKeyClientException

        raise exception_class(detail, error_code=error_code, status_code=status_code, diagnostics=diagnostics)
