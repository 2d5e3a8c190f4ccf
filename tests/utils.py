"""Utils for tests."""

import base64
from datetime import UTC, datetime
from xml.sax.saxutils import escape

import httpx

from s3gate.files.s3.hashing import sha256_hex
from s3gate.files.s3.pydantic import S3Credentials, S3Endpoint, S3SignableRequest
from s3gate.files.s3.signer import sign_request

S3_NAMESPACE = "http://s3.amazonaws.com/doc/2006-03-01/"
SIGNER_HEADERS = frozenset({"host", "x-amz-content-sha256", "x-amz-date"})

INTERCEPT_PAGE = (
    "<!DOCTYPE html>\n<html lang='en-US'>\n<head><title>Just a moment...</title></head>\n"
    "<body>\n  <h1>Checking if the site connection is secure</h1>\n"
    "  <style>body { font-family: sans-serif; }</style>\n</body>\n</html>"
)


def sample_bytes(size: int) -> bytes:
    """Deterministic payload of `size` bytes."""
    return (bytes(range(256)) * (size // 256 + 1))[:size]


class FakeS3Backend:
    """In-memory S3 provider to put behind `httpx.MockTransport`.

    Every request is verified by re-signing it with the known credentials, the
    way a provider recomputes the signature. A mismatch is answered with 403
    `SignatureDoesNotMatch`.
    """

    def __init__(self, credentials: S3Credentials, endpoint: S3Endpoint, *, strict_delete: bool = False) -> None:
        self.credentials = credentials
        self.endpoint = endpoint
        self.strict_delete = strict_delete
        self.intercept_with_html = False
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.requests: list[httpx.Request] = []

    def transport(self) -> httpx.MockTransport:
        """Mock transport serving this backend."""
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Serve one request."""
        self.requests.append(request)

        if self.intercept_with_html:
            return httpx.Response(
                403,
                headers={
                    "content-type": "text/html; charset=UTF-8",
                    "cf-ray": "8f1c2d3e4a5b6c7d-AMS",
                    "server": "cloudflare",
                },
                text=INTERCEPT_PAGE,
            )

        if not self._signature_matches(request):
            return self._error(403, "SignatureDoesNotMatch", "The request signature we calculated does not match.")

        path = request.url.path
        bucket_path = f"/{self.endpoint.bucket}"
        if path != bucket_path and not path.startswith(bucket_path + "/"):
            return self._error(404, "NoSuchBucket", "The specified bucket does not exist.")

        key = path[len(bucket_path) + 1 :]
        if not key:
            if request.method == "GET" and request.url.params.get("list-type") == "2":
                return self._list(request.url.params)
            return self._error(400, "InvalidRequest", "Unsupported bucket request.")

        match request.method:
            case "GET":
                if key not in self.objects:
                    return self._error(404, "NoSuchKey", "The specified key does not exist.")
                body, content_type = self.objects[key]
                return httpx.Response(200, headers={"content-type": content_type}, content=body)
            case "PUT":
                self.objects[key] = (request.content, request.headers.get("content-type", "binary/octet-stream"))
                return httpx.Response(200, headers={"etag": f'"{sha256_hex(request.content)[:32]}"'})
            case "DELETE":
                if key not in self.objects and self.strict_delete:
                    return self._error(404, "NoSuchKey", "The specified key does not exist.")
                self.objects.pop(key, None)
                return httpx.Response(204)
            case _:
                return self._error(405, "MethodNotAllowed", "The specified method is not allowed.")

    def _signature_matches(self, request: httpx.Request) -> bool:
        authorization = request.headers.get("authorization", "")
        if "SignedHeaders=" not in authorization or "x-amz-date" not in request.headers:
            return False
        if request.headers.get("x-amz-content-sha256") != sha256_hex(request.content):
            return False

        signed_names = authorization.split("SignedHeaders=", 1)[1].split(",", 1)[0].split(";")
        caller_headers = {name: request.headers[name] for name in signed_names if name not in SIGNER_HEADERS}
        now = datetime.strptime(request.headers["x-amz-date"], "%Y%m%dT%H%M%SZ").replace(tzinfo=UTC)

        expected = sign_request(
            S3SignableRequest(
                method=request.method,
                canonical_path=request.url.raw_path.split(b"?", 1)[0].decode("ascii"),
                query=dict(request.url.params),
                headers=caller_headers,
                body=request.content or None,
            ),
            self.credentials,
            self.endpoint,
            now=now,
        )
        return expected.authorization == authorization

    def _list(self, params: httpx.QueryParams) -> httpx.Response:
        prefix = params.get("prefix", "")
        max_keys = int(params.get("max-keys", "1000"))
        keys = sorted(key for key in self.objects if key.startswith(prefix))
        if token := params.get("continuation-token"):
            start_after = base64.urlsafe_b64decode(token).decode()
            keys = [key for key in keys if key > start_after]

        page, rest = keys[:max_keys], keys[max_keys:]
        contents = "".join(
            "<Contents>"
            f"<Key>{escape(key)}</Key>"
            "<LastModified>2024-05-01T12:00:00.000Z</LastModified>"
            f"<ETag>&quot;{sha256_hex(self.objects[key][0])[:32]}&quot;</ETag>"
            f"<Size>{len(self.objects[key][0])}</Size>"
            "<StorageClass>STANDARD</StorageClass>"
            "</Contents>"
            for key in page
        )
        next_token = ""
        if rest:
            next_token = (
                "<NextContinuationToken>"
                f"{base64.urlsafe_b64encode(page[-1].encode()).decode()}"
                "</NextContinuationToken>"
            )
        body = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<ListBucketResult xmlns="{S3_NAMESPACE}">'
            f"<Name>{escape(self.endpoint.bucket)}</Name>"
            f"<Prefix>{escape(prefix)}</Prefix>"
            f"<KeyCount>{len(page)}</KeyCount>"
            f"<MaxKeys>{max_keys}</MaxKeys>"
            f"<IsTruncated>{'true' if rest else 'false'}</IsTruncated>"
            f"{next_token}{contents}"
            "</ListBucketResult>"
        )
        return httpx.Response(200, headers={"content-type": "application/xml"}, text=body)

    def _error(self, status_code: int, code: str, message: str) -> httpx.Response:
        body = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f"<Error><Code>{code}</Code><Message>{escape(message)}</Message>"
            "<RequestId>4442587FB7D0A2F9</RequestId></Error>"
        )
        return httpx.Response(
            status_code,
            headers={"content-type": "application/xml", "x-amz-request-id": "4442587FB7D0A2F9"},
            text=body,
        )
