"""Object key naming for uploads."""

import secrets
import string
from datetime import UTC, datetime

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits
_DOT_SEGMENTS = frozenset({".", ".."})
TOKEN_LENGTH = 8


def random_token(length: int = TOKEN_LENGTH) -> str:
    """Random lowercase alphanumeric token."""
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))


def file_extension(file_name: str) -> str:
    """Text after the last dot of the base name, or an empty string."""
    base_name = file_name.rsplit("/", 1)[-1]
    if "." not in base_name:
        return ""
    return base_name.rsplit(".", 1)[-1]


def validate_object_key(key: str) -> str:
    """Check that a key addresses exactly one path under the bucket.

    HTTP clients remove `.` and `..` segments from URLs before sending, so a
    key holding them would be signed over one path and sent on another.

    Raises:
        ValueError: If the key is empty or has an empty, `.` or `..` segment.

    """
    if not key:
        raise ValueError("File name must not be empty")
    for segment in key.split("/"):
        if not segment:
            raise ValueError(f"File name {key!r} has an empty path segment")
        if segment in _DOT_SEGMENTS:
            raise ValueError(f"File name {key!r} has a {segment!r} path segment")
    return key


def build_object_key(
    file_name: str,
    *,
    folder: str = "",
    preserve_name: bool = False,
    now: datetime | None = None,
    token: str | None = None,
) -> str:
    """Build the key an upload is stored under.

    With `preserve_name` the caller's name is kept verbatim (leading slashes
    removed) under `folder`. Otherwise the key is `{timestamp_ms}-{token}.{ext}`
    under `folder`, unique per call.

    Args:
        file_name: Original file name.
        folder: Optional folder prefix.
        preserve_name: Keep the original name instead of generating one.
        now: Timestamp for generated names. Defaults to the current time.
        token: Random suffix for generated names. Defaults to a fresh token.

    Raises:
        ValueError: If the file name is empty or the key would have an
            empty, `.` or `..` path segment.

    """
    clean_name = file_name.lstrip("/")
    if not clean_name:
        raise ValueError("File name must not be empty")

    clean_folder = folder.strip("/")

    if preserve_name:
        name = clean_name
    else:
        timestamp = int((now or datetime.now(UTC)).timestamp() * 1000)
        name = f"{timestamp}-{token or random_token()}"
        if extension := file_extension(clean_name):
            name = f"{name}.{extension}"

    return validate_object_key(f"{clean_folder}/{name}" if clean_folder else name)
