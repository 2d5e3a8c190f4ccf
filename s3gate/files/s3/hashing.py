"""SHA-256 and HMAC-SHA256 helpers used by the SigV4 signer."""

import hashlib
import hmac

EMPTY_PAYLOAD_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def sha256_hex(data: bytes | str) -> str:
    """Hex-encoded SHA-256 digest of `data` (strings are UTF-8 encoded)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def hmac_sha256(key: bytes, msg: str | bytes) -> bytes:
    """Raw HMAC-SHA256 digest, suitable for chaining as the next key."""
    if isinstance(msg, str):
        msg = msg.encode("utf-8")
    return hmac.new(key, msg, hashlib.sha256).digest()


def hmac_sha256_hex(key: bytes, msg: str | bytes) -> str:
    """Hex-encoded HMAC-SHA256 digest."""
    return hmac_sha256(key, msg).hex()
