import hashlib
import hmac
from typing import Mapping, Optional, Union

from ..log import get_logger

SIGNATURE_HEADER = "x-hub-signature-256"
SIGNATURE_PREFIX = "sha256="

logger = get_logger(__name__)

RawBody = Union[bytes, bytearray, memoryview, str]


def _as_bytes(value: RawBody) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"unsupported payload type: {type(value).__name__}")


def extract_signature_header(headers: Mapping[str, str]) -> Optional[str]:
    for name, value in headers.items():
        if name.lower() == SIGNATURE_HEADER:
            return value
    return None


def strip_signature_prefix(signature: str) -> str:
    if signature.startswith(SIGNATURE_PREFIX):
        return signature[len(SIGNATURE_PREFIX) :]
    return signature


def compute_signature(raw_body: RawBody, app_secret: str, *, digestmod: str = "sha256") -> str:
    return hmac.new(_as_bytes(app_secret), _as_bytes(raw_body), digestmod).hexdigest()


def constant_time_equals(left: str, right: str) -> bool:
    left_bytes = left.encode("utf-8")
    right_bytes = right.encode("utf-8")
    if len(left_bytes) != len(right_bytes):
        return False
    return hmac.compare_digest(left_bytes, right_bytes)


def verify_signature(
    raw_body: RawBody,
    signature_header: Optional[str],
    app_secret: str,
    *,
    digestmod: str = "sha256",
) -> bool:
    """Check ``signature_header`` against the HMAC of the exact raw body.

    Never raises: malformed input, an unsupported digest or any other failure
    yields ``False``.
    """
    try:
        if not signature_header or not app_secret:
            return False
        received = strip_signature_prefix(signature_header)
        expected = compute_signature(raw_body, app_secret, digestmod=digestmod)
        return constant_time_equals(received, expected)
    except Exception as exc:
        logger.debug("signature verification failed closed: %r", exc)
        return False


async def verify_webhook_signature(
    raw_body: RawBody,
    signature_header: Optional[str],
    app_secret: str,
    *,
    digestmod: str = "sha256",
) -> bool:
    return verify_signature(raw_body, signature_header, app_secret, digestmod=digestmod)


def sign_payload(raw_body: RawBody, app_secret: str) -> str:
    return SIGNATURE_PREFIX + compute_signature(raw_body, app_secret)
