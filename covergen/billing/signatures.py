"""
Webhook authenticity and freshness checks.

Signatures are HMAC-SHA256 hex digests over the exact raw request body,
optionally prefixed with ``sha256=``. A separate timestamp header, when sent,
must be within the tolerance window of the verifier's clock.
"""
import enum
import hashlib
import hmac
import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="
DEFAULT_TOLERANCE_SECONDS = 300


class Verdict(enum.Enum):
    OK = "ok"
    MISSING_SIGNATURE = "missing_signature"
    INVALID_SIGNATURE = "invalid_signature"
    STALE_TIMESTAMP = "stale_timestamp"

    @property
    def ok(self) -> bool:
        return self is Verdict.OK


def _as_bytes(payload: bytes | str) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return payload


def sign_payload(payload: bytes | str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), _as_bytes(payload), hashlib.sha256).hexdigest()


def verify_signature(payload: bytes | str, signature: str | None, secret: str | None) -> bool:
    """Constant-time check of ``signature`` against the payload's HMAC. Never raises."""
    if not signature or not secret:
        logger.warning("webhook.signature.missing_input", extra={"has_signature": bool(signature), "has_secret": bool(secret)})
        return False
    try:
        received = signature.strip()
        if received.startswith(SIGNATURE_PREFIX):
            received = received[len(SIGNATURE_PREFIX):]
        expected = bytes.fromhex(sign_payload(payload, secret))
        return hmac.compare_digest(expected, bytes.fromhex(received))
    except (ValueError, TypeError, UnicodeError):
        logger.warning("webhook.signature.undecodable")
        return False


def is_fresh(timestamp: str | None, now: float, tolerance: int = DEFAULT_TOLERANCE_SECONDS) -> bool:
    """
    True when no timestamp was sent or it lies within ``tolerance`` seconds of
    ``now`` in either direction. The boundary itself is accepted, and a
    fractional value is truncated to whole seconds.
    """
    if timestamp is None or timestamp == "":
        return True
    try:
        sent = int(float(timestamp.strip()))
    except (ValueError, OverflowError, AttributeError):
        return False
    return abs(int(now) - sent) <= tolerance


class WebhookVerifier:
    """Built once per app with the shared secret; holds no per-request state."""

    def __init__(self, secret: str | None, tolerance: int = DEFAULT_TOLERANCE_SECONDS,
                 clock: Callable[[], float] = time.time):
        self._secret = secret or None
        self.tolerance = int(tolerance)
        self._clock = clock

    @property
    def configured(self) -> bool:
        return self._secret is not None

    def verify(self, payload: bytes | str, signature: str | None, timestamp: str | None = None) -> Verdict:
        if not signature:
            return Verdict.MISSING_SIGNATURE
        if not verify_signature(payload, signature, self._secret):
            return Verdict.INVALID_SIGNATURE
        if not is_fresh(timestamp, self._clock(), self.tolerance):
            logger.warning("webhook.timestamp.stale", extra={"timestamp": timestamp})
            return Verdict.STALE_TIMESTAMP
        return Verdict.OK

    def __repr__(self) -> str:
        return f"<WebhookVerifier configured={self.configured} tolerance={self.tolerance}>"
