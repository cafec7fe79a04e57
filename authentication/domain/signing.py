"""
Request signing and signed envelope validation.

A client signs every field of its JSON payload except ``signature`` itself.
Fields are serialized with sorted keys and compact separators, so the
signature does not depend on field order and a caller cannot influence it
by injecting or reordering a ``signature`` field.
"""
import hashlib
import hmac
import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from core.domain.value_objects import is_email_shaped

logger = logging.getLogger(__name__)

SIGNATURE_FIELD = "signature"
SUBJECT_FIELD = "username"
TIMESTAMP_FIELD = "timestamp"

DEFAULT_REPLAY_WINDOW_MS = 300_000

HEX_SIGNATURE = re.compile(r"[0-9a-fA-F]{64}")


def canonicalize(payload: Mapping[str, Any]) -> str:
    """
    Serialize a payload for signing.

    Args:
        payload: Request payload (the signature field is dropped)

    Returns:
        JSON string with sorted keys and no insignificant whitespace
    """
    data = {key: value for key, value in payload.items() if key != SIGNATURE_FIELD}
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def current_time_ms() -> int:
    """Return the current epoch time in milliseconds."""
    return int(time.time() * 1000)


@dataclass
class EnvelopeValidation:
    """Result of validating a signed request envelope."""

    valid: bool
    errors: List[str] = field(default_factory=list)


class RequestSigner:
    """
    HMAC-SHA256 signer for client request payloads.

    Args:
        secret: Shared signing secret
        replay_window_ms: Maximum distance between the request timestamp
            and the server clock, in either direction
    """

    def __init__(self, secret: str, replay_window_ms: int = DEFAULT_REPLAY_WINDOW_MS):
        if not secret:
            raise ValueError("Signing secret is required")
        self._key = secret.encode("utf-8")
        self.replay_window_ms = replay_window_ms

    def sign(self, payload: Mapping[str, Any]) -> str:
        """
        Compute the hex signature of a payload.

        Args:
            payload: Request payload

        Returns:
            HMAC-SHA256 signature (hex)
        """
        message = canonicalize(payload)
        return hmac.new(self._key, message.encode("utf-8"), hashlib.sha256).hexdigest()

    def verify(self, payload: Mapping[str, Any], provided_signature: str) -> bool:
        """
        Verify a provided signature against the payload.

        Never raises; malformed input is treated as a mismatch. Only a
        64-character hex string is accepted, in either case.

        Args:
            payload: Request payload
            provided_signature: Hex signature supplied by the client

        Returns:
            True if the signature is valid
        """
        try:
            if not isinstance(provided_signature, str) or not HEX_SIGNATURE.fullmatch(
                provided_signature
            ):
                return False
            expected = self.sign(payload)
            return hmac.compare_digest(expected, provided_signature.lower())
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error verifying signature: %s", type(e).__name__)
            return False

    def validate_envelope(
        self, payload: Mapping[str, Any], now_ms: Optional[int] = None
    ) -> EnvelopeValidation:
        """
        Validate the shape of a signed request envelope.

        Every violation is reported, not only the first one.

        Args:
            payload: Request payload
            now_ms: Server time in epoch milliseconds (defaults to now)

        Returns:
            EnvelopeValidation with the collected errors
        """
        errors: List[str] = []
        subject = payload.get(SUBJECT_FIELD)
        timestamp = payload.get(TIMESTAMP_FIELD)
        signature = payload.get(SIGNATURE_FIELD)

        if _is_blank(subject):
            errors.append("Username is required")
        if _is_blank(timestamp):
            errors.append("Timestamp is required")
        if _is_blank(signature):
            errors.append("Signature is required")
        elif not isinstance(signature, str):
            errors.append("Signature must be a hex string")

        if not _is_blank(timestamp):
            if isinstance(timestamp, bool) or not isinstance(timestamp, int):
                errors.append("Timestamp must be an integer (epoch milliseconds)")
            else:
                now = current_time_ms() if now_ms is None else now_ms
                if abs(now - timestamp) > self.replay_window_ms:
                    errors.append("Request timestamp is outside the allowed window")

        if not _is_blank(subject) and not is_email_shaped(subject):
            errors.append("Invalid email format")

        return EnvelopeValidation(valid=not errors, errors=errors)

    def sign_envelope(
        self, payload: Mapping[str, Any], now_ms: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Build a complete signed envelope (client-side helper).

        Args:
            payload: Operation fields including the username
            now_ms: Timestamp to embed (defaults to now)

        Returns:
            New payload with timestamp and signature set
        """
        envelope = {key: value for key, value in payload.items() if key != SIGNATURE_FIELD}
        envelope[TIMESTAMP_FIELD] = current_time_ms() if now_ms is None else now_ms
        envelope[SIGNATURE_FIELD] = self.sign(envelope)
        return envelope


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def mask_signature(signature: Any) -> str:
    """Return a log-safe prefix of a signature."""
    if not isinstance(signature, str) or not signature:
        return "<none>"
    return f"{signature[:8]}..."
