"""Webhook signature verification.

A delivery carries a ``Zoneless-Signature`` header of the form::

    t=1700000000,v1=5257a869...,v1=9d1a0c2b...

Each ``v1`` is a lowercase hex HMAC-SHA256 of ``"{t}.{payload}"`` keyed with
the endpoint's signing secret. Several ``v1`` values may be present while a
secret is being rotated; any one of them matching is enough.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Union

from cryptography.hazmat.primitives import constant_time, hashes, hmac
from pydantic import BaseModel, Field, ValidationError

from ..application.event_dtos import Event
from ..domain.errors import (
    MissingSignatureError,
    PayloadDecodeError,
    SignatureMismatchError,
    TimestampToleranceError,
)

DEFAULT_TOLERANCE = 300
SIGNATURE_HEADER = "Zoneless-Signature"
SIGNATURE_SCHEME = "v1"

Clock = Callable[[], int]


def system_clock() -> int:
    return int(time.time())


class WebhookEnvelope(BaseModel):
    """Fields extracted from the signature header before verification."""

    timestamp: Optional[int] = None
    signatures: List[str] = Field(default_factory=list)


def parse_header(header: str) -> WebhookEnvelope:
    """Split a signature header into its timestamp and v1 candidates.

    The first ``t`` wins; every ``v1`` is kept in the order seen. Pairs missing
    a key or a value are ignored.
    """
    timestamp: Optional[int] = None
    signatures: List[str] = []
    for item in header.split(","):
        key, _, value = item.partition("=")
        key = key.strip()
        value = value.strip()
        if not key or not value:
            continue
        if key == "t" and timestamp is None:
            # Plain ASCII digits only; int() would also take "+5" or "1_700"
            if value.isascii() and value.isdigit():
                timestamp = int(value)
        elif key == SIGNATURE_SCHEME:
            signatures.append(value)
    return WebhookEnvelope(timestamp=timestamp, signatures=signatures)


def _as_bytes(payload: Union[bytes, str]) -> bytes:
    return payload.encode("utf-8") if isinstance(payload, str) else payload


def compute_signature(timestamp: int, payload: Union[bytes, str], secret: str) -> str:
    """Hex HMAC-SHA256 over ``"{timestamp}.{payload}"``."""
    mac = hmac.HMAC(secret.encode("utf-8"), hashes.SHA256())
    mac.update(f"{timestamp}.".encode("ascii"))
    mac.update(_as_bytes(payload))
    return mac.finalize().hex()


def _matches(candidate: str, expected: bytes) -> bool:
    candidate_bytes = candidate.encode("utf-8")
    if len(candidate_bytes) != len(expected):
        return False
    return constant_time.bytes_eq(candidate_bytes, expected)


class Webhooks:
    """Verify webhook deliveries and turn them into ``Event`` objects.

    ``secret`` and ``tolerance`` given here are used when a call omits them.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        *,
        secret: Optional[str] = None,
        tolerance: int = DEFAULT_TOLERANCE,
    ) -> None:
        self._clock = clock or system_clock
        self._secret = secret
        self._tolerance = tolerance

    def _resolve_secret(self, secret: Optional[str]) -> str:
        resolved = secret if secret is not None else self._secret
        if not resolved:
            raise ValueError("A webhook signing secret is required")
        return resolved

    def verify(
        self,
        payload: Union[bytes, str],
        header: str,
        secret: Optional[str] = None,
        tolerance: Optional[int] = None,
    ) -> None:
        secret = self._resolve_secret(secret)
        tolerance = self._tolerance if tolerance is None else tolerance
        envelope = parse_header(header)
        if envelope.timestamp is None or not envelope.signatures:
            raise MissingSignatureError(
                "Unable to extract timestamp and signatures from header"
            )

        if tolerance > 0 and self._clock() - envelope.timestamp > tolerance:
            raise TimestampToleranceError("Timestamp outside the tolerance zone")

        expected = compute_signature(envelope.timestamp, payload, secret).encode("ascii")
        if not any(_matches(sig, expected) for sig in envelope.signatures):
            raise SignatureMismatchError(
                "No signatures found matching the expected signature for payload"
            )

    def construct_event(
        self,
        payload: Union[bytes, str],
        header: str,
        secret: Optional[str] = None,
        tolerance: Optional[int] = None,
    ) -> Event:
        """Verify a delivery, then parse it.

        Raises:
            MissingSignatureError: header has no timestamp or no v1 signature
            TimestampToleranceError: signed timestamp is older than ``tolerance``
            SignatureMismatchError: no v1 candidate matches
            PayloadDecodeError: the verified payload is not a valid event
        """
        self.verify(payload, header, secret, tolerance)
        try:
            return Event.model_validate_json(_as_bytes(payload))
        except ValidationError as e:
            raise PayloadDecodeError(f"Webhook payload is not a valid event: {e}") from e

    def generate_header(
        self,
        payload: Union[bytes, str],
        secret: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> str:
        """Build a valid signature header, e.g. for tests or local replays."""
        secret = self._resolve_secret(secret)
        ts = self._clock() if timestamp is None else timestamp
        return f"t={ts},{SIGNATURE_SCHEME}={compute_signature(ts, payload, secret)}"
