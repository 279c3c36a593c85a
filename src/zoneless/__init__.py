"""Python client for the Zoneless payments API."""

from .application.dtos import ListResponse, RangeFilter, RequestOptions
from .application.event_dtos import EVENT_TYPES, Event
from .application.payout_dtos import MAX_BATCH_SIZE, Payout, SettlementRound
from .application.settlement import (
    EmptyRound,
    FailedRound,
    RoundStage,
    SettledRound,
    Settlement,
)
from .client import Zoneless
from .crypto.signer import sign_transaction
from .crypto.webhooks import Webhooks, parse_header
from .domain.errors import (
    DecodeError,
    KeypairMismatchError,
    MalformedTransactionError,
    MissingSignatureError,
    PayloadDecodeError,
    RemoteCallError,
    SignatureMismatchError,
    SignerError,
    TimestampToleranceError,
    WebhookSignatureVerificationError,
    ZonelessError,
)
from .infrastructure.resources.base import auto_paginate

__all__ = [
    "DecodeError",
    "EVENT_TYPES",
    "EmptyRound",
    "Event",
    "FailedRound",
    "KeypairMismatchError",
    "ListResponse",
    "MAX_BATCH_SIZE",
    "MalformedTransactionError",
    "MissingSignatureError",
    "PayloadDecodeError",
    "Payout",
    "RangeFilter",
    "RemoteCallError",
    "RequestOptions",
    "RoundStage",
    "SettledRound",
    "Settlement",
    "SettlementRound",
    "SignatureMismatchError",
    "SignerError",
    "TimestampToleranceError",
    "WebhookSignatureVerificationError",
    "Webhooks",
    "Zoneless",
    "ZonelessError",
    "auto_paginate",
    "parse_header",
    "sign_transaction",
]
