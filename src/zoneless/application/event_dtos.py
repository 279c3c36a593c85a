"""Event objects, as delivered by the events API and by webhooks."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .dtos import ApiObject, ListParams, RangeFilter

# "*" subscribes a webhook endpoint to every event type.
EVENT_TYPES = (
    "*",
    "account.created",
    "account.updated",
    "api_key.created",
    "api_key.updated",
    "api_key.deleted",
    "balance.available",
    "balance_transaction.created",
    "external_account.created",
    "external_account.updated",
    "external_account.deleted",
    "payout.created",
    "payout.updated",
    "payout.paid",
    "payout.failed",
    "payout.canceled",
    "person.created",
    "person.updated",
    "person.deleted",
    "topup.created",
    "topup.canceled",
    "topup.failed",
    "topup.reversed",
    "topup.succeeded",
    "transfer.created",
    "transfer.updated",
    "transfer.reversed",
)


class EventData(BaseModel):
    object: Dict[str, Any]
    # Only present on "*.updated" events
    previous_attributes: Optional[Dict[str, Any]] = None


class EventRequest(BaseModel):
    id: Optional[str] = None
    idempotency_key: Optional[str] = None


class Event(ApiObject):
    id: str
    object: str = "event"
    type: str
    account: Optional[str] = None
    api_version: Optional[str] = None
    context: Optional[str] = None
    created: int
    livemode: bool = False
    data: EventData
    pending_webhooks: int = 0
    request: Optional[EventRequest] = None


class ListEventsDTO(ListParams):
    type: Optional[str] = None
    # Expanded to types[0], types[1], ... on the wire
    types: Optional[List[str]] = Field(default=None)
    created: Optional[RangeFilter] = None
