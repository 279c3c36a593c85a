"""Data Transfer Objects for balances, top-ups, transfers and webhook endpoints."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .dtos import ApiObject, ListParams, RangeFilter
from .event_dtos import EVENT_TYPES

# Balance


class BalanceAmount(BaseModel):
    amount: int
    currency: str
    source_types: Optional[Dict[str, int]] = None


class Balance(ApiObject):
    id: Optional[str] = None
    object: Literal["balance"] = "balance"
    account: Optional[str] = None
    livemode: bool = False
    available: List[BalanceAmount] = Field(default_factory=list)
    pending: List[BalanceAmount] = Field(default_factory=list)


class BalanceTransaction(ApiObject):
    id: str
    object: Literal["balance_transaction"] = "balance_transaction"
    amount: int
    available_on: Optional[int] = None
    created: Optional[int] = None
    currency: str
    description: Optional[str] = None
    fee: int = 0
    net: int = 0
    reporting_category: Optional[str] = None
    source: Optional[str] = None
    status: Literal["available", "pending"]
    type: str
    account: Optional[str] = None


class ListBalanceTransactionsDTO(ListParams):
    currency: Optional[str] = None
    payout: Optional[str] = None
    source: Optional[str] = None
    type: Optional[str] = None
    created: Optional[RangeFilter] = None


# Top-ups

TopUpStatus = Literal["canceled", "failed", "pending", "reversed", "succeeded"]


class TopUp(ApiObject):
    id: str
    object: Literal["topup"] = "topup"
    amount: int
    currency: str
    status: TopUpStatus
    balance_transaction: Optional[str] = None
    created: Optional[int] = None
    description: Optional[str] = None
    expected_availability_date: Optional[int] = None
    failure_code: Optional[str] = None
    failure_message: Optional[str] = None
    livemode: bool = False
    metadata: Dict[str, str] = Field(default_factory=dict)
    statement_descriptor: Optional[str] = None
    transfer_group: Optional[str] = None
    account: Optional[str] = None


class CreateTopUpDTO(BaseModel):
    amount: int = Field(gt=0)
    currency: str = Field(min_length=3, max_length=4)
    description: Optional[str] = Field(default=None, max_length=500)
    metadata: Optional[Dict[str, str]] = None
    source: Optional[str] = None
    statement_descriptor: Optional[str] = Field(
        default=None, max_length=15, pattern=r"^[\x20-\x7E]*$"
    )
    transfer_group: Optional[str] = Field(default=None, max_length=255)

    @field_validator("currency")
    @classmethod
    def lowercase_currency(cls, v: str) -> str:
        return v.lower()


class UpdateTopUpDTO(BaseModel):
    description: Optional[str] = Field(default=None, max_length=500)
    metadata: Optional[Dict[str, str]] = None


class ListTopUpsDTO(ListParams):
    status: Optional[TopUpStatus] = None
    amount: Optional[RangeFilter] = None
    created: Optional[RangeFilter] = None


class CheckDepositsResponse(ApiObject):
    object: Literal["check_deposits_result"] = "check_deposits_result"
    processed: int = 0
    errors: int = 0
    topups: List[TopUp] = Field(default_factory=list)
    message: str = ""


# Transfers


class Transfer(ApiObject):
    id: str
    object: Literal["transfer"] = "transfer"
    amount: int
    amount_reversed: int = 0
    balance_transaction: Optional[str] = None
    created: Optional[int] = None
    currency: str
    description: Optional[str] = None
    destination: str
    destination_payment: Optional[str] = None
    livemode: bool = False
    metadata: Dict[str, str] = Field(default_factory=dict)
    reversed: bool = False
    source_transaction: Optional[str] = None
    source_type: Optional[str] = None
    transfer_group: Optional[str] = None
    account: Optional[str] = None


class CreateTransferDTO(BaseModel):
    amount: int = Field(gt=0)
    currency: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    description: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None
    source_transaction: Optional[str] = None
    source_type: Optional[Literal["bank_account", "card", "fpx", "wallet"]] = None
    transfer_group: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def lowercase_currency(cls, v: str) -> str:
        return v.lower()


class UpdateTransferDTO(BaseModel):
    description: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None


class ListTransfersDTO(ListParams):
    destination: Optional[str] = None
    transfer_group: Optional[str] = None
    created: Optional[RangeFilter] = None


# Webhook endpoints


def _validate_enabled_events(events: Optional[List[str]]) -> Optional[List[str]]:
    if events is None:
        return events
    if not events:
        raise ValueError("At least one event type must be specified")
    unknown = [e for e in events if e not in EVENT_TYPES]
    if unknown:
        raise ValueError(f"Invalid event type specified: {', '.join(unknown)}")
    return events


class WebhookEndpoint(ApiObject):
    id: str
    object: Literal["webhook_endpoint"] = "webhook_endpoint"
    api_version: Optional[str] = None
    created: Optional[int] = None
    description: Optional[str] = None
    enabled_events: List[str] = Field(default_factory=list)
    livemode: bool = False
    metadata: Dict[str, str] = Field(default_factory=dict)
    # Only returned in full on creation
    secret: Optional[str] = None
    status: Literal["enabled", "disabled"] = "enabled"
    url: str


class CreateWebhookEndpointDTO(BaseModel):
    enabled_events: List[str]
    url: str = Field(min_length=1)
    api_version: Optional[str] = None
    connect: Optional[bool] = None
    description: Optional[str] = Field(default=None, max_length=500)
    metadata: Optional[Dict[str, str]] = None

    @field_validator("enabled_events")
    @classmethod
    def validate_enabled_events(cls, v: List[str]) -> List[str]:
        return _validate_enabled_events(v)


class UpdateWebhookEndpointDTO(BaseModel):
    url: Optional[str] = Field(default=None, min_length=1)
    enabled_events: Optional[List[str]] = None
    description: Optional[str] = Field(default=None, max_length=500)
    disabled: Optional[bool] = None
    metadata: Optional[Dict[str, str]] = None

    @field_validator("enabled_events")
    @classmethod
    def validate_enabled_events(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _validate_enabled_events(v)

    @model_validator(mode="after")
    def require_one_field(self) -> "UpdateWebhookEndpointDTO":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class ListWebhookEndpointsDTO(ListParams):
    pass
