"""Data Transfer Objects for payouts and batch settlement."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .dtos import ApiObject, ListParams, RangeFilter

# Hard protocol limit on payouts bundled into one network transaction.
MAX_BATCH_SIZE = 10

PayoutStatus = Literal["pending", "processing", "in_transit", "paid", "failed", "canceled"]
PayoutFailureCode = Literal[
    "account_closed",
    "account_frozen",
    "could_not_process",
    "declined",
    "insufficient_funds",
    "invalid_account_number",
    "invalid_currency",
    "wallet_not_found",
    "sanctioned_address",
    "blockchain_error",
]
BatchStatus = Literal["paid", "failed"]


class Payout(ApiObject):
    """One outbound transfer of funds to an external wallet."""

    id: str
    object: Literal["payout"] = "payout"
    amount: int
    currency: str
    destination: str
    status: PayoutStatus
    account: Optional[str] = None
    arrival_date: Optional[int] = None
    automatic: bool = False
    balance_transaction: Optional[str] = None
    created: Optional[int] = None
    description: Optional[str] = None
    failure_code: Optional[PayoutFailureCode] = None
    failure_message: Optional[str] = None
    livemode: bool = False
    metadata: Dict[str, Any] = Field(default_factory=dict)
    method: Literal["standard", "instant"] = "instant"
    source_type: str = "wallet"
    statement_descriptor: Optional[str] = None
    type: str = "wallet"


class CreatePayoutDTO(BaseModel):
    amount: int = Field(gt=0)
    currency: str = "usdc"
    # Falls back to the account's default wallet when omitted
    destination: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    method: Optional[Literal["standard", "instant"]] = None
    metadata: Optional[Dict[str, str]] = None
    statement_descriptor: Optional[str] = Field(default=None, max_length=22)


class UpdatePayoutDTO(BaseModel):
    """Only metadata can be changed after creation."""

    metadata: Dict[str, str]


class ListPayoutsDTO(ListParams):
    destination: Optional[str] = None
    status: Optional[Literal["pending", "in_transit", "paid", "failed", "canceled"]] = None
    arrival_date: Optional[RangeFilter] = None
    created: Optional[RangeFilter] = None


def _validate_batch_ids(ids: List[str]) -> List[str]:
    if not ids:
        raise ValueError("At least one payout ID is required")
    if len(ids) > MAX_BATCH_SIZE:
        raise ValueError(f"Maximum {MAX_BATCH_SIZE} payouts per batch transaction")
    if any(not payout_id for payout_id in ids):
        raise ValueError("Payout ID cannot be empty")
    return ids


class BuildPayoutsBatchDTO(BaseModel):
    """Request an unsigned transaction covering the given pending payouts."""

    payouts: List[str]

    @field_validator("payouts")
    @classmethod
    def validate_payouts(cls, v: List[str]) -> List[str]:
        return _validate_batch_ids(v)


class BroadcastPayoutsBatchDTO(BaseModel):
    """Submit a signed transaction along with the payout ids it settles."""

    signed_transaction: str = Field(min_length=1)
    payouts: List[str]

    @field_validator("payouts")
    @classmethod
    def validate_payouts(cls, v: List[str]) -> List[str]:
        return _validate_batch_ids(v)


class PayoutBatchBuildResponse(ApiObject):
    """Unsigned batch transaction returned by the build endpoint.

    ``blockhash`` is the freshness token; the transaction is unusable once the
    network passes ``last_valid_block_height``.
    """

    unsigned_transaction: str
    payouts: List[str] = Field(default_factory=list)
    estimated_fee: Optional[int] = None
    blockhash: Optional[str] = None
    last_valid_block_height: Optional[int] = None
    total_amount: int = 0
    recipients_count: int = 0


class PayoutBatchBroadcastResponse(ApiObject):
    """Outcome of broadcasting one signed batch."""

    signature: str = ""
    status: BatchStatus
    viewer_url: str = ""
    payouts: List[Payout] = Field(default_factory=list)
    failure_message: Optional[str] = None


class SettlementRound(BaseModel):
    """One settled batch: the broadcast outcome plus list/build bookkeeping."""

    signature: str
    status: BatchStatus
    viewer_url: str
    payouts: List[Payout]
    total_amount: int
    has_more: bool
    failure_message: Optional[str] = None

    @classmethod
    def empty(cls) -> "SettlementRound":
        return cls(
            signature="",
            status="paid",
            viewer_url="",
            payouts=[],
            total_amount=0,
            has_more=False,
        )

    @classmethod
    def from_broadcast(
        cls,
        result: PayoutBatchBroadcastResponse,
        *,
        total_amount: int,
        has_more: bool,
    ) -> "SettlementRound":
        return cls(
            signature=result.signature,
            status=result.status,
            viewer_url=result.viewer_url,
            payouts=result.payouts,
            total_amount=total_amount,
            has_more=has_more,
            failure_message=result.failure_message,
        )
