"""Protocol interface for the remote side of batch settlement.

Settlement only needs three calls from the server. Depending on this protocol
instead of the concrete ``Payouts`` resource lets tests drive the orchestrator
with canned responses.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ...application.dtos import ListResponse, RequestOptions
    from ...application.payout_dtos import (
        Payout,
        PayoutBatchBroadcastResponse,
        PayoutBatchBuildResponse,
    )


class PayoutGatewayProtocol(Protocol):
    """Remote operations consumed by the batch orchestrator."""

    def list_pending(
        self, limit: int, options: Optional["RequestOptions"] = None
    ) -> "ListResponse[Payout]":
        """List up to ``limit`` payouts with status ``pending``."""
        ...

    def build_batch(
        self, payout_ids: List[str], options: Optional["RequestOptions"] = None
    ) -> "PayoutBatchBuildResponse":
        """Request an unsigned transaction covering exactly ``payout_ids``."""
        ...

    def broadcast_batch(
        self,
        signed_transaction: str,
        payout_ids: List[str],
        options: Optional["RequestOptions"] = None,
    ) -> "PayoutBatchBroadcastResponse":
        """Submit a signed transaction for the given payouts.

        The server checks that the signed content matches the claimed set.
        """
        ...
