from __future__ import annotations

from typing import List, Optional

from ...application.dtos import ListResponse, RequestOptions
from ...application.payout_dtos import (
    MAX_BATCH_SIZE,
    BroadcastPayoutsBatchDTO,
    BuildPayoutsBatchDTO,
    CreatePayoutDTO,
    ListPayoutsDTO,
    Payout,
    PayoutBatchBroadcastResponse,
    PayoutBatchBuildResponse,
    SettlementRound,
    UpdatePayoutDTO,
)
from ...application.settlement import Settlement
from .base import BaseResource, build_query


class Payouts(BaseResource):
    """Payout CRUD plus self-custodial batch settlement.

    Also satisfies ``PayoutGatewayProtocol`` so it can back a ``Settlement``.
    """

    def create(
        self, dto: CreatePayoutDTO, options: Optional[RequestOptions] = None
    ) -> Payout:
        data = self._http.post("/payouts", dto.model_dump(exclude_none=True), options)
        return Payout.model_validate(data)

    def retrieve(self, payout_id: str, options: Optional[RequestOptions] = None) -> Payout:
        return Payout.model_validate(self._http.get(f"/payouts/{payout_id}", options=options))

    def update(
        self,
        payout_id: str,
        dto: UpdatePayoutDTO,
        options: Optional[RequestOptions] = None,
    ) -> Payout:
        data = self._http.post(f"/payouts/{payout_id}", dto.model_dump(), options)
        return Payout.model_validate(data)

    def list(
        self,
        params: Optional[ListPayoutsDTO] = None,
        options: Optional[RequestOptions] = None,
    ) -> ListResponse[Payout]:
        data = self._http.get("/payouts", build_query(params), options)
        return ListResponse[Payout].model_validate(data)

    def cancel(self, payout_id: str, options: Optional[RequestOptions] = None) -> Payout:
        data = self._http.post(f"/payouts/{payout_id}/cancel", {}, options)
        return Payout.model_validate(data)

    def build(
        self, dto: BuildPayoutsBatchDTO, options: Optional[RequestOptions] = None
    ) -> PayoutBatchBuildResponse:
        """Build an unsigned batch transaction for up to 10 pending payouts."""
        data = self._http.post("/payouts/build", dto.model_dump(), options)
        return PayoutBatchBuildResponse.model_validate(data)

    def broadcast(
        self, dto: BroadcastPayoutsBatchDTO, options: Optional[RequestOptions] = None
    ) -> PayoutBatchBroadcastResponse:
        """Broadcast a signed batch; included payouts move to paid or failed."""
        data = self._http.post("/payouts/broadcast", dto.model_dump(), options)
        return PayoutBatchBroadcastResponse.model_validate(data)

    # PayoutGatewayProtocol

    def list_pending(
        self, limit: int, options: Optional[RequestOptions] = None
    ) -> ListResponse[Payout]:
        return self.list(
            ListPayoutsDTO(status="pending", limit=min(limit, MAX_BATCH_SIZE)), options
        )

    def build_batch(
        self, payout_ids: List[str], options: Optional[RequestOptions] = None
    ) -> PayoutBatchBuildResponse:
        return self.build(BuildPayoutsBatchDTO(payouts=payout_ids), options)

    def broadcast_batch(
        self,
        signed_transaction: str,
        payout_ids: List[str],
        options: Optional[RequestOptions] = None,
    ) -> PayoutBatchBroadcastResponse:
        return self.broadcast(
            BroadcastPayoutsBatchDTO(
                signed_transaction=signed_transaction, payouts=payout_ids
            ),
            options,
        )

    # Settlement

    def settlement(
        self,
        secret_key: str,
        *,
        limit: Optional[int] = MAX_BATCH_SIZE,
        options: Optional[RequestOptions] = None,
    ) -> Settlement:
        """A ``Settlement`` bound to this resource.

        Keep a reference to it when rounds completed before a failure are
        needed; they stay on ``settlement.rounds`` after ``run()`` raises.
        """
        return Settlement(self, secret_key, limit=limit, options=options)

    def process_batch(
        self,
        secret_key: str,
        *,
        limit: Optional[int] = MAX_BATCH_SIZE,
        options: Optional[RequestOptions] = None,
    ) -> SettlementRound:
        """Settle one batch of pending payouts (at most 10).

        Lists pending payouts, builds an unsigned transaction, signs it locally
        with ``secret_key`` (base58 Solana secret key) and broadcasts it. When
        nothing is pending, returns an empty round without further calls.
        """
        return self.settlement(secret_key, limit=limit, options=options).process_batch()

    def process_all(
        self, secret_key: str, options: Optional[RequestOptions] = None
    ) -> List[SettlementRound]:
        """Settle batches until no pending payouts remain; one result per batch.

        The first failing round's error propagates unchanged. To also read the
        rounds settled before it, use ``settlement(secret_key).run()`` and
        inspect ``rounds`` on the settlement.
        """
        return self.settlement(secret_key, options=options).run()
