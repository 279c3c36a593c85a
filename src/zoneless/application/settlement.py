"""Batch payout settlement: list pending, build, sign locally, broadcast.

One round settles up to ``MAX_BATCH_SIZE`` payouts in a single network
transaction; ``Settlement.run`` repeats rounds until the server reports no
more pending payouts.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

from ..crypto.signer import sign_transaction
from ..domain.shared import PayoutGatewayProtocol
from ..infrastructure.timing import log_timing
from .dtos import RequestOptions
from .payout_dtos import MAX_BATCH_SIZE, SettlementRound

logger = logging.getLogger(__name__)

TransactionSigner = Callable[[str, str], str]


class RoundStage(str, Enum):
    LIST = "list"
    BUILD = "build"
    SIGN = "sign"
    BROADCAST = "broadcast"


@dataclass(frozen=True)
class EmptyRound:
    """No payouts were pending; nothing was built, signed or broadcast."""

    has_more: bool = False


@dataclass(frozen=True)
class SettledRound:
    round: SettlementRound


@dataclass(frozen=True)
class FailedRound:
    stage: RoundStage
    error: Exception


RoundOutcome = Union[EmptyRound, SettledRound, FailedRound]


def clamp_batch_limit(limit: Optional[int]) -> int:
    """Requested batch size, bounded to ``[1, MAX_BATCH_SIZE]``."""
    if limit is None:
        return MAX_BATCH_SIZE
    return max(1, min(limit, MAX_BATCH_SIZE))


def _payout_set_digest(payout_ids: List[str]) -> str:
    return hashlib.sha256(",".join(sorted(payout_ids)).encode("utf-8")).hexdigest()[:16]


def scoped_options(
    options: Optional[RequestOptions],
    stage: RoundStage,
    payout_ids: List[str],
) -> Optional[RequestOptions]:
    """Derive per-stage request options for one batch.

    Build requests never carry the caller's idempotency key: an unsigned batch
    is tied to a blockhash that expires, so every attempt needs a fresh one.
    For broadcast the key is narrowed to ``{key}:broadcast:{digest}``, so one
    key cannot replay another round's response while a retry of the same
    payout set reuses it.
    """
    if options is None or not options.idempotency_key:
        return options
    if stage is RoundStage.BUILD:
        return options.model_copy(update={"idempotency_key": None})
    key = f"{options.idempotency_key}:{stage.value}:{_payout_set_digest(payout_ids)}"
    return options.model_copy(update={"idempotency_key": key})


class Settlement:
    """Drives batch settlement rounds against a payout gateway.

    Rounds run strictly one after another. Completed rounds are kept on
    ``rounds`` so they stay visible when a later round raises.
    """

    def __init__(
        self,
        gateway: PayoutGatewayProtocol,
        secret_key: str,
        *,
        limit: Optional[int] = MAX_BATCH_SIZE,
        options: Optional[RequestOptions] = None,
        signer: TransactionSigner = sign_transaction,
    ) -> None:
        self.gateway = gateway
        self.limit = clamp_batch_limit(limit)
        self.options = options
        self._secret_key = secret_key
        self._signer = signer
        self.rounds: List[SettlementRound] = []

    @log_timing("settlement_round")
    def run_round(self) -> RoundOutcome:
        """Run one list -> build -> sign -> broadcast cycle.

        Failures are captured with the stage they happened in; nothing is
        retried or rolled back.
        """
        # 1) List pending payouts
        try:
            pending = self.gateway.list_pending(self.limit, self.options)
        except Exception as e:
            return FailedRound(RoundStage.LIST, e)

        if not pending.data:
            logger.info("No pending payouts to settle")
            return EmptyRound()

        payout_ids = [p.id for p in pending.data][:MAX_BATCH_SIZE]

        # 2) Build the unsigned transaction for exactly these payouts
        try:
            build = self.gateway.build_batch(
                payout_ids, scoped_options(self.options, RoundStage.BUILD, payout_ids)
            )
        except Exception as e:
            return FailedRound(RoundStage.BUILD, e)

        # 3) Sign locally; a bad key or blob never reaches the network
        try:
            signed_transaction = self._signer(build.unsigned_transaction, self._secret_key)
        except Exception as e:
            return FailedRound(RoundStage.SIGN, e)

        # 4) Broadcast with the same id set for server-side verification
        try:
            result = self.gateway.broadcast_batch(
                signed_transaction,
                payout_ids,
                scoped_options(self.options, RoundStage.BROADCAST, payout_ids),
            )
        except Exception as e:
            return FailedRound(RoundStage.BROADCAST, e)

        settled = SettlementRound.from_broadcast(
            result,
            total_amount=build.total_amount,
            # Ids cut from an over-long page are still pending
            has_more=pending.has_more or len(pending.data) > len(payout_ids),
        )
        logger.info(
            "Settled %d payouts (status=%s signature=%s has_more=%s)",
            len(settled.payouts),
            settled.status,
            settled.signature,
            settled.has_more,
        )
        return SettledRound(settled)

    def process_batch(self) -> SettlementRound:
        """Settle one batch, raising the failing stage's error unchanged."""
        outcome = self.run_round()
        if isinstance(outcome, FailedRound):
            logger.warning(
                "Settlement round failed at %s: %r", outcome.stage.value, outcome.error
            )
            raise outcome.error
        if isinstance(outcome, EmptyRound):
            return SettlementRound.empty()
        return outcome.round

    def run(self) -> List[SettlementRound]:
        """Settle batches until the server reports nothing more pending.

        Returns the non-empty rounds in order. The first failure propagates and
        stops the loop; earlier rounds remain on ``self.rounds``.
        """
        self.rounds = []
        has_more = True
        while has_more:
            result = self.process_batch()
            if result.payouts:
                self.rounds.append(result)
            has_more = result.has_more
        return list(self.rounds)
