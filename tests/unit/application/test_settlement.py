"""Unit tests for batch payout settlement against a canned gateway."""

from __future__ import annotations

import logging
from typing import List

import pytest

from tests.fixtures import FakePayoutGateway
from zoneless.application.dtos import RequestOptions
from zoneless.application.settlement import (
    EmptyRound,
    FailedRound,
    RoundStage,
    SettledRound,
    Settlement,
    clamp_batch_limit,
    scoped_options,
)
from zoneless.crypto.signer import count_signatures
from zoneless.domain.errors import KeypairMismatchError, RemoteCallError

SECRET_KEY = "platform-secret"


def fake_signer(unsigned_transaction: str, secret_key: str) -> str:
    return f"signed({unsigned_transaction})"


def ids(prefix: str, n: int) -> List[str]:
    return [f"{prefix}_{i}" for i in range(n)]


def make_settlement(gateway: FakePayoutGateway, **kwargs) -> Settlement:
    kwargs.setdefault("signer", fake_signer)
    return Settlement(gateway, SECRET_KEY, **kwargs)


class TestClampBatchLimit:
    """Test clamp_batch_limit."""

    @pytest.mark.parametrize(
        "requested, expected",
        [(None, 10), (1, 1), (5, 5), (10, 10), (11, 10), (100, 10), (0, 1), (-3, 1)],
    )
    def test_clamps_into_range(self, requested, expected) -> None:
        assert clamp_batch_limit(requested) == expected


class TestRunRound:
    """Test Settlement.run_round."""

    def test_nothing_pending_makes_no_further_calls(self) -> None:
        gateway = FakePayoutGateway()

        outcome = make_settlement(gateway).run_round()

        assert outcome == EmptyRound()
        assert gateway.call_names() == ["list_pending"]

    def test_full_round_settles_listed_payouts(self) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_1", "po_2"], has_more=True)
        gateway.queue_build("unsigned-tx", total_amount=2000)
        gateway.queue_broadcast(["po_1", "po_2"], signature="5abc")

        outcome = make_settlement(gateway).run_round()

        assert isinstance(outcome, SettledRound)
        assert outcome.round.signature == "5abc"
        assert outcome.round.status == "paid"
        assert outcome.round.total_amount == 2000
        assert outcome.round.has_more is True
        assert [p.id for p in outcome.round.payouts] == ["po_1", "po_2"]
        assert gateway.call_names() == ["list_pending", "build_batch", "broadcast_batch"]

    def test_build_and_broadcast_use_the_listed_ids(self) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_b", "po_a"])
        gateway.queue_build("unsigned-tx")
        gateway.queue_broadcast(["po_b", "po_a"])

        make_settlement(gateway).run_round()

        _, build_args = gateway.calls[1]
        _, broadcast_args = gateway.calls[2]
        assert build_args["payout_ids"] == ["po_b", "po_a"]
        assert broadcast_args["payout_ids"] == ["po_b", "po_a"]
        assert broadcast_args["signed_transaction"] == "signed(unsigned-tx)"

    def test_requests_clamped_limit(self) -> None:
        gateway = FakePayoutGateway()

        make_settlement(gateway, limit=50).run_round()

        _, args = gateway.calls[0]
        assert args["limit"] == 10

    def test_never_sends_more_than_ten_ids(self) -> None:
        """An over-long pending page is cut to the batch maximum."""
        gateway = FakePayoutGateway()
        gateway.queue_pending(ids("po", 12))
        gateway.queue_build("unsigned-tx")
        gateway.queue_broadcast(ids("po", 10))

        make_settlement(gateway).run_round()

        _, build_args = gateway.calls[1]
        assert len(build_args["payout_ids"]) == 10

    def test_list_failure_reports_stage(self) -> None:
        gateway = FakePayoutGateway()
        error = RemoteCallError("boom", status_code=500)
        gateway.set_error("list_pending", error)

        outcome = make_settlement(gateway).run_round()

        assert outcome == FailedRound(RoundStage.LIST, error)

    def test_build_failure_skips_sign_and_broadcast(self) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_1"])
        gateway.set_error("build_batch", RemoteCallError("stale"))

        outcome = make_settlement(gateway).run_round()

        assert isinstance(outcome, FailedRound)
        assert outcome.stage is RoundStage.BUILD
        assert "broadcast_batch" not in gateway.call_names()

    def test_signing_failure_never_broadcasts(self) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_1"])
        gateway.queue_build("unsigned-tx")

        def failing_signer(unsigned_transaction: str, secret_key: str) -> str:
            raise KeypairMismatchError("wrong key")

        outcome = make_settlement(gateway, signer=failing_signer).run_round()

        assert isinstance(outcome, FailedRound)
        assert outcome.stage is RoundStage.SIGN
        assert isinstance(outcome.error, KeypairMismatchError)
        assert gateway.call_names() == ["list_pending", "build_batch"]

    def test_broadcast_failure_reports_stage(self) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_1"])
        gateway.queue_build("unsigned-tx")
        gateway.set_error("broadcast_batch", RemoteCallError("rejected", status_code=400))

        outcome = make_settlement(gateway).run_round()

        assert isinstance(outcome, FailedRound)
        assert outcome.stage is RoundStage.BROADCAST

    def test_failed_chain_status_is_a_settled_round(self) -> None:
        """A broadcast that lands but fails on-chain is still a completed round."""
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_1"])
        gateway.queue_build("unsigned-tx")
        gateway.queue_broadcast(["po_1"], status="failed")

        outcome = make_settlement(gateway).run_round()

        assert isinstance(outcome, SettledRound)
        assert outcome.round.status == "failed"
        assert outcome.round.payouts[0].status == "failed"

    def test_real_signer_adds_one_signature(
        self, unsigned_transaction: str, platform_secret_key: str
    ) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_1"])
        gateway.queue_build(unsigned_transaction)
        gateway.queue_broadcast(["po_1"])

        Settlement(gateway, platform_secret_key).run_round()

        _, broadcast_args = gateway.calls[2]
        signed = broadcast_args["signed_transaction"]
        assert count_signatures(signed) == count_signatures(unsigned_transaction) + 1


class TestProcessBatch:
    """Test Settlement.process_batch."""

    def test_empty_round_shape(self) -> None:
        result = make_settlement(FakePayoutGateway()).process_batch()

        assert result.signature == ""
        assert result.status == "paid"
        assert result.viewer_url == ""
        assert result.payouts == []
        assert result.total_amount == 0
        assert result.has_more is False

    def test_failure_raises_original_error(self) -> None:
        gateway = FakePayoutGateway()
        error = RemoteCallError("unauthorized", status_code=401)
        gateway.set_error("list_pending", error)

        with pytest.raises(RemoteCallError) as exc_info:
            make_settlement(gateway).process_batch()

        assert exc_info.value is error


class TestRun:
    """Test Settlement.run."""

    def test_stops_when_has_more_is_false(self) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(ids("a", 10), has_more=True)
        gateway.queue_build("tx-a", total_amount=10)
        gateway.queue_broadcast(ids("a", 10), signature="sig-a")
        gateway.queue_pending(ids("b", 3), has_more=False)
        gateway.queue_build("tx-b", total_amount=3)
        gateway.queue_broadcast(ids("b", 3), signature="sig-b")

        rounds = make_settlement(gateway).run()

        assert [r.signature for r in rounds] == ["sig-a", "sig-b"]
        assert gateway.call_names().count("list_pending") == 2

    def test_empty_final_listing_is_not_recorded(self) -> None:
        """has_more of true, true, then an empty page gives two rounds."""
        gateway = FakePayoutGateway()
        for prefix in ("a", "b"):
            gateway.queue_pending(ids(prefix, 10), has_more=True)
            gateway.queue_build(f"tx-{prefix}")
            gateway.queue_broadcast(ids(prefix, 10), signature=f"sig-{prefix}")

        rounds = make_settlement(gateway).run()

        assert len(rounds) == 2
        assert gateway.call_names().count("list_pending") == 3
        assert gateway.call_names().count("build_batch") == 2

    def test_over_long_page_keeps_settling_the_remainder(self) -> None:
        """Ids cut from a page of 12 are picked up by another round."""
        gateway = FakePayoutGateway()
        gateway.queue_pending(ids("po", 12), has_more=False)
        gateway.queue_build("tx-1")
        gateway.queue_broadcast(ids("po", 12)[:10], signature="sig-1")
        gateway.queue_pending(ids("po", 12)[10:], has_more=False)
        gateway.queue_build("tx-2")
        gateway.queue_broadcast(ids("po", 12)[10:], signature="sig-2")

        rounds = make_settlement(gateway).run()

        assert [r.signature for r in rounds] == ["sig-1", "sig-2"]
        assert rounds[0].has_more is True
        assert sum(len(r.payouts) for r in rounds) == 12
        assert gateway.call_names().count("list_pending") == 2

    def test_nothing_pending_returns_no_rounds(self) -> None:
        gateway = FakePayoutGateway()
        assert make_settlement(gateway).run() == []
        assert gateway.call_names() == ["list_pending"]

    def test_failure_stops_loop_and_keeps_completed_rounds(self) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(ids("a", 10), has_more=True)
        gateway.queue_build("tx-a")
        gateway.queue_broadcast(ids("a", 10), signature="sig-a")
        gateway.queue_pending(ids("b", 2), has_more=False)
        gateway.queue_build("tx-b")
        error = RemoteCallError("blockhash expired", status_code=400)
        settlement = make_settlement(gateway)

        # Fail the second broadcast only
        original = gateway.broadcast_batch
        broadcasts = []

        def broadcast_then_fail(*args, **kwargs):
            broadcasts.append(args)
            if len(broadcasts) == 2:
                raise error
            return original(*args, **kwargs)

        gateway.broadcast_batch = broadcast_then_fail

        with pytest.raises(RemoteCallError) as exc_info:
            settlement.run()

        assert exc_info.value is error
        assert [r.signature for r in settlement.rounds] == ["sig-a"]
        assert gateway.call_names().count("list_pending") == 2


class TestScopedOptions:
    """Test idempotency key scoping."""

    def test_no_options_passes_through(self) -> None:
        assert scoped_options(None, RoundStage.BUILD, ["po_1"]) is None

    def test_options_without_key_pass_through(self) -> None:
        options = RequestOptions(zoneless_account="acct_1")
        assert scoped_options(options, RoundStage.BROADCAST, ["po_1"]) is options

    def test_build_drops_idempotency_key(self) -> None:
        """Each build must fetch a fresh blockhash, never a cached batch."""
        options = RequestOptions(idempotency_key="run-1", zoneless_account="acct_1")

        build = scoped_options(options, RoundStage.BUILD, ["po_1"])

        assert build.idempotency_key is None
        assert build.zoneless_account == "acct_1"
        assert options.idempotency_key == "run-1"

    def test_broadcast_key_is_scoped(self) -> None:
        options = RequestOptions(idempotency_key="run-1")
        broadcast = scoped_options(options, RoundStage.BROADCAST, ["po_1"])
        assert broadcast.idempotency_key.startswith("run-1:broadcast:")

    def test_key_differs_per_payout_set(self) -> None:
        options = RequestOptions(idempotency_key="run-1")
        first = scoped_options(options, RoundStage.BROADCAST, ["po_1"])
        second = scoped_options(options, RoundStage.BROADCAST, ["po_2"])
        assert first.idempotency_key != second.idempotency_key

    def test_key_ignores_id_order(self) -> None:
        options = RequestOptions(idempotency_key="run-1")
        first = scoped_options(options, RoundStage.BROADCAST, ["po_1", "po_2"])
        second = scoped_options(options, RoundStage.BROADCAST, ["po_2", "po_1"])
        assert first.idempotency_key == second.idempotency_key

    def test_rounds_of_a_run_get_distinct_broadcast_keys(self) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_1"], has_more=True)
        gateway.queue_build("tx-1")
        gateway.queue_broadcast(["po_1"])
        gateway.queue_pending(["po_2"])
        gateway.queue_build("tx-2")
        gateway.queue_broadcast(["po_2"])

        make_settlement(gateway, options=RequestOptions(idempotency_key="run-1")).run()

        build_keys = [
            args["options"].idempotency_key
            for name, args in gateway.calls
            if name == "build_batch"
        ]
        broadcast_keys = [
            args["options"].idempotency_key
            for name, args in gateway.calls
            if name == "broadcast_batch"
        ]
        assert build_keys == [None, None]
        assert len(set(broadcast_keys)) == 2

    def test_retry_after_failed_broadcast_rebuilds_without_key(self) -> None:
        """A retry with the same caller key gets a new batch, same broadcast key."""
        gateway = FakePayoutGateway()
        options = RequestOptions(idempotency_key="run-1")
        for attempt in range(2):
            gateway.queue_pending(["po_1", "po_2"])
            gateway.queue_build(f"tx-{attempt}")

        for _ in range(2):
            gateway.set_error("broadcast_batch", RemoteCallError("blockhash expired"))
            with pytest.raises(RemoteCallError):
                make_settlement(gateway, options=options).run()

        builds = [args for name, args in gateway.calls if name == "build_batch"]
        broadcasts = [args for name, args in gateway.calls if name == "broadcast_batch"]
        assert [b["options"].idempotency_key for b in builds] == [None, None]
        assert [b["signed_transaction"] for b in broadcasts] == [
            "signed(tx-0)",
            "signed(tx-1)",
        ]
        assert broadcasts[0]["options"].idempotency_key == broadcasts[1]["options"].idempotency_key


class TestSettlementLogging:
    """Test round logging."""

    def test_settled_round_logged_at_info(self, caplog: pytest.LogCaptureFixture) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_1"])
        gateway.queue_build("unsigned-tx")
        gateway.queue_broadcast(["po_1"], signature="5abc")

        with caplog.at_level(logging.INFO, logger="zoneless.application.settlement"):
            make_settlement(gateway).process_batch()

        assert "Settled 1 payouts" in caplog.text
        assert "5abc" in caplog.text

    def test_failure_logged_at_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        gateway = FakePayoutGateway()
        gateway.set_error("list_pending", RemoteCallError("down"))

        with caplog.at_level(logging.WARNING, logger="zoneless.application.settlement"):
            with pytest.raises(RemoteCallError):
                make_settlement(gateway).process_batch()

        assert "failed at list" in caplog.text

    def test_secret_key_never_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        gateway = FakePayoutGateway()
        gateway.queue_pending(["po_1"])
        gateway.queue_build("unsigned-tx")
        gateway.queue_broadcast(["po_1"])

        with caplog.at_level(logging.DEBUG):
            make_settlement(gateway).run()

        assert SECRET_KEY not in caplog.text
