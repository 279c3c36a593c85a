"""Test doubles shared across the test suite."""

from .fake_payout_gateway import FakePayoutGateway, make_payout

__all__ = [
    "FakePayoutGateway",
    "make_payout",
]
