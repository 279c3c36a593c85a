"""Shared pytest fixtures for signing and settlement tests."""

from __future__ import annotations

import base64

import base58
import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction


def build_unsigned_transaction(fee_payer: Keypair, platform: Keypair) -> str:
    """Base64 transaction paid by ``fee_payer`` that also needs ``platform``."""
    ix = transfer(
        TransferParams(
            from_pubkey=platform.pubkey(),
            to_pubkey=Keypair().pubkey(),
            lamports=1_000,
        )
    )
    message = Message.new_with_blockhash([ix], fee_payer.pubkey(), Hash.default())
    tx = Transaction.new_unsigned(message)
    return base64.b64encode(bytes(tx)).decode("utf-8")


@pytest.fixture
def platform_keypair() -> Keypair:
    """Generate the platform wallet keypair used to co-sign batches."""
    return Keypair()


@pytest.fixture
def fee_payer_keypair() -> Keypair:
    """Generate the server-side fee payer keypair."""
    return Keypair()


@pytest.fixture
def platform_secret_key(platform_keypair: Keypair) -> str:
    """Platform secret key as a base58 string."""
    return base58.b58encode(bytes(platform_keypair)).decode("ascii")


@pytest.fixture
def unsigned_transaction(fee_payer_keypair: Keypair, platform_keypair: Keypair) -> str:
    """Unsigned batch transaction requiring both fee payer and platform."""
    return build_unsigned_transaction(fee_payer_keypair, platform_keypair)
