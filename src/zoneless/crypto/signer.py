"""Offline signing of batch payout transactions.

The platform wallet co-signs the unsigned transaction built by the server;
nothing here touches the network and the secret key is never logged.
"""

from __future__ import annotations

import base64
import binascii
import json

import base58
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction import Transaction

from ..domain.errors import DecodeError, KeypairMismatchError, MalformedTransactionError
from ..infrastructure.timing import log_timing

KEYPAIR_LENGTH = 64


def _decode_secret_key(secret_key: str) -> bytes:
    """Decode a base58 secret key or a Solana CLI style JSON byte array."""
    text = secret_key.strip()
    if not text:
        raise DecodeError("Secret key is empty")
    if text.startswith("["):
        try:
            raw = bytes(json.loads(text))
        except (ValueError, TypeError) as e:
            raise DecodeError("Secret key is not a valid JSON byte array") from e
    else:
        try:
            raw = base58.b58decode(text)
        except ValueError as e:
            raise DecodeError("Secret key is not valid base58") from e
    if len(raw) != KEYPAIR_LENGTH:
        raise DecodeError(f"Secret key must decode to {KEYPAIR_LENGTH} bytes, got {len(raw)}")
    return raw


def load_keypair(secret_key: str) -> Keypair:
    raw = _decode_secret_key(secret_key)
    try:
        return Keypair.from_bytes(raw)
    except ValueError as e:
        raise DecodeError("Secret key bytes are not a valid ed25519 keypair") from e


def decode_transaction(encoded: str) -> Transaction:
    """Decode a base64 wire transaction into a ``Transaction``."""
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError("Transaction is not valid base64") from e
    try:
        return Transaction.from_bytes(raw)
    except Exception as e:
        raise MalformedTransactionError("Transaction bytes could not be parsed") from e


def encode_transaction(tx: Transaction) -> str:
    return base64.b64encode(bytes(tx)).decode("utf-8")


def count_signatures(encoded: str) -> int:
    """Number of filled signature slots in a base64 transaction."""
    tx = decode_transaction(encoded)
    empty = Signature.default()
    return sum(1 for sig in tx.signatures if sig != empty)


@log_timing("sign_transaction")
def sign_transaction(unsigned_transaction: str, secret_key: str) -> str:
    """Attach the platform signature to a base64 transaction.

    Args:
        unsigned_transaction: Base64 wire transaction returned by the build endpoint
        secret_key: Platform wallet secret key (base58, or JSON byte array)

    Returns:
        The base64 transaction with exactly one more signature attached.
    """
    keypair = load_keypair(secret_key)
    tx = decode_transaction(unsigned_transaction)
    try:
        tx.partial_sign([keypair], tx.message.recent_blockhash)
    except Exception as e:
        raise KeypairMismatchError(
            f"Key {keypair.pubkey()} is not a required signer of this transaction"
        ) from e
    return encode_transaction(tx)
