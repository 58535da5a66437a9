"""
zkapp_cli.tx.sign
=================

Local, deterministic signing of a deploy.

Fees are typed by people in MINA ("0.1"). The wire wants nanomina, and we
scale by appending nine zero characters to the text rather than multiplying a
float, so no value is ever rounded.

Sign-bytes are the canonical CBOR encoding (RFC 8949 deterministic ordering,
via ``cbor2``) of::

    {"feePayer": {"publicKey", "fee", "nonce", "memo"}, "parties": <payload>}

signed with the fee payer's Ed25519 key (``cryptography``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

import cbor2
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from ..errors import SigningError
from ..wallet.keys import KeyPair
from .build import UnsignedIntent

NANOMINA_ZEROS = "000000000"

__all__ = [
    "NANOMINA_ZEROS",
    "SignedTransaction",
    "to_nanomina",
    "sign_bytes",
    "sign_transaction",
    "verify_transaction",
]


def to_nanomina(fee: str) -> str:
    """'0.05' -> '0.05000000000'; '1' -> '1000000000'. Text in, text out."""
    fee = fee.strip()
    if not fee:
        raise ValueError("fee is empty")
    return f"{fee}{NANOMINA_ZEROS}"


@dataclass(frozen=True)
class SignedTransaction:
    fee_payer: str
    nonce: int
    fee: str
    parties: Dict[str, Any] = field(repr=False)
    signature: str
    memo: str = ""

    def fee_payer_body(self) -> Dict[str, Any]:
        return {
            "publicKey": self.fee_payer,
            "fee": self.fee,
            "nonce": str(self.nonce),
            "memo": self.memo,
        }

    def to_input(self) -> Dict[str, Any]:
        """Mutation input: fee payer with its authorization, plus the parties payload."""
        return {
            "parties": {
                "feePayer": {"body": self.fee_payer_body(), "authorization": self.signature},
                "otherParties": self.parties,
            }
        }


def sign_bytes(fee_payer_body: Dict[str, Any], parties: Dict[str, Any]) -> bytes:
    try:
        return cbor2.dumps({"feePayer": fee_payer_body, "parties": parties}, canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise SigningError(f"Transaction payload cannot be encoded: {e}") from e


def sign_transaction(
    intent: UnsignedIntent,
    nonce: int,
    fee: str,
    key: KeyPair,
    memo: str = "",
) -> SignedTransaction:
    if nonce < 0:
        raise SigningError(f"nonce must be non-negative, got {nonce}")
    unsigned = SignedTransaction(
        fee_payer=key.public_key,
        nonce=int(nonce),
        fee=to_nanomina(fee),
        parties=intent.parties,
        signature="",
        memo=memo,
    )
    sig = key.sign(sign_bytes(unsigned.fee_payer_body(), intent.parties))
    return SignedTransaction(
        fee_payer=unsigned.fee_payer,
        nonce=unsigned.nonce,
        fee=unsigned.fee,
        parties=unsigned.parties,
        signature=sig.hex(),
        memo=memo,
    )


def verify_transaction(tx: SignedTransaction) -> bool:
    """True when `tx.signature` was made by `tx.fee_payer` over its contents."""
    try:
        pub = Ed25519PublicKey.from_public_bytes(bytes.fromhex(tx.fee_payer))
        pub.verify(bytes.fromhex(tx.signature), sign_bytes(tx.fee_payer_body(), tx.parties))
    except (InvalidSignature, ValueError):
        return False
    return True
