"""
zkapp_cli.wallet.keys
=====================

Key material for deploys: the JSON key file at an alias' `keyPath`.

File shape (written by the key-generation step, read here)::

    {"privateKey": "<64 hex chars, Ed25519 seed>", "publicKey": "<64 hex chars>"}

Only `privateKey` is consumed; the public key (fee payer / contract address) is
always re-derived from it. Secret bytes never appear in `repr()` or logs.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ..errors import KeyFileError

__all__ = ["KeyPair", "load_key_file", "parse_private_key"]


def _strip_hex(s: str) -> str:
    s = s.strip().lower()
    return s[2:] if s.startswith("0x") else s


def parse_private_key(value: str) -> Ed25519PrivateKey:
    """Hex seed (with or without 0x) -> Ed25519 private key."""
    try:
        seed = bytes.fromhex(_strip_hex(value))
    except (ValueError, AttributeError) as e:
        raise KeyFileError("privateKey must be hex-encoded.") from e
    if len(seed) != 32:
        raise KeyFileError(f"privateKey must be 32 bytes, got {len(seed)}.")
    return Ed25519PrivateKey.from_private_bytes(seed)


@dataclass(frozen=True)
class KeyPair:
    private_key: Ed25519PrivateKey = field(repr=False)

    @classmethod
    def from_hex(cls, private_key_hex: str) -> "KeyPair":
        return cls(parse_private_key(private_key_hex))

    @property
    def public_key_bytes(self) -> bytes:
        return self.private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @property
    def public_key(self) -> str:
        """Hex public key; doubles as the fee-payer / zkApp address."""
        return self.public_key_bytes.hex()

    def sign(self, message: bytes) -> bytes:
        return self.private_key.sign(message)


def load_key_file(path: Path) -> KeyPair:
    """Read the key file once; every failure is a KeyFileError."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise KeyFileError(
            f"Failed to find the zkApp private key at {path}.",
            hint="Please make sure your config.json has the correct 'keyPath' property.",
        ) from e
    except (OSError, ValueError) as e:
        raise KeyFileError(f"Unable to read key file {path}: {e.__class__.__name__}") from e
    if not isinstance(raw, dict) or not raw.get("privateKey"):
        raise KeyFileError(f"Key file {path} has no 'privateKey'.")
    return KeyPair.from_hex(str(raw["privateKey"]))
