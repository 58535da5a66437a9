"""
zkapp_cli.wallet
================

Key material for signing deploys (Ed25519 key file at an alias' `keyPath`).
"""

from .keys import KeyPair, load_key_file, parse_private_key  # noqa: F401

__all__ = ["KeyPair", "load_key_file", "parse_private_key"]
