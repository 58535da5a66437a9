"""
zkapp_cli.contracts
===================

Finding and choosing the contract a deploy ships.

Submodules
----------
- discovery : Lexical scan of the build output for `class Name(SmartContract)`.
- resolver  : Pick one contract per alias (config, single match, or operator
              selection) and persist the choice in config.json.
"""

from .discovery import (  # noqa: F401
    DiscoveredContract,
    find_contract_file,
    find_smart_contracts,
    scan_source,
    write_build_manifest,
)
from .resolver import Resolution, ResolutionSource, persist_choice, resolve_contract  # noqa: F401

__all__ = [
    "DiscoveredContract",
    "find_contract_file",
    "find_smart_contracts",
    "scan_source",
    "write_build_manifest",
    "Resolution",
    "ResolutionSource",
    "persist_choice",
    "resolve_contract",
]
