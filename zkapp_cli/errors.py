"""
Typed error classes for zkapp-cli.

These are raised by the config loader, contract discovery/resolution, the
transaction builder, the signer and the GraphQL transport so callers can catch
specific failure modes while still being able to catch the base `ZkCliError`.

Fatal/local errors carry an operator-facing message plus an optional `hint`
line that the CLI prints underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = [
    "ZkCliError",
    "ConfigError",
    "ConfigNotFound",
    "ConfigInvalid",
    "AliasNotFound",
    "AliasUrlMissing",
    "NoContractsFound",
    "BuildOutputError",
    "ContractNotFound",
    "TransactionBuildError",
    "KeyFileError",
    "SigningError",
    "PromptCancelled",
    "SelectionCancelled",
    "GraphQLError",
    "GraphQLTransportError",
    "GraphQLHttpError",
    "GraphQLResponseError",
]


class ZkCliError(Exception):
    """Base class for all zkapp-cli errors."""

    def __init__(self, message: str, *, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


# --- configuration ------------------------------------------------------------


class ConfigError(ZkCliError):
    """config.json is missing, unreadable, or has the wrong shape."""


class ConfigNotFound(ConfigError):
    pass


class ConfigInvalid(ConfigError):
    pass


class AliasNotFound(ZkCliError):
    def __init__(self, alias: str) -> None:
        super().__init__(
            "Network name not found in config.json.",
            hint="Add it under the `networks` key of config.json, or run `zk aliases` to list the configured ones.",
        )
        self.alias = alias


class AliasUrlMissing(ZkCliError):
    def __init__(self, alias: str) -> None:
        super().__init__(
            "No 'url' property is specified for this network in config.json.",
            hint="Please correct your config.json and try again.",
        )
        self.alias = alias


# --- contracts ------------------------------------------------------------------


class NoContractsFound(ZkCliError):
    def __init__(self, pattern: str) -> None:
        super().__init__(
            f"No smart contracts were found in the build output ({pattern}).",
            hint="Build your project and make sure your contract classes extend SmartContract.",
        )
        self.pattern = pattern


class BuildOutputError(ZkCliError):
    """build/build.json could not be written."""


class ContractNotFound(ZkCliError):
    def __init__(self, name: str, *, hint: Optional[str] = None) -> None:
        super().__init__(
            f'Failed to find the "{name}" smart contract in your build directory.',
            hint=hint
            or "Please confirm that your config.json contains the name of the smart "
            "contract that you desire to deploy to this network alias.",
        )
        self.name = name


class TransactionBuildError(ZkCliError):
    """Contract compilation or deploy-transaction construction failed."""


# --- keys & signing -------------------------------------------------------------


class KeyFileError(ZkCliError):
    """The key file at `keyPath` is missing, unreadable, or holds a bad key."""


class SigningError(ZkCliError):
    pass


# --- operator cancellation ------------------------------------------------------


class PromptCancelled(ZkCliError):
    """The operator aborted an interactive prompt (Ctrl-C / EOF)."""

    def __init__(self, message: str = "Cancelled.") -> None:
        super().__init__(message)


class SelectionCancelled(PromptCancelled):
    def __init__(self) -> None:
        super().__init__("Smart contract selection cancelled.")


# --- GraphQL transport ----------------------------------------------------------


class GraphQLError(ZkCliError):
    """Base for failures talking to the GraphQL endpoint."""

    classification = "transport"


class GraphQLTransportError(GraphQLError):
    """Timeout, DNS failure, refused connection, or an unparseable body."""

    classification = "transport"


@dataclass(eq=False)
class GraphQLHttpError(GraphQLError):
    """The endpoint answered with a non-success HTTP status."""

    status_code: int
    status_text: str
    errors: Optional[Any] = None

    classification = "http"

    def __post_init__(self) -> None:
        ZkCliError.__init__(self, f"HTTP {self.status_code} {self.status_text}".rstrip())

    def __str__(self) -> str:
        base = f"HTTP {self.status_code} {self.status_text}".rstrip()
        return f"{base}: {self.errors}" if self.errors else base


@dataclass(eq=False)
class GraphQLResponseError(GraphQLError):
    """HTTP success, but the body carries GraphQL `errors`."""

    errors: Any

    classification = "rejected"

    def __post_init__(self) -> None:
        ZkCliError.__init__(self, _errors_text(self.errors))

    def __str__(self) -> str:
        return _errors_text(self.errors)


def _errors_text(errors: Any) -> str:
    if isinstance(errors, list):
        msgs = [str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors]
        return "; ".join(msgs) or "Unknown GraphQL error"
    return str(errors)
