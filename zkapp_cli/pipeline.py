"""
zkapp_cli.pipeline
==================

The deploy pipeline. One call deploys one contract to one alias:

    discover -> resolve -> build -> nonce -> sign -> confirm -> submit

Steps run strictly in order, each finishing before the next starts. The only
network traffic is the nonce query and the submission, each bounded by the
GraphQL client's deadline. Local failures (config, alias, contract, key,
compilation) stop the run before anything is sent.

`run_deploy` never exits the process: it returns a `DeployResult` and leaves
the exit code to the CLI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import ModuleType
from typing import List, Optional, Union

from rich.console import Console
from rich.markup import escape

from .config import DeployAlias, ProjectConfig, Settings, find_project_root
from .contracts.discovery import find_contract_file, find_smart_contracts, write_build_manifest
from .contracts.resolver import ResolutionSource, persist_choice, resolve_contract
from .errors import ConfigInvalid, ContractNotFound, PromptCancelled, ZkCliError
from .gate import ConfirmationGate, GateState, confirm_submission
from .prompts import ConsolePrompter, Prompter, ask, non_negative, numeric, plain_decimal, required
from .rpc.graphql import GraphQLClient
from .tx.build import build_deploy_intent, load_contract_module, shutdown_contract_module
from .tx.nonce import resolve_nonce
from .tx.send import SubmissionError, SubmissionResult, SubmissionSuccess, submit_transaction
from .tx.sign import sign_transaction
from .ui import step
from .wallet.keys import load_key_file

log = logging.getLogger(__name__)

__all__ = ["DeployRequest", "DeployStatus", "DeployResult", "run_deploy"]


@dataclass
class DeployRequest:
    alias: str
    yes: bool = False
    project_dir: Optional[Path] = None
    settings: Settings = field(default_factory=Settings.from_env)


class DeployStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ABORTED = "aborted"


@dataclass
class DeployResult:
    status: DeployStatus
    alias: str
    contract: Optional[str] = None
    submission: Optional[SubmissionResult] = None
    error: Optional[ZkCliError] = None
    explorer_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is DeployStatus.SUCCEEDED

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


_FEE_RULES = (required("Fee"), numeric("Fee"), non_negative("Fee"), plain_decimal("Fee"))


def _configured_fee(alias: DeployAlias) -> Optional[str]:
    """The alias' `fee`, validated; None when config.json leaves it out."""
    if alias.fee is None:
        return None
    fee = alias.fee.strip()
    for rule in _FEE_RULES:
        err = rule(fee)
        if err:
            raise ConfigInvalid(f"Invalid 'fee' for alias '{alias.name}' in config.json: {err}")
    return fee


async def run_deploy(
    request: DeployRequest,
    *,
    prompter: Optional[Prompter] = None,
    console: Optional[Console] = None,
    client: Optional[GraphQLClient] = None,
) -> DeployResult:
    """
    Deploy the alias' contract. Every expected failure is folded into the
    returned result; only programming errors propagate.
    """
    console = console or Console()
    prompter = prompter or ConsolePrompter(console)
    alias_name = request.alias.lower()
    result = DeployResult(status=DeployStatus.FAILED, alias=alias_name)
    loaded: List[ModuleType] = []
    try:
        await _deploy(request, result, prompter, console, client, loaded)
    except PromptCancelled as e:
        result.status = DeployStatus.ABORTED
        result.error = e
        console.print("  Aborted. Transaction not sent.")
    except ZkCliError as e:
        result.status = DeployStatus.FAILED
        result.error = e
        console.print(f"  [red]{escape(e.message)}[/red]")
        if e.hint:
            console.print(f"  [red]{escape(e.hint)}[/red]")
    finally:
        for module in loaded:
            await shutdown_contract_module(module)
    return result


async def _deploy(
    request: DeployRequest,
    result: DeployResult,
    prompter: Prompter,
    console: Console,
    client: Optional[GraphQLClient],
    loaded: List[ModuleType],
) -> None:
    settings = request.settings
    root = find_project_root(request.project_dir)
    config = ProjectConfig.load(root)
    alias = config.get_alias(result.alias)
    fee = _configured_fee(alias)

    with step(console, "Generate build.json"):
        contracts = find_smart_contracts(settings.build_glob, root, settings.contract_base)
        write_build_manifest(root / "build", contracts)

    resolution = resolve_contract(config, alias.name, contracts, prompter, pattern=settings.build_glob)
    name = resolution.name
    result.contract = name
    if resolution.source is ResolutionSource.CONFIG:
        console.print(
            f"  The '{name}' smart contract will be used\n"
            "  for this network as specified in config.json."
        )
    elif resolution.source is ResolutionSource.SINGLE:
        console.print(f"  Only one smart contract exists in the project: {name}")
    if persist_choice(config, alias.name, name):
        console.print(
            "  Your config.json was updated to always use this\n"
            "  smart contract when deploying to this network."
        )

    source = resolution.path or find_contract_file(contracts, name)
    if source is None:
        raise ContractNotFound(name)
    key = load_key_file(alias.resolved_key_path(root))

    module = load_contract_module(source, name)
    loaded.append(module)
    with step(console, "Generate verification key and build transaction"):
        intent = await build_deploy_intent(module, name, key)

    if fee is None:
        fee = ask(prompter, "Set transaction fee to deploy (in MINA):", _FEE_RULES)

    gql = client or GraphQLClient(alias.url, timeout=settings.graphql_timeout)
    try:
        nonce = await resolve_nonce(gql, key.public_key, prompter)
        log.info("fee payer %s nonce %d", key.public_key, nonce)

        with step(console, "Sign transaction"):
            signed = sign_transaction(intent, nonce, fee, key)

        gate = ConfirmationGate(auto_confirm=request.yes)
        summary = [("Network", alias.name), ("Url", alias.url), ("Smart Contract", name)]
        if confirm_submission(gate, prompter, summary) is not GateState.CONFIRMED:
            raise PromptCancelled("Transaction not confirmed.")

        with step(console, "Send to network"):
            submission = await submit_transaction(gql, signed)
    finally:
        if client is None:
            await gql.aclose()

    _report(result, submission, settings, console)


def _report(
    result: DeployResult,
    submission: Union[SubmissionSuccess, SubmissionError],
    settings: Settings,
    console: Console,
) -> None:
    result.submission = submission
    if isinstance(submission, SubmissionError):
        result.status = DeployStatus.FAILED
        console.print(f"  [red]{escape(str(submission))}[/red]")
        console.print("  [red]Failed to send transaction to relayer. Please try again.[/red]")
        return
    result.status = DeployStatus.SUCCEEDED
    result.explorer_url = settings.explorer_url(submission.hash)
    console.print(
        "\n[green]Success! Deploy transaction sent.\n"
        "\nNext step:\n"
        "  Your smart contract will be live (or updated)\n"
        "  as soon as the transaction is included in a block:\n"
        f"  {result.explorer_url}[/green]"
    )
