"""
zkapp_cli.cli.deploy
====================

`zk deploy ALIAS`: deploy the project's contract to a configured alias.

Typical usage
-------------
    $ zk deploy testnet
    $ zk deploy testnet --yes --project-dir ./my-zkapp

This command:
1) Scans the build output for contract classes and writes build/build.json,
2) Picks the contract for the alias (config.json, single match, or a prompt),
3) Compiles the verification key and builds the deploy transaction,
4) Looks up the fee payer nonce (or asks for it), signs locally,
5) Asks for confirmation (skipped with --yes) and sends it once.

Exit status is 0 only when the transaction was accepted by the endpoint.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from ..config import Settings
from ..pipeline import DeployRequest, run_deploy
from ..prompts import ConsolePrompter

__all__ = ["register", "deploy"]


def deploy(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Deploy alias from config.json (e.g. testnet)."),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Respond `yes` to all confirmation prompts. Allows running non-interactively within a script.",
    ),
    project_dir: Optional[Path] = typer.Option(
        None, "--project-dir", "-p", help="Project directory (default: nearest with config.json)."
    ),
    build_glob: Optional[str] = typer.Option(
        None, "--build-glob", help="Glob for compiled contract modules, relative to the project.",
    ),
) -> None:
    """Deploy or redeploy a zkApp."""
    c = ctx.obj
    settings = Settings.with_overrides(c.settings, build_glob=build_glob)
    request = DeployRequest(alias=alias, yes=yes, project_dir=project_dir, settings=settings)
    result = asyncio.run(
        run_deploy(request, prompter=ConsolePrompter(c.console), console=c.console)
    )
    if result.exit_code:
        raise typer.Exit(result.exit_code)


def register(app: typer.Typer) -> None:
    app.command("deploy")(deploy)
