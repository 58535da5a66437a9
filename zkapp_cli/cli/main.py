"""
zkapp_cli.cli.main
==================

`zk`: deploy zkApp smart contracts from a project directory.

Commands
--------
- `deploy ALIAS [--yes]`   build, sign and send a deploy for a configured alias
- `aliases`                list the aliases in config.json
- `version`                print the CLI version

Examples
--------
    $ zk deploy testnet
    $ zk deploy testnet --yes          # non-interactive confirmation
    $ zk -v deploy testnet             # with INFO logging on stderr
    $ zk aliases --project-dir ./my-zkapp

Configuration
-------------
- Log level        : `--log-level`, `-v`, or env `ZK_LOG_LEVEL` (default: WARNING)
- GraphQL timeout  : `--timeout` or env `ZK_GRAPHQL_TIMEOUT` seconds (default: 20)
- Build glob       : `--build-glob` or env `ZK_BUILD_GLOB` (default: build/**/*.py)
- Explorer link    : env `ZK_EXPLORER_TX_URL` (template with `{hash}`)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import ProjectConfig, Settings, find_project_root
from ..errors import ZkCliError
from ..log import configure_logging
from ..ui import aliases_table
from ..version import version as version_string
from . import deploy as deploy_cmd

app = typer.Typer(
    name="zk",
    help="Deploy zkApp smart contracts to a GraphQL network.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "Ctx"]


@dataclass
class Ctx:
    settings: Settings
    console: Console


@app.callback()
def _root(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log INFO messages to stderr."),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR).",
        envvar="ZK_LOG_LEVEL",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        min=0.001,
        help="GraphQL request timeout in seconds.",
        envvar="ZK_GRAPHQL_TIMEOUT",
    ),
) -> None:
    """
    Set logging and effective settings for this CLI process.
    """
    configure_logging(log_level or ("INFO" if verbose else None))
    try:
        settings = Settings.with_overrides(Settings.from_env(), graphql_timeout=timeout)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    ctx.obj = Ctx(settings=settings, console=Console())


@app.command("version")
def version() -> None:
    """Print the CLI version."""
    typer.echo(f"zk {version_string()}")


@app.command("aliases")
def aliases(
    ctx: typer.Context,
    project_dir: Optional[Path] = typer.Option(
        None, "--project-dir", "-p", help="Project directory (default: nearest with config.json)."
    ),
) -> None:
    """Show the deploy aliases configured in config.json."""
    c: Ctx = ctx.obj
    try:
        cfg = ProjectConfig.load(find_project_root(project_dir))
    except ZkCliError as e:
        c.console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)
    rows = []
    for name in cfg.alias_names():
        raw = cfg.data[cfg.aliases_key].get(name) or {}
        rows.append((name, str(raw.get("url") or ""), raw.get("smartContract")))
    c.console.print(aliases_table(rows))


deploy_cmd.register(app)


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.

    Typer runs in standalone mode and reports usage errors, aborts and
    `typer.Exit` itself; we only turn its final SystemExit into a return value.
    """
    try:
        app(prog_name="zk", args=argv)
    except SystemExit as e:
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
    return 0


def entrypoint() -> None:  # pragma: no cover - console script
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    entrypoint()
