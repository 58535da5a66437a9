"""
Console helpers shared by the pipeline and the CLI: a `step` progress line and
the summary tables shown before sending a transaction.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table

__all__ = ["step", "summary_table", "aliases_table"]


@contextmanager
def step(console: Console, title: str) -> Iterator[None]:
    """
    Show a spinner while the block runs, then a ✔ or ✖ line. Exceptions are
    re-raised untouched; the caller decides what a failure means.
    """
    try:
        with console.status(f"{title}...", spinner="dots"):
            yield
    except BaseException:
        console.print(f"[red]✖[/red] {title}")
        raise
    console.print(f"[green]✔ {title}[/green]")


def summary_table(rows: Sequence[Tuple[str, str]]) -> Table:
    table = Table(box=box.SQUARE, show_header=False, padding=(0, 1))
    table.add_column(style="bold")
    table.add_column()
    for key, value in rows:
        table.add_row(key, value)
    return table


def aliases_table(rows: Sequence[Tuple[str, str, Optional[str]]]) -> Table:
    table = Table(title="Deploy aliases in config.json", box=box.SQUARE)
    table.add_column("Name", style="bold")
    table.add_column("Url")
    table.add_column("Smart Contract")
    if not rows:
        table.add_row("[dim]None found[/dim]", "", "")
    for name, url, contract in rows:
        table.add_row(name, url, contract or "[dim](never deployed)[/dim]")
    return table
