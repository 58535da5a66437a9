"""
zkapp_cli.cli
=============

Command-line interface for zkapp-cli, exposed as the console script `zk`.

    >>> from zkapp_cli.cli import main
    >>> main(["deploy", "testnet", "--yes"])
"""

from .main import app, main

__all__ = ["app", "main"]
