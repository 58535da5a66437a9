"""
zkapp_cli.rpc
=============

Network transport for the deploy pipeline: an async GraphQL-over-HTTP client
with a hard per-request deadline (see :mod:`zkapp_cli.rpc.graphql`).
"""

from .graphql import DEFAULT_TIMEOUT, GraphQLClient  # noqa: F401

__all__ = ["GraphQLClient", "DEFAULT_TIMEOUT"]
