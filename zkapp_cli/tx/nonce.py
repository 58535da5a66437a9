"""
Resolve the fee payer's current nonce.

The network is asked first (one bounded GraphQL query). Anything short of a
usable nonce (timeout, HTTP/GraphQL error, unknown account) falls back to
asking the operator, who may be re-asked until the answer is a non-negative
integer or they cancel.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..errors import GraphQLError
from ..prompts import Prompter, ask, non_negative_integer, required
from ..rpc.graphql import GraphQLClient

log = logging.getLogger(__name__)

ACCOUNT_QUERY = """
query Account($publicKey: PublicKey!) {
  account(publicKey: $publicKey) {
    publicKey
    nonce
  }
}
"""

__all__ = ["ACCOUNT_QUERY", "parse_nonce", "fetch_nonce", "resolve_nonce"]


def parse_nonce(value: Any) -> Optional[int]:
    """Accept an int or a decimal string >= 0; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        return int(value.strip())
    return None


async def fetch_nonce(client: GraphQLClient, public_key: str) -> Optional[int]:
    """Network nonce for `public_key`, or None when it cannot be determined."""
    try:
        data = await client.execute(ACCOUNT_QUERY, {"publicKey": public_key})
    except GraphQLError as e:
        log.warning("account nonce query failed (%s): %s", e.classification, e)
        return None
    account = data.get("account")
    if not isinstance(account, dict):
        log.info("account %s is unknown to the network", public_key)
        return None
    return parse_nonce(account.get("nonce"))


async def resolve_nonce(client: GraphQLClient, public_key: str, prompter: Prompter) -> int:
    nonce = await fetch_nonce(client, public_key)
    if nonce is not None:
        return nonce
    answer = ask(
        prompter,
        "Please confirm the nonce of the account:",
        [required("Nonce"), non_negative_integer("Nonce")],
    )
    return int(answer)
