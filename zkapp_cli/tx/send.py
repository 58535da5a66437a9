"""
zkapp_cli.tx.send
=================

Submit a signed deploy with a single `sendZkapp` mutation and classify the
outcome. There is no retry at any classification; the caller reports and
stops.

Outcomes
--------
- SubmissionSuccess(hash, id)              2xx and a transaction hash
- SubmissionError("http", ...)             non-2xx status
- SubmissionError("transport", ...)        timeout / DNS / refused / bad body
- SubmissionError("rejected", ...)         2xx, but the body reports failure
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..errors import GraphQLError, GraphQLHttpError
from ..rpc.graphql import GraphQLClient
from .sign import SignedTransaction

log = logging.getLogger(__name__)

SEND_ZKAPP_MUTATION = """
mutation SendZkapp($input: SendZkappInput!) {
  sendZkapp(input: $input) {
    zkapp {
      id
      hash
      failureReason {
        index
        failures
      }
    }
  }
}
"""

__all__ = [
    "SEND_ZKAPP_MUTATION",
    "SubmissionSuccess",
    "SubmissionError",
    "SubmissionResult",
    "classify_response",
    "submit_transaction",
]


@dataclass(frozen=True)
class SubmissionSuccess:
    hash: str
    id: Optional[str] = None

    ok = True


@dataclass(frozen=True)
class SubmissionError:
    classification: str
    message: str
    status_code: Optional[int] = None
    status_text: Optional[str] = None

    ok = False

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"[{self.classification}] HTTP {self.status_code} {self.status_text or ''}: {self.message}"
        return f"[{self.classification}] {self.message}"


SubmissionResult = Union[SubmissionSuccess, SubmissionError]


def _errors_message(errors: Any) -> str:
    if isinstance(errors, list):
        return "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors
        ) or "unknown error"
    return str(errors)


def classify_response(body: Dict[str, Any]) -> SubmissionResult:
    """Classify a decoded 2xx body."""
    if body.get("errors"):
        return SubmissionError("rejected", _errors_message(body["errors"]))
    data = body.get("data") or {}
    send = data.get("sendZkapp") if isinstance(data, dict) else None
    zkapp = send.get("zkapp") if isinstance(send, dict) else None
    if not isinstance(zkapp, dict):
        return SubmissionError("rejected", "Response carries no zkapp transaction.")
    if zkapp.get("kind") == "error":
        return SubmissionError("rejected", str(zkapp.get("message") or "zkapp error"))
    if zkapp.get("failureReason"):
        return SubmissionError("rejected", f"failureReason: {zkapp['failureReason']}")
    tx_hash = zkapp.get("hash")
    if not tx_hash:
        return SubmissionError("rejected", "Response carries no transaction hash.")
    tx_id = zkapp.get("id")
    return SubmissionSuccess(hash=str(tx_hash), id=None if tx_id is None else str(tx_id))


async def submit_transaction(client: GraphQLClient, tx: SignedTransaction) -> SubmissionResult:
    """Send `tx` once. Never raises for network or server failures."""
    try:
        body = await client.post(SEND_ZKAPP_MUTATION, {"input": tx.to_input()})
    except GraphQLHttpError as e:
        return SubmissionError(
            "http",
            _errors_message(e.errors) if e.errors is not None else "",
            status_code=e.status_code,
            status_text=e.status_text,
        )
    except GraphQLError as e:
        return SubmissionError(e.classification, str(e))
    result = classify_response(body)
    log.info("sendZkapp -> %s", result)
    return result
