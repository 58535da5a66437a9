"""
zkapp_cli.tx
============

Deploy transaction helpers: build, nonce, sign, send.

Submodules
----------
- build : Load a contract artifact, compile its verification key and build the
          unsigned parties payload.
- nonce : Fee payer nonce from the network, with an interactive fallback.
- sign  : Exact MINA -> nanomina fee scaling and Ed25519 signing over canonical CBOR.
- send  : The `sendZkapp` mutation and outcome classification.
"""

from .build import UnsignedIntent, build_deploy_intent, load_contract_module  # noqa: F401
from .nonce import fetch_nonce, resolve_nonce  # noqa: F401
from .send import SubmissionError, SubmissionSuccess, classify_response, submit_transaction  # noqa: F401
from .sign import SignedTransaction, sign_transaction, to_nanomina  # noqa: F401

__all__ = [
    "UnsignedIntent",
    "build_deploy_intent",
    "load_contract_module",
    "fetch_nonce",
    "resolve_nonce",
    "SubmissionError",
    "SubmissionSuccess",
    "classify_response",
    "submit_transaction",
    "SignedTransaction",
    "sign_transaction",
    "to_nanomina",
]
