"""
zkapp_cli.tx.build
==================

Turn a compiled contract into an unsigned deploy intent.

A build artifact is a Python module that defines the contract class and a
module-level deploy routine::

    class Foo(SmartContract):
        @classmethod
        def compile(cls, address: str) -> dict:      # may be async
            return {"verification_key": {...}}

    def deploy(contract_cls, *, zkapp_key, verification_key):   # may be async
        return {...}            # parties payload, or the same as a JSON string

    def shutdown() -> None:     # optional, called once the deploy is over
        ...

Compilation can take a long time (circuit compilation); the pipeline simply
waits for it. Any error raised by the contract code becomes a
TransactionBuildError and aborts the deploy.
"""

from __future__ import annotations

import importlib.util
import inspect
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Mapping, Optional

from ..errors import ContractNotFound, TransactionBuildError
from ..wallet.keys import KeyPair

log = logging.getLogger(__name__)

__all__ = [
    "UnsignedIntent",
    "load_contract_module",
    "unload_contract_module",
    "build_deploy_intent",
    "shutdown_contract_module",
]


@dataclass(frozen=True)
class UnsignedIntent:
    verification_key: Any
    parties: Dict[str, Any]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


# private module name -> directory we put on sys.path for it ("" if it was there already)
_IMPORT_DIRS: Dict[str, str] = {}


def load_contract_module(path: Path, name: str) -> ModuleType:
    """
    Import the artifact at `path` under a private module name. Import failures
    mean the contract cannot be deployed from this build.

    The artifact's directory stays on sys.path until `unload_contract_module`,
    so sibling modules (`from helpers import ...`) resolve at import time and
    on later lazy imports during compile/deploy.
    """
    mod_name = f"_zk_build_{path.stem}_{abs(hash(str(path.resolve()))):x}"
    spec = importlib.util.spec_from_file_location(mod_name, path)
    if spec is None or spec.loader is None:
        raise ContractNotFound(name)
    module = importlib.util.module_from_spec(spec)

    import_dir = str(path.parent.resolve())
    if import_dir in sys.path:
        _IMPORT_DIRS[mod_name] = ""
    else:
        sys.path.insert(0, import_dir)
        _IMPORT_DIRS[mod_name] = import_dir
    sys.modules[mod_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        unload_contract_module(module)
        log.debug("import of %s failed", path, exc_info=True)
        raise ContractNotFound(
            name,
            hint=f"Importing {path.name} failed: {e.__class__.__name__}: {e}",
        ) from e
    return module


def unload_contract_module(module: ModuleType) -> None:
    """
    Forget an artifact: drop it (and any sibling modules it pulled in from its
    directory) from sys.modules and take that directory back off sys.path.
    """
    mod_name = module.__name__
    sys.modules.pop(mod_name, None)
    import_dir = _IMPORT_DIRS.pop(mod_name, "")
    if not import_dir:
        return
    if import_dir in sys.path:
        sys.path.remove(import_dir)
    prefix = import_dir + os.sep
    for key, mod in list(sys.modules.items()):
        origin = getattr(mod, "__file__", None)
        if origin and os.path.abspath(origin).startswith(prefix):
            sys.modules.pop(key, None)


def _verification_key(compiled: Any) -> Any:
    if isinstance(compiled, Mapping):
        for key in ("verification_key", "verificationKey"):
            if key in compiled:
                return compiled[key]
    elif hasattr(compiled, "verification_key"):
        return compiled.verification_key
    raise TransactionBuildError("compile() did not return a verification key.")


def _parties(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise TransactionBuildError(f"deploy() returned invalid JSON: {e}") from e
    if not isinstance(raw, Mapping):
        raise TransactionBuildError(
            f"deploy() must return a mapping or a JSON object, got {type(raw).__name__}."
        )
    return dict(raw)


async def build_deploy_intent(module: ModuleType, name: str, key: KeyPair) -> UnsignedIntent:
    """
    Compile the verification key of `module.<name>` for the key's address and
    build the parties payload with the module's `deploy` routine.
    """
    contract = getattr(module, name, None)
    if contract is None:
        raise ContractNotFound(
            name,
            hint="Check that you have exported your smart contract class and try again.",
        )
    deploy = getattr(module, "deploy", None)
    if not callable(deploy):
        raise TransactionBuildError(f"{module.__file__} does not define a deploy() routine.")

    try:
        compiled = await _maybe_await(contract.compile(key.public_key))
    except Exception as e:
        raise TransactionBuildError(f"Generating the verification key failed: {e}") from e
    vk = _verification_key(compiled)

    try:
        raw = await _maybe_await(deploy(contract, zkapp_key=key, verification_key=vk))
    except Exception as e:
        raise TransactionBuildError(f"Building the deploy transaction failed: {e}") from e
    return UnsignedIntent(verification_key=vk, parties=_parties(raw))


async def shutdown_contract_module(module: Optional[ModuleType]) -> None:
    """
    Call the artifact's optional shutdown() hook, then unload it. Hook errors
    are logged, not raised.
    """
    if module is None:
        return
    hook = getattr(module, "shutdown", None)
    try:
        if callable(hook):
            await _maybe_await(hook())
    except Exception:
        log.warning("contract shutdown hook failed", exc_info=True)
    finally:
        unload_contract_module(module)

