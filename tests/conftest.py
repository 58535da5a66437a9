import io
import json
import pathlib
import textwrap
from typing import Any, List

import pytest
from rich.console import Console

from zkapp_cli.errors import PromptCancelled

GRAPHQL_URL = "https://example/graphql"

# Deterministic test seed: 0x00, 0x01, ..., 0x1f
SEED_HEX = bytes(range(32)).hex()

CANCEL = object()


FOO_CONTRACT = textwrap.dedent(
    '''
    import json


    class SmartContract:
        """Stand-in base type; the real one ships with the contract library."""


    class Foo(SmartContract):
        compiled_for = None

        @classmethod
        def compile(cls, address):
            cls.compiled_for = address
            return {"verification_key": {"data": "vk-foo", "hash": "42"}}


    SHUTDOWN_CALLS = []


    def deploy(contract_cls, *, zkapp_key, verification_key):
        return json.dumps(
            {
                "accountUpdates": [
                    {
                        "body": {
                            "publicKey": zkapp_key.public_key,
                            "update": {"verificationKey": verification_key},
                        },
                        "authorization": {"proof": None, "signature": None},
                    }
                ]
            }
        )


    def shutdown():
        SHUTDOWN_CALLS.append(True)
    '''
)

BAR_BAZ_CONTRACTS = textwrap.dedent(
    """
    from zk_contract_lib import SmartContract
    import zk_contract_lib


    class Bar(SmartContract):
        pass


    class Baz(zk_contract_lib.SmartContract):
        pass
    """
)


class ScriptedPrompter:
    """Answers prompts from a list; CANCEL (or running dry) cancels."""

    def __init__(self, answers=()):
        self.answers: List[Any] = list(answers)
        self.asked: List[str] = []
        self.errors: List[str] = []
        self.shown: List[Any] = []

    def read(self, message: str) -> str:
        self.asked.append(message)
        if not self.answers:
            raise PromptCancelled()
        answer = self.answers.pop(0)
        if answer is CANCEL:
            raise PromptCancelled()
        return answer

    def show_error(self, message: str) -> None:
        self.errors.append(message)

    def show(self, renderable: Any) -> None:
        self.shown.append(renderable)


def write_project(
    root: pathlib.Path,
    *,
    aliases=None,
    contracts=None,
    key_hex: str = SEED_HEX,
) -> pathlib.Path:
    if aliases is None:
        aliases = {
            "testnet": {"url": GRAPHQL_URL, "fee": "0.05", "keyPath": "keys/testnet.json"}
        }
    if contracts is None:
        contracts = {"src/foo.py": FOO_CONTRACT}
    (root / "config.json").write_text(json.dumps({"version": 1, "networks": aliases}, indent=2))
    keys = root / "keys"
    keys.mkdir(parents=True, exist_ok=True)
    (keys / "testnet.json").write_text(json.dumps({"privateKey": key_hex, "publicKey": "ignored"}))
    for rel, src in contracts.items():
        path = root / "build" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(src)
    return root


def read_config(root: pathlib.Path) -> dict:
    return json.loads((root / "config.json").read_text())


@pytest.fixture
def project(tmp_path: pathlib.Path) -> pathlib.Path:
    return write_project(tmp_path)


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, width=100)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ZK_GRAPHQL_TIMEOUT", "ZK_BUILD_GLOB", "ZK_CONTRACT_BASE", "ZK_EXPLORER_TX_URL", "ZK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
