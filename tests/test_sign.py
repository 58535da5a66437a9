import dataclasses
import json
from pathlib import Path

import cbor2
import pytest

from zkapp_cli.errors import KeyFileError, SigningError
from zkapp_cli.tx.build import UnsignedIntent
from zkapp_cli.tx.sign import sign_bytes, sign_transaction, to_nanomina, verify_transaction
from zkapp_cli.wallet.keys import KeyPair, load_key_file, parse_private_key

from conftest import SEED_HEX

INTENT = UnsignedIntent(
    verification_key={"data": "vk", "hash": "1"},
    parties={"0": {"body": {"publicKey": "zkapp"}}},
)


@pytest.mark.parametrize(
    "fee,expected",
    [
        ("0.01", "0.01000000000"),
        ("1", "1000000000"),
        ("0.000000001", "0.000000001000000000"),
        (" 0.05 ", "0.05000000000"),
    ],
)
def test_to_nanomina_is_textual(fee: str, expected: str) -> None:
    assert to_nanomina(fee) == expected


def test_to_nanomina_empty() -> None:
    with pytest.raises(ValueError):
        to_nanomina("  ")


def test_keypair_from_hex() -> None:
    a = KeyPair.from_hex(SEED_HEX)
    b = KeyPair.from_hex("0x" + SEED_HEX.upper())
    assert a.public_key == b.public_key
    assert len(a.public_key_bytes) == 32
    assert SEED_HEX not in repr(a)


@pytest.mark.parametrize("value", ["zz", "00" * 31, "00" * 33])
def test_parse_private_key_rejects(value: str) -> None:
    with pytest.raises(KeyFileError):
        parse_private_key(value)


def test_load_key_file(tmp_path: Path) -> None:
    path = tmp_path / "k.json"
    path.write_text(json.dumps({"privateKey": SEED_HEX}))
    assert load_key_file(path).public_key == KeyPair.from_hex(SEED_HEX).public_key


def test_load_key_file_errors(tmp_path: Path) -> None:
    with pytest.raises(KeyFileError) as ei:
        load_key_file(tmp_path / "missing.json")
    assert "keyPath" in (ei.value.hint or "")

    bad = tmp_path / "bad.json"
    bad.write_text("{")
    with pytest.raises(KeyFileError):
        load_key_file(bad)

    empty = tmp_path / "empty.json"
    empty.write_text(json.dumps({"publicKey": "abc"}))
    with pytest.raises(KeyFileError):
        load_key_file(empty)


def test_sign_and_verify() -> None:
    key = KeyPair.from_hex(SEED_HEX)
    tx = sign_transaction(INTENT, 3, "0.05", key)

    assert tx.fee_payer == key.public_key
    assert tx.fee == "0.05000000000"
    assert tx.nonce == 3
    assert verify_transaction(tx)

    body = tx.to_input()["parties"]["feePayer"]
    assert body["body"] == {"publicKey": key.public_key, "fee": "0.05000000000", "nonce": "3", "memo": ""}
    assert body["authorization"] == tx.signature


def test_signing_is_deterministic() -> None:
    key = KeyPair.from_hex(SEED_HEX)
    assert sign_transaction(INTENT, 3, "0.05", key) == sign_transaction(INTENT, 3, "0.05", key)


def test_sign_bytes_ignore_key_order() -> None:
    body = {"publicKey": "p", "fee": "1", "nonce": "0", "memo": ""}
    reordered = dict(reversed(list(body.items())))
    assert sign_bytes(body, {"a": 1, "b": 2}) == sign_bytes(reordered, {"b": 2, "a": 1})
    assert cbor2.loads(sign_bytes(body, {}))["feePayer"] == body


@pytest.mark.parametrize("field,value", [("nonce", 4), ("fee", "1000000000"), ("memo", "hi")])
def test_tampering_breaks_the_signature(field: str, value) -> None:
    tx = sign_transaction(INTENT, 3, "0.05", KeyPair.from_hex(SEED_HEX))
    assert not verify_transaction(dataclasses.replace(tx, **{field: value}))


def test_sign_rejects_negative_nonce_and_unencodable_payload() -> None:
    key = KeyPair.from_hex(SEED_HEX)
    with pytest.raises(SigningError):
        sign_transaction(INTENT, -1, "0.05", key)
    with pytest.raises(SigningError):
        sign_transaction(UnsignedIntent(None, {"x": object()}), 0, "0.05", key)
