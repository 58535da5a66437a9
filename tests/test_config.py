import json
from pathlib import Path

import pytest

from zkapp_cli.config import DeployAlias, ProjectConfig, Settings, find_project_root
from zkapp_cli.errors import AliasNotFound, AliasUrlMissing, ConfigInvalid, ConfigNotFound

from conftest import GRAPHQL_URL, read_config


def test_settings_defaults() -> None:
    s = Settings.from_env()
    assert s.graphql_timeout == 20.0
    assert s.build_glob == "build/**/*.py"
    assert s.contract_base == "SmartContract"
    assert s.explorer_url("0xabc") == "https://berkeley.minaexplorer.com/transaction/0xabc"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZK_GRAPHQL_TIMEOUT", "2.5")
    monkeypatch.setenv("ZK_BUILD_GLOB", "out/*.py")
    monkeypatch.setenv("ZK_EXPLORER_TX_URL", "https://explorer.test/tx/{hash}")
    s = Settings.from_env()
    assert s.graphql_timeout == 2.5
    assert s.build_glob == "out/*.py"
    assert s.explorer_url("h") == "https://explorer.test/tx/h"


def test_settings_rejects_non_positive_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZK_GRAPHQL_TIMEOUT", "0")
    with pytest.raises(ValueError):
        Settings.from_env()


def test_settings_with_overrides_ignores_none_and_unknown() -> None:
    base = Settings(graphql_timeout=5.0)
    s = Settings.with_overrides(base, graphql_timeout=None, build_glob="x/*.py", nope=1)
    assert s.graphql_timeout == 5.0
    assert s.build_glob == "x/*.py"
    assert base.build_glob == "build/**/*.py"


def test_load_missing_config(tmp_path: Path) -> None:
    with pytest.raises(ConfigNotFound) as ei:
        ProjectConfig.load(tmp_path)
    assert "config.json not found" in ei.value.message


@pytest.mark.parametrize("text", ["{not json", "[1, 2]", '{"networks": []}'])
def test_load_invalid_config(tmp_path: Path, text: str) -> None:
    (tmp_path / "config.json").write_text(text)
    with pytest.raises(ConfigInvalid):
        ProjectConfig.load(tmp_path)


def test_get_alias_is_case_insensitive(project: Path) -> None:
    cfg = ProjectConfig.load(project)
    alias = cfg.get_alias("TestNet")
    assert alias == DeployAlias(
        name="testnet", url=GRAPHQL_URL, fee="0.05", key_path="keys/testnet.json"
    )
    assert alias.resolved_key_path(project) == project / "keys" / "testnet.json"


def test_get_alias_errors(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(
        json.dumps({"networks": {"nourl": {"fee": "1"}, "blank": {"url": ""}}})
    )
    cfg = ProjectConfig.load(tmp_path)
    with pytest.raises(AliasNotFound) as ei:
        cfg.get_alias("mainnet")
    assert ei.value.message == "Network name not found in config.json."
    with pytest.raises(AliasUrlMissing):
        cfg.get_alias("nourl")
    with pytest.raises(AliasUrlMissing):
        cfg.get_alias("blank")


def test_legacy_deploy_aliases_key(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(
        json.dumps({"deployAliases": {"berkeley": {"url": GRAPHQL_URL, "fee": 0.1}}})
    )
    cfg = ProjectConfig.load(tmp_path)
    assert cfg.aliases_key == "deployAliases"
    alias = cfg.get_alias("berkeley")
    assert alias.fee == "0.1"
    assert alias.resolved_key_path(tmp_path) == tmp_path / "keys" / "berkeley.json"

    assert cfg.set_smart_contract("berkeley", "Foo") is True
    assert read_config(tmp_path)["deployAliases"]["berkeley"]["smartContract"] == "Foo"
    assert "networks" not in read_config(tmp_path)


def test_set_smart_contract_preserves_other_fields(project: Path) -> None:
    before = read_config(project)
    cfg = ProjectConfig.load(project)

    assert cfg.set_smart_contract("testnet", "Foo") is True
    after = read_config(project)
    assert after["version"] == before["version"]
    assert after["networks"]["testnet"] == {**before["networks"]["testnet"], "smartContract": "Foo"}

    mtime = (project / "config.json").stat().st_mtime_ns
    assert ProjectConfig.load(project).set_smart_contract("testnet", "Foo") is False
    assert (project / "config.json").stat().st_mtime_ns == mtime
    assert not list(project.glob("tmp*"))


def test_set_smart_contract_unknown_alias(project: Path) -> None:
    with pytest.raises(AliasNotFound):
        ProjectConfig.load(project).set_smart_contract("mainnet", "Foo")


def test_find_project_root_walks_up(project: Path) -> None:
    nested = project / "build" / "src"
    assert find_project_root(nested) == project.resolve()


def test_find_project_root_without_config(tmp_path: Path) -> None:
    assert find_project_root(tmp_path) == tmp_path.resolve()
