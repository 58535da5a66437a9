import json
from pathlib import Path

import httpx
import respx
from typer.testing import CliRunner

from zkapp_cli import __version__
from zkapp_cli.cli import main
from zkapp_cli.cli.main import app

from conftest import GRAPHQL_URL, read_config

runner = CliRunner()


def _network(request: httpx.Request) -> httpx.Response:
    payload = json.loads(request.content)
    if "sendZkapp" in payload["query"]:
        return httpx.Response(200, json={"data": {"sendZkapp": {"zkapp": {"hash": "0xabc"}}}})
    return httpx.Response(200, json={"data": {"account": {"nonce": "3"}}})


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0, result.output
    assert __version__ in result.output


def test_aliases(project: Path) -> None:
    result = runner.invoke(app, ["aliases", "--project-dir", str(project)])
    assert result.exit_code == 0, result.output
    assert "testnet" in result.output
    assert GRAPHQL_URL in result.output
    assert "(never deployed)" in result.output


def test_aliases_without_project(tmp_path: Path) -> None:
    result = runner.invoke(app, ["aliases", "-p", str(tmp_path)])
    assert result.exit_code == 1
    assert "config.json not found" in result.output


@respx.mock
def test_deploy_yes(project: Path) -> None:
    route = respx.post(GRAPHQL_URL).mock(side_effect=_network)
    result = runner.invoke(app, ["deploy", "testnet", "--yes", "-p", str(project)])

    assert result.exit_code == 0, result.output
    assert route.call_count == 2
    assert "Success! Deploy transaction sent." in result.output
    assert "https://berkeley.minaexplorer.com/transaction/0xabc" in result.output
    assert read_config(project)["networks"]["testnet"]["smartContract"] == "Foo"


@respx.mock
def test_deploy_interactive_confirm(project: Path) -> None:
    route = respx.post(GRAPHQL_URL).mock(side_effect=_network)
    result = runner.invoke(app, ["deploy", "testnet", "-p", str(project)], input="YES\n")

    assert result.exit_code == 0, result.output
    assert route.call_count == 2
    assert "Are you sure you want to send (yes/no)?" in result.output
    assert "Smart Contract" in result.output


@respx.mock
def test_deploy_interactive_decline(project: Path) -> None:
    route = respx.post(GRAPHQL_URL).mock(side_effect=_network)
    result = runner.invoke(app, ["deploy", "testnet", "-p", str(project)], input="no\n")

    assert result.exit_code == 1
    assert route.call_count == 1
    assert "Aborted. Transaction not sent." in result.output


@respx.mock
def test_deploy_cancelled_at_confirmation(project: Path) -> None:
    route = respx.post(GRAPHQL_URL).mock(side_effect=_network)
    # no input at all: the confirmation prompt hits EOF
    result = runner.invoke(app, ["deploy", "testnet", "-p", str(project)], input="")

    assert result.exit_code == 1
    assert route.call_count == 1
    assert "Aborted. Transaction not sent." in result.output


def test_deploy_unknown_alias(project: Path) -> None:
    with respx.mock(assert_all_called=False) as router:
        route = router.post(GRAPHQL_URL).mock(side_effect=_network)
        result = runner.invoke(app, ["deploy", "mainnet", "--yes", "-p", str(project)])

    assert result.exit_code == 1
    assert not route.called
    assert "Network name not found in config.json." in result.output


def test_deploy_custom_explorer_and_timeout(project: Path, monkeypatch) -> None:
    monkeypatch.setenv("ZK_EXPLORER_TX_URL", "https://explorer.test/tx/{hash}")
    with respx.mock:
        respx.post(GRAPHQL_URL).mock(side_effect=_network)
        result = runner.invoke(app, ["--timeout", "5", "deploy", "testnet", "-y", "-p", str(project)])
    assert result.exit_code == 0, result.output
    assert "https://explorer.test/tx/0xabc" in result.output


def test_timeout_must_be_positive(project: Path) -> None:
    result = runner.invoke(app, ["--timeout", "0", "version"])
    assert result.exit_code == 2


def test_main_returns_exit_codes(tmp_path: Path) -> None:
    assert main(["version"]) == 0
    assert main(["deploy", "testnet", "--yes", "-p", str(tmp_path)]) == 1
    assert main(["no-such-command"]) == 2
    assert main(["--timeout", "0", "version"]) == 2
