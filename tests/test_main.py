from __future__ import annotations

import json
from decimal import Decimal

import pytest
from typer.testing import CliRunner

from xrpl_amm_tvl.clients import XrplNodeError
from xrpl_amm_tvl.main import app
from xrpl_amm_tvl.pipeline import run as pipeline_run
from xrpl_amm_tvl.settings import CONFIG_ENV_VAR

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    # --config writes this variable; setenv lets monkeypatch restore it
    monkeypatch.setenv(CONFIG_ENV_VAR, "")


def test_show_config_prints_effective_settings():
    result = runner.invoke(
        app,
        ["--show-config", "--threshold", "50000", "--ledger-index", "86799000", "--json-entries"],
    )

    assert result.exit_code == 0
    config = json.loads(result.stdout)
    assert config["reference_threshold"] == "50000"
    assert config["ledger_index"] == 86799000
    assert config["binary"] is False


def test_show_config_reads_config_file(tmp_path):
    config_path = tmp_path / "tvl.toml"
    config_path.write_text('[xrpl_amm_tvl]\nnode_url = "https://s1.ripple.com:51234"\n')

    result = runner.invoke(app, ["--config", str(config_path), "--show-config"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["node_url"] == "https://s1.ripple.com:51234"


def test_runs_pipeline_with_cli_settings(monkeypatch):
    seen = {}

    async def fake_run_tvl(state):
        seen["settings"] = state.settings

    monkeypatch.setattr(pipeline_run, "run_tvl", fake_run_tvl)

    result = runner.invoke(app, ["--format", "json", "--top-pools", "3", "--log-level", "debug"])

    assert result.exit_code == 0
    assert seen["settings"].top_pools == 3
    assert seen["settings"].log_level == "DEBUG"
    assert seen["settings"].reference_threshold == Decimal(40_000)


@pytest.mark.parametrize(
    "error",
    [
        XrplNodeError("Node returned 'lgrNotFound' for 'ledger_data'", "lgrNotFound"),
        ValueError("Malformed reserve amount"),
        TimeoutError("global timeout"),
    ],
)
def test_failures_exit_with_code_one(monkeypatch, error):
    async def failing_run_tvl(state):
        raise error

    monkeypatch.setattr(pipeline_run, "run_tvl", failing_run_tvl)

    result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)


@pytest.mark.parametrize(
    "args",
    [["--threshold", "abc"], ["--threshold", "0"], ["--log-level", "foo"]],
)
def test_invalid_settings_exit_with_code_one(monkeypatch, args):
    async def unexpected_run_tvl(state):
        raise AssertionError("pipeline must not start")

    monkeypatch.setattr(pipeline_run, "run_tvl", unexpected_run_tvl)

    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
