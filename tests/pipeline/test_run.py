import asyncio
import json
import logging
from decimal import Decimal

import pytest

from xrpl_amm_tvl.pipeline import run as pipeline_run
from xrpl_amm_tvl.settings import OutputFormat, TvlSettings
from xrpl_amm_tvl.state import AppState


def _state(**kwargs) -> AppState:
    return AppState(settings=TvlSettings(**kwargs), logger=logging.getLogger("test"))


@pytest.mark.asyncio
async def test_run_tvl_end_to_end(monkeypatch, capsys, fake_client):
    monkeypatch.setattr(pipeline_run, "build_client", lambda _state: fake_client)
    state = _state(binary=False, output_format=OutputFormat.JSON, ledger_index=86799000)

    report = await pipeline_run.run_tvl(state)

    assert report.total_tvl == Decimal("121999.9999999999999998")
    assert report.reference_pairs_tvl == Decimal(102_000)
    assert report.non_reference_pairs_tvl == Decimal("19999.9999999999999998")
    assert report.pool_count == 3
    assert report.valued_pool_count == 1
    assert fake_client.closed

    output = json.loads(capsys.readouterr().out)
    assert output["total_tvl"] == "121999.9999999999999998"
    assert output["ledger_index"] == 86799000
    assert [p["pool"] for p in output["top_pools"]] == ["rXrpKek", "rXrpUsd", "rKekUsd"]


@pytest.mark.asyncio
async def test_run_tvl_with_measurement(monkeypatch, capsys, caplog, fake_client):
    monkeypatch.setattr(pipeline_run, "build_client", lambda _state: fake_client)
    state = _state(binary=False, output_format=OutputFormat.JSON, measure=True)

    with caplog.at_level(logging.INFO):
        report = await pipeline_run.run_tvl(state)

    assert report.total_tvl == Decimal("121999.9999999999999998")
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Pool Discovery took") for m in messages)
    assert any(m.startswith("Get All Pools Reserves took") for m in messages)
    assert any(m.startswith("Get Total TVL took") for m in messages)


@pytest.mark.asyncio
async def test_run_tvl_runs_steps_in_order(monkeypatch, fake_client):
    calls: list[str] = []

    def stage(name: str):
        async def _inner(ctx):  # type: ignore[unused-arg]
            calls.append(name)
            await asyncio.sleep(0)

        return _inner

    async def build(ctx):
        calls.append("build")
        ctx.report = object()

    monkeypatch.setattr(pipeline_run, "build_client", lambda _state: fake_client)
    monkeypatch.setattr(pipeline_run, "collect_pools", stage("discover"))
    monkeypatch.setattr(pipeline_run, "collect_reserves", stage("reserves"))
    monkeypatch.setattr(pipeline_run, "aggregate", stage("aggregate"))
    monkeypatch.setattr(pipeline_run, "build_report", build)
    monkeypatch.setattr(pipeline_run, "publish_report", stage("publish"))

    await pipeline_run.run_tvl(_state(global_timeout_seconds=0.5))

    assert calls == ["discover", "reserves", "aggregate", "build", "publish"]


@pytest.mark.asyncio
async def test_run_tvl_raises_timeout(monkeypatch, fake_client):
    async def slow(ctx):  # type: ignore[unused-arg]
        await asyncio.sleep(0.2)

    monkeypatch.setattr(pipeline_run, "build_client", lambda _state: fake_client)
    monkeypatch.setattr(pipeline_run, "collect_pools", slow)

    with pytest.raises(asyncio.TimeoutError, match="global timeout"):
        await pipeline_run.run_tvl(_state(global_timeout_seconds=0.05))

    assert fake_client.closed


@pytest.mark.asyncio
async def test_run_tvl_propagates_fetch_errors(monkeypatch, fake_client):
    fake_client.reserves["rKekUsd"] = ("garbage", "1")
    monkeypatch.setattr(pipeline_run, "build_client", lambda _state: fake_client)

    with pytest.raises(ValueError, match="Invalid amount value"):
        await pipeline_run.run_tvl(_state(binary=False))

    assert fake_client.closed
