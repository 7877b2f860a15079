from __future__ import annotations

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from xrpl_amm_tvl.diagnostics import MemorySampler, measure

MB = 1024 * 1024


def _process(*rss_vms: tuple[int, int]) -> MagicMock:
    process = MagicMock()
    process.memory_info.side_effect = [
        SimpleNamespace(rss=rss * MB, vms=vms * MB) for rss, vms in rss_vms
    ]
    return process


def test_summary_tracks_low_and_high():
    sampler = MemorySampler(process=_process((100, 400), (150, 380), (120, 500)))

    for _ in range(3):
        sampler.record()
    summary = sampler.summary()

    assert summary.samples == 3
    assert summary.low.rss == 100
    assert summary.low.vms == 380
    assert summary.high.rss == 150
    assert summary.high.vms == 500


def test_record_rounds_to_two_decimals():
    process = MagicMock()
    process.memory_info.return_value = SimpleNamespace(rss=int(1.234567 * MB), vms=MB)
    sampler = MemorySampler(process=process)

    sample = sampler.record()

    assert sample.rss == 1.23
    assert sample.vms == 1.0


def test_summary_without_samples_takes_one():
    sampler = MemorySampler(process=_process((10, 20)))

    summary = sampler.summary()

    assert summary.samples == 1
    assert summary.low == summary.high


def test_samplers_do_not_share_state():
    first = MemorySampler(process=_process((10, 20)))
    second = MemorySampler(process=_process((30, 40)))

    first.record()

    assert len(first.samples) == 1
    assert second.samples == []


def test_real_process_sample_is_positive():
    sample = MemorySampler().record()

    assert sample.rss > 0
    assert sample.vms > 0


@pytest.mark.asyncio
async def test_measure_passes_sampler_and_logs(caplog):
    seen = {}

    async def step(value, sampler=None):
        seen["sampler"] = sampler
        sampler.record()
        return value * 2

    sampler = MemorySampler(process=_process((1, 2), (3, 4), (5, 6)))
    with caplog.at_level(logging.INFO):
        result = await measure("Doubling", step, 21, sampler=sampler)

    assert result == 42
    assert seen["sampler"] is sampler
    assert len(sampler.samples) == 3
    messages = [r.getMessage() for r in caplog.records]
    assert ">>> Doubling" in messages
    assert any(m.startswith("Doubling took") for m in messages)
    assert any("high rss=5.00 vms=6.00" in m for m in messages)
