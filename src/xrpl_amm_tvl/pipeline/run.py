"""High-level pipeline orchestration."""

from __future__ import annotations

import asyncio

from ..clients import XrplNodeClient
from ..report import TvlReport
from ..state import AppState
from .context import PipelineContext
from .discovery import collect_pools
from .report import build_report, publish_report
from .reserves import collect_reserves
from .valuation import aggregate


def build_client(state: AppState) -> XrplNodeClient:
    s = state.settings
    return XrplNodeClient(
        node_url=s.node_url,
        timeout=s.request_timeout,
        max_tries=s.max_retries,
    )


async def run_tvl(state: AppState) -> TvlReport:
    """Execute the complete TVL pipeline.

    This is a thin orchestrator that sequences the pipeline steps:
    1. Pool discovery
    2. Reserve fetching
    3. Aggregation
    4. Report generation and publishing

    Args:
        state: Application state containing settings and logger

    Returns:
        The published report
    """
    s = state.settings
    log = state.logger

    log.info(
        "Starting TVL run",
        extra={"node_url": s.node_url, "ledger_index": s.ledger_index_param},
    )

    timeout_s = s.global_timeout_seconds

    client = build_client(state)
    ctx = PipelineContext(state=state, client=client)

    async def _run_pipeline() -> None:
        await collect_pools(ctx)
        await collect_reserves(ctx)
        await aggregate(ctx)
        await build_report(ctx)
        await publish_report(ctx)

    try:
        if timeout_s is None or timeout_s <= 0:
            await _run_pipeline()
        else:
            async with asyncio.timeout(timeout_s):
                await _run_pipeline()
    except asyncio.TimeoutError as exc:
        log.error(
            "TVL pipeline timed out",
            extra={"timeout_seconds": timeout_s},
        )
        raise asyncio.TimeoutError(
            f"TVL run exceeded global timeout {timeout_s}s\n N.B. This can be changed via "
            "`global_timeout_seconds` or CLI flag `--global-timeout-seconds`."
        ) from exc
    finally:
        client.close()

    log.info("TVL run completed")
    return ctx.report_required
