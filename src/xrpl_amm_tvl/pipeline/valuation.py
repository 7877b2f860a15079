from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ..diagnostics import MemorySampler, measure
from ..domain import PoolWithReserves, TvlBreakdown
from ..processors import aggregate_tvl
from .context import PipelineContext


async def _aggregate(
    pools: Sequence[PoolWithReserves],
    threshold: Decimal,
    sampler: MemorySampler | None = None,
) -> TvlBreakdown:
    breakdown = aggregate_tvl(pools, threshold)
    if sampler is not None:
        sampler.record()
    return breakdown


async def aggregate(ctx: PipelineContext) -> None:
    """Value every pool in XRP and store the breakdown in the context."""
    s = ctx.state.settings
    log = ctx.state.logger
    pools = ctx.pools_with_reserves_required

    log.info(
        "Aggregating TVL (reference pool threshold: %s XRP)...",
        s.reference_threshold,
    )
    sampler = ctx.new_sampler()
    if sampler is not None:
        breakdown = await measure(
            "Get Total TVL", _aggregate, pools, s.reference_threshold, sampler=sampler
        )
    else:
        breakdown = await _aggregate(pools, s.reference_threshold)

    log.info(
        "Total TVL: %s XRP (non-XRP pairs: %s XRP)",
        breakdown.total,
        breakdown.non_reference_pairs_tvl,
    )
    if breakdown.unvalued_pool_count:
        log.info(
            "%d non-XRP pools had no liquid XRP-paired pool and count as zero",
            breakdown.unvalued_pool_count,
        )
    ctx.breakdown = breakdown
