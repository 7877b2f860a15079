from __future__ import annotations

from typing import Sequence

from ..clients import XrplNodeClient
from ..clients.xrpl_node import LedgerSelector
from ..constants import VALIDATED_LEDGER
from ..diagnostics import MemorySampler, measure
from ..domain import PoolDescriptor, PoolWithReserves
from ..logger import get_logger
from ..processors import naive_tvl, parse_reserve
from .context import PipelineContext

logger = get_logger(__name__)


async def fetch_pool_reserves(
    client: XrplNodeClient,
    pool: PoolDescriptor,
    ledger_index: LedgerSelector = VALIDATED_LEDGER,
) -> PoolWithReserves:
    raw0, raw1 = await client.amm_info(pool, ledger_index)
    token0 = parse_reserve(raw0)
    token1 = parse_reserve(raw1)
    return PoolWithReserves(
        pool=pool.account,
        token0=token0,
        token1=token1,
        tvl=naive_tvl(token0, token1),
    )


async def fetch_all_pool_reserves(
    client: XrplNodeClient,
    pools: Sequence[PoolDescriptor],
    ledger_index: LedgerSelector = VALIDATED_LEDGER,
    sampler: MemorySampler | None = None,
) -> list[PoolWithReserves]:
    """Fetch reserves pool by pool, keeping discovery order.

    Any failure aborts the whole fetch; there are no partial results.
    """
    pools_with_reserves: list[PoolWithReserves] = []
    for index, pool in enumerate(pools, start=1):
        if sampler is not None:
            sampler.record()
        pools_with_reserves.append(
            await fetch_pool_reserves(client, pool, ledger_index)
        )
        if index % 100 == 0:
            logger.debug("Fetched reserves for %d/%d pools", index, len(pools))
    return pools_with_reserves


async def collect_reserves(ctx: PipelineContext) -> None:
    """Fetch reserves for every discovered pool and store them in the context."""
    s = ctx.state.settings
    log = ctx.state.logger
    pools = ctx.pools_required

    log.info("Fetching reserves for %d pools...", len(pools))
    sampler = ctx.new_sampler()
    if sampler is not None:
        pools_with_reserves = await measure(
            "Get All Pools Reserves",
            fetch_all_pool_reserves,
            ctx.client,
            pools,
            s.ledger_index_param,
            sampler=sampler,
        )
    else:
        pools_with_reserves = await fetch_all_pool_reserves(
            ctx.client, pools, s.ledger_index_param
        )

    ctx.pools_with_reserves = pools_with_reserves
