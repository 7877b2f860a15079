"""Adapter entry point: report the XRPL AMM TVL into a balances accumulator."""

from __future__ import annotations

from .constants import METHODOLOGY, REPORT_TOKEN, START_LEDGER
from .logger import get_logger
from .pipeline.run import build_client
from .pipeline import discover_pools, fetch_all_pool_reserves
from .processors import compute_total_tvl
from .report import Balances
from .settings import TvlSettings
from .state import AppState

logger = get_logger(__name__)

__all__ = ["METHODOLOGY", "START_LEDGER", "tvl"]


async def tvl(api: Balances, settings: TvlSettings | None = None) -> Balances:
    """Find all AMM pools, value them in XRP and add the total under "XRP"."""
    settings = settings or TvlSettings()
    client = build_client(AppState(settings=settings, logger=logger))
    try:
        pools = await discover_pools(
            client,
            binary=settings.binary,
            ledger_index=settings.ledger_index_param,
        )
        pools_with_reserves = await fetch_all_pool_reserves(
            client, pools, settings.ledger_index_param
        )
    finally:
        client.close()

    total = compute_total_tvl(pools_with_reserves, settings.reference_threshold)
    api.add(REPORT_TOKEN, total)
    return api
