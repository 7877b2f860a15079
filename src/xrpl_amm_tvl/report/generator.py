from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Sequence

from ..domain import PoolWithReserves, TvlBreakdown


@dataclass
class PoolSummary:
    pool: str
    token0: str
    token1: str
    tvl: Decimal


@dataclass
class TvlReport:
    """TVL report for all AMM pools at one ledger."""

    ledger_index: int | str
    total_tvl: Decimal
    reference_pairs_tvl: Decimal
    non_reference_pairs_tvl: Decimal
    pool_count: int
    reference_pool_count: int
    non_reference_pool_count: int
    valued_pool_count: int
    top_pools: list[PoolSummary] = field(default_factory=list)

    @property
    def unvalued_pool_count(self) -> int:
        return self.non_reference_pool_count - self.valued_pool_count

    def to_dict(self) -> dict[str, object]:
        """Convert report to a JSON-friendly dict (decimals as strings)."""
        data = asdict(self)
        for key in ("total_tvl", "reference_pairs_tvl", "non_reference_pairs_tvl"):
            data[key] = str(data[key])
        for pool in data["top_pools"]:
            pool["tvl"] = str(pool["tvl"])
        return data


def generate_report(
    ledger_index: int | str,
    pools: Sequence[PoolWithReserves],
    breakdown: TvlBreakdown,
    top_pools: int = 10,
) -> TvlReport:
    """Generate a TVL report from valued pools.

    Args:
        ledger_index: Ledger the pools were read at
        pools: Pools with their final TVL
        breakdown: Aggregation result for ``pools``
        top_pools: How many of the largest pools to list
    """
    largest = sorted(pools, key=lambda p: p.tvl, reverse=True)[:top_pools]
    return TvlReport(
        ledger_index=ledger_index,
        total_tvl=breakdown.total,
        reference_pairs_tvl=breakdown.reference_pairs_tvl,
        non_reference_pairs_tvl=breakdown.non_reference_pairs_tvl,
        pool_count=len(pools),
        reference_pool_count=breakdown.reference_pool_count,
        non_reference_pool_count=breakdown.non_reference_pool_count,
        valued_pool_count=breakdown.valued_pool_count,
        top_pools=[
            PoolSummary(
                pool=p.pool,
                token0=str(p.token0.asset),
                token1=str(p.token1.asset),
                tvl=p.tvl,
            )
            for p in largest
        ],
    )
