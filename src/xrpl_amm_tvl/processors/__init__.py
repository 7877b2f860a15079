from __future__ import annotations

from .reserves import naive_tvl, parse_reserve
from .tvl_aggregator import (
    aggregate_tvl,
    compute_total_tvl,
    find_reference_pool,
    implied_price,
    partition_pools,
    select_reference_pool,
    value_non_reference_pools,
)

__all__ = [
    "parse_reserve",
    "naive_tvl",
    "partition_pools",
    "find_reference_pool",
    "select_reference_pool",
    "implied_price",
    "value_non_reference_pools",
    "aggregate_tvl",
    "compute_total_tvl",
]
