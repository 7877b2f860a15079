from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from ..constants import REFERENCE_THRESHOLD
from ..domain import Asset, PoolWithReserves, TvlBreakdown
from ..logger import get_logger
from ..units import ZeroReserveError, add, divide, multiply

logger = get_logger(__name__)


def partition_pools(
    pools: Iterable[PoolWithReserves],
) -> tuple[list[PoolWithReserves], list[PoolWithReserves]]:
    """Split pools into XRP-paired and non-XRP-paired lists, keeping order."""
    reference_pools: list[PoolWithReserves] = []
    other_pools: list[PoolWithReserves] = []
    for pool in pools:
        if pool.is_reference_paired:
            reference_pools.append(pool)
        else:
            other_pools.append(pool)
    return reference_pools, other_pools


def find_reference_pool(
    reference_pools: Sequence[PoolWithReserves], asset: Asset
) -> PoolWithReserves | None:
    """Return the first XRP-paired pool holding ``asset``, in discovery order."""
    return next((pool for pool in reference_pools if pool.holds(asset)), None)


def select_reference_pool(
    for_token0: PoolWithReserves | None,
    for_token1: PoolWithReserves | None,
) -> PoolWithReserves | None:
    """Pick the pool to derive a price from.

    With two candidates the one with the larger TVL wins; on an exact tie
    token0's candidate is kept.
    """
    if for_token0 is not None and for_token1 is not None:
        if for_token1.tvl > for_token0.tvl:
            return for_token1
        return for_token0
    if for_token0 is not None:
        return for_token0
    if for_token1 is not None:
        return for_token1
    return None


def implied_price(reference_pool: PoolWithReserves) -> Decimal:
    """XRP per unit of the foreign asset held by an XRP-paired pool.

    Raises:
        ZeroReserveError: If the pool holds none of its foreign asset
    """
    foreign = reference_pool.foreign_reserve
    if foreign.amount.is_zero():
        raise ZeroReserveError(
            f"Reference pool {reference_pool.pool} holds no {foreign.asset}"
        )
    return divide(reference_pool.reference_reserve.amount, foreign.amount)


def _revalue_pool(
    pool: PoolWithReserves,
    reference_pools: Sequence[PoolWithReserves],
    threshold: Decimal,
) -> bool:
    pool.tvl = Decimal(0)
    reference_pool = select_reference_pool(
        find_reference_pool(reference_pools, pool.token0.asset),
        find_reference_pool(reference_pools, pool.token1.asset),
    )
    if reference_pool is None:
        logger.debug("No XRP-paired pool found for %s, leaving unvalued", pool.pool)
        return False

    if reference_pool.tvl < threshold:
        logger.debug(
            "Reference pool %s for %s is below threshold (%s < %s), leaving unvalued",
            reference_pool.pool,
            pool.pool,
            reference_pool.tvl,
            threshold,
        )
        return False

    try:
        price = implied_price(reference_pool)
    except ZeroReserveError as e:
        logger.warning("Cannot price %s: %s", pool.pool, e)
        return False

    foreign_asset = reference_pool.foreign_reserve.asset
    matching = pool.token0 if pool.token0.asset == foreign_asset else pool.token1
    side_value = multiply(matching.amount, price)
    pool.tvl = multiply(side_value, Decimal(2))

    logger.debug(
        "Valued %s at %s XRP via %s (%s XRP per %s)",
        pool.pool,
        pool.tvl,
        reference_pool.pool,
        price,
        foreign_asset,
    )
    return True


def _sum_tvl(pools: Iterable[PoolWithReserves]) -> Decimal:
    total = Decimal(0)
    for pool in pools:
        total = add(total, pool.tvl)
    return total


def value_non_reference_pools(
    reference_pools: Sequence[PoolWithReserves],
    other_pools: Sequence[PoolWithReserves],
    threshold: Decimal = REFERENCE_THRESHOLD,
) -> Decimal:
    """Value pools without XRP through a single XRP-paired pool and sum them.

    Each pool in ``other_pools`` has its ``tvl`` overwritten in place: valued
    when a reference pool with at least ``threshold`` XRP of TVL holds one of
    its assets, zero otherwise. Only ``reference_pools`` are consulted, so prices never chain
    through another non-XRP pool.

    Returns:
        Sum of the TVL of ``other_pools`` after revaluation
    """
    for pool in other_pools:
        _revalue_pool(pool, reference_pools, threshold)
    return _sum_tvl(other_pools)


def aggregate_tvl(
    pools: Iterable[PoolWithReserves],
    threshold: Decimal = REFERENCE_THRESHOLD,
) -> TvlBreakdown:
    """Compute the total TVL of all pools with a per-category breakdown."""
    reference_pools, other_pools = partition_pools(pools)

    valued = sum(
        1 for pool in other_pools if _revalue_pool(pool, reference_pools, threshold)
    )
    reference_pairs_tvl = _sum_tvl(reference_pools)
    non_reference_pairs_tvl = _sum_tvl(other_pools)

    breakdown = TvlBreakdown(
        total=add(reference_pairs_tvl, non_reference_pairs_tvl),
        reference_pairs_tvl=reference_pairs_tvl,
        non_reference_pairs_tvl=non_reference_pairs_tvl,
        reference_pool_count=len(reference_pools),
        non_reference_pool_count=len(other_pools),
        valued_pool_count=valued,
    )
    logger.debug(
        "Total TVL %s XRP (XRP pairs %s, non-XRP pairs %s, %d/%d non-XRP pools valued)",
        breakdown.total,
        breakdown.reference_pairs_tvl,
        breakdown.non_reference_pairs_tvl,
        breakdown.valued_pool_count,
        breakdown.non_reference_pool_count,
    )
    return breakdown


def compute_total_tvl(
    pools: Iterable[PoolWithReserves],
    threshold: Decimal = REFERENCE_THRESHOLD,
) -> Decimal:
    """Total TVL of all pools, in XRP."""
    return aggregate_tvl(pools, threshold).total
