from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..domain import REFERENCE_ASSET, Asset, Reserve
from ..units import drops_to_xrp, multiply

RawReserve = str | dict[str, Any]


def _to_decimal(raw: Any) -> Decimal:
    try:
        value = Decimal(str(raw))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount value: {raw!r}") from e
    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount value: {raw!r}")
    return value


def parse_reserve(raw: RawReserve) -> Reserve:
    """Normalize a raw ``amm_info`` amount into a ``Reserve``.

    Args:
        raw: Either a string of drops (XRP) or an issued currency amount
            object with ``currency``, ``issuer`` and ``value`` keys.

    Returns:
        The reserve, with XRP converted from drops to whole XRP.

    Raises:
        ValueError: If the amount is not a valid number or the object is
            missing fields
    """
    if isinstance(raw, str):
        return Reserve(asset=REFERENCE_ASSET, amount=drops_to_xrp(_to_decimal(raw)))

    try:
        asset = Asset(currency=raw["currency"], issuer=raw.get("issuer"))
        value = raw["value"]
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed reserve amount: {raw!r}") from e

    return Reserve(asset=asset, amount=_to_decimal(value))


def naive_tvl(token0: Reserve, token1: Reserve) -> Decimal:
    """Value a pool as twice its XRP side; zero if it holds no XRP."""
    if token0.asset.is_reference:
        return multiply(token0.amount, Decimal(2))
    if token1.asset.is_reference:
        return multiply(token1.amount, Decimal(2))
    return Decimal(0)
