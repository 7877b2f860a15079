"""Domain models for AMM pool valuation."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ..constants import XRP_CURRENCY


@dataclass(frozen=True)
class Asset:
    """A currency code plus an optional issuer account (``None`` for XRP)."""

    currency: str
    issuer: str | None = None

    @property
    def is_reference(self) -> bool:
        return self == REFERENCE_ASSET

    def to_request(self) -> dict[str, str]:
        """Render the asset the way rippled expects it in request params."""
        if self.issuer is None:
            return {"currency": self.currency}
        return {"currency": self.currency, "issuer": self.issuer}

    @classmethod
    def from_ledger(cls, raw: dict[str, Any]) -> "Asset":
        try:
            currency = raw["currency"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed asset in ledger entry: {raw!r}") from e
        return cls(currency=currency, issuer=raw.get("issuer"))

    def __str__(self) -> str:
        if self.issuer is None:
            return self.currency
        return f"{self.currency}.{self.issuer}"


REFERENCE_ASSET = Asset(XRP_CURRENCY)


@dataclass(frozen=True)
class Reserve:
    """Amount of one asset held by a pool, in the asset's whole units."""

    asset: Asset
    amount: Decimal


@dataclass(frozen=True)
class PoolDescriptor:
    """An AMM pool as found in the ledger state."""

    account: str
    asset1: Asset
    asset2: Asset


@dataclass
class PoolWithReserves:
    """A pool with its parsed reserves and TVL expressed in XRP.

    ``tvl`` starts as the naive valuation and is overwritten for pools that
    do not hold XRP once an implied price is found.
    """

    pool: str
    token0: Reserve
    token1: Reserve
    tvl: Decimal = field(default_factory=Decimal)

    @property
    def is_reference_paired(self) -> bool:
        return self.token0.asset.is_reference or self.token1.asset.is_reference

    def holds(self, asset: Asset) -> bool:
        return self.token0.asset == asset or self.token1.asset == asset

    @property
    def reference_reserve(self) -> Reserve:
        if self.token0.asset.is_reference:
            return self.token0
        if self.token1.asset.is_reference:
            return self.token1
        raise ValueError(f"Pool {self.pool} does not hold the reference asset")

    @property
    def foreign_reserve(self) -> Reserve:
        if self.token0.asset.is_reference:
            return self.token1
        if self.token1.asset.is_reference:
            return self.token0
        raise ValueError(f"Pool {self.pool} does not hold the reference asset")


@dataclass(frozen=True)
class TvlBreakdown:
    """Result of one aggregation pass."""

    total: Decimal
    reference_pairs_tvl: Decimal
    non_reference_pairs_tvl: Decimal
    reference_pool_count: int
    non_reference_pool_count: int
    valued_pool_count: int

    @property
    def unvalued_pool_count(self) -> int:
        return self.non_reference_pool_count - self.valued_pool_count


__all__ = [
    "Asset",
    "REFERENCE_ASSET",
    "Reserve",
    "PoolDescriptor",
    "PoolWithReserves",
    "TvlBreakdown",
]
