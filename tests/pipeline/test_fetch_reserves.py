from __future__ import annotations

from decimal import Decimal

import pytest

from xrpl_amm_tvl.domain import REFERENCE_ASSET, Asset, PoolDescriptor
from xrpl_amm_tvl.pipeline.reserves import fetch_all_pool_reserves, fetch_pool_reserves

from fakes import FakeNodeClient

XRP_USD = PoolDescriptor("rXrpUsd", Asset("XRP"), Asset("USD", "rUSD"))
XRP_KEK = PoolDescriptor("rXrpKek", Asset("XRP"), Asset("KEK", "rKEK"))
KEK_USD = PoolDescriptor("rKekUsd", Asset("KEK", "rKEK"), Asset("USD", "rUSD"))


@pytest.mark.asyncio
async def test_fetch_pool_reserves_parses_and_values(fake_client):
    pool = await fetch_pool_reserves(fake_client, XRP_USD)

    assert pool.pool == "rXrpUsd"
    assert pool.token0.asset == REFERENCE_ASSET
    assert pool.token0.amount == Decimal(21_000)
    assert pool.token1.asset == Asset("USD", "rUSD")
    assert pool.token1.amount == Decimal(10_500)
    assert pool.tvl == Decimal(42_000)


@pytest.mark.asyncio
async def test_non_xrp_pool_starts_at_zero(fake_client):
    pool = await fetch_pool_reserves(fake_client, KEK_USD)

    assert pool.tvl == 0
    assert not pool.is_reference_paired


@pytest.mark.asyncio
async def test_fetch_all_keeps_discovery_order(fake_client):
    pools = await fetch_all_pool_reserves(fake_client, [KEK_USD, XRP_USD, XRP_KEK])

    assert [p.pool for p in pools] == ["rKekUsd", "rXrpUsd", "rXrpKek"]
    assert fake_client.amm_info_calls == ["rKekUsd", "rXrpUsd", "rXrpKek"]


@pytest.mark.asyncio
async def test_malformed_reserve_aborts_fetch():
    client = FakeNodeClient(
        reserves={
            "rXrpUsd": ("21000000000", {"currency": "USD", "issuer": "rUSD", "value": "1"}),
            "rXrpKek": ("not-a-number", {"currency": "KEK", "issuer": "rKEK", "value": "1"}),
        }
    )

    with pytest.raises(ValueError, match="Invalid amount value"):
        await fetch_all_pool_reserves(client, [XRP_USD, XRP_KEK])
