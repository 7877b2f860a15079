from __future__ import annotations

from typing import Any

import pytest

from fakes import FakeNodeClient, KEK_JSON, USD_JSON, XRP_JSON, amm_entry
from xrpl_amm_tvl.clients import LedgerDataPage


@pytest.fixture
def ledger_pages() -> list[LedgerDataPage]:
    return [
        LedgerDataPage(
            state=[amm_entry("rXrpUsd", XRP_JSON, USD_JSON)],
            marker="page-2",
        ),
        LedgerDataPage(
            state=[
                amm_entry("rXrpKek", XRP_JSON, KEK_JSON),
                amm_entry("rKekUsd", KEK_JSON, USD_JSON),
            ],
            marker=None,
        ),
    ]


@pytest.fixture
def pool_reserves() -> dict[str, tuple[Any, Any]]:
    return {
        "rXrpUsd": ("21000000000", {**USD_JSON, "value": "10500"}),
        "rXrpKek": ("30000000000", {**KEK_JSON, "value": "90000"}),
        "rKekUsd": ({**KEK_JSON, "value": "30000"}, {**USD_JSON, "value": "5000"}),
    }


@pytest.fixture
def fake_client(ledger_pages, pool_reserves) -> FakeNodeClient:
    return FakeNodeClient(pages=ledger_pages, reserves=pool_reserves)
