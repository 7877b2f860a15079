from __future__ import annotations

from .discovery import discover_pools, iter_ledger_pages
from .reserves import fetch_all_pool_reserves

__all__ = ["discover_pools", "iter_ledger_pages", "fetch_all_pool_reserves"]
