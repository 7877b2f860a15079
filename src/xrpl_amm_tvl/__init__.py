"""XRPL AMM total value locked, denominated in XRP."""

from __future__ import annotations

from .processors import compute_total_tvl

__all__ = ["compute_total_tvl"]
