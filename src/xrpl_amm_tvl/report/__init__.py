from __future__ import annotations

from .balances import Balances
from .generator import PoolSummary, TvlReport, generate_report

__all__ = ["Balances", "PoolSummary", "TvlReport", "generate_report"]
