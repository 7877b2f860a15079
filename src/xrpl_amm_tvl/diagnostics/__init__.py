from __future__ import annotations

from .measure import measure
from .memory import MemorySample, MemorySampler, MemorySummary

__all__ = ["measure", "MemorySample", "MemorySampler", "MemorySummary"]
