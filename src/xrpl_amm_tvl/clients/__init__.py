from __future__ import annotations

from .xrpl_node import LedgerDataPage, XrplNodeClient, XrplNodeError

__all__ = ["LedgerDataPage", "XrplNodeClient", "XrplNodeError"]
