from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from ..units import add


class Balances:
    """Accumulates reported amounts per token label."""

    def __init__(self) -> None:
        self._balances: defaultdict[str, Decimal] = defaultdict(Decimal)

    def add(self, token: str, amount: Decimal) -> None:
        if amount < 0:
            raise ValueError(f"Cannot add negative amount {amount} for {token}")
        self._balances[token] = add(self._balances[token], amount)

    def get(self, token: str) -> Decimal:
        return self._balances.get(token, Decimal(0))

    def to_dict(self) -> dict[str, str]:
        return {token: str(amount) for token, amount in self._balances.items()}
