from __future__ import annotations

from typing import List, Tuple

from .errors import PlayerIndexOutOfRange


class EntryLedger:
    """Players of the current round, in join order, and their pooled funds."""

    def __init__(self) -> None:
        self._players: List[str] = []
        self._amounts: List[int] = []
        self._balance = 0

    @property
    def balance(self) -> int:
        return self._balance

    def add_entry(self, player: str, amount: int) -> None:
        # Duplicates are allowed: one entry per paid fee.
        self._players.append(player)
        self._amounts.append(amount)
        self._balance += amount

    def clear(self) -> int:
        """Empty the ledger and return the pool it held."""
        drained = self._balance
        self._players = []
        self._amounts = []
        self._balance = 0
        return drained

    def entry_at(self, index: int) -> str:
        if index < 0 or index >= len(self._players):
            raise PlayerIndexOutOfRange(index, len(self._players))
        return self._players[index]

    def count(self) -> int:
        return len(self._players)

    def entries(self) -> Tuple[str, ...]:
        return tuple(self._players)

    def amounts(self) -> Tuple[int, ...]:
        return tuple(self._amounts)
