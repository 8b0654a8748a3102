from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, Protocol, Set

log = logging.getLogger(__name__)


class PayoutGateway(Protocol):
    def transfer(self, recipient: str, amount: int) -> bool:
        ...


class AccountBook:
    """
    In-memory custody of player balances.

    Recipients listed in ``blocked`` refuse incoming transfers, the same way
    an account that cannot receive funds would.
    """

    def __init__(self, blocked: Iterable[str] = ()) -> None:
        self.balances: Dict[str, int] = defaultdict(int)
        self.blocked: Set[str] = set(blocked)

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def transfer(self, recipient: str, amount: int) -> bool:
        if recipient in self.blocked:
            log.warning("Transfer to %s refused", recipient)
            return False
        self.balances[recipient] += amount
        return True
