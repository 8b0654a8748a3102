"""
Periodic raffle state machine.

A round accepts entries while OPEN. Once the interval has elapsed with funds
and players in the pool, settlement moves the round to CALCULATING and asks
the randomness oracle for one word. The oracle later calls
``fulfill_settlement``, which picks the winner, resets the round and only
then pays the pool out.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from .config import RaffleConfig
from .coordinator import RandomnessOracleClient, RandomnessRequestCoordinator
from .draw import BlockSeed, SettlementRecord, pick_winner_index, to_tokens
from .eligibility import RaffleState, is_upkeep_needed
from .errors import (
    OnlyCoordinatorCanFulfill,
    RaffleNotCalculating,
    RaffleNotOpen,
    SendMoreToEnterRaffle,
    TransferFailed,
    UnknownRequest,
    UpkeepNotNeeded,
)
from .events import EntryRecorded, EventLog, SettlementRequested, WinnerPicked
from .ledger import EntryLedger
from .payout import PayoutGateway
from .project_constants import NUM_WORDS

log = logging.getLogger(__name__)


class Raffle:
    def __init__(
        self,
        config: RaffleConfig,
        oracle: RandomnessOracleClient,
        payout: PayoutGateway,
        *,
        clock: Callable[[], float] = time.time,
        events: Optional[EventLog] = None,
    ) -> None:
        self._config = config
        self._oracle = oracle
        self._payout = payout
        self._clock = clock
        self.events = events or EventLog()

        self._ledger = EntryLedger()
        self._coordinator = RandomnessRequestCoordinator(oracle, NUM_WORDS)
        self._state = RaffleState.OPEN
        self._last_timestamp = clock()
        self._recent_winner: Optional[str] = None
        self._last_settlement: Optional[SettlementRecord] = None
        # Funds in custody; only differs from the pool after a failed payout.
        self._held_funds = 0

    # ---- operations ----

    def enter(self, player: str, amount: int) -> None:
        if self._state is not RaffleState.OPEN:
            raise RaffleNotOpen(self._state)
        if amount < self._config.entrance_fee:
            raise SendMoreToEnterRaffle(amount, self._config.entrance_fee)

        self._ledger.add_entry(player, amount)
        self._held_funds += amount
        log.info(
            "Entry #%d from %s (%.4f SOL)",
            self._ledger.count(),
            player,
            to_tokens(amount),
        )
        self.events.emit(EntryRecorded(player))

    def check_eligibility(self) -> bool:
        now = self._clock()
        needed = is_upkeep_needed(
            self._state,
            self._last_timestamp,
            now,
            self._ledger.balance,
            self._ledger.count(),
            self._config.interval,
        )
        log.debug(
            "Eligibility at %s: %s (state=%s, elapsed=%s, balance=%d, players=%d)",
            now,
            needed,
            self._state.name,
            now - self._last_timestamp,
            self._ledger.balance,
            self._ledger.count(),
        )
        return needed

    def initiate_settlement(self) -> int:
        if not self.check_eligibility():
            raise UpkeepNotNeeded(
                self._ledger.balance, self._ledger.count(), self._state
            )

        self._state = RaffleState.CALCULATING
        try:
            request_id = self._coordinator.issue_request()
        except Exception:
            self._state = RaffleState.OPEN
            raise

        log.info("Requested randomness for settlement: request %s", request_id)
        self.events.emit(SettlementRequested(request_id))
        return request_id

    def fulfill_settlement(
        self,
        request_id: int,
        random_value: int,
        *,
        caller: Any,
        seed: Optional[BlockSeed] = None,
    ) -> None:
        """Settle the round; ``seed`` records where ``random_value`` came from."""
        if caller is not self._oracle:
            raise OnlyCoordinatorCanFulfill(caller)
        if self._state is not RaffleState.CALCULATING:
            log.warning("Rejected fulfillment %s: no settlement in progress", request_id)
            raise RaffleNotCalculating(self._state)
        if not self._coordinator.consume(request_id):
            log.warning(
                "Rejected fulfillment %s: outstanding request is %s",
                request_id,
                self._coordinator.outstanding,
            )
            raise UnknownRequest(request_id)

        participant_count = self._ledger.count()
        winner_index = pick_winner_index(random_value, participant_count)
        winner = self._ledger.entry_at(winner_index)
        entrants = self._ledger.entries()
        amounts = self._ledger.amounts()

        self._recent_winner = winner
        prize = self._ledger.clear()
        now = self._clock()
        self._last_timestamp = now
        self._state = RaffleState.OPEN
        self._last_settlement = SettlementRecord(
            request_id=request_id,
            random_value=random_value,
            winner_index=winner_index,
            winner=winner,
            prize=prize,
            entrants=entrants,
            amounts=amounts,
            settled_at=now,
            seed=seed,
        )
        log.info(
            "Winner of request %s: %s (index %d of %d), prize %.4f SOL",
            request_id,
            winner,
            winner_index,
            participant_count,
            to_tokens(prize),
        )

        # Everything above must be settled before funds leave custody.
        self._pay(winner, prize)
        self.events.emit(WinnerPicked(winner))

    def _pay(self, winner: str, prize: int) -> None:
        try:
            sent = self._payout.transfer(winner, prize)
        except Exception as e:
            log.error("Payout of %d to %s raised: %s", prize, winner, e)
            raise TransferFailed(winner, prize) from e
        if not sent:
            log.error("Payout of %d to %s failed; funds stay in custody", prize, winner)
            raise TransferFailed(winner, prize)
        self._held_funds -= prize

    # ---- read-only accessors ----

    @property
    def entrance_fee(self) -> int:
        return self._config.entrance_fee

    @property
    def interval(self) -> float:
        return self._config.interval

    @property
    def state(self) -> RaffleState:
        return self._state

    def get_player(self, index: int) -> str:
        return self._ledger.entry_at(index)

    @property
    def number_of_players(self) -> int:
        return self._ledger.count()

    @property
    def pool_balance(self) -> int:
        return self._ledger.balance

    @property
    def balance(self) -> int:
        return self._held_funds

    @property
    def recent_winner(self) -> Optional[str]:
        return self._recent_winner

    @property
    def last_settlement_timestamp(self) -> float:
        return self._last_timestamp

    @property
    def last_settlement(self) -> Optional[SettlementRecord]:
        return self._last_settlement

    @property
    def outstanding_request(self) -> Optional[int]:
        return self._coordinator.outstanding

    @property
    def num_words(self) -> int:
        return self._coordinator.num_words
