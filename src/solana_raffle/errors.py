"""
Raffle errors.

Every rejection raised by the raffle core derives from RaffleError so callers
can handle the whole family in one place.
"""

from __future__ import annotations

from typing import Any


class RaffleError(Exception):
    """Base class for all raffle errors."""


# ============ Entry ============

class SendMoreToEnterRaffle(RaffleError):
    def __init__(self, amount: int, entrance_fee: int) -> None:
        self.amount = amount
        self.entrance_fee = entrance_fee
        super().__init__(
            f"Sent {amount}, entrance fee is {entrance_fee}"
        )


class RaffleNotOpen(RaffleError):
    def __init__(self, state: Any) -> None:
        self.state = state
        super().__init__(f"Raffle is not open (state={state.name})")


class PlayerIndexOutOfRange(RaffleError, IndexError):
    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(f"Player index {index} out of range for {size} entries")


# ============ Settlement ============

class UpkeepNotNeeded(RaffleError):
    """Settlement was requested while the round is not eligible.

    Carries the snapshot the eligibility check saw, for diagnostics.
    """

    def __init__(self, balance: int, num_players: int, state: Any) -> None:
        self.balance = balance
        self.num_players = num_players
        self.state = state
        super().__init__(
            f"Upkeep not needed (balance={balance}, players={num_players}, state={state.name})"
        )


class RequestAlreadyOutstanding(RaffleError):
    def __init__(self, request_id: int) -> None:
        self.request_id = request_id
        super().__init__(f"Randomness request {request_id} is still outstanding")


class RaffleNotCalculating(RaffleError):
    def __init__(self, state: Any) -> None:
        self.state = state
        super().__init__(f"No settlement in progress (state={state.name})")


class UnknownRequest(RaffleError):
    def __init__(self, request_id: int, reason: str = "unknown or stale request") -> None:
        self.request_id = request_id
        super().__init__(f"Request {request_id}: {reason}")


class OnlyCoordinatorCanFulfill(RaffleError):
    def __init__(self, caller: Any) -> None:
        self.caller = caller
        super().__init__(f"Only the configured randomness oracle can fulfill, got {caller!r}")


# ============ Payout ============

class TransferFailed(RaffleError):
    """The prize transfer failed after the round had already been reset."""

    def __init__(self, recipient: str, amount: int) -> None:
        self.recipient = recipient
        self.amount = amount
        super().__init__(f"Transfer of {amount} to {recipient} failed")
