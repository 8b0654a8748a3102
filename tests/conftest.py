from __future__ import annotations

import json

import httpx
import pytest

from solana_raffle.config import RaffleConfig
from solana_raffle.oracle import LocalRandomnessOracle, SolanaBlockhashOracle
from solana_raffle.payout import AccountBook
from solana_raffle.raffle import Raffle
from solana_raffle.rpc import RpcClient

ENTRANCE_FEE = 10
INTERVAL = 30


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def oracle():
    return LocalRandomnessOracle()


@pytest.fixture
def book():
    return AccountBook()


@pytest.fixture
def raffle(clock, oracle, book):
    return Raffle(
        RaffleConfig(entrance_fee=ENTRANCE_FEE, interval=INTERVAL),
        oracle,
        book,
        clock=clock,
    )


@pytest.fixture
def calculating(raffle, clock):
    """Raffle with A, B and C entered and settlement requested."""
    for player in ("A", "B", "C"):
        raffle.enter(player, ENTRANCE_FEE)
    clock.advance(INTERVAL + 1)
    raffle.initiate_settlement()
    return raffle


class FakeChain:
    """Answers getSlot/getBlocksWithLimit/getBlock the way a Solana RPC node does."""

    def __init__(self, slot: int = 500) -> None:
        self.slot = slot
        self.blockhashes = {}
        self.calls = []

    def _result(self, result):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        self.calls.append(method)
        if method == "getSlot":
            return self._result(self.slot)
        if method == "getBlocksWithLimit":
            start, limit = body["params"][0], body["params"][1]
            produced = sorted(s for s in self.blockhashes if start <= s <= self.slot)
            return self._result(produced[:limit])
        if method == "getBlock":
            slot = body["params"][0]
            if slot not in self.blockhashes:
                return httpx.Response(
                    200,
                    json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32009, "message": "skipped"}},
                )
            return self._result({"blockhash": self.blockhashes[slot]})
        return httpx.Response(404)


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def solana_oracle(chain):
    oracle = SolanaBlockhashOracle(
        RpcClient("http://rpc.test", transport=httpx.MockTransport(chain)),
        request_confirmations=3,
    )
    yield oracle
    oracle.close()


@pytest.fixture
def solana_raffle(solana_oracle, clock, book):
    """Raffle seeded from the fake chain with A, B and C entered; slot 503 is the target."""
    raffle = Raffle(RaffleConfig(ENTRANCE_FEE, INTERVAL), solana_oracle, book, clock=clock)
    for player in ("A", "B", "C"):
        raffle.enter(player, ENTRANCE_FEE)
    clock.advance(INTERVAL + 1)
    return raffle
