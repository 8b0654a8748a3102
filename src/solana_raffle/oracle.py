"""
Randomness oracle clients.

Both oracles hand out increasing request ids starting at 1 and deliver the
first random word back through ``consumer.fulfill_settlement(...)``, naming
themselves as the caller.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .config import Settings
from .draw import BlockSeed, random_value_from_blockhash
from .errors import UnknownRequest
from .rpc import RpcClient, load_seed_from_block_feed_file

log = logging.getLogger(__name__)


class SettlementConsumer(Protocol):
    def fulfill_settlement(
        self,
        request_id: int,
        random_value: int,
        *,
        caller: Any,
        seed: Optional[BlockSeed] = None,
    ) -> None:
        ...


def _check_num_words(num_words: int) -> None:
    if num_words < 1:
        raise ValueError(f"num_words must be at least 1, got {num_words}")


class LocalRandomnessOracle:
    """In-process oracle; randomness is delivered when ``fulfill`` is called."""

    def __init__(self) -> None:
        self._next_id = 1
        self._pending: Dict[int, int] = {}

    @property
    def pending(self) -> List[int]:
        return sorted(self._pending)

    @property
    def last_request_id(self) -> Optional[int]:
        return self._next_id - 1 if self._next_id > 1 else None

    def request_randomness(self, num_words: int) -> int:
        _check_num_words(num_words)
        request_id = self._next_id
        self._next_id += 1
        self._pending[request_id] = num_words
        return request_id

    @staticmethod
    def derive_words(request_id: int, num_words: int) -> List[int]:
        return [
            int(hashlib.sha256(f"{request_id}:{i}".encode("utf-8")).hexdigest(), 16)
            for i in range(num_words)
        ]

    def fulfill(
        self,
        request_id: int,
        consumer: SettlementConsumer,
        words: Optional[Sequence[int]] = None,
    ) -> None:
        num_words = self._pending.pop(request_id, None)
        if num_words is None:
            raise UnknownRequest(request_id, "nonexistent request")
        if words is None:
            words = self.derive_words(request_id, num_words)
        elif len(words) != num_words:
            raise ValueError(f"Expected {num_words} words, got {len(words)}")
        consumer.fulfill_settlement(request_id, words[0], caller=self)


@dataclass(frozen=True)
class PendingBlockRequest:
    target_slot: int
    num_words: int


class SolanaBlockhashOracle:
    """
    Seeds each request with the blockhash of a future finalized slot.

    A request made at finalized slot S is bound to slot
    ``S + request_confirmations``, which nobody can know at request time.
    """

    def __init__(self, rpc: RpcClient, request_confirmations: int) -> None:
        if request_confirmations < 1:
            raise ValueError("request_confirmations must be at least 1")
        self.rpc = rpc
        self.request_confirmations = request_confirmations
        self._next_id = 1
        self._pending: Dict[int, PendingBlockRequest] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "SolanaBlockhashOracle":
        rpc = RpcClient(settings.rpc_url, timeout_s=settings.timeout_s)
        return cls(rpc, settings.request_confirmations)

    def target_slot(self, request_id: int) -> int:
        req = self._pending.get(request_id)
        if req is None:
            raise UnknownRequest(request_id, "nonexistent request")
        return req.target_slot

    def request_randomness(self, num_words: int) -> int:
        _check_num_words(num_words)
        current = self.rpc.get_slot()
        request_id = self._next_id
        self._next_id += 1
        self._pending[request_id] = PendingBlockRequest(
            target_slot=current + self.request_confirmations,
            num_words=num_words,
        )
        log.info(
            "Request %s bound to slot %d (finalized now: %d)",
            request_id,
            current + self.request_confirmations,
            current,
        )
        return request_id

    def fulfill(
        self,
        request_id: int,
        consumer: SettlementConsumer,
        feed_path: Optional[str] = None,
    ) -> None:
        """
        Fulfil one request from the first produced slot at or after its target.

        With ``feed_path`` the blockhash is read from a block feed file instead
        of RPC; the file must describe the target slot itself.
        """
        target = self.target_slot(request_id)
        if feed_path is not None:
            blockhash = load_seed_from_block_feed_file(feed_path, slot_hint=target)
            self._settle(request_id, consumer, target, blockhash)
            return

        slot = self.rpc.get_first_block_at_or_after(target)
        if slot is None:
            raise RuntimeError(
                f"Request {request_id}: no finalized block at or after slot {target} yet."
            )
        self._settle(request_id, consumer, slot, self.rpc.get_blockhash_for_slot(slot))

    def fulfill_ready(self, consumer: SettlementConsumer) -> List[int]:
        """Fulfil every pending request whose seed block is finalized."""
        current = self.rpc.get_slot()
        fulfilled: List[int] = []
        for request_id, req in sorted(self._pending.items()):
            if req.target_slot > current:
                continue
            # Skipped slots produce no block; the next produced one seeds the request.
            slot = self.rpc.get_first_block_at_or_after(req.target_slot)
            if slot is None:
                continue
            blockhash = self.rpc.get_blockhash_for_slot(slot)
            self._settle(request_id, consumer, slot, blockhash)
            fulfilled.append(request_id)
        return fulfilled

    def close(self) -> None:
        self.rpc.close()

    def _settle(
        self, request_id: int, consumer: SettlementConsumer, slot: int, blockhash: str
    ) -> None:
        target = self._pending[request_id].target_slot
        value, seed_hash_hex = random_value_from_blockhash(blockhash, request_id)
        seed = BlockSeed(
            target_slot=target,
            slot=slot,
            blockhash=blockhash,
            seed_hash_hex=seed_hash_hex,
        )
        del self._pending[request_id]
        if slot != target:
            log.info("Request %s: target slot %d skipped, using slot %d", request_id, target, slot)
        log.info("Request %s seed (slot %d): %s", request_id, slot, blockhash)
        log.info("Request %s seed SHA-256: %s", request_id, seed_hash_hex)
        consumer.fulfill_settlement(request_id, value, caller=self, seed=seed)
