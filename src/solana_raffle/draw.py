from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional, Tuple

import base58

from .project_constants import LAMPORT_DECIMALS


@dataclass(frozen=True)
class BlockSeed:
    target_slot: int
    slot: int  # first produced slot at or after target_slot
    blockhash: str
    seed_hash_hex: str


@dataclass(frozen=True)
class SettlementRecord:
    request_id: int
    random_value: int
    winner_index: int
    winner: str
    prize: int
    entrants: Tuple[str, ...]
    amounts: Tuple[int, ...]
    settled_at: float
    seed: Optional[BlockSeed] = None


def to_tokens(raw_amount: int) -> float:
    return round(raw_amount / (10**LAMPORT_DECIMALS), 4)


def pick_winner_index(random_value: int, participant_count: int) -> int:
    if participant_count <= 0:
        raise ValueError("Cannot pick a winner without participants.")
    return random_value % participant_count


def random_value_from_blockhash(blockhash: str, request_id: int) -> Tuple[int, str]:
    """
    Derive the random word for ``request_id`` from a finalized blockhash.

    The 32 decoded blockhash bytes are hashed together with the request id
    (32 bytes, big-endian) so two requests seeded by the same block still
    get independent words.
    """
    try:
        seed_bytes = base58.b58decode(blockhash)
    except ValueError as e:
        raise RuntimeError(f"Blockhash is not valid base58: {blockhash!r}") from e
    if len(seed_bytes) != 32:
        raise RuntimeError(
            f"Blockhash must decode to 32 bytes, got {len(seed_bytes)}"
        )

    digest = hashlib.sha256(seed_bytes + request_id.to_bytes(32, "big"))
    seed_hash_hex = digest.hexdigest()
    return int(seed_hash_hex, 16), seed_hash_hex
