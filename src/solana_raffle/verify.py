from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict

from .draw import SettlementRecord, pick_winner_index, random_value_from_blockhash


def build_audit(record: SettlementRecord) -> Dict[str, Any]:
    seed = record.seed
    return {
        "metadata": {
            "tool": "solana-raffle",
            "version": "1.0.0",
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "request_id": record.request_id,
            "target_slot": seed.target_slot if seed else None,
            "seed_slot": seed.slot if seed else None,
            "seed_blockhash": seed.blockhash if seed else None,
            "seed_hash_hex": seed.seed_hash_hex if seed else None,
            "random_value": str(record.random_value),  # big int; store as string for safety
            "settled_at": record.settled_at,
            "prize": record.prize,
        },
        "winner": {
            "address": record.winner,
            "index": record.winner_index,
        },
        # Entrants in join order so anyone can re-run the pick.
        "all_entrants": [
            {"address": address, "amount": amount}
            for address, amount in zip(record.entrants, record.amounts)
        ],
    }


def write_audit(record: SettlementRecord, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_audit(record), f, indent=2)


def verify_audit(audit_path: str) -> Dict[str, Any]:
    with open(audit_path, "r", encoding="utf-8") as f:
        audit = json.load(f)

    meta = audit["metadata"]
    request_id = int(meta["request_id"])
    blockhash = meta.get("seed_blockhash")
    if not blockhash:
        raise RuntimeError("Audit has no block seed; the random value cannot be re-derived.")

    target_slot = int(meta["target_slot"])
    seed_slot = int(meta["seed_slot"])
    if seed_slot < target_slot:
        raise RuntimeError(
            f"Seed slot {seed_slot} precedes the requested target slot {target_slot}"
        )

    random_value, seed_hash_hex = random_value_from_blockhash(blockhash, request_id)
    if seed_hash_hex != meta["seed_hash_hex"]:
        raise RuntimeError(
            f"Seed hash mismatch: audit={meta['seed_hash_hex']} recomputed={seed_hash_hex}"
        )
    if random_value != int(meta["random_value"]):
        raise RuntimeError(
            f"Random value mismatch: audit={meta['random_value']} recomputed={random_value}"
        )

    entrants = audit["all_entrants"]
    if not entrants:
        raise RuntimeError("Audit lists no entrants.")

    index = pick_winner_index(random_value, len(entrants))
    index_expected = int(audit["winner"]["index"])
    if index != index_expected:
        raise RuntimeError(
            f"Winner index mismatch: audit={index_expected} recomputed={index}"
        )

    winner_expected = audit["winner"]["address"]
    if entrants[index]["address"] != winner_expected:
        raise RuntimeError(
            f"Winner mismatch: audit={winner_expected} recomputed={entrants[index]['address']}"
        )

    prize = sum(int(e["amount"]) for e in entrants)
    if prize != int(meta["prize"]):
        raise RuntimeError(f"Prize mismatch: audit={meta['prize']} recomputed={prize}")

    return {
        "ok": True,
        "request_id": request_id,
        "seed_slot": seed_slot,
        "seed_hash_hex": seed_hash_hex,
        "winner": winner_expected,
        "winner_index": index,
        "total_entries": len(entrants),
        "prize": prize,
    }
