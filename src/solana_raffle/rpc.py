from __future__ import annotations

import json
from typing import Any, Dict, Optional
import httpx


class RpcClient:
    def __init__(
        self,
        rpc_url: str,
        timeout_s: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.client = httpx.Client(timeout=timeout_s, transport=transport)

    def close(self) -> None:
        self.client.close()

    def get_slot(self, commitment: str = "finalized") -> int:
        """Returns the current slot."""
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getSlot",
            "params": [{"commitment": commitment}],
        }
        data = self._post(payload)
        return int(data["result"])

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        resp = self.client.post(self.rpc_url, json=payload)
        resp.raise_for_status()
        data = resp.json()
        if "error" in data:
            raise RuntimeError(f"RPC error: {data['error']}")
        return data

    def get_first_block_at_or_after(
        self, slot: int, commitment: str = "finalized"
    ) -> Optional[int]:
        """Returns the first produced slot >= ``slot``, or None if none is finalized yet."""
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getBlocksWithLimit",
            "params": [slot, 1, {"commitment": commitment}],
        }
        data = self._post(payload)
        blocks = data.get("result") or []
        return int(blocks[0]) if blocks else None

    def get_blockhash_for_slot(self, slot: int) -> str:
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getBlock",
            "params": [
                slot,
                {"encoding": "json", "transactionDetails": "none", "rewards": False},
            ],
        }
        data = self._post(payload)
        result = data.get("result")
        if not result or "blockhash" not in result:
            raise RuntimeError(f"Slot {slot}: getBlock returned no blockhash.")
        return result["blockhash"]


def load_seed_from_block_feed_file(path: str, slot_hint: int) -> str:
    """
    Reads the blockhash of ``slot_hint`` from a block feed file.

    The file must name the slot it describes:
       - {"slot": 123, "blockhash": "..."}
       - {"blocks": {"123": {"blockhash": "..."}, ...}}
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read().strip()

    try:
        j = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RuntimeError(f"Block feed file is not valid JSON: {e}")

    if isinstance(j, dict):
        if "blockhash" in j and isinstance(j["blockhash"], str):
            if "slot" not in j:
                raise RuntimeError("Block feed file does not state its slot.")
            if int(j["slot"]) != int(slot_hint):
                raise RuntimeError(
                    f"Block feed slot mismatch: file slot={j['slot']} vs expected slot={slot_hint}"
                )
            return j["blockhash"]

        # A feed of many blocks
        if "blocks" in j and isinstance(j["blocks"], dict):
            block_obj = j["blocks"].get(str(int(slot_hint)))
            if isinstance(block_obj, dict) and isinstance(
                block_obj.get("blockhash"), str
            ):
                return block_obj["blockhash"]
            raise RuntimeError(f"Block feed has no block for slot {slot_hint}.")

    raise RuntimeError(
        "Could not find a blockhash in block feed file. "
        "Expected JSON with slot+blockhash or blocks[slot].blockhash."
    )
