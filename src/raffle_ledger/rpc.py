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

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

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


def load_seed_from_block_feed_file(path: str, slot_hint: Optional[int] = None) -> str:
    """
    Supports:
    1) Raw blockhash string in file
    2) JSON object containing:
       - {"blockhash": "..."}
       - {"slot": 123, "blockhash": "..."}   (verified against slot_hint)
       - {"blocks": {"123": {"blockhash": "..."}}}  (needs slot_hint)
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read().strip()

    if raw and raw[0] != "{":
        return raw

    try:
        j = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RuntimeError(f"Block feed file is not valid JSON or raw string: {e}") from e

    if isinstance(j, dict):
        if isinstance(j.get("blockhash"), str):
            if slot_hint is not None and "slot" in j and int(j["slot"]) != int(slot_hint):
                raise RuntimeError(
                    f"Block feed slot mismatch: file slot={j['slot']} vs expected slot={slot_hint}"
                )
            return j["blockhash"]

        if slot_hint is not None and isinstance(j.get("blocks"), dict):
            block_obj = j["blocks"].get(str(int(slot_hint)))
            if isinstance(block_obj, dict) and isinstance(block_obj.get("blockhash"), str):
                return block_obj["blockhash"]

    raise RuntimeError(
        "Could not find a blockhash in block feed file. "
        "Expected raw string or JSON with blockhash/(blocks[slot].blockhash)."
    )
