from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict

from .draw import DrawRecord, pick_index, split_payout
from .randomness import hash_seed


def build_draw_audit(record: DrawRecord) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {
        "tool": "raffle-ledger",
        "version": "1.0.0",
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "epoch": record.epoch,
        "drawn_at": record.drawn_at,
        "seed": record.seed,
        "seed_hash_hex": hash_seed(record.seed)[0] if record.seed is not None else None,
        "random_value": str(record.random_value),  # big int; store as string for safety
        "entrance_fee": record.entrance_fee,
        "winner_percent": record.winner_percent,
        "pool": record.pool,
        "winner_index": record.winner_index,
    }
    return {
        "metadata": metadata,
        "winner": {
            "address": record.winner,
            "share": record.winner_share,
        },
        "fee_share": record.fee_share,
        # Entry order matters: the winner index is taken over this list.
        "all_entrants": list(record.entrants),
    }


def write_draw_audit(record: DrawRecord, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_draw_audit(record), f, indent=2)


def verify_audit_data(audit: Dict[str, Any]) -> Dict[str, Any]:
    meta = audit["metadata"]
    entrants = list(audit["all_entrants"])
    random_value = int(meta["random_value"])
    seed = meta.get("seed")

    seed_hash_hex = None
    if seed is not None:
        seed_hash_hex, seed_int = hash_seed(seed)
        if seed_int != random_value:
            raise RuntimeError(
                f"Random value mismatch: audit={random_value} recomputed={seed_int}"
            )

    pool = int(meta["entrance_fee"]) * len(entrants)
    if pool != int(meta["pool"]):
        raise RuntimeError(f"Pool mismatch: audit={meta['pool']} recomputed={pool}")

    index = pick_index(random_value, len(entrants))
    if index != int(meta["winner_index"]):
        raise RuntimeError(
            f"Winner index mismatch: audit={meta['winner_index']} recomputed={index}"
        )

    winner_expected = audit["winner"]["address"]
    if entrants[index] != winner_expected:
        raise RuntimeError(
            f"Winner mismatch: audit={winner_expected} recomputed={entrants[index]}"
        )

    winner_share, fee_share = split_payout(pool, int(meta["winner_percent"]))
    if winner_share != int(audit["winner"]["share"]) or fee_share != int(audit["fee_share"]):
        raise RuntimeError(
            f"Payout mismatch: audit={audit['winner']['share']}/{audit['fee_share']} "
            f"recomputed={winner_share}/{fee_share}"
        )

    return {
        "ok": True,
        "seed_hash_hex": seed_hash_hex,
        "winner": winner_expected,
        "winner_index": index,
        "winner_share": winner_share,
        "fee_share": fee_share,
        "total_entrants": len(entrants),
    }


def verify_audit(audit_path: str) -> Dict[str, Any]:
    with open(audit_path, "r", encoding="utf-8") as f:
        audit = json.load(f)
    return verify_audit_data(audit)
