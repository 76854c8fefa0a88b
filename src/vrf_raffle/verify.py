from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict

from .draw import Settlement, pick_winner_index


def build_audit(settlement: Settlement, network: str, raffle_address: str, entry_fee: int) -> Dict[str, Any]:
    return {
        "metadata": {
            "tool": "vrf-raffle",
            "version": "1.0.0",
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "network": network,
            "raffle": raffle_address,
            "entry_fee": entry_fee,
            "request_id": settlement.request_id,
            # big ints; store as strings for safety
            "random_words": [str(w) for w in settlement.random_words],
            "winner_index": settlement.winner_index,
            "prize": str(settlement.prize),
            "settled_at": settlement.settled_at,
        },
        "winner": {"address": settlement.winner},
        # Entry order is the index space for selection.
        "all_entrants": list(settlement.participants),
    }


def write_audit(path: str, audit: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(audit, f, indent=2)


def verify_audit(audit_path: str) -> Dict[str, Any]:
    with open(audit_path, "r", encoding="utf-8") as f:
        audit = json.load(f)

    meta = audit["metadata"]
    words = [int(w) for w in meta["random_words"]]
    entrants = list(audit["all_entrants"])
    if not words:
        raise RuntimeError("Audit has no random words.")
    if not entrants:
        raise RuntimeError("Audit has no entrants.")

    prize = int(meta["prize"])
    entry_fee = int(meta["entry_fee"])
    if prize < entry_fee * len(entrants):
        raise RuntimeError(
            f"Prize mismatch: audit={prize} below {len(entrants)} entries x fee {entry_fee}"
        )

    idx = pick_winner_index(words[0], len(entrants))
    if idx != int(meta["winner_index"]):
        raise RuntimeError(
            f"Winner index mismatch: audit={meta['winner_index']} recomputed={idx}"
        )

    winner_expected = audit["winner"]["address"]
    if entrants[idx] != winner_expected:
        raise RuntimeError(
            f"Winner mismatch: audit={winner_expected} recomputed={entrants[idx]}"
        )

    return {
        "ok": True,
        "request_id": int(meta["request_id"]),
        "winner": winner_expected,
        "winner_index": idx,
        "players": len(entrants),
        "prize": prize,
    }
