from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import List, Sequence, Tuple


@dataclass(frozen=True)
class Settlement:
    request_id: int
    random_words: Tuple[int, ...]
    participants: Tuple[str, ...]
    winner_index: int
    winner: str
    prize: int
    settled_at: int


def pick_winner_index(random_word: int, player_count: int) -> int:
    # Modulo bias is accepted: player counts are tiny next to 2**256.
    if player_count <= 0:
        raise ValueError("Cannot pick a winner without players.")
    return random_word % player_count


def expand_words(request_id: int, num_words: int) -> List[int]:
    """Derive num_words 256-bit integers from a request id."""
    words: List[int] = []
    for i in range(num_words):
        digest = hashlib.sha256(f"{request_id}:{i}".encode("utf-8")).hexdigest()
        words.append(int(digest, 16))
    return words


def select_winner(random_words: Sequence[int], participants: Sequence[str]) -> Tuple[int, str]:
    idx = pick_winner_index(random_words[0], len(participants))
    return idx, participants[idx]
