"""
Randomness sources consumed by the draw.

A source hands out one unpredictable integer per draw. The hash-based sources
also expose the seed they used so a draw can be re-derived from its audit.
"""
from __future__ import annotations

import abc
import hashlib
import random
from typing import Callable, Optional, Tuple

from .rpc import RpcClient, load_seed_from_block_feed_file


def hash_seed(seed: str) -> Tuple[str, int]:
    seed_hash_hex = hashlib.sha256(seed.encode("utf-8")).hexdigest()
    return seed_hash_hex, int(seed_hash_hex, 16)


class RandomnessSource(abc.ABC):
    last_seed: Optional[str] = None

    @abc.abstractmethod
    def next_int(self) -> int:
        ...


class SystemRandomness(RandomnessSource):
    """OS entropy. Not reproducible from an audit."""

    def __init__(self) -> None:
        self._rng = random.SystemRandom()

    def next_int(self) -> int:
        return self._rng.getrandbits(256)


class HashChainRandomness(RandomnessSource):
    """SHA-256 over a public seed and a draw counter."""

    def __init__(self, seed: str) -> None:
        self.seed = seed
        self.counter = 0

    def next_int(self) -> int:
        self.last_seed = f"{self.seed}:{self.counter}"
        self.counter += 1
        return hash_seed(self.last_seed)[1]


class BlockhashRandomness(RandomnessSource):
    """
    Seeds each draw with the block hash of a target slot. The slot advances by
    ``stride`` after every draw so no hash is reused.
    """

    def __init__(self, fetch_blockhash: Callable[[int], str], first_slot: int, stride: int = 1) -> None:
        if stride <= 0:
            raise ValueError("stride must be positive")
        self._fetch = fetch_blockhash
        self.slot = first_slot
        self.stride = stride

    @classmethod
    def from_rpc(
        cls, client: RpcClient, first_slot: Optional[int] = None, stride: int = 1
    ) -> "BlockhashRandomness":
        # Without an explicit slot, start after the current finalized one so
        # the first seed is not yet known when the source is set up.
        if first_slot is None:
            first_slot = client.get_slot() + stride
        return cls(client.get_blockhash_for_slot, first_slot, stride)

    @classmethod
    def from_feed_file(cls, path: str, first_slot: int, stride: int = 1) -> "BlockhashRandomness":
        return cls(lambda slot: load_seed_from_block_feed_file(path, slot_hint=slot), first_slot, stride)

    def next_int(self) -> int:
        blockhash = self._fetch(self.slot)
        self.last_seed = blockhash
        self.slot += self.stride
        return hash_seed(blockhash)[1]
