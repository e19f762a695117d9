from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from .transaction import Journal


class PrizeIssuer(Protocol):
    def issue(self, winner: str, epoch: int) -> None: ...


@dataclass(frozen=True)
class Prize:
    token_id: int
    owner: str
    epoch: int


class InMemoryPrizeIssuer:
    """Records one prize token per draw. Raise from ``issue`` to refuse."""

    def __init__(self, journal: Optional[Journal] = None) -> None:
        self._journal = journal or Journal()
        self.prizes: List[Prize] = []

    def issue(self, winner: str, epoch: int) -> None:
        self.prizes.append(Prize(len(self.prizes), winner, epoch))
        self._journal.record(self.prizes.pop)

    def owner_of(self, token_id: int) -> str:
        return self.prizes[token_id].owner
