from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class EntryAccepted:
    epoch: int
    identities: Tuple[str, ...]


@dataclass(frozen=True)
class RefundIssued:
    epoch: int
    identity: str
    amount: int


@dataclass(frozen=True)
class WinnerSelected:
    epoch: int
    identity: str
    amount: int


@dataclass(frozen=True)
class FeesWithdrawn:
    recipient: str
    amount: int


@dataclass(frozen=True)
class FeeRecipientChanged:
    previous: str
    current: str
