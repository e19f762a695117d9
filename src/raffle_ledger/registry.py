from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import DuplicateEntrant, InvalidIndex, NotActive
from .transaction import Journal


@dataclass
class Entrant:
    identity: str
    slot_index: int
    epoch: int
    active: bool = True


class EntrantRegistry:
    """
    Ordered entrant slots for the current round.

    Duplicate detection goes through ``_active_index`` (identity -> (epoch,
    slot)); a tag from an older epoch counts as inactive, so rotating the
    round never sweeps the index.
    """

    def __init__(self, journal: Optional[Journal] = None, epoch: int = 0) -> None:
        self._journal = journal or Journal()
        self._epoch = epoch
        self._slots: List[Entrant] = []
        self._active_index: Dict[str, Tuple[int, int]] = {}
        self._active_count = 0

    @property
    def epoch(self) -> int:
        return self._epoch

    def __len__(self) -> int:
        return len(self._slots)

    def is_active(self, identity: str) -> bool:
        tag = self._active_index.get(identity)
        return tag is not None and tag[0] == self._epoch

    def check_new(self, identities: Iterable[str]) -> List[str]:
        """Validate a batch without mutating anything. Returns it as a list."""
        batch = list(identities)
        seen = set()
        for identity in batch:
            if identity in seen:
                raise DuplicateEntrant(f"{identity} appears twice in the same entry")
            if self.is_active(identity):
                raise DuplicateEntrant(f"{identity} already entered round {self._epoch}")
            seen.add(identity)
        return batch

    def add(self, identities: Iterable[str]) -> List[int]:
        batch = self.check_new(identities)
        start = len(self._slots)
        for offset, identity in enumerate(batch):
            self._tag(identity, (self._epoch, start + offset))
            self._slots.append(Entrant(identity, start + offset, self._epoch))
        self._active_count += len(batch)

        def undo() -> None:
            del self._slots[start:]
            self._active_count -= len(batch)

        self._journal.record(undo)
        return list(range(start, start + len(batch)))

    def entrant_at(self, slot_index: int) -> Entrant:
        if (
            not isinstance(slot_index, int)
            or isinstance(slot_index, bool)
            or not 0 <= slot_index < len(self._slots)
        ):
            raise InvalidIndex(f"Slot {slot_index} is out of range (0..{len(self._slots) - 1})")
        return self._slots[slot_index]

    def identity_at(self, slot_index: int) -> str:
        return self.entrant_at(slot_index).identity

    def deactivate(self, slot_index: int) -> str:
        entrant = self.entrant_at(slot_index)
        if not entrant.active:
            raise NotActive(f"Slot {slot_index} is not active")

        entrant.active = False
        self._active_count -= 1
        self._tag(entrant.identity, None)

        def undo() -> None:
            entrant.active = True
            self._active_count += 1

        self._journal.record(undo)
        return entrant.identity

    def active_count(self) -> int:
        return self._active_count

    def active_slot_of(self, identity: str) -> Optional[int]:
        if not self.is_active(identity):
            return None
        return self._active_index[identity][1]

    def active_identities(self) -> List[str]:
        # Entry order; a draw is the only caller that walks the slots.
        return [e.identity for e in self._slots if e.active]

    def rotate_epoch(self) -> int:
        # Old slots become unreachable; their index tags go stale with the epoch.
        old_epoch, old_slots, old_count = self._epoch, self._slots, self._active_count
        self._epoch += 1
        self._slots = []
        self._active_count = 0

        def undo() -> None:
            self._epoch, self._slots, self._active_count = old_epoch, old_slots, old_count

        self._journal.record(undo)
        return self._epoch

    def _tag(self, identity: str, tag: Optional[Tuple[int, int]]) -> None:
        previous = self._active_index.get(identity)
        if tag is None:
            self._active_index.pop(identity, None)
        else:
            self._active_index[identity] = tag

        def undo() -> None:
            if previous is None:
                self._active_index.pop(identity, None)
            else:
                self._active_index[identity] = previous

        self._journal.record(undo)
