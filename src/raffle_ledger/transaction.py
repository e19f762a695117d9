from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List

log = logging.getLogger(__name__)

Undo = Callable[[], None]


class Journal:
    """
    All-or-nothing execution for ledger operations.

    Each public operation opens a frame; every state mutation made while the
    frame is open registers an undo callback. If the frame exits with an
    exception, its undo log is replayed in reverse and the exception propagates.
    A frame that succeeds is folded into its parent, so a failing outer
    operation also reverts the effects of nested (re-entrant) operations that
    had completed inside it.

    Outside any frame mutations commit immediately.
    """

    def __init__(self) -> None:
        self._frames: List[List[Undo]] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    def record(self, undo: Undo) -> None:
        if self._frames:
            self._frames[-1].append(undo)

    @contextmanager
    def frame(self, label: str = "operation") -> Iterator[None]:
        self._frames.append([])
        try:
            yield
        except BaseException as e:
            # Interrupts revert too; a frame must never outlive its operation.
            undo_log = self._frames.pop()
            log.warning(
                "Rolling back %s at depth %d (%d effects): %s",
                label,
                len(self._frames),
                len(undo_log),
                repr(e),
            )
            for undo in reversed(undo_log):
                undo()
            raise
        committed = self._frames.pop()
        if self._frames:
            self._frames[-1].extend(committed)
