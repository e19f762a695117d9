from __future__ import annotations

import logging

from .custody import FundCustody, Payout
from .errors import AlreadyRefunded, Unauthorized
from .registry import EntrantRegistry

log = logging.getLogger(__name__)


class RefundProcessor:
    def __init__(self, registry: EntrantRegistry, custody: FundCustody) -> None:
        self._registry = registry
        self._custody = custody

    def check(self, slot_index: int, caller: str) -> None:
        entrant = self._registry.entrant_at(slot_index)
        if entrant.identity != caller:
            raise Unauthorized(f"Slot {slot_index} does not belong to {caller}")
        if not entrant.active:
            raise AlreadyRefunded(f"Slot {slot_index} was already refunded")

    def apply(self, slot_index: int, caller: str, entrance_fee: int) -> Payout:
        """
        Validate and book the refund. No value leaves custody here; the
        returned payout is executed by the caller once the booking is done.
        """
        self.check(slot_index, caller)
        identity = self._registry.deactivate(slot_index)
        self._custody.debit(entrance_fee)
        log.info("Refund booked for slot %d (%s)", slot_index, identity)
        return Payout(identity, entrance_fee)
