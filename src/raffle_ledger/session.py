from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .config import Settings
from .custody import FundCustody, InMemoryTransport, ValueTransport
from .draw import DrawEngine, DrawRecord
from .errors import (
    InsufficientPool,
    InvalidIdentity,
    PrizeIssuanceFailed,
    Unauthorized,
    WrongPayment,
)
from .events import (
    EntryAccepted,
    FeeRecipientChanged,
    FeesWithdrawn,
    RefundIssued,
    WinnerSelected,
)
from .identity import normalize_identities, normalize_identity
from .prizes import InMemoryPrizeIssuer, PrizeIssuer
from .randomness import RandomnessSource
from .refund import RefundProcessor
from .registry import EntrantRegistry
from .transaction import Journal

log = logging.getLogger(__name__)


class RaffleSession:
    """
    The externally callable raffle.

    Every operation runs in its own journal frame and books all of its state
    changes before the single outbound transfer it may issue, so a recipient
    that calls back in from inside the transfer sees the finished operation.
    Any failure reverts the whole operation, transfer included.
    """

    def __init__(
        self,
        settings: Settings,
        randomness: RandomnessSource,
        prize_issuer: Optional[PrizeIssuer] = None,
        transport: Optional[ValueTransport] = None,
        journal: Optional[Journal] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.journal = journal or Journal()
        self.transport = transport or InMemoryTransport(self.journal)
        self.prize_issuer = prize_issuer or InMemoryPrizeIssuer(self.journal)

        self._clock = clock
        self.entrance_fee = settings.entrance_fee
        self.round_duration = settings.round_duration_s
        self.winner_percent = settings.winner_percent
        self.min_entrants = settings.min_entrants
        self.owner = settings.owner or settings.fee_recipient
        self._fee_recipient = settings.fee_recipient
        self._round_start = clock()
        self._previous_winner: Optional[str] = None
        self._events: List[Any] = []
        self._draws: List[DrawRecord] = []

        self.registry = EntrantRegistry(self.journal)
        self.custody = FundCustody(self.transport, self.journal)
        self._refunds = RefundProcessor(self.registry, self.custody)
        self._draw = DrawEngine(self.registry, self.custody, randomness)

    # -- operations --------------------------------------------------------

    def enter(self, identities: Iterable[str], payment: int) -> List[int]:
        """Register a batch of identities for the current round. Returns their slots."""
        with self.journal.frame("enter"):
            batch = normalize_identities(identities)
            if not batch:
                raise InvalidIdentity("No identities to enter.")
            if not isinstance(payment, int) or isinstance(payment, bool):
                raise WrongPayment(f"Payment must be an integer amount, got {payment!r}")
            expected = self.entrance_fee * len(batch)
            if payment != expected:
                raise WrongPayment(
                    f"Entering {len(batch)} identities costs {expected}, paid {payment}"
                )

            slots = self.registry.add(batch)
            self.custody.credit(payment)
            self._emit(EntryAccepted(self.registry.epoch, tuple(batch)))
            log.info(
                "Round %d: %d entrants accepted (%d active)",
                self.registry.epoch,
                len(batch),
                self.registry.active_count(),
            )
            return slots

    def refund(self, slot_index: int, caller: str) -> int:
        with self.journal.frame("refund"):
            caller = normalize_identity(caller)
            payout = self._refunds.apply(slot_index, caller, self.entrance_fee)
            self._emit(RefundIssued(self.registry.epoch, payout.recipient, payout.amount))
            self.custody.transfer_out(payout.recipient, payout.amount)
            return payout.amount

    def select_winner(self) -> DrawRecord:
        with self.journal.frame("select_winner"):
            now = self._clock()
            record = self._draw.settle(
                entrance_fee=self.entrance_fee,
                winner_percent=self.winner_percent,
                round_start=self._round_start,
                round_duration=self.round_duration,
                now=now,
                min_entrants=self.min_entrants,
            )
            self._set("_round_start", now)
            self._set("_previous_winner", record.winner)
            self._draws.append(record)
            self.journal.record(self._draws.pop)
            self._emit(WinnerSelected(record.epoch, record.winner, record.winner_share))

            self.custody.transfer_out(record.winner, record.winner_share)
            try:
                self.prize_issuer.issue(record.winner, record.epoch)
            except Exception as e:
                raise PrizeIssuanceFailed(
                    f"Prize for round {record.epoch} could not be issued to {record.winner}: {e}"
                ) from e
            return record

    def withdraw_fees(self, caller: str) -> int:
        with self.journal.frame("withdraw_fees"):
            caller = normalize_identity(caller)
            if caller != self._fee_recipient:
                raise Unauthorized(f"{caller} is not the fee recipient")
            amount = self.custody.fee_balance
            if amount == 0:
                raise InsufficientPool("No fees to withdraw.")

            self.custody.debit_fees(amount)
            self._emit(FeesWithdrawn(caller, amount))
            log.info("Fees withdrawn: %d -> %s", amount, caller)
            self.custody.transfer_out(caller, amount)
            return amount

    def change_fee_recipient(self, caller: str, new_recipient: str) -> None:
        with self.journal.frame("change_fee_recipient"):
            caller = normalize_identity(caller)
            if caller != self.owner:
                raise Unauthorized(f"{caller} is not the owner")
            new_recipient = normalize_identity(new_recipient)
            previous = self._fee_recipient
            self._set("_fee_recipient", new_recipient)
            self._emit(FeeRecipientChanged(previous, new_recipient))

    # -- views -------------------------------------------------------------

    @property
    def epoch(self) -> int:
        return self.registry.epoch

    @property
    def round_start(self) -> float:
        return self._round_start

    @property
    def round_ends_at(self) -> float:
        return self._round_start + self.round_duration

    @property
    def fee_recipient(self) -> str:
        return self._fee_recipient

    @property
    def previous_winner(self) -> Optional[str]:
        return self._previous_winner

    @property
    def pool_balance(self) -> int:
        return self.custody.pool_balance

    @property
    def total_fees(self) -> int:
        return self.custody.fee_balance

    @property
    def events(self) -> Tuple[Any, ...]:
        return tuple(self._events)

    @property
    def draws(self) -> Tuple[DrawRecord, ...]:
        return tuple(self._draws)

    def active_count(self) -> int:
        return self.registry.active_count()

    def identity_at(self, slot_index: int) -> str:
        return self.registry.identity_at(slot_index)

    def active_entrant_index(self, identity: str) -> Optional[int]:
        return self.registry.active_slot_of(normalize_identity(identity))

    # -- internals ---------------------------------------------------------

    def _emit(self, event: Any) -> None:
        self._events.append(event)
        self.journal.record(self._events.pop)

    def _set(self, attr: str, value: Any) -> None:
        previous = getattr(self, attr)
        setattr(self, attr, value)
        self.journal.record(lambda: setattr(self, attr, previous))
