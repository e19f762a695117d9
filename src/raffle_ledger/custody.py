from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

from .errors import InsufficientPool, TransferRejected
from .transaction import Journal

log = logging.getLogger(__name__)

ReceiveHook = Callable[[int], None]


@dataclass(frozen=True)
class Payout:
    recipient: str
    amount: int


class ValueTransport(Protocol):
    def send(self, recipient: str, amount: int) -> None: ...


class InMemoryTransport:
    """
    Delivers value to recipient balances held in memory.

    A recipient may register a receive hook; it runs synchronously after the
    credit, while the sending operation is still executing, and may call back
    into the session.
    """

    def __init__(self, journal: Optional[Journal] = None) -> None:
        self._journal = journal or Journal()
        self.balances: Dict[str, int] = defaultdict(int)
        self._hooks: Dict[str, ReceiveHook] = {}

    def register_hook(self, recipient: str, hook: ReceiveHook) -> None:
        self._hooks[recipient] = hook

    def remove_hook(self, recipient: str) -> None:
        self._hooks.pop(recipient, None)

    def balance_of(self, recipient: str) -> int:
        return self.balances.get(recipient, 0)

    def send(self, recipient: str, amount: int) -> None:
        self.balances[recipient] += amount

        def undo() -> None:
            self.balances[recipient] -= amount

        self._journal.record(undo)

        hook = self._hooks.get(recipient)
        if hook is not None:
            hook(amount)


class FundCustody:
    """Pool and fee ledger bookkeeping, plus the only outbound transfer path."""

    def __init__(self, transport: ValueTransport, journal: Optional[Journal] = None) -> None:
        self._journal = journal or Journal()
        self._transport = transport
        self._pool = 0
        self._fees = 0

    @property
    def pool_balance(self) -> int:
        return self._pool

    @property
    def fee_balance(self) -> int:
        return self._fees

    def credit(self, amount: int) -> None:
        _check_amount(amount)
        self._set_pool(self._pool + amount)

    def debit(self, amount: int) -> None:
        _check_amount(amount)
        if amount > self._pool:
            raise InsufficientPool(f"Cannot debit {amount} from a pool of {self._pool}")
        self._set_pool(self._pool - amount)

    def credit_fees(self, amount: int) -> None:
        _check_amount(amount)
        self._set_fees(self._fees + amount)

    def debit_fees(self, amount: int) -> None:
        _check_amount(amount)
        if amount > self._fees:
            raise InsufficientPool(f"Cannot debit {amount} from fees of {self._fees}")
        self._set_fees(self._fees - amount)

    def transfer_out(self, recipient: str, amount: int) -> None:
        """
        Send ``amount`` to ``recipient``.

        Callers must have committed every ledger change for the operation
        before calling this: the recipient may re-enter the session from inside
        the transfer and must see the finished state.
        """
        _check_amount(amount)
        log.debug("Transfer %d -> %s", amount, recipient)
        try:
            self._transport.send(recipient, amount)
        except Exception as e:
            raise TransferRejected(f"Transfer of {amount} to {recipient} failed: {e}") from e

    def _set_pool(self, value: int) -> None:
        previous = self._pool
        self._pool = value
        self._journal.record(lambda: setattr(self, "_pool", previous))

    def _set_fees(self, value: int) -> None:
        previous = self._fees
        self._fees = value
        self._journal.record(lambda: setattr(self, "_fees", previous))


def _check_amount(amount: int) -> None:
    if not isinstance(amount, int) or amount < 0:
        raise ValueError(f"Amount must be a non-negative integer, got {amount!r}")
