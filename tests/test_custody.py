import pytest

from raffle_ledger.custody import FundCustody, InMemoryTransport
from raffle_ledger.errors import InsufficientPool, TransferRejected
from raffle_ledger.transaction import Journal


def test_pool_bookkeeping():
    custody = FundCustody(InMemoryTransport())
    custody.credit(5)
    custody.debit(3)
    assert custody.pool_balance == 2
    with pytest.raises(InsufficientPool):
        custody.debit(3)
    assert custody.pool_balance == 2


def test_fee_ledger():
    custody = FundCustody(InMemoryTransport())
    custody.credit_fees(4)
    with pytest.raises(InsufficientPool):
        custody.debit_fees(5)
    custody.debit_fees(4)
    assert custody.fee_balance == 0


def test_negative_amounts_rejected():
    custody = FundCustody(InMemoryTransport())
    with pytest.raises(ValueError):
        custody.credit(-1)


def test_transfer_delivers_and_runs_hook():
    transport = InMemoryTransport()
    received = []
    transport.register_hook("bob", received.append)
    FundCustody(transport).transfer_out("bob", 7)
    assert transport.balance_of("bob") == 7
    assert received == [7]


def test_rejected_transfer_leaves_no_delivery():
    journal = Journal()
    transport = InMemoryTransport(journal)

    def refuse(amount):
        raise RuntimeError("no thanks")

    transport.register_hook("bob", refuse)
    custody = FundCustody(transport, journal)
    with pytest.raises(TransferRejected):
        with journal.frame():
            custody.credit(7)
            custody.debit(7)
            custody.transfer_out("bob", 7)
    assert transport.balance_of("bob") == 0
    assert custody.pool_balance == 0
