from __future__ import annotations


class RaffleError(RuntimeError):
    """Base class for every failure surfaced by a raffle operation."""

    kind = "RaffleError"


class WrongPayment(RaffleError):
    kind = "WrongPayment"


class DuplicateEntrant(RaffleError):
    kind = "DuplicateEntrant"


class InvalidIndex(RaffleError):
    kind = "InvalidIndex"


class InvalidIdentity(RaffleError):
    kind = "InvalidIdentity"


class Unauthorized(RaffleError):
    kind = "Unauthorized"


class NotActive(RaffleError):
    kind = "NotActive"


class AlreadyRefunded(NotActive):
    kind = "AlreadyRefunded"


class RoundNotOver(RaffleError):
    kind = "RoundNotOver"


class NoEntrants(RaffleError):
    kind = "NoEntrants"


class InsufficientPool(RaffleError):
    kind = "InsufficientPool"


class TransferRejected(RaffleError):
    kind = "TransferRejected"


class PrizeIssuanceFailed(RaffleError):
    kind = "PrizeIssuanceFailed"
