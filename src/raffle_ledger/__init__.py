from .config import Settings
from .draw import DrawRecord, split_payout
from .errors import (
    AlreadyRefunded,
    DuplicateEntrant,
    InsufficientPool,
    InvalidIdentity,
    InvalidIndex,
    NoEntrants,
    NotActive,
    PrizeIssuanceFailed,
    RaffleError,
    RoundNotOver,
    TransferRejected,
    Unauthorized,
    WrongPayment,
)
from .randomness import BlockhashRandomness, HashChainRandomness, SystemRandomness
from .session import RaffleSession

__all__ = [
    "AlreadyRefunded",
    "BlockhashRandomness",
    "DrawRecord",
    "DuplicateEntrant",
    "HashChainRandomness",
    "InsufficientPool",
    "InvalidIdentity",
    "InvalidIndex",
    "NoEntrants",
    "NotActive",
    "PrizeIssuanceFailed",
    "RaffleError",
    "RaffleSession",
    "RoundNotOver",
    "Settings",
    "SystemRandomness",
    "TransferRejected",
    "Unauthorized",
    "WrongPayment",
    "split_payout",
]
