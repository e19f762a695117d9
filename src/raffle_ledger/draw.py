from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .custody import FundCustody, Payout
from .errors import NoEntrants, RoundNotOver
from .randomness import RandomnessSource
from .registry import EntrantRegistry

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawRecord:
    epoch: int
    entrants: Tuple[str, ...]  # active entrants in entry order
    random_value: int
    seed: Optional[str]
    winner_index: int
    winner: str
    entrance_fee: int
    winner_percent: int
    pool: int
    winner_share: int
    fee_share: int
    drawn_at: float

    @property
    def payout(self) -> Payout:
        return Payout(self.winner, self.winner_share)


def split_payout(pool: int, winner_percent: int) -> Tuple[int, int]:
    # Integer remainder goes to the fee side.
    winner_share = pool * winner_percent // 100
    return winner_share, pool - winner_share


def pick_index(random_value: int, entrant_count: int) -> int:
    if entrant_count <= 0:
        raise NoEntrants("Cannot pick a winner from an empty round.")
    return random_value % entrant_count


class DrawEngine:
    def __init__(
        self,
        registry: EntrantRegistry,
        custody: FundCustody,
        randomness: RandomnessSource,
    ) -> None:
        self._registry = registry
        self._custody = custody
        self._randomness = randomness

    def check(self, round_start: float, round_duration: float, now: float, min_entrants: int = 1) -> None:
        if now < round_start + round_duration:
            raise RoundNotOver(
                f"Round {self._registry.epoch} ends at {round_start + round_duration}, now {now}"
            )
        count = self._registry.active_count()
        if count == 0 or count < min_entrants:
            raise NoEntrants(f"{count} active entrants, need at least {max(min_entrants, 1)}")

    def settle(
        self,
        entrance_fee: int,
        winner_percent: int,
        round_start: float,
        round_duration: float,
        now: float,
        min_entrants: int = 1,
    ) -> DrawRecord:
        """
        Select the winner and finalize the round's books: the fee share moves
        to the fee ledger, the pool is emptied and the epoch rotates. Paying
        the winner is left to the caller.
        """
        self.check(round_start, round_duration, now, min_entrants)

        entrants = tuple(self._registry.active_identities())
        random_value = self._randomness.next_int()
        winner_index = pick_index(random_value, len(entrants))
        pool = entrance_fee * len(entrants)
        winner_share, fee_share = split_payout(pool, winner_percent)

        record = DrawRecord(
            epoch=self._registry.epoch,
            entrants=entrants,
            random_value=random_value,
            seed=self._randomness.last_seed,
            winner_index=winner_index,
            winner=entrants[winner_index],
            entrance_fee=entrance_fee,
            winner_percent=winner_percent,
            pool=pool,
            winner_share=winner_share,
            fee_share=fee_share,
            drawn_at=now,
        )

        self._custody.debit(pool)
        self._custody.credit_fees(fee_share)
        self._registry.rotate_epoch()

        log.info(
            "Round %d drawn: winner %s (index %d of %d), pool %d, winner share %d, fee %d",
            record.epoch,
            record.winner,
            winner_index,
            len(entrants),
            pool,
            winner_share,
            fee_share,
        )
        return record
