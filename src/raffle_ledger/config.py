from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from . import project_constants as defaults
from .errors import InvalidIdentity
from .identity import normalize_identity


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    fee_recipient: str
    entrance_fee: int = defaults.ENTRANCE_FEE
    round_duration_s: int = defaults.ROUND_DURATION_S
    winner_percent: int = defaults.WINNER_PERCENT
    min_entrants: int = defaults.MIN_ENTRANTS
    owner: Optional[str] = None
    rpc_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.entrance_fee <= 0:
            raise RuntimeError(f"Entrance fee must be positive, got {self.entrance_fee}")
        if self.round_duration_s < 0:
            raise RuntimeError(f"Round duration must not be negative, got {self.round_duration_s}")
        if not 0 <= self.winner_percent <= 100:
            raise RuntimeError(f"Winner percent must be within 0..100, got {self.winner_percent}")
        if self.min_entrants < 1:
            raise RuntimeError(f"Minimum entrants must be at least 1, got {self.min_entrants}")
        try:
            object.__setattr__(self, "fee_recipient", normalize_identity(self.fee_recipient))
            if self.owner is not None:
                object.__setattr__(self, "owner", normalize_identity(self.owner))
        except InvalidIdentity as e:
            raise RuntimeError(f"Invalid identity in settings: {e}") from e

    @staticmethod
    def from_env(
        fee_recipient_override: str | None = None,
        rpc_url_override: str | None = None,
    ) -> "Settings":
        load_dotenv(find_dotenv(usecwd=True))

        fee_recipient = fee_recipient_override or os.getenv("RAFFLE_FEE_RECIPIENT", "").strip()
        if not fee_recipient:
            raise RuntimeError(
                "Missing RAFFLE_FEE_RECIPIENT. Put it in .env or export it."
            )

        return Settings(
            fee_recipient=fee_recipient,
            entrance_fee=_int_env("RAFFLE_ENTRANCE_FEE", defaults.ENTRANCE_FEE),
            round_duration_s=_int_env("RAFFLE_DURATION_S", defaults.ROUND_DURATION_S),
            winner_percent=_int_env("RAFFLE_WINNER_PERCENT", defaults.WINNER_PERCENT),
            min_entrants=_int_env("RAFFLE_MIN_ENTRANTS", defaults.MIN_ENTRANTS),
            owner=os.getenv("RAFFLE_OWNER", "").strip() or None,
            rpc_url=rpc_url_override or os.getenv("RPC_URL", "").strip() or None,
        )
