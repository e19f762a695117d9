from __future__ import annotations

import base58
import pytest

from raffle_ledger.config import Settings
from raffle_ledger.randomness import RandomnessSource
from raffle_ledger.session import RaffleSession


def make_identity(n: int) -> str:
    return base58.b58encode(n.to_bytes(32, "big")).decode("ascii")


class FixedRandomness(RandomnessSource):
    def __init__(self, *values: int) -> None:
        self.values = list(values) or [0]
        self.calls = 0

    def next_int(self) -> int:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(name="make_identity")
def make_identity_fixture():
    return make_identity


@pytest.fixture
def fee_recipient():
    return make_identity(9_999)


@pytest.fixture
def owner():
    return make_identity(8_888)


@pytest.fixture
def players():
    return [make_identity(i) for i in range(1, 11)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def randomness():
    return FixedRandomness(0)


@pytest.fixture
def settings(fee_recipient, owner):
    return Settings(
        fee_recipient=fee_recipient,
        entrance_fee=1,
        round_duration_s=60,
        winner_percent=80,
        owner=owner,
    )


@pytest.fixture
def session(settings, randomness, clock):
    return RaffleSession(settings, randomness, clock=clock)
