import pytest

from raffle_ledger.config import Settings

ENV_VARS = [
    "RAFFLE_FEE_RECIPIENT",
    "RAFFLE_ENTRANCE_FEE",
    "RAFFLE_DURATION_S",
    "RAFFLE_WINNER_PERCENT",
    "RAFFLE_MIN_ENTRANTS",
    "RAFFLE_OWNER",
    "RPC_URL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)  # keep load_dotenv away from any real .env
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_from_env_defaults(monkeypatch, fee_recipient):
    monkeypatch.setenv("RAFFLE_FEE_RECIPIENT", fee_recipient)
    s = Settings.from_env()
    assert s.fee_recipient == fee_recipient
    assert s.entrance_fee == 1
    assert s.winner_percent == 80
    assert s.owner is None
    assert s.rpc_url is None


def test_from_env_overrides(monkeypatch, fee_recipient, owner):
    monkeypatch.setenv("RAFFLE_FEE_RECIPIENT", fee_recipient)
    monkeypatch.setenv("RAFFLE_ENTRANCE_FEE", "25")
    monkeypatch.setenv("RAFFLE_WINNER_PERCENT", "90")
    monkeypatch.setenv("RAFFLE_OWNER", owner)
    monkeypatch.setenv("RPC_URL", "https://rpc.example")
    s = Settings.from_env(rpc_url_override="https://override.example")
    assert s.entrance_fee == 25
    assert s.winner_percent == 90
    assert s.owner == owner
    assert s.rpc_url == "https://override.example"


def test_dotenv_file_is_loaded(tmp_path, fee_recipient):
    (tmp_path / ".env").write_text(f"RAFFLE_FEE_RECIPIENT={fee_recipient}\nRAFFLE_DURATION_S=30\n")
    assert Settings.from_env().round_duration_s == 30


def test_missing_fee_recipient():
    with pytest.raises(RuntimeError, match="RAFFLE_FEE_RECIPIENT"):
        Settings.from_env()


def test_non_integer_env(monkeypatch, fee_recipient):
    monkeypatch.setenv("RAFFLE_FEE_RECIPIENT", fee_recipient)
    monkeypatch.setenv("RAFFLE_ENTRANCE_FEE", "lots")
    with pytest.raises(RuntimeError, match="RAFFLE_ENTRANCE_FEE"):
        Settings.from_env()


@pytest.mark.parametrize(
    "field, value",
    [("entrance_fee", 0), ("round_duration_s", -1), ("winner_percent", 101), ("min_entrants", 0)],
)
def test_invalid_settings(field, value, fee_recipient):
    with pytest.raises(RuntimeError):
        Settings(fee_recipient=fee_recipient, **{field: value})


def test_invalid_fee_recipient():
    with pytest.raises(RuntimeError, match="Invalid identity"):
        Settings(fee_recipient="nope")
