from __future__ import annotations

import pytest

from solana_raffle import config as config_module
from solana_raffle.config import RaffleConfig, Settings
from solana_raffle.project_constants import ENTRANCE_FEE, INTERVAL_SECONDS, REQUEST_CONFIRMATIONS
from solana_raffle.rpc import load_seed_from_block_feed_file

ENV_VARS = (
    "RAFFLE_ENTRANCE_FEE",
    "RAFFLE_INTERVAL",
    "RAFFLE_REQUEST_CONFIRMATIONS",
    "RPC_URL",
    "HELIUS_API_KEY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the tests.
    monkeypatch.setattr(config_module, "load_dotenv", lambda: False)


def test_raffle_config_defaults():
    cfg = RaffleConfig.from_env()
    assert cfg.entrance_fee == ENTRANCE_FEE
    assert cfg.interval == INTERVAL_SECONDS


def test_raffle_config_from_env(monkeypatch):
    monkeypatch.setenv("RAFFLE_ENTRANCE_FEE", "25")
    monkeypatch.setenv("RAFFLE_INTERVAL", "60")
    cfg = RaffleConfig.from_env()
    assert cfg == RaffleConfig(entrance_fee=25, interval=60)


def test_raffle_config_rejects_garbage(monkeypatch):
    monkeypatch.setenv("RAFFLE_INTERVAL", "soon")
    with pytest.raises(ValueError):
        RaffleConfig.from_env()


def test_raffle_config_is_frozen():
    cfg = RaffleConfig(entrance_fee=10, interval=30)
    with pytest.raises(AttributeError):
        cfg.entrance_fee = 1  # type: ignore[misc]


def test_settings_override_wins(monkeypatch):
    monkeypatch.setenv("RPC_URL", "http://env.test")
    assert Settings.from_env(rpc_url_override="http://cli.test").rpc_url == "http://cli.test"


def test_settings_from_helius_key(monkeypatch):
    monkeypatch.setenv("HELIUS_API_KEY", "abc")
    settings = Settings.from_env()
    assert settings.rpc_url == "https://mainnet.helius-rpc.com/?api-key=abc"
    assert settings.request_confirmations == REQUEST_CONFIRMATIONS


def test_settings_missing_rpc():
    with pytest.raises(RuntimeError):
        Settings.from_env()


def test_settings_confirmations(monkeypatch):
    monkeypatch.setenv("RPC_URL", "http://env.test")
    monkeypatch.setenv("RAFFLE_REQUEST_CONFIRMATIONS", "0")
    with pytest.raises(ValueError):
        Settings.from_env()


# ---- block feed files ----

def test_feed_raw_string_rejected(tmp_path):
    path = tmp_path / "feed.txt"
    path.write_text("  abc123\n", encoding="utf-8")
    with pytest.raises(RuntimeError, match="not valid JSON"):
        load_seed_from_block_feed_file(str(path), slot_hint=5)


def test_feed_single_block(tmp_path):
    path = tmp_path / "feed.json"
    path.write_text('{"slot": 5, "blockhash": "abc"}', encoding="utf-8")
    assert load_seed_from_block_feed_file(str(path), slot_hint=5) == "abc"
    with pytest.raises(RuntimeError, match="slot mismatch"):
        load_seed_from_block_feed_file(str(path), slot_hint=6)


def test_feed_without_slot_rejected(tmp_path):
    path = tmp_path / "feed.json"
    path.write_text('{"blockhash": "abc"}', encoding="utf-8")
    with pytest.raises(RuntimeError, match="does not state its slot"):
        load_seed_from_block_feed_file(str(path), slot_hint=5)


def test_feed_many_blocks(tmp_path):
    path = tmp_path / "feed.json"
    path.write_text('{"blocks": {"503": {"blockhash": "xyz"}}}', encoding="utf-8")
    assert load_seed_from_block_feed_file(str(path), slot_hint=503) == "xyz"
    with pytest.raises(RuntimeError, match="no block for slot"):
        load_seed_from_block_feed_file(str(path), slot_hint=504)

