from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from .project_constants import ENTRANCE_FEE, INTERVAL_SECONDS, REQUEST_CONFIRMATIONS


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class RaffleConfig:
    entrance_fee: int
    interval: float

    def __post_init__(self) -> None:
        if self.entrance_fee <= 0:
            raise ValueError(f"entrance_fee must be positive, got {self.entrance_fee}")
        if self.interval < 0:
            raise ValueError(f"interval must not be negative, got {self.interval}")

    @staticmethod
    def from_env() -> "RaffleConfig":
        load_dotenv()
        return RaffleConfig(
            entrance_fee=_int_from_env("RAFFLE_ENTRANCE_FEE", ENTRANCE_FEE),
            interval=_int_from_env("RAFFLE_INTERVAL", INTERVAL_SECONDS),
        )


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    request_confirmations: int = REQUEST_CONFIRMATIONS
    timeout_s: float = 60.0

    @staticmethod
    def from_env(rpc_url_override: str | None = None) -> "Settings":
        load_dotenv()

        confirmations = _int_from_env("RAFFLE_REQUEST_CONFIRMATIONS", REQUEST_CONFIRMATIONS)
        if confirmations < 1:
            raise ValueError("RAFFLE_REQUEST_CONFIRMATIONS must be at least 1")

        # If user provides an explicit URL, trust it.
        if rpc_url_override:
            return Settings(rpc_url=rpc_url_override, request_confirmations=confirmations)

        # Otherwise, use RPC_URL from env if present, else build helius url from key.
        env_rpc = os.getenv("RPC_URL", "").strip()
        if env_rpc:
            return Settings(rpc_url=env_rpc, request_confirmations=confirmations)

        helius_key = os.getenv("HELIUS_API_KEY", "").strip()
        if not helius_key:
            raise RuntimeError(
                "Missing HELIUS_API_KEY (or RPC_URL). Put it in .env or export it."
            )

        return Settings(
            rpc_url=f"https://mainnet.helius-rpc.com/?api-key={helius_key}",
            request_confirmations=confirmations,
        )
