from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .project_constants import DEVELOPMENT_CHAINS, NETWORK_CONFIG
from .raffle import RaffleParams


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    network: str
    entry_fee: int
    interval: int
    callback_gas_limit: int
    gas_lane: str
    subscription_id: int = 0
    coordinator_address: Optional[str] = None
    oracle_rpc_url: Optional[str] = None

    @property
    def is_development(self) -> bool:
        return self.network in DEVELOPMENT_CHAINS

    def raffle_params(self, subscription_id: Optional[int] = None) -> RaffleParams:
        return RaffleParams(
            subscription_id=self.subscription_id if subscription_id is None else subscription_id,
            gas_lane=self.gas_lane,
            entry_fee=self.entry_fee,
            callback_gas_limit=self.callback_gas_limit,
            interval=self.interval,
        )

    @staticmethod
    def from_env(network_override: str | None = None) -> "Settings":
        load_dotenv()

        network = network_override or os.getenv("RAFFLE_NETWORK", "").strip() or "hardhat"
        net = NETWORK_CONFIG.get(network)
        if net is None:
            raise RuntimeError(
                f"Unknown network {network!r}. Known: {', '.join(sorted(NETWORK_CONFIG))}"
            )

        oracle_rpc_url = os.getenv("ORACLE_RPC_URL", "").strip() or None
        if network not in DEVELOPMENT_CHAINS and not oracle_rpc_url:
            raise RuntimeError(
                f"Missing ORACLE_RPC_URL for live network {network!r}. Put it in .env or export it."
            )

        return Settings(
            network=network,
            entry_fee=_env_int("RAFFLE_ENTRY_FEE", net["entry_fee"]),
            interval=_env_int("RAFFLE_INTERVAL", net["interval"]),
            callback_gas_limit=_env_int("RAFFLE_CALLBACK_GAS_LIMIT", net["callback_gas_limit"]),
            gas_lane=os.getenv("RAFFLE_GAS_LANE", "").strip() or net["gas_lane"],
            subscription_id=_env_int("VRF_SUBSCRIPTION_ID", 0),
            coordinator_address=net.get("coordinator"),
            oracle_rpc_url=oracle_rpc_url,
        )
