from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .clock import Clock, system_clock
from .config import Settings
from .coordinator import MockCoordinator
from .ledger import Ledger
from .project_constants import VRF_SUB_FUND_AMOUNT
from .raffle import Raffle
from .rpc import OracleRpcClient

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deployment:
    raffle: Raffle
    coordinator: Union[MockCoordinator, OracleRpcClient]
    subscription_id: int
    ledger: Ledger


def deploy(
    settings: Settings,
    ledger: Ledger | None = None,
    clock: Clock = system_clock,
    timeout_s: float = 60.0,
) -> Deployment:
    """
    Construct a raffle wired to the right coordinator.

    Development networks get a local MockCoordinator with a funded
    subscription; live networks talk to the oracle over JSON-RPC using the
    configured subscription.
    """
    ledger = ledger if ledger is not None else Ledger()

    if settings.is_development:
        coordinator = MockCoordinator()
        subscription_id = coordinator.create_subscription()
        coordinator.fund_subscription(subscription_id, VRF_SUB_FUND_AMOUNT)
        log.info("Local coordinator %s, subscription %d", coordinator.address, subscription_id)
    else:
        if not settings.coordinator_address or not settings.oracle_rpc_url:
            raise RuntimeError(f"Network {settings.network!r} has no coordinator configured.")
        coordinator = OracleRpcClient(
            settings.oracle_rpc_url,
            address=settings.coordinator_address,
            timeout_s=timeout_s,
        )
        subscription_id = settings.subscription_id

    raffle = Raffle(
        coordinator=coordinator,
        params=settings.raffle_params(subscription_id=subscription_id),
        ledger=ledger,
        clock=clock,
    )

    if isinstance(coordinator, MockCoordinator):
        coordinator.add_consumer(subscription_id, raffle.address)

    log.info("Raffle deployed at %s on %s", raffle.address, settings.network)
    return Deployment(raffle=raffle, coordinator=coordinator, subscription_id=subscription_id, ledger=ledger)
