"""
Shared fixtures: a local coordinator with a funded subscription and a raffle
registered as its consumer, driven by a manual clock.
"""

import pytest

from vrf_raffle.clock import ManualClock
from vrf_raffle.coordinator import MockCoordinator
from vrf_raffle.ledger import Ledger, make_address
from vrf_raffle.project_constants import VRF_SUB_FUND_AMOUNT
from vrf_raffle.raffle import Raffle, RaffleParams

ENTRY_FEE = 10**16
INTERVAL = 30
GAS_LANE = "0x474e34a077df58807dbe9c96d3c009b23b3c6d0cce433e59bbf5b34f823bc56c"


@pytest.fixture
def clock():
    return ManualClock(start=1_000_000)


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def coordinator():
    return MockCoordinator()


@pytest.fixture
def subscription_id(coordinator):
    sub_id = coordinator.create_subscription()
    coordinator.fund_subscription(sub_id, VRF_SUB_FUND_AMOUNT)
    return sub_id


def make_raffle(coordinator, subscription_id, ledger, clock, entry_fee=ENTRY_FEE, interval=INTERVAL):
    params = RaffleParams(
        subscription_id=subscription_id,
        gas_lane=GAS_LANE,
        entry_fee=entry_fee,
        callback_gas_limit=500_000,
        interval=interval,
    )
    raffle = Raffle(coordinator=coordinator, params=params, ledger=ledger, clock=clock)
    coordinator.add_consumer(subscription_id, raffle.address)
    return raffle


@pytest.fixture
def raffle(coordinator, subscription_id, ledger, clock):
    return make_raffle(coordinator, subscription_id, ledger, clock)


@pytest.fixture
def players(ledger):
    """Four funded accounts: deployer plus three extra entrants."""
    accounts = [make_address(name) for name in ("deployer", "alice", "bob", "carol")]
    for addr in accounts:
        ledger.mint(addr, 10**18)
    return accounts


@pytest.fixture
def ready_raffle(raffle, players, clock):
    """One entry by the deployer and the interval elapsed."""
    raffle.enter(players[0], raffle.entry_fee)
    clock.advance(raffle.interval + 1)
    return raffle
