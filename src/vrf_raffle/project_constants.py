"""
Protocol-wide immutable parameters for the VRF raffle.

These values define the public rules of each round.
Changing them changes who can win and MUST be publicly announced.
"""

# Ether-style denomination (18 decimals)
WEI_DECIMALS = 18
WEI_PER_ETHER = 10**WEI_DECIMALS

# Oracle request parameters
REQUEST_CONFIRMATIONS = 3
NUM_WORDS = 1

# Local coordinator pricing (mirrors the public VRF v2 mock)
BASE_FEE = 25 * 10**16  # 0.25 LINK
GAS_PRICE_LINK = 10**9  # LINK per gas
VRF_SUB_FUND_AMOUNT = 30 * WEI_PER_ETHER
MAX_NUM_WORDS = 500
MAX_CONSUMERS = 100

DEVELOPMENT_CHAINS = ("hardhat", "localhost")

_DEFAULT_GAS_LANE = "0x474e34a077df58807dbe9c96d3c009b23b3c6d0cce433e59bbf5b34f823bc56c"

NETWORK_CONFIG = {
    "hardhat": {
        "chain_id": 31337,
        "entry_fee": 10**16,  # 0.01 ether
        "gas_lane": _DEFAULT_GAS_LANE,
        "callback_gas_limit": 500_000,
        "interval": 30,
    },
    "localhost": {
        "chain_id": 31337,
        "entry_fee": 10**16,
        "gas_lane": _DEFAULT_GAS_LANE,
        "callback_gas_limit": 500_000,
        "interval": 30,
    },
    "sepolia": {
        "chain_id": 11155111,
        "coordinator": "0x8103B0A8A00be2DDC778e6e7eaa21791Cd364625",
        "entry_fee": 10**16,
        "gas_lane": _DEFAULT_GAS_LANE,
        "callback_gas_limit": 500_000,
        "interval": 30,
    },
    "goerli": {
        "chain_id": 5,
        "coordinator": "0x2Ca8E0C643bDe4C2E08ab1fA0da3401AdAD7734D",
        "entry_fee": 10**16,
        "gas_lane": "0x79d3d8832d904592c0bf9818b621522c988bb8b0c05cdc3b15aea1b6e8db0c15",
        "callback_gas_limit": 500_000,
        "interval": 30,
    },
}


def to_ether(wei: int) -> float:
    return round(wei / WEI_PER_ETHER, 6)
