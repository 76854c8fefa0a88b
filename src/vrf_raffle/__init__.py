from .errors import (
    IndexOutOfRange,
    NotEnoughPaid,
    PayoutFailed,
    RaffleError,
    RoundNotOpen,
    UnknownOrStaleRequest,
    UpkeepNotNeeded,
)
from .raffle import Raffle, RaffleParams, RaffleState, UpkeepCheck, UpkeepFailure

__all__ = [
    "IndexOutOfRange",
    "NotEnoughPaid",
    "PayoutFailed",
    "Raffle",
    "RaffleError",
    "RaffleParams",
    "RaffleState",
    "RoundNotOpen",
    "UnknownOrStaleRequest",
    "UpkeepCheck",
    "UpkeepFailure",
    "UpkeepNotNeeded",
]
