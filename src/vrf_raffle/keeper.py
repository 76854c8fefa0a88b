from __future__ import annotations

import logging
from typing import Optional

from .errors import UpkeepNotNeeded
from .raffle import Raffle

log = logging.getLogger(__name__)


class Keeper:
    """One automation agent polling a raffle. Scheduling is left to the caller."""

    def __init__(self, raffle: Raffle, name: str = "keeper") -> None:
        self.raffle = raffle
        self.name = name

    def poll(self) -> Optional[int]:
        """Trigger the raffle if it is ready. Returns the request id, if any."""
        check = self.raffle.check_upkeep(b"")
        if not check.upkeep_needed:
            log.debug("%s: upkeep not needed (%r)", self.name, check.failures)
            return None
        try:
            return self.raffle.perform_upkeep(check.perform_data)
        except UpkeepNotNeeded as e:
            # Another keeper got there first.
            log.info("%s: lost trigger race: %s", self.name, e)
            return None
