from __future__ import annotations

import hashlib
import logging
from collections import defaultdict
from typing import Dict, Set

from .errors import InsufficientFunds, TransferRejected

log = logging.getLogger(__name__)


def make_address(label: str) -> str:
    """Deterministic 20-byte hex address for a human label."""
    return "0x" + hashlib.sha256(label.encode("utf-8")).hexdigest()[:40]


class Ledger:
    """
    Native-value balances of the hosting environment.

    Addresses registered with refuse_payments() behave like accounts without
    a payable receive hook: any transfer into them is rejected.
    """

    def __init__(self) -> None:
        self._balances: Dict[str, int] = defaultdict(int)
        self._refusing: Set[str] = set()

    def balance_of(self, address: str) -> int:
        return self._balances.get(address, 0)

    def mint(self, address: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot mint a negative amount.")
        self._balances[address] += amount

    def refuse_payments(self, address: str, refuse: bool = True) -> None:
        if refuse:
            self._refusing.add(address)
        else:
            self._refusing.discard(address)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot transfer a negative amount.")
        if recipient in self._refusing:
            raise TransferRejected(recipient)
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientFunds(sender, balance, amount)
        self._balances[sender] = balance - amount
        self._balances[recipient] += amount
        log.debug("Transfer %d from %s to %s", amount, sender, recipient)
