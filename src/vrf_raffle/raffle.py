"""
Single-round raffle driven by an automation agent and a randomness oracle.

Lifecycle of a round:

    OPEN         enter() appends paid entries to the pot
      |  perform_upkeep() once check_upkeep() holds: request randomness
      v
    CALCULATING  entries rejected; waits for the oracle callback
      |  raw_fulfill_random_words() with the pending request id:
      |  pick winner, pay the whole pot, start a fresh round
      v
    OPEN

The state and the pending request id always move together, and a round is
only ever replaced as a whole after the winner has been paid.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, replace
from enum import IntEnum, IntFlag
from typing import NamedTuple, Optional, Sequence, Tuple

from .clock import Clock, system_clock
from .coordinator import RandomnessCoordinator
from .draw import Settlement, select_winner
from .errors import (
    IndexOutOfRange,
    InvalidRandomWords,
    LedgerError,
    NotEnoughPaid,
    OnlyCoordinatorCanFulfill,
    PayoutFailed,
    RoundNotOpen,
    UnknownOrStaleRequest,
    UpkeepNotNeeded,
)
from .events import EnteredRound, EventLog, RoundCalculating, WinnerPicked
from .ledger import Ledger, make_address
from .project_constants import NUM_WORDS, REQUEST_CONFIRMATIONS

log = logging.getLogger(__name__)

_instance_ids = itertools.count(1)


class RaffleState(IntEnum):
    OPEN = 0
    CALCULATING = 1


class UpkeepFailure(IntFlag):
    NONE = 0
    NOT_OPEN = 1
    INTERVAL_NOT_ELAPSED = 2
    NO_PLAYERS = 4
    NO_BALANCE = 8


class UpkeepCheck(NamedTuple):
    upkeep_needed: bool
    failures: UpkeepFailure

    @property
    def perform_data(self) -> bytes:
        return bytes([int(self.failures)])


@dataclass(frozen=True)
class RaffleParams:
    subscription_id: int
    gas_lane: str
    entry_fee: int
    callback_gas_limit: int
    interval: int

    def __post_init__(self) -> None:
        if self.entry_fee < 0:
            raise ValueError("entry_fee must be >= 0")
        if self.interval < 0:
            raise ValueError("interval must be >= 0")
        if self.callback_gas_limit <= 0:
            raise ValueError("callback_gas_limit must be > 0")


@dataclass(frozen=True)
class Round:
    last_timestamp: int
    state: RaffleState = RaffleState.OPEN
    participants: Tuple[str, ...] = ()
    pot: int = 0
    pending_request_id: Optional[int] = None


class Raffle:
    def __init__(
        self,
        coordinator: RandomnessCoordinator,
        params: RaffleParams,
        ledger: Ledger | None = None,
        clock: Clock = system_clock,
        address: str | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._params = params
        self._ledger = ledger if ledger is not None else Ledger()
        self._clock = clock
        self._lock = threading.RLock()

        self.address = address or make_address(f"raffle-{next(_instance_ids)}")
        self.coordinator_address = coordinator.address
        self.events = EventLog()

        self._round = Round(last_timestamp=clock())
        self._recent_winner: Optional[str] = None

    # ------------------------------------------------------------------
    # Entry
    # ------------------------------------------------------------------

    def enter(self, participant: str, paid_amount: int) -> int:
        """Buy one slot in the current round. Returns the slot index."""
        with self._lock:
            rnd = self._round
            if rnd.state != RaffleState.OPEN:
                raise RoundNotOpen()
            if paid_amount < self._params.entry_fee:
                raise NotEnoughPaid(paid_amount, self._params.entry_fee)

            # Overpayment stays in the pot.
            self._ledger.transfer(participant, self.address, paid_amount)
            self._round = replace(
                rnd,
                participants=rnd.participants + (participant,),
                pot=rnd.pot + paid_amount,
            )
            index = len(rnd.participants)

            log.debug("Entry #%d by %s (%d paid)", index, participant, paid_amount)
            self.events.emit(EnteredRound(participant=participant, index=index))
            return index

    # ------------------------------------------------------------------
    # Automation
    # ------------------------------------------------------------------

    def check_upkeep(self, check_data: bytes = b"") -> UpkeepCheck:
        """Read-only readiness predicate polled by the automation agent."""
        return self._evaluate_upkeep()

    def _evaluate_upkeep(self) -> UpkeepCheck:
        rnd = self._round
        failures = UpkeepFailure.NONE
        if rnd.state != RaffleState.OPEN:
            failures |= UpkeepFailure.NOT_OPEN
        if self._clock() - rnd.last_timestamp < self._params.interval:
            failures |= UpkeepFailure.INTERVAL_NOT_ELAPSED
        if not rnd.participants:
            failures |= UpkeepFailure.NO_PLAYERS
        if rnd.pot <= 0:
            failures |= UpkeepFailure.NO_BALANCE
        return UpkeepCheck(failures == UpkeepFailure.NONE, failures)

    def perform_upkeep(self, perform_data: bytes = b"") -> int:
        """Close the round and request randomness. Returns the request id."""
        with self._lock:
            # perform_data is opaque; readiness is always re-evaluated here.
            check = self._evaluate_upkeep()
            if not check.upkeep_needed:
                raise UpkeepNotNeeded(
                    check.failures,
                    self._round.pot,
                    len(self._round.participants),
                    self._round.state,
                )

            # A failed request leaves the round untouched.
            request_id = self._coordinator.request_random_words(
                key_hash=self._params.gas_lane,
                subscription_id=self._params.subscription_id,
                request_confirmations=REQUEST_CONFIRMATIONS,
                callback_gas_limit=self._params.callback_gas_limit,
                num_words=NUM_WORDS,
                sender=self.address,
            )
            self._round = replace(
                self._round,
                state=RaffleState.CALCULATING,
                pending_request_id=request_id,
            )

            log.info(
                "Round closed with %d players, pot %d; randomness request %s",
                len(self._round.participants),
                self._round.pot,
                request_id,
            )
            self.events.emit(RoundCalculating(request_id=request_id))
            return request_id

    # ------------------------------------------------------------------
    # Oracle callback
    # ------------------------------------------------------------------

    def raw_fulfill_random_words(
        self, request_id: int, random_words: Sequence[int], caller: str
    ) -> Settlement | None:
        """
        Entry point for the randomness coordinator.

        Returns the settlement, or None when the request id is not the one
        in flight (stale replies and replays are ignored).
        """
        if caller != self.coordinator_address:
            raise OnlyCoordinatorCanFulfill(caller, self.coordinator_address)
        try:
            return self._fulfill_random_words(request_id, random_words)
        except UnknownOrStaleRequest as e:
            log.warning("Ignoring randomness callback: %s", e)
            return None

    def _fulfill_random_words(self, request_id: int, random_words: Sequence[int]) -> Settlement:
        with self._lock:
            rnd = self._round
            if rnd.state != RaffleState.CALCULATING or request_id != rnd.pending_request_id:
                raise UnknownOrStaleRequest(request_id, rnd.pending_request_id)

            words = _validate_words(random_words)
            participants = rnd.participants
            winner_index, winner = select_winner(words, participants)
            prize = rnd.pot

            try:
                self._ledger.transfer(self.address, winner, prize)
            except LedgerError as e:
                log.error("Payout of %d to %s failed: %s", prize, winner, e)
                raise PayoutFailed(winner, prize) from e

            now = self._clock()
            self._recent_winner = winner
            self._round = Round(last_timestamp=now)

            log.info("Winner %s (slot %d of %d) paid %d", winner, winner_index, len(participants), prize)
            self.events.emit(WinnerPicked(winner=winner))
            return Settlement(
                request_id=request_id,
                random_words=words,
                participants=participants,
                winner_index=winner_index,
                winner=winner,
                prize=prize,
                settled_at=now,
            )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def state(self) -> RaffleState:
        return self._round.state

    @property
    def entry_fee(self) -> int:
        return self._params.entry_fee

    @property
    def interval(self) -> int:
        return self._params.interval

    @property
    def params(self) -> RaffleParams:
        return self._params

    @property
    def player_count(self) -> int:
        return len(self._round.participants)

    @property
    def players(self) -> Tuple[str, ...]:
        return self._round.participants

    def get_player(self, index: int) -> str:
        players = self._round.participants
        if index < 0 or index >= len(players):
            raise IndexOutOfRange(index, len(players))
        return players[index]

    @property
    def snapshot(self) -> Round:
        """The current round as one immutable value."""
        return self._round

    @property
    def pot(self) -> int:
        return self._round.pot

    @property
    def pending_request_id(self) -> Optional[int]:
        return self._round.pending_request_id

    @property
    def last_timestamp(self) -> int:
        return self._round.last_timestamp

    @property
    def recent_winner(self) -> Optional[str]:
        return self._recent_winner


def _validate_words(random_words: Sequence[int]) -> Tuple[int, ...]:
    words = tuple(random_words)
    if not words:
        raise InvalidRandomWords("Oracle delivered no random words.")
    first = words[0]
    if isinstance(first, bool) or not isinstance(first, int) or first < 0:
        raise InvalidRandomWords(f"Oracle delivered an invalid random word: {first!r}")
    return words
