"""
Unit tests for the local randomness coordinator and the ledger.
"""

import pytest

from vrf_raffle.coordinator import MockCoordinator
from vrf_raffle.draw import expand_words, pick_winner_index, select_winner
from vrf_raffle.errors import (
    InsufficientFunds,
    InsufficientSubscriptionBalance,
    InvalidConsumer,
    InvalidSubscription,
    NonexistentRequest,
    TooManyWords,
    TransferRejected,
)
from vrf_raffle.ledger import Ledger, make_address


class RecordingConsumer:
    def __init__(self, address="0xconsumer"):
        self.address = address
        self.calls = []

    def raw_fulfill_random_words(self, request_id, random_words, caller):
        self.calls.append((request_id, list(random_words), caller))
        return "ok"


def _request(coordinator, sub_id, sender="0xconsumer", num_words=1):
    return coordinator.request_random_words(
        key_hash="0xlane",
        subscription_id=sub_id,
        request_confirmations=3,
        callback_gas_limit=500_000,
        num_words=num_words,
        sender=sender,
    )


@pytest.fixture
def funded():
    coordinator = MockCoordinator()
    sub_id = coordinator.create_subscription()
    coordinator.fund_subscription(sub_id, 10**18)
    coordinator.add_consumer(sub_id, "0xconsumer")
    return coordinator, sub_id


class TestSubscriptions:
    """Subscription bookkeeping."""

    def test_ids_start_at_one(self):
        """Subscriptions are numbered from 1."""
        coordinator = MockCoordinator()
        assert coordinator.create_subscription() == 1
        assert coordinator.create_subscription() == 2

    def test_unknown_subscription(self):
        """Operations on unknown subscriptions fail."""
        coordinator = MockCoordinator()
        with pytest.raises(InvalidSubscription):
            coordinator.fund_subscription(9, 1)
        with pytest.raises(InvalidSubscription):
            _request(coordinator, 9)

    def test_consumer_must_be_registered(self, funded):
        """Requests from unregistered senders are refused."""
        coordinator, sub_id = funded
        with pytest.raises(InvalidConsumer):
            _request(coordinator, sub_id, sender="0xstranger")

    def test_add_consumer_is_idempotent(self, funded):
        """Adding the same consumer twice keeps one entry."""
        coordinator, sub_id = funded
        coordinator.add_consumer(sub_id, "0xconsumer")
        assert coordinator.get_subscription(sub_id).consumers == {"0xconsumer"}


class TestRequests:
    """Request and fulfillment flow."""

    def test_request_ids_increment(self, funded):
        """Request ids start at 1 and stay pending until fulfilled."""
        coordinator, sub_id = funded
        assert _request(coordinator, sub_id) == 1
        assert _request(coordinator, sub_id) == 2
        assert coordinator.pending_requests() == [1, 2]

    def test_word_count_bounds(self, funded):
        """Zero or too many words are refused."""
        coordinator, sub_id = funded
        with pytest.raises(TooManyWords):
            _request(coordinator, sub_id, num_words=0)
        with pytest.raises(TooManyWords):
            _request(coordinator, sub_id, num_words=501)

    def test_fulfill_delivers_derived_words(self, funded):
        """Default words are derived from the request id."""
        coordinator, sub_id = funded
        consumer = RecordingConsumer()
        rid = _request(coordinator, sub_id, num_words=2)
        assert coordinator.fulfill_random_words(rid, consumer) == "ok"
        assert consumer.calls == [(rid, expand_words(rid, 2), coordinator.address)]
        assert coordinator.pending_requests() == []

    def test_fulfill_with_override(self, funded):
        """Callers can pick the delivered words."""
        coordinator, sub_id = funded
        consumer = RecordingConsumer()
        rid = _request(coordinator, sub_id)
        coordinator.fulfill_random_words_with_override(rid, consumer, [42])
        assert consumer.calls[0][1] == [42]

    def test_fulfill_unknown_request(self, funded):
        """Unknown and already-fulfilled ids are nonexistent."""
        coordinator, sub_id = funded
        consumer = RecordingConsumer()
        with pytest.raises(NonexistentRequest, match="nonexistent request"):
            coordinator.fulfill_random_words(1, consumer)
        rid = _request(coordinator, sub_id)
        coordinator.fulfill_random_words(rid, consumer)
        with pytest.raises(NonexistentRequest):
            coordinator.fulfill_random_words(rid, consumer)
        assert len(consumer.calls) == 1

    def test_fulfill_charges_subscription(self, funded):
        """Each delivery costs base fee plus gas price times gas limit."""
        coordinator, sub_id = funded
        rid = _request(coordinator, sub_id)
        coordinator.fulfill_random_words(rid, RecordingConsumer())
        payment = coordinator.base_fee + coordinator.gas_price_link * 500_000
        assert coordinator.get_subscription(sub_id).balance == 10**18 - payment

    def test_underfunded_subscription(self):
        """Delivery fails without enough subscription balance; request stays pending."""
        coordinator = MockCoordinator()
        sub_id = coordinator.create_subscription()
        coordinator.add_consumer(sub_id, "0xconsumer")
        rid = _request(coordinator, sub_id)
        with pytest.raises(InsufficientSubscriptionBalance):
            coordinator.fulfill_random_words(rid, RecordingConsumer())
        assert coordinator.pending_requests() == [rid]


class TestDraw:
    """Winner selection helpers."""

    def test_modulo_selection(self):
        """Index is the first word modulo the player count."""
        assert pick_winner_index(7, 1) == 0
        assert pick_winner_index(5, 3) == 2
        assert select_winner([5, 99], ["a", "b", "c"]) == (2, "c")

    def test_no_players(self):
        """Selecting among zero players is an error."""
        with pytest.raises(ValueError):
            pick_winner_index(5, 0)

    def test_expand_words_is_deterministic(self):
        """Same request id, same words; different ids differ."""
        assert expand_words(3, 2) == expand_words(3, 2)
        assert expand_words(3, 1) != expand_words(4, 1)
        assert all(0 <= w < 2**256 for w in expand_words(3, 4))


class TestLedger:
    """Native-value transfers."""

    def test_transfer_moves_funds(self):
        ledger = Ledger()
        ledger.mint("a", 10)
        ledger.transfer("a", "b", 4)
        assert ledger.balance_of("a") == 6
        assert ledger.balance_of("b") == 4

    def test_insufficient_funds(self):
        ledger = Ledger()
        with pytest.raises(InsufficientFunds):
            ledger.transfer("a", "b", 1)

    def test_refusing_recipient(self):
        """Refusing accounts reject transfers without moving funds."""
        ledger = Ledger()
        ledger.mint("a", 10)
        ledger.refuse_payments("b")
        with pytest.raises(TransferRejected):
            ledger.transfer("a", "b", 1)
        assert ledger.balance_of("a") == 10
        ledger.refuse_payments("b", refuse=False)
        ledger.transfer("a", "b", 1)
        assert ledger.balance_of("b") == 1

    def test_make_address(self):
        """Addresses are deterministic 20-byte hex strings."""
        addr = make_address("alice")
        assert addr == make_address("alice")
        assert addr.startswith("0x") and len(addr) == 42
        assert addr != make_address("bob")
