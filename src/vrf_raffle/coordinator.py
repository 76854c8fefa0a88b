from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Set

from .draw import expand_words
from .errors import (
    InsufficientSubscriptionBalance,
    InvalidConsumer,
    InvalidSubscription,
    NonexistentRequest,
    TooManyConsumers,
    TooManyWords,
)
from .ledger import make_address
from .project_constants import BASE_FEE, GAS_PRICE_LINK, MAX_CONSUMERS, MAX_NUM_WORDS

log = logging.getLogger(__name__)


class RandomnessCoordinator(Protocol):
    address: str

    def request_random_words(
        self,
        key_hash: str,
        subscription_id: int,
        request_confirmations: int,
        callback_gas_limit: int,
        num_words: int,
        sender: str,
    ) -> int: ...


class RandomnessConsumer(Protocol):
    address: str

    def raw_fulfill_random_words(
        self, request_id: int, random_words: Sequence[int], caller: str
    ): ...


@dataclass
class Subscription:
    balance: int = 0
    consumers: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class PendingRequest:
    request_id: int
    subscription_id: int
    sender: str
    key_hash: str
    request_confirmations: int
    callback_gas_limit: int
    num_words: int


class MockCoordinator:
    """
    In-process randomness coordinator for development networks.

    Requests are only delivered when fulfill_random_words() is called, which
    lets callers exercise arbitrary delays between request and callback.
    """

    def __init__(
        self,
        base_fee: int = BASE_FEE,
        gas_price_link: int = GAS_PRICE_LINK,
        address: str | None = None,
    ) -> None:
        self.address = address or make_address("vrf-coordinator")
        self.base_fee = base_fee
        self.gas_price_link = gas_price_link
        self._subscriptions: Dict[int, Subscription] = {}
        self._requests: Dict[int, PendingRequest] = {}
        self._next_sub_id = itertools.count(1)
        self._next_request_id = itertools.count(1)

    # Subscriptions

    def create_subscription(self) -> int:
        sub_id = next(self._next_sub_id)
        self._subscriptions[sub_id] = Subscription()
        log.debug("Created subscription %d", sub_id)
        return sub_id

    def fund_subscription(self, subscription_id: int, amount: int) -> int:
        sub = self._subscription(subscription_id)
        sub.balance += amount
        return sub.balance

    def add_consumer(self, subscription_id: int, consumer: str) -> None:
        sub = self._subscription(subscription_id)
        if consumer in sub.consumers:
            return
        if len(sub.consumers) >= MAX_CONSUMERS:
            raise TooManyConsumers(f"Subscription {subscription_id} is full")
        sub.consumers.add(consumer)

    def remove_consumer(self, subscription_id: int, consumer: str) -> None:
        sub = self._subscription(subscription_id)
        if consumer not in sub.consumers:
            raise InvalidConsumer(subscription_id, consumer)
        sub.consumers.discard(consumer)

    def get_subscription(self, subscription_id: int) -> Subscription:
        return self._subscription(subscription_id)

    def _subscription(self, subscription_id: int) -> Subscription:
        sub = self._subscriptions.get(subscription_id)
        if sub is None:
            raise InvalidSubscription(subscription_id)
        return sub

    # Requests

    def request_random_words(
        self,
        key_hash: str,
        subscription_id: int,
        request_confirmations: int,
        callback_gas_limit: int,
        num_words: int,
        sender: str,
    ) -> int:
        sub = self._subscription(subscription_id)
        if sender not in sub.consumers:
            raise InvalidConsumer(subscription_id, sender)
        if num_words < 1 or num_words > MAX_NUM_WORDS:
            raise TooManyWords(f"num_words must be in 1..{MAX_NUM_WORDS}, got {num_words}")

        request_id = next(self._next_request_id)
        self._requests[request_id] = PendingRequest(
            request_id=request_id,
            subscription_id=subscription_id,
            sender=sender,
            key_hash=key_hash,
            request_confirmations=request_confirmations,
            callback_gas_limit=callback_gas_limit,
            num_words=num_words,
        )
        log.info("Random words requested: request=%d sub=%d sender=%s", request_id, subscription_id, sender)
        return request_id

    def pending_requests(self) -> List[int]:
        return sorted(self._requests)

    def fulfill_random_words(self, request_id: int, consumer: RandomnessConsumer):
        return self.fulfill_random_words_with_override(request_id, consumer, None)

    def fulfill_random_words_with_override(
        self,
        request_id: int,
        consumer: RandomnessConsumer,
        words: Optional[Sequence[int]],
    ):
        """
        Deliver request_id to consumer. Without words, they are derived from
        the request id. Returns whatever the consumer's callback returns.
        """
        req = self._requests.get(request_id)
        if req is None:
            raise NonexistentRequest(request_id)
        if words is None:
            words = expand_words(request_id, req.num_words)

        sub = self._subscription(req.subscription_id)
        payment = self.base_fee + self.gas_price_link * req.callback_gas_limit
        if sub.balance < payment:
            raise InsufficientSubscriptionBalance(req.subscription_id, sub.balance, payment)

        # A request is delivered at most once, even if the consumer callback fails.
        del self._requests[request_id]
        sub.balance -= payment
        log.info("Delivering request %d (payment %d)", request_id, payment)
        return consumer.raw_fulfill_random_words(request_id, list(words), caller=self.address)
