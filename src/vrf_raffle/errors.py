from __future__ import annotations


class RaffleError(RuntimeError):
    """Base class for every rejection raised by the raffle state machine."""


class NotEnoughPaid(RaffleError):
    def __init__(self, paid: int, required: int) -> None:
        super().__init__(f"Not enough paid: {paid} < entry fee {required}")
        self.paid = paid
        self.required = required


class RoundNotOpen(RaffleError):
    def __init__(self) -> None:
        super().__init__("Round is not open (winner calculation in progress)")


class UpkeepNotNeeded(RaffleError):
    def __init__(self, failures, pot: int, player_count: int, state) -> None:
        super().__init__(
            f"Upkeep not needed: failures={failures!r} pot={pot} "
            f"players={player_count} state={state.name}"
        )
        self.failures = failures
        self.pot = pot
        self.player_count = player_count
        self.state = state


class UnknownOrStaleRequest(RaffleError):
    def __init__(self, request_id: int, pending_request_id: int | None) -> None:
        super().__init__(
            f"Request {request_id} does not match pending request {pending_request_id}"
        )
        self.request_id = request_id
        self.pending_request_id = pending_request_id


class PayoutFailed(RaffleError):
    def __init__(self, winner: str, prize: int) -> None:
        super().__init__(f"Payout of {prize} to {winner} failed; round kept calculating")
        self.winner = winner
        self.prize = prize


class IndexOutOfRange(RaffleError, IndexError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Player index {index} out of range (players={size})")
        self.index = index
        self.size = size


class OnlyCoordinatorCanFulfill(RaffleError):
    def __init__(self, caller: str, coordinator: str) -> None:
        super().__init__(f"Only coordinator {coordinator} can fulfill, got {caller}")
        self.caller = caller
        self.coordinator = coordinator


class InvalidRandomWords(RaffleError):
    pass


# Ledger


class LedgerError(RuntimeError):
    pass


class InsufficientFunds(LedgerError):
    def __init__(self, account: str, balance: int, amount: int) -> None:
        super().__init__(f"{account} holds {balance}, cannot send {amount}")
        self.account = account
        self.balance = balance
        self.amount = amount


class TransferRejected(LedgerError):
    def __init__(self, recipient: str) -> None:
        super().__init__(f"{recipient} does not accept payments")
        self.recipient = recipient


# Randomness coordinator


class CoordinatorError(RuntimeError):
    pass


class NonexistentRequest(CoordinatorError):
    def __init__(self, request_id: int) -> None:
        super().__init__("nonexistent request")
        self.request_id = request_id


class InvalidSubscription(CoordinatorError):
    def __init__(self, subscription_id: int) -> None:
        super().__init__(f"Invalid subscription {subscription_id}")
        self.subscription_id = subscription_id


class InvalidConsumer(CoordinatorError):
    def __init__(self, subscription_id: int, consumer: str) -> None:
        super().__init__(f"{consumer} is not a consumer of subscription {subscription_id}")
        self.subscription_id = subscription_id
        self.consumer = consumer


class TooManyConsumers(CoordinatorError):
    pass


class TooManyWords(CoordinatorError):
    pass


class InsufficientSubscriptionBalance(CoordinatorError):
    def __init__(self, subscription_id: int, balance: int, payment: int) -> None:
        super().__init__(
            f"Subscription {subscription_id} balance {balance} < payment {payment}"
        )
        self.subscription_id = subscription_id
        self.balance = balance
        self.payment = payment
