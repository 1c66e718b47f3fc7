"""Store credit error hierarchy.

Validation errors are refusals the caller can show to the user; they subclass
``ValueError`` so routers can turn them into 400 responses. Integrity errors
point at corrupted data or a programming bug and must never be masked as a
validation failure.
"""

from decimal import Decimal


class StoreCreditError(Exception):
    """Base class for all store credit errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreCreditValidationError(StoreCreditError, ValueError):
    """A transition was refused; nothing was changed."""


class StoreCreditIntegrityError(StoreCreditError, RuntimeError):
    """Data is inconsistent with what the caller expected."""


class InsufficientFunds(StoreCreditValidationError):
    def __init__(self, requested: Decimal, available: Decimal):
        super().__init__(
            f"Unable to use {requested} of store credit: only {available} is available"
        )
        self.requested = requested
        self.available = available


class CurrencyMismatch(StoreCreditValidationError):
    def __init__(self, expected: str, given: str):
        super().__init__(
            f"Store credit currency {expected} does not match the requested currency {given}"
        )
        self.expected = expected
        self.given = given


class CurrencyMissing(StoreCreditValidationError):
    def __init__(self) -> None:
        super().__init__("Currency can't be blank")


class InvalidAmount(StoreCreditValidationError):
    pass


class AmountTooLow(StoreCreditValidationError):
    def __init__(self, amount: Decimal, amount_used: Decimal):
        super().__init__(
            f"Amount used ({amount_used}) cannot be greater than the credited amount ({amount})"
        )
        self.amount = amount
        self.amount_used = amount_used


class OutstandingAuthorization(StoreCreditValidationError):
    def __init__(self) -> None:
        super().__init__("Cannot invalidate a store credit with an uncaptured authorization")


class StoreCreditInvalidated(StoreCreditValidationError):
    def __init__(self) -> None:
        super().__init__("Store credit has been invalidated and cannot be used")


class RefundExceedsCapture(StoreCreditValidationError):
    def __init__(self, authorization_code: str):
        super().__init__(f"Unable to credit code: {authorization_code}")
        self.authorization_code = authorization_code


class GiftCardNotFound(StoreCreditValidationError):
    def __init__(self, redemption_code: str):
        super().__init__(f"Gift card {redemption_code} not found")


class GiftCardAlreadyRedeemed(StoreCreditValidationError):
    def __init__(self, redemption_code: str):
        super().__init__(f"Gift card {redemption_code} has already been redeemed")


class InvalidOrderTransition(StoreCreditValidationError):
    def __init__(self, state: str, event: str):
        super().__init__(f"Cannot {event} an order in state '{state}'")
        self.state = state
        self.event = event


class UnknownAuthorization(StoreCreditIntegrityError):
    def __init__(self, authorization_code: str | None):
        super().__init__(f"No outstanding authorization for code {authorization_code}")
        self.authorization_code = authorization_code


class MultiplePaymentsFound(StoreCreditIntegrityError):
    def __init__(self, count: int):
        super().__init__(f"Found {count} payments and only expected 1")
        self.count = count


class UnexpectedPaymentSource(StoreCreditIntegrityError):
    def __init__(self, source_type: str):
        super().__init__(
            f"Found unexpected payment method {source_type}. "
            "Credit cards are the only other supported payment type"
        )
        self.source_type = source_type
