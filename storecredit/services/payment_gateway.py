"""Card payment gateway abstraction layer.

Supports a bogus gateway for development and tests, and Stripe.
"""

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from storecredit.core.config import settings
from storecredit.models.payment import CreditCard


class GatewayError(Exception):
    """A gateway refused or failed an operation."""


@dataclass
class GatewayResponse:
    """Result of a gateway call."""

    success: bool
    authorization: str | None = None
    message: str | None = None


class PaymentGatewayBase(ABC):
    """Abstract base class for card payment gateways."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the gateway name."""
        pass  # pragma: no cover

    @abstractmethod
    def authorize(self, amount: Decimal, card: CreditCard, currency: str) -> GatewayResponse:
        """Place a hold on the card."""
        pass  # pragma: no cover

    @abstractmethod
    def capture(self, amount: Decimal, authorization: str, currency: str) -> GatewayResponse:
        """Settle a previous authorization."""
        pass  # pragma: no cover

    @abstractmethod
    def void(self, authorization: str) -> GatewayResponse:
        """Release a previous authorization."""
        pass  # pragma: no cover

    @abstractmethod
    def credit(self, amount: Decimal, authorization: str, currency: str) -> GatewayResponse:
        """Refund part or all of a captured payment."""
        pass  # pragma: no cover


class BogusGateway(PaymentGatewayBase):
    """Gateway that never leaves the process.

    Cards ending in 0002 are declined; everything else succeeds.
    """

    DECLINED_LAST_DIGITS = "0002"

    @property
    def name(self) -> str:
        return "bogus"

    def authorize(self, amount: Decimal, card: CreditCard, currency: str) -> GatewayResponse:
        if card.last_digits == self.DECLINED_LAST_DIGITS:
            return GatewayResponse(success=False, message="Bogus Gateway: Forced failure")
        return GatewayResponse(success=True, authorization=f"BGS-{secrets.token_hex(6)}")

    def capture(self, amount: Decimal, authorization: str, currency: str) -> GatewayResponse:
        if not authorization:
            return GatewayResponse(success=False, message="Bogus Gateway: Missing authorization")
        return GatewayResponse(success=True, authorization=authorization)

    def void(self, authorization: str) -> GatewayResponse:
        return GatewayResponse(success=True, authorization=authorization)

    def credit(self, amount: Decimal, authorization: str, currency: str) -> GatewayResponse:
        return GatewayResponse(success=True, authorization=authorization)


class StripeGateway(PaymentGatewayBase):
    """Stripe gateway using manually captured PaymentIntents."""

    def __init__(self, api_key: str | None = None):
        self.api_key = api_key or settings.stripe_api_key
        self._stripe: Any = None

    @property
    def stripe(self) -> Any:
        """Lazy-load stripe module."""
        if self._stripe is None:
            try:
                import stripe

                stripe.api_key = self.api_key
                self._stripe = stripe
            except ImportError as e:
                raise ImportError("stripe package not installed. Run: pip install stripe") from e
        return self._stripe

    @property
    def name(self) -> str:
        return "stripe"

    @staticmethod
    def _minor_units(amount: Decimal) -> int:
        # Stripe uses the smallest currency unit
        return int(amount * 100)

    def authorize(self, amount: Decimal, card: CreditCard, currency: str) -> GatewayResponse:
        try:
            intent = self.stripe.PaymentIntent.create(
                amount=self._minor_units(amount),
                currency=currency.lower(),
                payment_method=card.gateway_payment_profile_id,
                capture_method="manual",
                confirm=True,
            )
        except self.stripe.error.StripeError as e:
            return GatewayResponse(success=False, message=str(e))
        return GatewayResponse(success=True, authorization=intent.id)

    def capture(self, amount: Decimal, authorization: str, currency: str) -> GatewayResponse:
        try:
            intent = self.stripe.PaymentIntent.capture(
                authorization, amount_to_capture=self._minor_units(amount)
            )
        except self.stripe.error.StripeError as e:
            return GatewayResponse(success=False, message=str(e))
        return GatewayResponse(success=True, authorization=intent.id)

    def void(self, authorization: str) -> GatewayResponse:
        try:
            intent = self.stripe.PaymentIntent.cancel(authorization)
        except self.stripe.error.StripeError as e:
            return GatewayResponse(success=False, message=str(e))
        return GatewayResponse(success=True, authorization=intent.id)

    def credit(self, amount: Decimal, authorization: str, currency: str) -> GatewayResponse:
        try:
            refund = self.stripe.Refund.create(
                payment_intent=authorization, amount=self._minor_units(amount)
            )
        except self.stripe.error.StripeError as e:
            return GatewayResponse(success=False, message=str(e))
        return GatewayResponse(success=True, authorization=refund.id)


def get_payment_gateway(name: str | None = None) -> PaymentGatewayBase:
    """Factory function to get a gateway instance."""
    name = name or settings.PAYMENT_GATEWAY
    if name == "bogus":
        return BogusGateway()
    if name == "stripe":
        return StripeGateway()
    raise ValueError(f"Unsupported payment gateway: {name}")
