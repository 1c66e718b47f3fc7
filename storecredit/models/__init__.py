from storecredit.models.gift_card import GiftCard
from storecredit.models.notification import Notification
from storecredit.models.order import LineItem, Order, OrderState
from storecredit.models.payment import (
    CreditCard,
    Payment,
    PaymentCaptureEvent,
    PaymentSourceType,
    PaymentState,
)
from storecredit.models.store_credit import StoreCredit
from storecredit.models.store_credit_category import StoreCreditCategory
from storecredit.models.store_credit_event import (
    OriginatorType,
    StoreCreditAction,
    StoreCreditEvent,
)
from storecredit.models.user import User

__all__ = [
    "CreditCard",
    "GiftCard",
    "LineItem",
    "Notification",
    "Order",
    "OrderState",
    "OriginatorType",
    "Payment",
    "PaymentCaptureEvent",
    "PaymentSourceType",
    "PaymentState",
    "StoreCredit",
    "StoreCreditAction",
    "StoreCreditCategory",
    "StoreCreditEvent",
    "User",
]
