from storecredit.repositories.gift_card_repository import GiftCardRepository
from storecredit.repositories.notification_repository import NotificationRepository
from storecredit.repositories.order_repository import OrderRepository
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.repositories.store_credit_category_repository import (
    StoreCreditCategoryRepository,
)
from storecredit.repositories.store_credit_event_repository import StoreCreditEventRepository
from storecredit.repositories.store_credit_repository import StoreCreditRepository
from storecredit.repositories.user_repository import UserRepository

__all__ = [
    "GiftCardRepository",
    "NotificationRepository",
    "OrderRepository",
    "PaymentRepository",
    "StoreCreditCategoryRepository",
    "StoreCreditEventRepository",
    "StoreCreditRepository",
    "UserRepository",
]
