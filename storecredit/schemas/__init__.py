from storecredit.schemas.gift_card import GiftCardRedeem, GiftCardResponse
from storecredit.schemas.order import (
    LineItemCreate,
    LineItemResponse,
    OrderCreate,
    OrderDetailResponse,
    OrderResponse,
    OrderStoreCreditSummary,
    OrderTransitionResponse,
)
from storecredit.schemas.payment import (
    CaptureResultResponse,
    CardPaymentCreate,
    CreditCardCreate,
    PaymentCaptureOutcomeResponse,
    PaymentResponse,
    RefundRequest,
)
from storecredit.schemas.store_credit import (
    StoreCreditCategoryResponse,
    StoreCreditCreate,
    StoreCreditResponse,
    StoreCreditUpdate,
    UserStoreCreditBalanceResponse,
)
from storecredit.schemas.store_credit_event import StoreCreditEventResponse
from storecredit.schemas.user import UserCreate, UserResponse

__all__ = [
    "CaptureResultResponse",
    "CardPaymentCreate",
    "CreditCardCreate",
    "GiftCardRedeem",
    "GiftCardResponse",
    "LineItemCreate",
    "LineItemResponse",
    "OrderCreate",
    "OrderDetailResponse",
    "OrderResponse",
    "OrderStoreCreditSummary",
    "OrderTransitionResponse",
    "PaymentCaptureOutcomeResponse",
    "PaymentResponse",
    "RefundRequest",
    "StoreCreditCategoryResponse",
    "StoreCreditCreate",
    "StoreCreditEventResponse",
    "StoreCreditResponse",
    "StoreCreditUpdate",
    "UserCreate",
    "UserResponse",
    "UserStoreCreditBalanceResponse",
]
