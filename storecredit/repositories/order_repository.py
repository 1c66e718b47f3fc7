"""Order repository for data access."""

import secrets
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.models.order import LineItem, Order, OrderState
from storecredit.models.payment import Payment, PaymentState
from storecredit.schemas.order import OrderCreate


def generate_order_number() -> str:
    return "R" + "".join(secrets.choice("0123456789") for _ in range(9))


class OrderRepository:
    """Repository for Order and LineItem models."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, order_id: UUID) -> Order | None:
        return self.db.query(Order).filter(Order.id == order_id).first()

    def get_by_number(self, number: str) -> Order | None:
        return self.db.query(Order).filter(Order.number == number).first()

    def get_line_items(self, order_id: UUID) -> list[LineItem]:
        return (
            self.db.query(LineItem)
            .filter(LineItem.order_id == order_id)
            .order_by(LineItem.created_at.asc())
            .all()
        )

    def create(self, data: OrderCreate) -> Order:
        """Create an order with its line items.

        The total is taken from the request when given, otherwise summed from
        the line items.
        """
        total = data.total
        if total is None:
            total = sum(
                (item.price * item.quantity for item in data.line_items), Decimal("0")
            )

        order = Order(
            number=generate_order_number(),
            user_id=data.user_id,
            state=data.state.value,
            total=total,
            currency=data.currency,
        )
        self.db.add(order)
        self.db.flush()

        for item in data.line_items:
            self.db.add(
                LineItem(
                    order_id=order.id,
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    gift_card=item.gift_card,
                )
            )
        self.db.flush()
        self.db.refresh(order)
        return order

    def update_state(self, order: Order, state: OrderState) -> Order:
        order.state = state.value  # type: ignore[assignment]
        self.db.flush()
        return order

    def outstanding_balance(self, order: Order) -> Decimal:
        """Order total not yet covered by completed payments."""
        if order.state == OrderState.CANCELED.value:
            return Decimal("0")
        paid = (
            self.db.query(Payment)
            .filter(
                Payment.order_id == order.id,
                Payment.state == PaymentState.COMPLETED.value,
            )
            .all()
        )
        paid_total = sum((Decimal(str(p.amount)) for p in paid), Decimal("0"))
        return Decimal(str(order.total)) - paid_total
