"""Order domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass, field
from datetime import datetime

from src.sf_common.enums import OrderStatus

TERMINAL_STATUSES = frozenset(
    {OrderStatus.SHIPPED.value, OrderStatus.COMPLETED.value, OrderStatus.CANCELLED.value}
)


@dataclass
class OrderLine:
    """Immutable snapshot of one purchased product; never updated after creation."""

    id: str
    order_id: str
    product_id: str
    product_name: str  # snapshot at order time
    unit_price: int  # snapshot at order time
    quantity: int
    line_subtotal: int = field(init=False)

    def __post_init__(self) -> None:
        self.line_subtotal = self.unit_price * self.quantity


@dataclass
class Order:
    id: str
    order_number: str  # customer-facing, distinct from the primary key
    customer_id: str
    payment_method: str
    # Amounts (yen)
    subtotal_amount: int
    shipping_fee: int
    surcharge_amount: int  # legacy "codFee"; covers card / bank transfer too
    total_amount: int
    # Delivery
    shipping_address: str
    recipient_name: str
    contact_phone: str | None = None
    notes: str | None = None
    # Control
    status: str = OrderStatus.PENDING.value
    lines: list[OrderLine] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    paid_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancel_reason: str | None = None

    def __post_init__(self) -> None:
        self.check_total()

    def check_total(self) -> None:
        expected = self.subtotal_amount + self.shipping_fee + self.surcharge_amount
        if self.total_amount != expected:
            raise ValueError(
                f"Order {self.id}: total {self.total_amount} != "
                f"subtotal {self.subtotal_amount} + shipping {self.shipping_fee}"
                f" + surcharge {self.surcharge_amount}"
            )

    def apply_surcharge(self, payment_method: str, surcharge_amount: int) -> None:
        """Switch payment method; total is recomputed so it never goes stale."""
        self.payment_method = payment_method
        self.surcharge_amount = surcharge_amount
        self.total_amount = self.subtotal_amount + self.shipping_fee + surcharge_amount
        self.check_total()

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)
