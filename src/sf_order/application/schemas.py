# src/sf_order/application/schemas.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.sf_catalog.domain.models import normalize_payment_method
from src.sf_common.yen import yen_to_display
from src.sf_order.domain.models import Order, OrderLine
from src.sf_pricing.application.schemas import ShippingBreakdownItem
from src.sf_pricing.domain.models import PricingResult

PaymentMethodName = Literal["card", "bank_transfer", "cash_on_delivery"]

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PlaceOrderRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    shipping_address: str = Field(..., max_length=500)
    recipient_name: str = Field(..., max_length=100)
    payment_method: PaymentMethodName
    contact_phone: str | None = Field(None, max_length=30)
    notes: str | None = Field(None, max_length=1000)

    @field_validator("payment_method", mode="before")
    @classmethod
    def resolve_alias(cls, v: object) -> object:
        return normalize_payment_method(v)

    @field_validator("shipping_address", "recipient_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CancelOrderRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str | None = Field(None, max_length=500)


class ChangePaymentMethodRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payment_method: PaymentMethodName

    @field_validator("payment_method", mode="before")
    @classmethod
    def resolve_alias(cls, v: object) -> object:
        return normalize_payment_method(v)


class UpdateStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Validated by the lifecycle manager so unknown values map to error 4007.
    status: str
    cancel_reason: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class OrderLineResponse(BaseModel):
    product_id: str
    product_name: str
    unit_price: int
    quantity: int
    line_subtotal: int

    @classmethod
    def from_domain(cls, line: OrderLine) -> "OrderLineResponse":
        return cls(
            product_id=line.product_id,
            product_name=line.product_name,
            unit_price=line.unit_price,
            quantity=line.quantity,
            line_subtotal=line.line_subtotal,
        )


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    status: str
    payment_method: str
    subtotal_amount: int
    shipping_fee: int
    surcharge_amount: int
    total_amount: int
    total_display: str
    shipping_address: str
    recipient_name: str
    contact_phone: str | None = None
    notes: str | None = None
    lines: list[OrderLineResponse]
    created_at: datetime | None = None
    updated_at: datetime | None = None
    paid_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancel_reason: str | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_number=order.order_number,
            customer_id=order.customer_id,
            status=order.status,
            payment_method=order.payment_method,
            subtotal_amount=order.subtotal_amount,
            shipping_fee=order.shipping_fee,
            surcharge_amount=order.surcharge_amount,
            total_amount=order.total_amount,
            total_display=yen_to_display(order.total_amount),
            shipping_address=order.shipping_address,
            recipient_name=order.recipient_name,
            contact_phone=order.contact_phone,
            notes=order.notes,
            lines=[OrderLineResponse.from_domain(line) for line in order.lines],
            created_at=order.created_at,
            updated_at=order.updated_at,
            paid_at=order.paid_at,
            cancelled_at=order.cancelled_at,
            cancelled_by=order.cancelled_by,
            cancel_reason=order.cancel_reason,
        )


class PlaceOrderResponse(BaseModel):
    order: OrderResponse
    shipping_breakdown: list[ShippingBreakdownItem]
    fallback_shipping_applied: bool
    merchant_surcharge_amount: int

    @classmethod
    def from_result(cls, order: Order, pricing: PricingResult) -> "PlaceOrderResponse":
        return cls(
            order=OrderResponse.from_domain(order),
            shipping_breakdown=[
                ShippingBreakdownItem.from_domain(s) for s in pricing.shipping_breakdown
            ],
            fallback_shipping_applied=pricing.fallback_applied,
            merchant_surcharge_amount=pricing.merchant_surcharge_amount,
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    next_cursor: str | None
    has_more: bool
