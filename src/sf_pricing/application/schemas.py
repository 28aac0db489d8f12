"""Pydantic schemas for the shipping quote API."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.sf_catalog.domain.models import normalize_payment_method
from src.sf_common.yen import yen_to_display
from src.sf_pricing.domain.models import CategoryShipping, PricingResult


class QuoteItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class QuoteRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    items: list[QuoteItem] = Field(default_factory=list, max_length=200)
    payment_method: str = "card"

    @field_validator("payment_method", mode="before")
    @classmethod
    def resolve_alias(cls, v: object) -> object:
        return normalize_payment_method(v)


class ShippingBreakdownItem(BaseModel):
    category: str
    subtotal: int
    fee: int
    free_shipping_threshold: int | None
    is_free: bool
    source: str

    @classmethod
    def from_domain(cls, s: CategoryShipping) -> "ShippingBreakdownItem":
        return cls(
            category=s.category_key,
            subtotal=s.subtotal,
            fee=s.fee,
            free_shipping_threshold=s.free_shipping_threshold,
            is_free=s.is_free,
            source=str(s.source.value),
        )


class QuoteResponse(BaseModel):
    subtotal_amount: int
    shipping_fee: int
    surcharge_amount: int
    total_amount: int
    total_display: str
    merchant_surcharge_amount: int
    shipping_breakdown: list[ShippingBreakdownItem]
    fallback_shipping_applied: bool

    @classmethod
    def empty(cls) -> "QuoteResponse":
        return cls(
            subtotal_amount=0,
            shipping_fee=0,
            surcharge_amount=0,
            total_amount=0,
            total_display=yen_to_display(0),
            merchant_surcharge_amount=0,
            shipping_breakdown=[],
            fallback_shipping_applied=False,
        )

    @classmethod
    def from_result(cls, pricing: PricingResult) -> "QuoteResponse":
        return cls(
            subtotal_amount=pricing.subtotal_amount,
            shipping_fee=pricing.shipping_fee,
            surcharge_amount=pricing.surcharge_amount,
            total_amount=pricing.total_amount,
            total_display=yen_to_display(pricing.total_amount),
            merchant_surcharge_amount=pricing.merchant_surcharge_amount,
            shipping_breakdown=[
                ShippingBreakdownItem.from_domain(s) for s in pricing.shipping_breakdown
            ],
            fallback_shipping_applied=pricing.fallback_applied,
        )
