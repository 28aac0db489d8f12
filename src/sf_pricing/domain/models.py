"""Pricing domain model — pure dataclasses, no I/O."""
from dataclasses import dataclass

from src.sf_common.enums import RateSource

DEFAULT_GROUP_KEY = "default"


@dataclass(frozen=True)
class CartLine:
    product_id: str
    quantity: int
    unit_price: int  # yen
    category_id: str | None = None
    is_digital: bool = False

    @property
    def line_subtotal(self) -> int:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CategoryShipping:
    """Shipping outcome for one category group."""

    category_key: str  # category_id, or DEFAULT_GROUP_KEY for uncategorised lines
    subtotal: int
    fee: int
    free_shipping_threshold: int | None
    is_free: bool
    source: RateSource


@dataclass(frozen=True)
class PricingResult:
    subtotal_amount: int
    shipping_fee: int
    surcharge_amount: int  # customer-facing, 0 when the merchant bears it
    total_amount: int
    merchant_surcharge_amount: int = 0  # informational, never in total_amount
    shipping_breakdown: tuple[CategoryShipping, ...] = ()

    @property
    def fallback_applied(self) -> bool:
        return any(s.source == RateSource.FALLBACK for s in self.shipping_breakdown)

    @property
    def fallback_categories(self) -> list[str]:
        return [s.category_key for s in self.shipping_breakdown if s.source == RateSource.FALLBACK]
