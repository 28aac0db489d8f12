"""Read-only snapshot of shipping rates used for one pricing run.

Resolution order for a category group:
  1. the category's own active rate
  2. the active default rate (category_id NULL)
  3. FALLBACK: a hard-coded fee with no free-shipping threshold

Checkout never fails for lack of configuration; a FALLBACK resolution is
reported through RateSource.FALLBACK so callers can log and flag it.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from src.sf_catalog.domain.models import CategoryRate
from src.sf_common.enums import RateSource

FALLBACK_SHIPPING_FEE = 500


@dataclass(frozen=True)
class ResolvedRate:
    fee_per_order: int
    free_shipping_threshold: int | None
    source: RateSource


@dataclass(frozen=True)
class RateCatalog:
    rates_by_category: Mapping[str, CategoryRate] = field(default_factory=dict)
    default_rate: CategoryRate | None = None
    fallback_fee: int = FALLBACK_SHIPPING_FEE

    def resolve(self, category_id: str | None) -> ResolvedRate:
        if category_id is not None:
            rate = self.rates_by_category.get(category_id)
            if rate is not None and rate.is_active:
                return ResolvedRate(
                    rate.fee_per_order, rate.free_shipping_threshold, RateSource.CATEGORY
                )
        if self.default_rate is not None and self.default_rate.is_active:
            return ResolvedRate(
                self.default_rate.fee_per_order,
                self.default_rate.free_shipping_threshold,
                RateSource.DEFAULT,
            )
        return ResolvedRate(self.fallback_fee, None, RateSource.FALLBACK)
